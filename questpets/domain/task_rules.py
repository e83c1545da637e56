"""Task completion and active task rotation rules.

Rule of thumb:
- OK: duplicate checks, sampling, filtering of already loaded rows.
- Not OK: touching DB sessions, FastAPI, datetime.now(), a global random.
"""

from random import Random
from typing import Iterable, List, Sequence

from questpets.domain.day_key import day_key
from questpets.models.schema_models import (
    ActiveTaskSchema,
    CompletionRecordSchema,
    TaskSchema,
)

# The active set always holds exactly this many distinct tasks
ACTIVE_TASK_COUNT = 3


def sample_task_indices(catalog_size: int, count: int, rng: Random, start: int = 0) -> List[int]:
    """Pick ``count`` distinct catalog indices from ``[start, catalog_size)``.

    Raises:
        ValueError: The index range holds fewer than ``count`` entries.
    """
    population = range(start, catalog_size)
    if len(population) < count:
        raise ValueError(
            f"cannot pick {count} distinct tasks from {len(population)} catalog entries"
        )
    return rng.sample(population, count)


def build_active_tasks(
    catalog: Sequence[TaskSchema], indices: Iterable[int], timestamp: str
) -> List[ActiveTaskSchema]:
    """Stamp the sampled catalog entries with the rotation timestamp."""
    return [
        ActiveTaskSchema(name=catalog[i].name, reward=catalog[i].reward, timestamp=timestamp)
        for i in indices
    ]


def rotation_day(active: Sequence[ActiveTaskSchema]) -> str | None:
    """Day-key of the current rotation, read from the first entry.

    All entries of one rotation are written together, so any entry carries
    the same day. An empty set has no rotation day.
    """
    if not active:
        return None
    return day_key(active[0].timestamp)


def needs_rotation(active: Sequence[ActiveTaskSchema], today: str) -> bool:
    return rotation_day(active) != today


def completed_task_names(records: Iterable[CompletionRecordSchema], today: str) -> List[str]:
    return [record.task for record in records if day_key(record.timestamp) == today]


def is_duplicate_completion(
    records: Iterable[CompletionRecordSchema], task: str, today: str
) -> bool:
    return task in completed_task_names(records, today)


def filter_completed(
    active: Sequence[ActiveTaskSchema], completed_names: Iterable[str]
) -> List[ActiveTaskSchema]:
    """Drop active tasks completed today.

    Only the first entry matching each completed name is removed. The input
    sequence is left untouched.
    """
    remaining = list(active)
    for name in completed_names:
        for position, task in enumerate(remaining):
            if task.name == name:
                del remaining[position]
                break
    return remaining


def catalog_reward_of(catalog: Iterable[TaskSchema], task: str) -> float | None:
    """Stored reward of a catalog task, None for names outside the catalog."""
    for entry in catalog:
        if entry.name == task:
            return entry.reward
    return None
