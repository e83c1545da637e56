"""Active task rotation.

The active set is replaced as a whole on the first read of a new day (or by
the scheduled check). On the same day, each account sees the set minus the
tasks it has completed today. That view is not written back, the stored set
keeps every task until the next rotation.

The delete and the inserts of a rotation share one transaction, so a failed
rotation leaves the previous set in place. The staleness check is a separate
read: two requests crossing the day boundary together can both rotate, and
the later rotation wins.
"""

import logging
from datetime import datetime
from random import Random
from typing import Callable, List

from questpets.authentication.session_auth import SessionVerifier
from questpets.domain.day_key import day_key, format_timestamp
from questpets.domain.task_rules import (
    ACTIVE_TASK_COUNT,
    build_active_tasks,
    completed_task_names,
    filter_completed,
    needs_rotation,
    sample_task_indices,
)
from questpets.models.dc_models import ErrorKind
from questpets.models.schema_models import ActiveTaskSchema
from questpets.services.result import StoreError, TaskResult
from questpets.services.task_store import TaskStore


class CatalogTooSmallError(Exception):
    pass


class RotationEngine:
    def __init__(
        self,
        store: TaskStore,
        sessions: SessionVerifier,
        clock: Callable[[], datetime] = datetime.now,
        rng: Random | None = None,
        sample_start: int = 0,
    ):
        self.store = store
        self.sessions = sessions
        self.clock = clock
        self.rng = rng or Random()
        self.sample_start = sample_start

    async def get_active_tasks(self, session_id: str) -> TaskResult[List[ActiveTaskSchema]]:
        """Get today's active tasks that the session's account has not completed yet

        Args:
            session_id (str): Session token of the requesting account

        Returns:
            TaskResult[List[ActiveTaskSchema]]: A fresh rotation, or the stored set filtered
            by today's completions
        """
        account_id = await self.sessions.verify_session(session_id)
        if account_id is None:
            logging.warning("Active task request rejected: invalid session")
            return TaskResult.failure(ErrorKind.invalid_session)

        timestamp = format_timestamp(self.clock())
        today = day_key(timestamp)
        try:
            active = await self.store.find_all_active()
            if needs_rotation(active, today):
                return TaskResult.success(await self._rotate(timestamp))

            records = await self.store.find_completions_by_account(account_id)
            return TaskResult.success(filter_completed(active, completed_task_names(records, today)))
        except CatalogTooSmallError as e:
            logging.error(f"Rotation failed: {e}")
            return TaskResult.failure(ErrorKind.catalog_too_small)
        except StoreError as e:
            logging.error(f"Reading active tasks for {account_id} failed: {e}")
            return TaskResult.failure(ErrorKind.store_failure)

    async def rotate_if_stale(self) -> bool:
        """Rotate the active set if it belongs to an earlier day. Used by the scheduled job.

        Returns:
            bool: True if a rotation happened
        """
        timestamp = format_timestamp(self.clock())
        try:
            active = await self.store.find_all_active()
            if not needs_rotation(active, day_key(timestamp)):
                return False
            await self._rotate(timestamp)
            return True
        except (CatalogTooSmallError, StoreError) as e:
            logging.error(f"Scheduled rotation failed: {e}")
            return False

    async def _rotate(self, timestamp: str) -> List[ActiveTaskSchema]:
        catalog = await self.store.find_all_tasks()
        try:
            indices = sample_task_indices(
                len(catalog), ACTIVE_TASK_COUNT, self.rng, start=self.sample_start
            )
        except ValueError as e:
            raise CatalogTooSmallError(str(e)) from e

        new_active = build_active_tasks(catalog, indices, timestamp)
        await self.store.replace_active(new_active)

        logging.info(
            f"Rotated active tasks for {day_key(timestamp)}: {[task.name for task in new_active]}"
        )
        return new_active
