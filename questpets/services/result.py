from dataclasses import dataclass
from typing import Generic, TypeVar

from questpets.models.dc_models import ErrorKind

T = TypeVar("T")


class StoreError(Exception):
    """A store call failed. Raised by the store, turned into a result by the engines."""


@dataclass(frozen=True)
class TaskResult(Generic[T]):
    """Outcome of a task use case: either a value or the kind of error."""

    value: T | None = None
    error: ErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "TaskResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind) -> "TaskResult[T]":
        return cls(error=error)
