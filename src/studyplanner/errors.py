"""Error taxonomy for the storage and state layers."""

from __future__ import annotations


class StudyPlannerError(Exception):
    """Base class for all application errors."""


class StorageError(StudyPlannerError):
    """Base class for errors raised by the storage layer."""


class StorageUnavailable(StorageError):
    """The durable store could not be opened (or was never opened)."""


class StorageIOError(StorageError):
    """An underlying read or write failed."""


class UnknownIndex(StorageError):
    """A secondary index was requested that the collection does not declare."""

    def __init__(self, collection: str, index_name: str):
        super().__init__(f"Collection '{collection}' has no index named '{index_name}'")
        self.collection = collection
        self.index_name = index_name


class InvalidRecord(StudyPlannerError, ValueError):
    """A value cannot be converted to or from its stored representation."""


class NotFound(StudyPlannerError):
    """A referenced primary key is absent."""

    def __init__(self, kind: str, key: object):
        super().__init__(f"{kind} not found: {key!r}")
        self.kind = kind
        self.key = key


class PartialCascadeFailure(StorageError):
    """A habit was deleted but some of its records could not be removed."""

    def __init__(self, habit_id: str, remaining: int):
        super().__init__(
            f"Habit {habit_id!r} deleted with {remaining} habit record(s) left behind"
        )
        self.habit_id = habit_id
        self.remaining = remaining


class Conflict(StorageError):
    """The stored version moved past the version the caller last read."""

    def __init__(self, kind: str, key: object, expected: int, actual: int | None):
        super().__init__(
            f"{kind} {key!r} is at version {actual}, expected {expected}"
        )
        self.kind = kind
        self.key = key
        self.expected = expected
        self.actual = actual


__all__ = [
    "Conflict",
    "InvalidRecord",
    "NotFound",
    "PartialCascadeFailure",
    "StorageError",
    "StorageIOError",
    "StorageUnavailable",
    "StudyPlannerError",
    "UnknownIndex",
]
