"""Habit and habit record repository protocols."""

from __future__ import annotations

from typing import Any, Optional, Protocol

from ..entities import Habit, HabitRecord


class HabitRepository(Protocol):
    """Repository for managing habit entities."""

    def init(self) -> "HabitRepository":
        ...

    def get_all(self) -> list[Habit]:
        ...

    def get_by_id(self, habit_id: str) -> Optional[Habit]:
        ...

    def get_by_index(self, index_name: str, value: Any) -> list[Habit]:
        ...

    def put(self, habit: Habit) -> Habit:
        ...

    def delete(self, habit_id: str) -> None:
        """Delete the habit row only (records are left alone)."""
        ...

    def delete_habit(self, habit_id: str) -> int:
        """Delete a habit and all of its records in one transaction."""
        ...

    def clear(self) -> None:
        ...


class HabitRecordRepository(Protocol):
    """Repository for per-day habit completion records."""

    def init(self) -> "HabitRecordRepository":
        ...

    def get_all(self) -> list[HabitRecord]:
        ...

    def get(self, habit_id: str, day: Any) -> Optional[HabitRecord]:
        """Retrieve the record for one habit on one day."""
        ...

    def get_by_index(self, index_name: str, value: Any) -> list[HabitRecord]:
        ...

    def get_for_habit(self, habit_id: str) -> list[HabitRecord]:
        ...

    def put(self, record: HabitRecord) -> HabitRecord:
        """Insert or replace the record keyed by (habit_id, date)."""
        ...

    def delete(self, key: tuple[str, Any]) -> None:
        ...

    def clear(self) -> None:
        ...
