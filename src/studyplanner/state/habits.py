"""Write-through state for habits and their completion records."""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional

from ..domain.entities import Habit, HabitCategory, HabitFrequency, HabitRecord
from ..domain.repositories import HabitRecordRepository, HabitRepository
from ..errors import StudyPlannerError
from ..infra.codec import coerce_enum, encode_day
from ..logging_config import get_logger
from ..services.habits import completion_rate, compute_streaks
from .base import Clock, WriteThroughState, new_id, require, utcnow

logger = get_logger(__name__)


class HabitState(WriteThroughState[Habit]):
    """Cached habits and habit records.

    Deleting a habit goes through the repository's cascade, then drops the
    habit and its cached records together.
    """

    kind = "habit"
    plural = "habits"
    timestamp_fields = frozenset({"created_at"})
    enum_fields = {"category": HabitCategory, "frequency": HabitFrequency}

    repository: HabitRepository

    def __init__(
        self,
        repository: HabitRepository,
        records: HabitRecordRepository,
        *,
        clock: Clock = utcnow,
    ):
        super().__init__(repository, clock=clock)
        self.record_repository = records
        self.records: list[HabitRecord] = []

    def _build(self, data: Mapping[str, Any]) -> Habit:
        return Habit(
            id=str(data.get("id") or new_id()),
            name=require(data, "name"),
            description=data.get("description"),
            category=coerce_enum(HabitCategory, require(data, "category")),
            frequency=coerce_enum(HabitFrequency, data.get("frequency") or HabitFrequency.DAILY),
            target=data.get("target", 1) or 1,
            color=data.get("color") or "",
            icon=data.get("icon") or "",
            created_at=self.clock(),
            is_active=data.get("is_active", True),
        )

    def _remove(self, key: Any) -> None:
        self.repository.delete_habit(key)

    def delete(self, key: Any) -> None:
        super().delete(key)
        self.records = [r for r in self.records if r.habit_id != key]

    def load_records(self) -> None:
        """Replace the cached records; keeps the old ones on failure."""
        try:
            records = self.record_repository.get_all()
        except StudyPlannerError:
            logger.error("Failed to load habit records", exc_info=True)
            self.error = "Failed to load habit records. Please try again."
            return
        self.records = list(records)

    def record_for(self, habit_id: str, day: Any) -> Optional[HabitRecord]:
        day = encode_day(day)
        for record in self.records:
            if record.habit_id == habit_id and record.date == day:
                return record
        return None

    def toggle_completion(self, habit_id: str, day: Any) -> HabitRecord:
        """Flip the completion of ``habit_id`` on ``day`` (creating it as completed)."""
        try:
            day = encode_day(day)
            existing = self.record_for(habit_id, day)
            if existing is not None:
                record = HabitRecord(
                    habit_id=habit_id,
                    date=day,
                    completed=not existing.completed,
                    notes=existing.notes,
                )
            else:
                record = HabitRecord(habit_id=habit_id, date=day, completed=True)
            stored = self.record_repository.put(record)
        except StudyPlannerError:
            logger.error("Failed to toggle habit completion", extra={"habit_id": habit_id}, exc_info=True)
            self.error = "Failed to update habit completion. Please try again."
            raise

        if existing is not None:
            self.records = [stored if r.key == stored.key else r for r in self.records]
        else:
            self.records = [*self.records, stored]
        return stored

    def streaks(self, habit_id: str, *, today: Optional[date] = None) -> tuple[int, int]:
        """(current, longest) streak for a habit from the cached records."""
        return compute_streaks(
            (r for r in self.records if r.habit_id == habit_id), today=today
        )

    def completion_rate(self, habit_id: str, *, days: int = 7, today: Optional[date] = None) -> float:
        return completion_rate(
            (r for r in self.records if r.habit_id == habit_id), days=days, today=today
        )


__all__ = ["HabitState"]
