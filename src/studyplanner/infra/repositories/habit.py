"""SQLModel implementation of the Habit and HabitRecord repositories."""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import func
from sqlmodel import select

from ...domain.entities import Habit, HabitRecord
from ...errors import PartialCascadeFailure
from ...logging_config import get_logger
from ...models.habit import HabitRecordRow, HabitRow
from ..codec import (
    decode_habit,
    decode_habit_record,
    encode_habit,
    encode_habit_record,
    habit_record_key,
    split_habit_record_key,
)
from .base import SQLModelCollectionRepository

logger = get_logger(__name__)


class SQLModelHabitRepository(SQLModelCollectionRepository[HabitRow, Habit]):
    """SQLModel-based habit repository implementation."""

    collection = "habits"
    row_model = HabitRow
    indexes = {
        "category": "category",
        "is_active": "is_active",
    }

    def _encode(self, entity: Habit) -> HabitRow:
        return encode_habit(entity)

    def _decode(self, row: HabitRow) -> Habit:
        return decode_habit(row)

    def list_active(self) -> list[Habit]:
        """List only active habits."""
        return self.get_by_index("is_active", True)

    def delete_habit(self, habit_id: str) -> int:
        """Delete a habit and every record referencing it, atomically.

        Both deletes share one transaction; if anything fails SQLite rolls the
        whole thing back and the error surfaces as ``StorageIOError``. Returns
        the number of records removed.
        """
        with self.store.session_scope(begin="IMMEDIATE") as session:
            habit = session.get(HabitRow, habit_id)
            if habit is not None:
                session.delete(habit)
                session.flush()
            records = session.exec(
                select(HabitRecordRow).where(HabitRecordRow.habit_id == habit_id)
            ).all()
            for record in records:
                session.delete(record)
            removed = len(records)

        remaining = self._count_records(habit_id)
        if remaining:
            logger.error(
                "Habit records survived cascade delete",
                extra={"habit_id": habit_id, "remaining": remaining},
            )
            raise PartialCascadeFailure(habit_id, remaining)

        logger.info(
            "Habit deleted",
            extra={"habit_id": habit_id, "found": habit is not None, "records_removed": removed},
        )
        return removed

    def _count_records(self, habit_id: str) -> int:
        with self.store.session_scope() as session:
            return session.exec(
                select(func.count())
                .select_from(HabitRecordRow)
                .where(HabitRecordRow.habit_id == habit_id)
            ).one()


class SQLModelHabitRecordRepository(SQLModelCollectionRepository[HabitRecordRow, HabitRecord]):
    """Per-day completion records keyed by ``(habit_id, date)``."""

    collection = "habit_records"
    row_model = HabitRecordRow
    indexes = {
        "habit_id": "habit_id",
        "date": "date",
        "completed": "completed",
    }

    def _encode(self, entity: HabitRecord) -> HabitRecordRow:
        return encode_habit_record(entity)

    def _decode(self, row: HabitRecordRow) -> HabitRecord:
        return decode_habit_record(row)

    def _identity(self, key: Any) -> tuple[str, str]:
        return split_habit_record_key(key)

    def get(self, habit_id: str, day: Any) -> Optional[HabitRecord]:
        """Retrieve the record for one habit on one day."""
        return self.get_by_id(habit_record_key(habit_id, day))

    def get_for_habit(self, habit_id: str) -> list[HabitRecord]:
        """All records of a habit, oldest day first."""
        return sorted(self.get_by_index("habit_id", habit_id), key=lambda r: r.date)


__all__ = ["SQLModelHabitRecordRepository", "SQLModelHabitRepository"]
