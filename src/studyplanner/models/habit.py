"""Storage rows for habits and their per-day completion records."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class HabitRow(SQLModel, table=True):
    """A habit the user tracks."""

    __tablename__: ClassVar[str] = "habits"

    id: str = Field(primary_key=True, max_length=64)
    name: str = Field(nullable=False, max_length=120)
    description: Optional[str] = Field(default=None, max_length=255)
    category: str = Field(nullable=False, max_length=16, index=True)
    frequency: str = Field(nullable=False, max_length=16)
    target: float = Field(default=1.0, nullable=False)
    color: str = Field(default="", max_length=32)
    icon: str = Field(default="", max_length=64)
    created_at: str = Field(nullable=False, max_length=32)
    is_active: bool = Field(default=True, nullable=False, index=True)


class HabitRecordRow(SQLModel, table=True):
    """Completion state of a habit on a calendar day, keyed by (habit_id, date)."""

    __tablename__: ClassVar[str] = "habit_records"

    # No foreign key: habit_id is a soft reference, cascades happen in the repository.
    habit_id: str = Field(primary_key=True, max_length=64, index=True)
    date: str = Field(primary_key=True, max_length=10, index=True)
    completed: bool = Field(default=False, nullable=False, index=True)
    notes: Optional[str] = Field(default=None, max_length=500)
