"""Storage row for goals."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class GoalRecord(SQLModel, table=True):
    """A goal as persisted; timestamps are ISO-8601 strings."""

    __tablename__: ClassVar[str] = "goals"

    id: str = Field(primary_key=True, max_length=64)
    title: str = Field(nullable=False, max_length=255)
    description: Optional[str] = Field(default=None)
    category: str = Field(nullable=False, max_length=16, index=True)
    type: str = Field(nullable=False, max_length=16, index=True)
    target: float = Field(nullable=False)
    current: float = Field(default=0.0, nullable=False)
    unit: str = Field(nullable=False, max_length=32)
    start_date: Optional[str] = Field(default=None, max_length=32)
    end_date: Optional[str] = Field(default=None, max_length=32)
    priority: str = Field(nullable=False, max_length=8)
    status: str = Field(nullable=False, max_length=16, index=True)
    streak: int = Field(default=0, nullable=False)
    last_updated: str = Field(nullable=False, max_length=32)
    # Added in schema v3
    version: int = Field(default=1, nullable=False, sa_column_kwargs={"server_default": "1"})
