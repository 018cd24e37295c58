"""Storage row for tasks and calendar events."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class EventRecord(SQLModel, table=True):
    """A task/event as persisted; timestamps are ISO-8601 strings."""

    __tablename__: ClassVar[str] = "events"

    id: str = Field(primary_key=True, max_length=64)
    title: str = Field(nullable=False, max_length=255)
    type: str = Field(nullable=False, max_length=16, index=True)
    status: str = Field(nullable=False, max_length=16, index=True)
    course: Optional[str] = Field(default=None, max_length=120, index=True)
    start_time: str = Field(nullable=False, max_length=32, index=True)
    end_time: Optional[str] = Field(default=None, max_length=32)
    estimated_time: Optional[float] = Field(default=None)
    actual_time: Optional[float] = Field(default=None)
    description: Optional[str] = Field(default=None)
    priority: Optional[str] = Field(default=None, max_length=8)
    tags: list = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    realistic_deadline: Optional[str] = Field(default=None, max_length=32)
    procrastination_coefficient: Optional[float] = Field(default=None)
