"""In-memory entity types used by repositories and state synchronizers.

Temporal fields hold native ``datetime`` values here; the storage rows in
``studyplanner.models`` hold ISO-8601 strings instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class EventType(str, Enum):
    DEADLINE = "deadline"
    CLASS = "class"
    PROJECT = "project"
    PERSONAL = "personal"


class EventStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class GoalCategory(str, Enum):
    ACADEMIC = "academic"
    PERSONAL = "personal"
    FITNESS = "fitness"
    SKILL = "skill"
    HABIT = "habit"


class GoalType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ONE_TIME = "one-time"


class GoalStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"
    FAILED = "failed"


class HabitCategory(str, Enum):
    HEALTH = "health"
    PRODUCTIVITY = "productivity"
    LEARNING = "learning"
    PERSONAL = "personal"
    SOCIAL = "social"


class HabitFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    CUSTOM = "custom"


@dataclass
class Event:
    """A task or calendar event (deadline, class, project work, personal)."""

    id: str
    title: str
    type: EventType
    status: EventStatus
    start_time: datetime
    course: Optional[str] = None
    end_time: Optional[datetime] = None
    estimated_time: Optional[float] = None  # hours
    actual_time: Optional[float] = None  # hours
    description: Optional[str] = None
    priority: Optional[Priority] = None
    tags: list[str] = field(default_factory=list)
    realistic_deadline: Optional[datetime] = None
    procrastination_coefficient: Optional[float] = None


@dataclass
class Goal:
    """A measurable target with progress tracked against it."""

    id: str
    title: str
    category: GoalCategory
    type: GoalType
    target: float
    current: float
    unit: str
    priority: Priority
    status: GoalStatus
    streak: int
    last_updated: datetime
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    # Bumped by the repository on every write; used to reject stale updates.
    version: int = 0


@dataclass
class Habit:
    id: str
    name: str
    category: HabitCategory
    frequency: HabitFrequency
    target: float
    color: str
    icon: str
    created_at: datetime
    is_active: bool = True
    description: Optional[str] = None


@dataclass
class HabitRecord:
    """Completion state of one habit on one calendar day (``YYYY-MM-DD``)."""

    habit_id: str
    date: str
    completed: bool
    notes: Optional[str] = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.habit_id, self.date)


__all__ = [
    "Event",
    "EventStatus",
    "EventType",
    "Goal",
    "GoalCategory",
    "GoalStatus",
    "GoalType",
    "Habit",
    "HabitCategory",
    "HabitFrequency",
    "HabitRecord",
    "Priority",
]
