"""Repository protocol definitions for domain layer."""

from .event import EventRepository
from .goal import GoalRepository
from .habit import HabitRecordRepository, HabitRepository

__all__ = [
    "EventRepository",
    "GoalRepository",
    "HabitRecordRepository",
    "HabitRepository",
]
