"""Concrete repository implementations using SQLModel."""

from .base import SQLModelCollectionRepository
from .event import SQLModelEventRepository
from .goal import SQLModelGoalRepository
from .habit import SQLModelHabitRecordRepository, SQLModelHabitRepository

__all__ = [
    "SQLModelCollectionRepository",
    "SQLModelEventRepository",
    "SQLModelGoalRepository",
    "SQLModelHabitRecordRepository",
    "SQLModelHabitRepository",
]
