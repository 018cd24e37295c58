"""SQLModel table exports."""

from .event import EventRecord
from .goal import GoalRecord
from .habit import HabitRecordRow, HabitRow

__all__ = [
    "EventRecord",
    "GoalRecord",
    "HabitRecordRow",
    "HabitRow",
]
