"""In-memory state kept in step with the store (write-through)."""

from .base import WriteThroughState
from .events import EventState
from .goals import GoalState
from .habits import HabitState

__all__ = ["EventState", "GoalState", "HabitState", "WriteThroughState"]
