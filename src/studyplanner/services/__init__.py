"""Domain services built on top of the repositories."""

from .habits import compute_streaks, completion_rate

__all__ = ["compute_streaks", "completion_rate"]
