"""Habit helpers for streaks and completion rates."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from ..domain.entities import HabitRecord


def _completed_days(records: Iterable[HabitRecord]) -> set[date]:
    return {date.fromisoformat(r.date) for r in records if r.completed}


def compute_streaks(records: Iterable[HabitRecord], *, today: date | None = None) -> tuple[int, int]:
    """Return (current_streak, longest_streak) from a habit's records."""

    today = today or date.today()
    days = _completed_days(records)

    # Current streak: walk backwards from today until a gap.
    current = 0
    cursor = today
    while cursor in days:
        current += 1
        cursor -= timedelta(days=1)

    # Longest streak: sweep through sorted days, counting consecutive runs.
    longest = 0
    run = 0
    last_day: date | None = None
    for d in sorted(days):
        if last_day is None or d == last_day + timedelta(days=1):
            run += 1
        else:
            longest = max(longest, run)
            run = 1
        last_day = d
    longest = max(longest, run)

    return current, longest


def completion_rate(
    records: Iterable[HabitRecord], *, days: int = 7, today: date | None = None
) -> float:
    """Fraction of the last ``days`` days (today included) marked completed."""

    if days <= 0:
        return 0.0
    today = today or date.today()
    window_start = today - timedelta(days=days - 1)
    done = {d for d in _completed_days(records) if window_start <= d <= today}
    return len(done) / days


__all__ = ["compute_streaks", "completion_rate"]
