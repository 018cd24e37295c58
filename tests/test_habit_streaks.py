"""Tests for habit streak and completion-rate calculations.

These cover:
- Consecutive days
- Gaps in habit completion
- Streaks ending today vs in the past
- Records marked not completed
- Empty habit data
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from studyplanner.domain.entities import HabitRecord
from studyplanner.services.habits import completion_rate, compute_streaks

TODAY = date(2025, 3, 15)


def _records(days, completed: bool = True, habit_id: str = "h1") -> list[HabitRecord]:
    return [HabitRecord(habit_id=habit_id, date=d.isoformat(), completed=completed) for d in days]


def _run(start: date, length: int) -> list[date]:
    return [start + timedelta(days=i) for i in range(length)]


class TestCurrentStreak:
    """Tests for calculating current consecutive day streaks."""

    def test_no_records_returns_zero_streak(self):
        assert compute_streaks([], today=TODAY) == (0, 0)

    def test_single_record_today_returns_one(self):
        current, _ = compute_streaks(_records([TODAY]), today=TODAY)
        assert current == 1

    def test_consecutive_days_ending_today(self):
        current, longest = compute_streaks(_records(_run(TODAY - timedelta(days=6), 7)), today=TODAY)
        assert current == 7
        assert longest == 7

    def test_gap_breaks_streak(self):
        days = [TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=3), TODAY - timedelta(days=4)]

        current, _ = compute_streaks(_records(days), today=TODAY)

        assert current == 2

    def test_missing_today_returns_zero(self):
        yesterday = TODAY - timedelta(days=1)

        current, longest = compute_streaks(_records(_run(yesterday - timedelta(days=4), 5)), today=TODAY)

        assert current == 0
        assert longest == 5

    def test_uncompleted_record_breaks_streak(self):
        records = _records([TODAY, TODAY - timedelta(days=2)])
        records += _records([TODAY - timedelta(days=1)], completed=False)

        current, _ = compute_streaks(records, today=TODAY)

        assert current == 1


class TestLongestStreak:
    """Tests for calculating the longest historical streak."""

    def test_multiple_streaks_returns_longest(self):
        days = _run(date(2025, 1, 1), 3) + _run(date(2025, 1, 10), 7) + _run(date(2025, 1, 20), 4)

        _, longest = compute_streaks(_records(days), today=TODAY)

        assert longest == 7

    def test_current_streak_can_be_longest(self):
        days = _run(date(2025, 1, 1), 2) + _run(TODAY - timedelta(days=13), 14)

        assert compute_streaks(_records(days), today=TODAY) == (14, 14)

    def test_uncompleted_records_ignored(self):
        records = _records(_run(date(2025, 1, 1), 2) + _run(date(2025, 1, 4), 2))
        records += _records([date(2025, 1, 3)], completed=False)

        _, longest = compute_streaks(records, today=TODAY)

        assert longest == 2

    def test_month_boundary_is_consecutive(self):
        days = [date(2025, 2, 27), date(2025, 2, 28), date(2025, 3, 1)]

        _, longest = compute_streaks(_records(days), today=TODAY)

        assert longest == 3


class TestCompletionRate:
    def test_counts_window_including_today(self):
        records = _records([TODAY, TODAY - timedelta(days=6), TODAY - timedelta(days=7)])

        assert completion_rate(records, days=7, today=TODAY) == pytest.approx(2 / 7)

    def test_ignores_uncompleted(self):
        records = _records(_run(TODAY - timedelta(days=6), 7), completed=False)

        assert completion_rate(records, days=7, today=TODAY) == 0.0

    def test_non_positive_window(self):
        assert completion_rate(_records([TODAY]), days=0, today=TODAY) == 0.0
