"""Pytest configuration and shared fixtures for StudyPlanner tests.

Every test gets its own on-disk SQLite store under ``tmp_path`` so repositories,
migrations and state objects run against the real engine without touching the
user's data directory.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from studyplanner.config import TestConfig
from studyplanner.domain.entities import (
    Event,
    EventStatus,
    EventType,
    Goal,
    GoalCategory,
    GoalStatus,
    GoalType,
    Habit,
    HabitCategory,
    HabitFrequency,
    HabitRecord,
    Priority,
)
from studyplanner.infra.database import Store
from studyplanner.infra.repositories import (
    SQLModelEventRepository,
    SQLModelGoalRepository,
    SQLModelHabitRecordRepository,
    SQLModelHabitRepository,
)

UTC = timezone.utc
FIXED_NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def config(tmp_path) -> TestConfig:
    """Configuration rooted in a per-test temporary directory."""
    return TestConfig(tmp_path / "data")


@pytest.fixture
def store(config):
    """An opened store at the current schema version.

    Yields:
        Store: handle shared by the repository fixtures
    """
    handle = Store(config).open()
    yield handle
    handle.close()


@pytest.fixture
def event_repo(store) -> SQLModelEventRepository:
    return SQLModelEventRepository(store)


@pytest.fixture
def goal_repo(store) -> SQLModelGoalRepository:
    return SQLModelGoalRepository(store)


@pytest.fixture
def habit_repo(store) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(store)


@pytest.fixture
def record_repo(store) -> SQLModelHabitRecordRepository:
    return SQLModelHabitRecordRepository(store)


# =============================================================================
# Entity Factories
# =============================================================================


@pytest.fixture
def event_factory():
    """Factory for Event instances with sensible defaults (not persisted)."""

    def _create_event(
        id: str = "evt-1",
        title: str = "Essay draft",
        type: EventType = EventType.DEADLINE,
        status: EventStatus = EventStatus.TODO,
        start_time: datetime = datetime(2025, 3, 3, 9, 0, tzinfo=UTC),
        **extra,
    ) -> Event:
        return Event(
            id=id,
            title=title,
            type=type,
            status=status,
            start_time=start_time,
            **extra,
        )

    return _create_event


@pytest.fixture
def goal_factory():
    """Factory for Goal instances with sensible defaults (not persisted)."""

    def _create_goal(
        id: str = "goal-1",
        title: str = "Read 20 pages",
        target: float = 20,
        current: float = 0,
        **extra,
    ) -> Goal:
        values = dict(
            id=id,
            title=title,
            category=GoalCategory.ACADEMIC,
            type=GoalType.DAILY,
            target=target,
            current=current,
            unit="pages",
            priority=Priority.MEDIUM,
            status=GoalStatus.ACTIVE,
            streak=0,
            last_updated=FIXED_NOW,
        )
        values.update(extra)
        return Goal(**values)

    return _create_goal


@pytest.fixture
def habit_factory():
    """Factory for Habit instances with sensible defaults (not persisted)."""

    def _create_habit(id: str = "habit-1", name: str = "Meditate", **extra) -> Habit:
        values = dict(
            id=id,
            name=name,
            category=HabitCategory.HEALTH,
            frequency=HabitFrequency.DAILY,
            target=1,
            color="teal",
            icon="leaf",
            created_at=FIXED_NOW,
            is_active=True,
        )
        values.update(extra)
        return Habit(**values)

    return _create_habit


@pytest.fixture
def record_factory():
    """Factory for HabitRecord instances."""

    def _create_record(
        habit_id: str = "habit-1",
        date: str = "2025-03-01",
        completed: bool = True,
        notes: str | None = None,
    ) -> HabitRecord:
        return HabitRecord(habit_id=habit_id, date=date, completed=completed, notes=notes)

    return _create_record
