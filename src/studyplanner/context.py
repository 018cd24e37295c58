"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import BaseConfig
from .infra.database import Store
from .infra.legacy import FileKeyValueStorage, LegacyMigrator, MigrationReport
from .infra.repositories import (
    SQLModelEventRepository,
    SQLModelGoalRepository,
    SQLModelHabitRecordRepository,
    SQLModelHabitRepository,
)
from .logging_config import get_logger
from .state import EventState, GoalState, HabitState

logger = get_logger(__name__)


@dataclass
class AppContext:
    """Store handle, repositories and state objects for one process."""

    config: BaseConfig
    store: Store

    # Repositories
    event_repo: SQLModelEventRepository
    goal_repo: SQLModelGoalRepository
    habit_repo: SQLModelHabitRepository
    habit_record_repo: SQLModelHabitRecordRepository

    # State
    events: EventState
    goals: GoalState
    habits: HabitState

    migration: Optional[MigrationReport] = None

    def close(self) -> None:
        self.store.close()


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Open the store, run the legacy import, then wire repositories and state.

    Raises ``StorageUnavailable`` if the store cannot be opened. State objects
    are returned unloaded.
    """

    if config is None:
        config = BaseConfig()

    store = Store(config).open()

    event_repo = SQLModelEventRepository(store)
    goal_repo = SQLModelGoalRepository(store)
    habit_repo = SQLModelHabitRepository(store)
    habit_record_repo = SQLModelHabitRecordRepository(store)

    # Must finish before anything reads the events collection.
    migrator = LegacyMigrator(store, FileKeyValueStorage(config.LEGACY_DIR), event_repo)
    migrator.run()
    logger.info("Startup migration finished", extra={"report": migrator.report})

    return AppContext(
        config=config,
        store=store,
        event_repo=event_repo,
        goal_repo=goal_repo,
        habit_repo=habit_repo,
        habit_record_repo=habit_record_repo,
        events=EventState(event_repo),
        goals=GoalState(goal_repo),
        habits=HabitState(habit_repo, habit_record_repo),
        migration=migrator.report,
    )
