"""Schema versioning for the SQLite store.

The on-disk version lives in ``PRAGMA user_version``. Opening a store whose
version is below :data:`SCHEMA_VERSION` runs every pending step inside one
``BEGIN EXCLUSIVE`` transaction and writes the new version as the last
statement of that transaction. Steps only create what is missing, so a store
left half-upgraded by an older build can be upgraded again.
"""

from __future__ import annotations

from typing import Callable

from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Engine
from sqlmodel import SQLModel

from .. import models  # noqa: F401  # register tables with SQLModel metadata
from ..logging_config import get_logger

logger = get_logger(__name__)

SCHEMA_VERSION = 3

UpgradeStep = Callable[[Connection], None]


def _ensure_tables(*names: str) -> UpgradeStep:
    """Step creating the named tables and each of their declared indexes."""

    def step(conn: Connection) -> None:
        for name in names:
            table = SQLModel.metadata.tables[name]
            table.create(conn, checkfirst=True)
            for index in table.indexes:
                index.create(conn, checkfirst=True)

    step.__name__ = f"ensure_tables({', '.join(names)})"
    return step


def _add_goal_version_column(conn: Connection) -> None:
    columns = {column["name"] for column in inspect(conn).get_columns("goals")}
    if "version" not in columns:
        conn.exec_driver_sql(
            "ALTER TABLE goals ADD COLUMN version INTEGER NOT NULL DEFAULT 1"
        )


# version -> steps bringing a store from version - 1 up to version
UPGRADE_STEPS: dict[int, tuple[UpgradeStep, ...]] = {
    1: (_ensure_tables("events"),),
    2: (_ensure_tables("goals", "habits", "habit_records"),),
    3: (_ensure_tables("goals"), _add_goal_version_column),
}


def read_version(conn: Connection) -> int:
    return int(conn.exec_driver_sql("PRAGMA user_version").scalar() or 0)


def _write_version(conn: Connection, version: int) -> None:
    # PRAGMA does not take bound parameters
    conn.exec_driver_sql(f"PRAGMA user_version = {int(version)}")


def upgrade_schema(engine: Engine, desired_version: int = SCHEMA_VERSION) -> int:
    """Bring the store at ``engine`` up to ``desired_version``.

    Returns the version recorded on disk afterwards. SQLAlchemy errors
    propagate to the caller.
    """

    if desired_version > SCHEMA_VERSION:
        raise ValueError(
            f"Schema version {desired_version} is not known (latest is {SCHEMA_VERSION})"
        )

    with engine.connect() as conn:
        current = read_version(conn)
    if current >= desired_version:
        if current > SCHEMA_VERSION:
            logger.warning(
                "Store schema is newer than this build",
                extra={"on_disk": current, "expected": SCHEMA_VERSION},
            )
        return current

    exclusive = engine.execution_options(sqlite_begin="EXCLUSIVE")
    with exclusive.begin() as conn:
        # Another process may have finished the upgrade while we waited for the lock.
        current = read_version(conn)
        if current >= desired_version:
            logger.info("Schema already upgraded by another connection", extra={"version": current})
            return current

        for version in range(current + 1, desired_version + 1):
            for step in UPGRADE_STEPS[version]:
                logger.debug("Running schema step", extra={"version": version, "step": step.__name__})
                step(conn)
        _write_version(conn, desired_version)

    logger.info("Schema upgraded", extra={"from_version": current, "to_version": desired_version})
    return desired_version


__all__ = ["SCHEMA_VERSION", "UPGRADE_STEPS", "read_version", "upgrade_schema"]
