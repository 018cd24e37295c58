"""Administrative command line for the StudyPlanner store."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from .config import BaseConfig, TestConfig
from .errors import StorageUnavailable
from .infra.database import Store
from .infra.legacy import FileKeyValueStorage, LegacyMigrator
from .infra.repositories import (
    SQLModelEventRepository,
    SQLModelGoalRepository,
    SQLModelHabitRecordRepository,
    SQLModelHabitRepository,
)
from .logging_config import setup_logging


def _open(config: BaseConfig) -> Store:
    try:
        return Store(config).open()
    except StorageUnavailable as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the database file (defaults to STUDYPLANNER_DATA_DIR).",
)
@click.pass_context
def main(ctx: click.Context, data_dir: Optional[Path]) -> None:
    """Manage the StudyPlanner local store."""

    config = TestConfig(data_dir) if data_dir is not None else BaseConfig()
    setup_logging(config)
    ctx.obj = config


@main.command("init-db")
@click.pass_obj
def init_db(config: BaseConfig) -> None:
    """Create or upgrade the store and print its schema version."""

    store = _open(config)
    click.echo(f"Schema version: {store.schema_version}")
    store.close()


@main.command("migrate-legacy")
@click.pass_obj
def migrate_legacy(config: BaseConfig) -> None:
    """Import the legacy event list if the store has no events yet."""

    store = Store(config)
    migrator = LegacyMigrator(store, FileKeyValueStorage(config.LEGACY_DIR))
    migrated = migrator.run()
    report = migrator.report
    if migrated:
        click.echo(f"Migrated {report.imported} event(s), {report.failed} failed.")
    else:
        click.echo(f"Nothing migrated ({report.reason}).")
    store.close()


@main.command("status")
@click.pass_obj
def status(config: BaseConfig) -> None:
    """Print the schema version and record counts."""

    store = _open(config)
    click.echo(f"Schema version: {store.schema_version}")
    for label, repo_cls in (
        ("events", SQLModelEventRepository),
        ("goals", SQLModelGoalRepository),
        ("habits", SQLModelHabitRepository),
        ("habit_records", SQLModelHabitRecordRepository),
    ):
        click.echo(f"{label}: {repo_cls(store).count()}")
    store.close()


if __name__ == "__main__":  # pragma: no cover
    main()
