"""One-time import of the legacy flat event list into the indexed store.

Older builds kept every event as one JSON array under a single key of a flat
key/value store. :class:`LegacyMigrator` moves that array into the events
collection once, then removes the blob.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..errors import StudyPlannerError
from ..logging_config import get_logger
from .codec import event_from_wire
from .database import Store
from .repositories.event import SQLModelEventRepository

logger = get_logger(__name__)

LEGACY_EVENTS_KEY = "smart-academic-planner-events"

_KEY_RE = re.compile(r"^[A-Za-z0-9._-]+$")


class FileKeyValueStorage:
    """Flat string key/value storage, one ``<key>.json`` file per key."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


@dataclass(frozen=True)
class MigrationReport:
    """Outcome of a migrator run."""

    migrated: bool
    imported: int = 0
    failed: int = 0
    reason: str = ""


class LegacyMigrator:
    """Import the legacy event blob exactly once.

    The guard against repeated imports is "the events collection is already
    non-empty". It cannot tell a finished import from one interrupted halfway;
    an interrupted run leaves the blob behind but later runs skip it.
    """

    def __init__(
        self,
        store: Store,
        legacy: FileKeyValueStorage,
        events: Optional[SQLModelEventRepository] = None,
        *,
        key: str = LEGACY_EVENTS_KEY,
    ):
        self.store = store
        self.legacy = legacy
        self.events = events or SQLModelEventRepository(store)
        self.key = key
        self.report: Optional[MigrationReport] = None

    def _finish(self, report: MigrationReport) -> bool:
        self.report = report
        return report.migrated

    def run(self) -> bool:
        """Run the migration; True only when the legacy blob was imported."""

        try:
            raw = self.legacy.get_item(self.key)
        except OSError:
            logger.error("Could not read legacy data", exc_info=True)
            return self._finish(MigrationReport(False, reason="legacy data unreadable"))
        if not raw:
            logger.info("No legacy data to migrate")
            return self._finish(MigrationReport(False, reason="no legacy data"))

        try:
            payload = json.loads(raw)
        except ValueError:
            logger.warning("Legacy data is not valid JSON, skipping migration", exc_info=True)
            return self._finish(MigrationReport(False, reason="malformed legacy data"))
        if not isinstance(payload, list) or not payload:
            logger.info("No valid events in legacy data to migrate")
            return self._finish(MigrationReport(False, reason="no legacy events"))

        try:
            self.store.open()
            if self.events.get_all():
                logger.info("Store already has events, skipping migration")
                return self._finish(MigrationReport(False, reason="store not empty"))
        except StudyPlannerError:
            logger.error("Migration failed", exc_info=True)
            return self._finish(MigrationReport(False, reason="store unavailable"))

        logger.info("Migrating legacy events", extra={"count": len(payload)})
        imported = 0
        failed = 0
        for item in payload:
            try:
                self.events.put(event_from_wire(item))
            except (StudyPlannerError, ValueError, TypeError, KeyError):
                failed += 1
                record_id = item.get("id") if isinstance(item, dict) else None
                logger.warning(
                    "Failed to migrate event", extra={"event_id": record_id}, exc_info=True
                )
            else:
                imported += 1

        try:
            self.legacy.remove_item(self.key)
        except OSError:
            # The non-empty store already blocks a second import.
            logger.warning("Could not remove legacy data", exc_info=True)
        logger.info(
            "Migration completed",
            extra={"imported": imported, "failed": failed},
        )
        return self._finish(MigrationReport(True, imported=imported, failed=failed))


__all__ = [
    "FileKeyValueStorage",
    "LEGACY_EVENTS_KEY",
    "LegacyMigrator",
    "MigrationReport",
]
