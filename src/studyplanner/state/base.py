"""Write-through cache shared by the per-collection state objects.

Mutations go to the repository first; the in-memory ``items`` list changes
only after the repository call returns. A failed mutation leaves ``items``
untouched, records a user-facing ``error`` message and re-raises so the
caller can react.
"""

from __future__ import annotations

import uuid
from dataclasses import fields, replace
from datetime import datetime, timezone
from typing import Any, Callable, ClassVar, Generic, Mapping, Optional, TypeVar

from ..errors import Conflict, InvalidRecord, NotFound, StudyPlannerError
from ..infra.codec import coerce_enum, decode_timestamp
from ..logging_config import get_logger

EntityT = TypeVar("EntityT")

Clock = Callable[[], datetime]

logger = get_logger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


def require(data: Mapping[str, Any], name: str) -> Any:
    """Return a mandatory field from caller data."""
    value = data.get(name)
    if value is None or value == "":
        raise InvalidRecord(f"Missing required field: {name}")
    return value


class WriteThroughState(Generic[EntityT]):
    """Cache mirroring one collection, updated strictly after durable writes."""

    kind: ClassVar[str] = "item"
    plural: ClassVar[str] = "items"
    timestamp_fields: ClassVar[frozenset[str]] = frozenset()
    enum_fields: ClassVar[dict[str, type]] = {}

    def __init__(self, repository: Any, *, clock: Clock = utcnow):
        self.repository = repository
        self.clock = clock
        self.items: list[EntityT] = []
        self.is_loading = False
        self.error: Optional[str] = None
        self.initialized = False

    # -- hooks -------------------------------------------------------------

    def _build(self, data: Mapping[str, Any]) -> EntityT:
        """Create a full entity from caller data plus generated defaults."""
        raise NotImplementedError

    def _stamp(self, entity: EntityT) -> EntityT:
        """Adjust a merged entity before it is written (e.g. timestamps)."""
        return entity

    def _write(self, entity: EntityT, previous: Optional[EntityT]) -> EntityT:
        return self.repository.put(entity)

    def _remove(self, key: Any) -> None:
        self.repository.delete(key)

    def _key(self, entity: EntityT) -> Any:
        return entity.id  # type: ignore[attr-defined]

    # -- helpers -----------------------------------------------------------

    def _message(self, verb: str, exc: Exception) -> str:
        if isinstance(exc, Conflict):
            return f"{self.kind.capitalize()} was changed elsewhere. Reload and try again."
        if isinstance(exc, NotFound):
            return f"{self.kind.capitalize()} not found."
        return f"Failed to {verb} {self.kind}. Please try again."

    def _fail(self, verb: str, exc: Exception) -> None:
        logger.error(
            "State mutation failed",
            extra={"kind": self.kind, "action": verb, "error": str(exc)},
        )
        self.error = self._message(verb, exc)
        self.is_loading = False

    def _begin(self) -> None:
        self.is_loading = True
        self.error = None

    def _index_of(self, key: Any) -> int:
        for index, item in enumerate(self.items):
            if self._key(item) == key:
                return index
        raise NotFound(self.kind.capitalize(), key)

    def _merge(self, current: EntityT, updates: Mapping[str, Any]) -> EntityT:
        allowed = {f.name for f in fields(current)} - {"id"}  # type: ignore[arg-type]
        unknown = set(updates) - allowed - {"id"}
        if unknown:
            raise InvalidRecord(f"Unknown {self.kind} field(s): {', '.join(sorted(unknown))}")
        changes = {k: v for k, v in updates.items() if k in allowed}
        return replace(current, **self._coerce(changes))

    def _coerce(self, updates: dict[str, Any]) -> dict[str, Any]:
        """Normalize wire-style timestamps and enum values the way ``add`` does."""
        for name, value in updates.items():
            if value is None:
                continue
            if name in self.timestamp_fields:
                updates[name] = decode_timestamp(value)
            elif name in self.enum_fields:
                updates[name] = coerce_enum(self.enum_fields[name], value)
        return updates

    # -- read API ----------------------------------------------------------

    def get(self, key: Any) -> Optional[EntityT]:
        """Cached entity for ``key``, or None."""
        for item in self.items:
            if self._key(item) == key:
                return item
        return None

    def clear_error(self) -> None:
        self.error = None

    # -- operations --------------------------------------------------------

    def load(self) -> None:
        """Replace the cache with the collection's current contents.

        Never raises for storage failures: the previous cache is kept and
        ``error`` is set instead.
        """
        self._begin()
        try:
            items = self.repository.get_all()
        except StudyPlannerError:
            logger.error("Failed to load %s", self.plural, exc_info=True)
            self.error = f"Failed to load {self.plural}. Please try again."
        else:
            self.items = list(items)
            logger.debug("Loaded %d %s", len(self.items), self.plural)
        finally:
            self.is_loading = False
            self.initialized = True

    def add(self, data: Mapping[str, Any]) -> EntityT:
        """Write a new entity through the repository, then cache it."""
        self._begin()
        try:
            entity = self._build(data)
            stored = self._write(entity, None)
        except StudyPlannerError as exc:
            self._fail("add", exc)
            raise
        finally:
            self.is_loading = False
        self.items = [*self.items, stored]
        return stored

    def update(self, key: Any, updates: Mapping[str, Any]) -> EntityT:
        """Merge ``updates`` onto the cached entity and write the full record."""
        self._begin()
        try:
            index = self._index_of(key)
            current = self.items[index]
            merged = self._stamp(self._merge(current, updates))
            stored = self._write(merged, current)
        except StudyPlannerError as exc:
            self._fail("update", exc)
            raise
        finally:
            self.is_loading = False
        items = list(self.items)
        items[index] = stored
        self.items = items
        return stored

    def delete(self, key: Any) -> None:
        """Delete through the repository, then drop the cached entry."""
        self._begin()
        try:
            self._remove(key)
        except StudyPlannerError as exc:
            self._fail("delete", exc)
            raise
        finally:
            self.is_loading = False
        self.items = [item for item in self.items if self._key(item) != key]


__all__ = ["WriteThroughState", "new_id", "require", "utcnow"]
