"""Write-through state for goals."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Optional

from ..domain.entities import Goal, GoalCategory, GoalStatus, GoalType, Priority
from ..domain.repositories import GoalRepository
from ..infra.codec import coerce_enum, decode_timestamp
from .base import WriteThroughState, new_id, require


class GoalState(WriteThroughState[Goal]):
    """Cached goals.

    Updates carry the cached ``version`` to the repository, so an update based
    on a stale cache is rejected with ``Conflict`` instead of silently
    overwriting a newer write. Callers recover with ``load()`` and a retry.
    """

    kind = "goal"
    plural = "goals"
    timestamp_fields = frozenset({"start_date", "end_date", "last_updated"})
    enum_fields = {
        "category": GoalCategory,
        "type": GoalType,
        "priority": Priority,
        "status": GoalStatus,
    }

    repository: GoalRepository

    def _build(self, data: Mapping[str, Any]) -> Goal:
        now = self.clock()
        return Goal(
            id=str(data.get("id") or new_id()),
            title=require(data, "title"),
            description=data.get("description"),
            category=coerce_enum(GoalCategory, require(data, "category")),
            type=coerce_enum(GoalType, require(data, "type")),
            target=require(data, "target"),
            current=data.get("current", 0) or 0,
            unit=require(data, "unit"),
            start_date=decode_timestamp(data.get("start_date")) or now,
            end_date=decode_timestamp(data.get("end_date")),
            priority=coerce_enum(Priority, data.get("priority") or Priority.MEDIUM),
            status=coerce_enum(GoalStatus, data.get("status") or GoalStatus.ACTIVE),
            streak=data.get("streak", 0) or 0,
            last_updated=now,
        )

    def _stamp(self, entity: Goal) -> Goal:
        return replace(entity, last_updated=self.clock())

    def _write(self, entity: Goal, previous: Optional[Goal]) -> Goal:
        if previous is None:
            return self.repository.put(entity)
        return self.repository.put(entity, expected_version=previous.version)


__all__ = ["GoalState"]
