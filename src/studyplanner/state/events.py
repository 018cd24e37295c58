"""Write-through state for tasks and calendar events."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Mapping, Optional

from ..domain.entities import Event, EventStatus, EventType, Priority
from ..domain.repositories import EventRepository
from ..infra.codec import coerce_enum, decode_timestamp
from .base import WriteThroughState, new_id, require


class EventState(WriteThroughState[Event]):
    """Cached events plus the board/calendar read helpers."""

    kind = "event"
    plural = "events"
    timestamp_fields = frozenset({"start_time", "end_time", "realistic_deadline"})
    enum_fields = {"type": EventType, "status": EventStatus, "priority": Priority}

    repository: EventRepository

    def _build(self, data: Mapping[str, Any]) -> Event:
        priority = data.get("priority")
        return Event(
            id=str(data.get("id") or new_id()),
            title=require(data, "title"),
            type=coerce_enum(EventType, require(data, "type")),
            status=coerce_enum(EventStatus, data.get("status") or EventStatus.TODO),
            start_time=decode_timestamp(require(data, "start_time")),
            course=data.get("course"),
            end_time=decode_timestamp(data.get("end_time")),
            estimated_time=data.get("estimated_time"),
            actual_time=data.get("actual_time"),
            description=data.get("description"),
            priority=coerce_enum(Priority, priority) if priority else None,
            tags=list(data.get("tags") or []),
            realistic_deadline=decode_timestamp(data.get("realistic_deadline")),
            procrastination_coefficient=data.get("procrastination_coefficient"),
        )

    def get_by_type(self, event_type: EventType | str) -> list[Event]:
        event_type = EventType(event_type)
        return [e for e in self.items if e.type == event_type]

    def get_by_status(self, status: EventStatus | str) -> list[Event]:
        status = EventStatus(status)
        return [e for e in self.items if e.status == status]

    def get_upcoming(self, days: int = 7, *, now: Optional[datetime] = None) -> list[Event]:
        """Cached events starting within ``days`` days of ``now``, soonest first."""
        start = now or self.clock()
        end = start + timedelta(days=days)
        return sorted(
            (e for e in self.items if start <= e.start_time <= end),
            key=lambda e: e.start_time,
        )


__all__ = ["EventState"]
