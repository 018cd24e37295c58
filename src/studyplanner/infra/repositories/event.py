"""SQLModel implementation of the Event repository."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from ...domain.entities import Event, EventStatus, EventType
from ...models.event import EventRecord
from ..codec import decode_event, encode_event
from .base import SQLModelCollectionRepository


class SQLModelEventRepository(SQLModelCollectionRepository[EventRecord, Event]):
    """Tasks and calendar events keyed by caller-assigned id."""

    collection = "events"
    row_model = EventRecord
    indexes = {
        "status": "status",
        "type": "type",
        "start_time": "start_time",
        "course": "course",
    }

    def _encode(self, entity: Event) -> EventRecord:
        return encode_event(entity)

    def _decode(self, row: EventRecord) -> Event:
        return decode_event(row)

    def get_by_status(self, status: EventStatus | str) -> list[Event]:
        """List events with the given status."""
        return self.get_by_index("status", EventStatus(status))

    def get_by_type(self, event_type: EventType | str) -> list[Event]:
        """List events of the given type."""
        return self.get_by_index("type", EventType(event_type))

    def get_upcoming(self, days: int = 7, *, now: Optional[datetime] = None) -> list[Event]:
        """Events starting between ``now`` and ``now + days``, soonest first."""
        start = now or datetime.now(timezone.utc)
        return self.get_by_range("start_time", start, start + timedelta(days=days))


__all__ = ["SQLModelEventRepository"]
