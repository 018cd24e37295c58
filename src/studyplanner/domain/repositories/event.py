"""Event repository protocol."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol

from ..entities import Event, EventStatus, EventType


class EventRepository(Protocol):
    """Repository for tasks and calendar events."""

    def init(self) -> "EventRepository":
        """Make sure the underlying store is open."""
        ...

    def get_all(self) -> list[Event]:
        """Return every event; order is unspecified."""
        ...

    def get_by_id(self, event_id: str) -> Optional[Event]:
        """Retrieve an event by ID."""
        ...

    def get_by_index(self, index_name: str, value: Any) -> list[Event]:
        """Equality lookup through a declared secondary index."""
        ...

    def get_by_range(
        self, index_name: str, lower: Any = None, upper: Any = None
    ) -> list[Event]:
        """Inclusive range scan through a declared secondary index."""
        ...

    def get_by_status(self, status: EventStatus | str) -> list[Event]:
        """List events with the given status."""
        ...

    def get_by_type(self, event_type: EventType | str) -> list[Event]:
        """List events of the given type."""
        ...

    def get_upcoming(self, days: int = 7, *, now: Optional[datetime] = None) -> list[Event]:
        """Events starting within the next ``days`` days, soonest first."""
        ...

    def put(self, event: Event) -> Event:
        """Insert or fully replace an event."""
        ...

    def delete(self, event_id: str) -> None:
        """Delete an event; absent ids are ignored."""
        ...

    def clear(self) -> None:
        """Remove every event."""
        ...
