"""Conversion between in-memory entities and their stored/wire representation.

Timestamps are stored as UTC ISO-8601 strings with millisecond precision and
a ``Z`` suffix (``2025-03-01T09:30:00.000Z``). The fixed width keeps the
lexicographic order of the stored strings identical to chronological order,
which the ``start_time`` range scans rely on. Naive datetimes are taken as UTC.

Everything here is pure: no I/O, no session access.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional, TypeVar

from ..domain.entities import (
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
from ..errors import InvalidRecord
from ..models import EventRecord, GoalRecord, HabitRecordRow, HabitRow

E = TypeVar("E", bound=Enum)

_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


def encode_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Render a datetime as a fixed-width UTC ISO-8601 string."""

    if value is None:
        return None
    if not isinstance(value, datetime):
        raise InvalidRecord(f"Expected datetime, got {type(value).__name__}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def decode_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string (or pass through a datetime) into aware UTC."""

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidRecord(f"Invalid timestamp: {value!r}") from exc
    else:
        raise InvalidRecord(f"Invalid timestamp: {value!r}")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def encode_day(value: Any) -> str:
    """Normalize a calendar day to ``YYYY-MM-DD``."""

    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str) and _DAY_RE.match(value):
        try:
            date.fromisoformat(value)
        except ValueError as exc:
            raise InvalidRecord(f"Invalid calendar day: {value!r}") from exc
        return value
    raise InvalidRecord(f"Invalid calendar day: {value!r}")


def coerce_enum(enum_cls: type[E], value: Any) -> E:
    """Return ``value`` as a member of ``enum_cls`` (accepts members or raw values)."""

    try:
        return enum_cls(value)
    except ValueError as exc:
        raise InvalidRecord(f"{value!r} is not a valid {enum_cls.__name__}") from exc


def _enum_value(enum_cls: type[Enum], value: Any) -> str:
    return coerce_enum(enum_cls, value).value


def _optional_enum(enum_cls: type[E], value: Any) -> Optional[E]:
    if value is None or value == "":
        return None
    return coerce_enum(enum_cls, value)


def _number(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise InvalidRecord(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidRecord(f"{name} must be a number, got {value!r}") from exc


def _optional_number(value: Any, name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    return _number(value, name)


def encode_index_value(value: Any) -> Any:
    """Convert a lookup value to the form stored in an indexed column."""

    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return encode_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    return value


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


def encode_event(event: Event) -> EventRecord:
    if not event.id:
        raise InvalidRecord("Event id is required")
    if event.start_time is None:
        raise InvalidRecord(f"Event {event.id!r} has no start time")
    return EventRecord(
        id=event.id,
        title=event.title,
        type=_enum_value(EventType, event.type),
        status=_enum_value(EventStatus, event.status),
        course=event.course,
        start_time=encode_timestamp(event.start_time),
        end_time=encode_timestamp(event.end_time),
        estimated_time=_optional_number(event.estimated_time, "estimated_time"),
        actual_time=_optional_number(event.actual_time, "actual_time"),
        description=event.description,
        priority=_enum_value(Priority, event.priority) if event.priority else None,
        tags=list(event.tags or []),
        realistic_deadline=encode_timestamp(event.realistic_deadline),
        procrastination_coefficient=_optional_number(
            event.procrastination_coefficient, "procrastination_coefficient"
        ),
    )


def decode_event(row: EventRecord) -> Event:
    return Event(
        id=row.id,
        title=row.title,
        type=coerce_enum(EventType, row.type),
        status=coerce_enum(EventStatus, row.status),
        course=row.course,
        start_time=decode_timestamp(row.start_time),
        end_time=decode_timestamp(row.end_time),
        estimated_time=row.estimated_time,
        actual_time=row.actual_time,
        description=row.description,
        priority=_optional_enum(Priority, row.priority),
        tags=list(row.tags or []),
        realistic_deadline=decode_timestamp(row.realistic_deadline),
        procrastination_coefficient=row.procrastination_coefficient,
    )


# camelCase wire name -> entity attribute
_EVENT_WIRE_FIELDS = {
    "id": "id",
    "title": "title",
    "type": "type",
    "status": "status",
    "course": "course",
    "startTime": "start_time",
    "endTime": "end_time",
    "estimatedTime": "estimated_time",
    "actualTime": "actual_time",
    "description": "description",
    "priority": "priority",
    "tags": "tags",
    "realisticDeadline": "realistic_deadline",
    "procrastinationCoefficient": "procrastination_coefficient",
}
_EVENT_TIMESTAMPS = {"start_time", "end_time", "realistic_deadline"}


def event_from_wire(data: Mapping[str, Any]) -> Event:
    """Build an Event from a JSON-shaped record (camelCase keys, string timestamps)."""

    if not isinstance(data, Mapping):
        raise InvalidRecord(f"Event record must be an object, got {type(data).__name__}")
    values: dict[str, Any] = {}
    for wire_name, attr in _EVENT_WIRE_FIELDS.items():
        if wire_name in data:
            values[attr] = data[wire_name]
        elif attr in data:
            values[attr] = data[attr]
    for attr in ("id", "title", "type", "status", "start_time"):
        if values.get(attr) in (None, ""):
            raise InvalidRecord(f"Event record is missing {attr!r}")
    for attr in _EVENT_TIMESTAMPS:
        values[attr] = decode_timestamp(values.get(attr))
    values["id"] = str(values["id"])
    values["type"] = coerce_enum(EventType, values["type"])
    values["status"] = coerce_enum(EventStatus, values["status"])
    values["priority"] = _optional_enum(Priority, values.get("priority"))
    values["tags"] = list(values.get("tags") or [])
    return Event(**values)


def event_to_wire(event: Event) -> dict[str, Any]:
    """Inverse of :func:`event_from_wire`; omits unset optional fields."""

    wire: dict[str, Any] = {}
    for wire_name, attr in _EVENT_WIRE_FIELDS.items():
        value = getattr(event, attr)
        if value is None:
            continue
        if attr in _EVENT_TIMESTAMPS:
            value = encode_timestamp(value)
        elif isinstance(value, Enum):
            value = value.value
        wire[wire_name] = value
    return wire


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------


def encode_goal(goal: Goal) -> GoalRecord:
    if not goal.id:
        raise InvalidRecord("Goal id is required")
    target = _number(goal.target, "target")
    current = _number(goal.current, "current")
    streak = _number(goal.streak, "streak")
    if target <= 0:
        raise InvalidRecord(f"Goal {goal.id!r} target must be greater than zero")
    if current < 0:
        raise InvalidRecord(f"Goal {goal.id!r} current must not be negative")
    if streak < 0 or streak != int(streak):
        raise InvalidRecord(f"Goal {goal.id!r} streak must be a whole number >= 0")
    return GoalRecord(
        id=goal.id,
        title=goal.title,
        description=goal.description,
        category=_enum_value(GoalCategory, goal.category),
        type=_enum_value(GoalType, goal.type),
        target=target,
        current=current,
        unit=goal.unit,
        start_date=encode_timestamp(goal.start_date),
        end_date=encode_timestamp(goal.end_date),
        priority=_enum_value(Priority, goal.priority),
        status=_enum_value(GoalStatus, goal.status),
        streak=int(streak),
        last_updated=encode_timestamp(goal.last_updated),
        version=goal.version,
    )


def decode_goal(row: GoalRecord) -> Goal:
    return Goal(
        id=row.id,
        title=row.title,
        description=row.description,
        category=coerce_enum(GoalCategory, row.category),
        type=coerce_enum(GoalType, row.type),
        target=row.target,
        current=row.current,
        unit=row.unit,
        start_date=decode_timestamp(row.start_date),
        end_date=decode_timestamp(row.end_date),
        priority=coerce_enum(Priority, row.priority),
        status=coerce_enum(GoalStatus, row.status),
        streak=row.streak,
        last_updated=decode_timestamp(row.last_updated),
        version=row.version,
    )


# ---------------------------------------------------------------------------
# Habits
# ---------------------------------------------------------------------------


def encode_habit(habit: Habit) -> HabitRow:
    if not habit.id:
        raise InvalidRecord("Habit id is required")
    return HabitRow(
        id=habit.id,
        name=habit.name,
        description=habit.description,
        category=_enum_value(HabitCategory, habit.category),
        frequency=_enum_value(HabitFrequency, habit.frequency),
        target=_number(habit.target, "target"),
        color=habit.color or "",
        icon=habit.icon or "",
        created_at=encode_timestamp(habit.created_at),
        is_active=bool(habit.is_active),
    )


def decode_habit(row: HabitRow) -> Habit:
    return Habit(
        id=row.id,
        name=row.name,
        description=row.description,
        category=coerce_enum(HabitCategory, row.category),
        frequency=coerce_enum(HabitFrequency, row.frequency),
        target=row.target,
        color=row.color,
        icon=row.icon,
        created_at=decode_timestamp(row.created_at),
        is_active=bool(row.is_active),
    )


def habit_record_key(habit_id: str, day: Any) -> tuple[str, str]:
    """Assemble the composite primary key of a habit record."""

    if not habit_id:
        raise InvalidRecord("Habit record requires a habit id")
    return (str(habit_id), encode_day(day))


def split_habit_record_key(key: Any) -> tuple[str, str]:
    """Validate a ``(habit_id, date)`` key given by a caller."""

    try:
        habit_id, day = key
    except (TypeError, ValueError) as exc:
        raise InvalidRecord(f"Habit record key must be (habit_id, date), got {key!r}") from exc
    return habit_record_key(habit_id, day)


def encode_habit_record(record: HabitRecord) -> HabitRecordRow:
    habit_id, day = habit_record_key(record.habit_id, record.date)
    return HabitRecordRow(
        habit_id=habit_id,
        date=day,
        completed=bool(record.completed),
        notes=record.notes,
    )


def decode_habit_record(row: HabitRecordRow) -> HabitRecord:
    return HabitRecord(
        habit_id=row.habit_id,
        date=row.date,
        completed=bool(row.completed),
        notes=row.notes,
    )


__all__ = [
    "coerce_enum",
    "decode_event",
    "decode_goal",
    "decode_habit",
    "decode_habit_record",
    "decode_timestamp",
    "encode_day",
    "encode_event",
    "encode_goal",
    "encode_habit",
    "encode_habit_record",
    "encode_index_value",
    "encode_timestamp",
    "event_from_wire",
    "event_to_wire",
    "habit_record_key",
    "split_habit_record_key",
]
