"""Tests for entity <-> row conversion and timestamp normalization."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from studyplanner.domain.entities import EventStatus, EventType, GoalStatus, Priority
from studyplanner.errors import InvalidRecord
from studyplanner.infra.codec import (
    coerce_enum,
    decode_event,
    decode_goal,
    decode_timestamp,
    encode_day,
    encode_event,
    encode_goal,
    encode_habit,
    encode_index_value,
    encode_timestamp,
    event_from_wire,
    event_to_wire,
    split_habit_record_key,
)

UTC = timezone.utc


class TestTimestamps:
    def test_encodes_fixed_width_utc_with_millis(self):
        value = datetime(2025, 3, 1, 9, 30, tzinfo=UTC)
        assert encode_timestamp(value) == "2025-03-01T09:30:00.000Z"

    def test_converts_offsets_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        value = datetime(2025, 3, 1, 11, 30, 15, 250000, tzinfo=plus_two)
        assert encode_timestamp(value) == "2025-03-01T09:30:15.250Z"

    def test_naive_datetimes_are_taken_as_utc(self):
        assert encode_timestamp(datetime(2025, 3, 1, 9, 30)) == "2025-03-01T09:30:00.000Z"

    def test_encoded_strings_sort_chronologically(self):
        times = [
            datetime(2025, 12, 31, 23, 59, tzinfo=UTC),
            datetime(2025, 1, 2, 0, 0, tzinfo=UTC),
            datetime(2025, 1, 1, 23, 0, 0, 5000, tzinfo=UTC),
            datetime(2025, 1, 1, 23, 0, tzinfo=UTC),
        ]
        encoded = [encode_timestamp(t) for t in times]
        assert sorted(encoded) == [encode_timestamp(t) for t in sorted(times)]

    def test_decode_accepts_z_suffix_and_returns_aware_utc(self):
        decoded = decode_timestamp("2025-03-01T09:30:00.000Z")
        assert decoded == datetime(2025, 3, 1, 9, 30, tzinfo=UTC)
        assert decoded.tzinfo is not None

    def test_decode_empty_is_none(self):
        assert decode_timestamp(None) is None
        assert decode_timestamp("") is None

    def test_decode_rejects_garbage(self):
        with pytest.raises(InvalidRecord):
            decode_timestamp("next tuesday")

    def test_encode_rejects_non_datetime(self):
        with pytest.raises(InvalidRecord):
            encode_timestamp("2025-03-01")  # type: ignore[arg-type]


class TestScalars:
    def test_encode_day_accepts_dates_and_iso_strings(self):
        assert encode_day(date(2025, 3, 1)) == "2025-03-01"
        assert encode_day(datetime(2025, 3, 1, 23, 0)) == "2025-03-01"
        assert encode_day("2025-03-01") == "2025-03-01"

    @pytest.mark.parametrize("value", ["2025-3-1", "2025-02-30", "yesterday", None, 20250301])
    def test_encode_day_rejects_invalid_values(self, value):
        with pytest.raises(InvalidRecord):
            encode_day(value)

    def test_coerce_enum(self):
        assert coerce_enum(EventStatus, "in-progress") is EventStatus.IN_PROGRESS
        assert coerce_enum(EventStatus, EventStatus.DONE) is EventStatus.DONE
        with pytest.raises(InvalidRecord):
            coerce_enum(EventStatus, "archived")

    def test_index_values_match_stored_form(self):
        assert encode_index_value(EventType.CLASS) == "class"
        assert encode_index_value(datetime(2025, 3, 1, tzinfo=UTC)) == "2025-03-01T00:00:00.000Z"
        assert encode_index_value(date(2025, 3, 1)) == "2025-03-01"
        assert encode_index_value("CS101") == "CS101"

    def test_split_habit_record_key(self):
        assert split_habit_record_key(("h1", date(2025, 3, 1))) == ("h1", "2025-03-01")
        with pytest.raises(InvalidRecord):
            split_habit_record_key("h1")
        with pytest.raises(InvalidRecord):
            split_habit_record_key(("", "2025-03-01"))


class TestEventCodec:
    def test_row_round_trip_preserves_all_fields(self, event_factory):
        event = event_factory(
            course="CS101",
            end_time=datetime(2025, 3, 3, 11, 0, tzinfo=UTC),
            estimated_time=2.5,
            actual_time=3.0,
            description="First draft",
            priority=Priority.HIGH,
            tags=["writing", "cs"],
            realistic_deadline=datetime(2025, 3, 4, 9, 0, tzinfo=UTC),
            procrastination_coefficient=1.4,
        )

        row = encode_event(event)

        assert row.start_time == "2025-03-03T09:00:00.000Z"
        assert row.status == "todo"
        assert row.priority == "high"
        assert decode_event(row) == event

    def test_missing_start_time_is_rejected(self, event_factory):
        event = event_factory(start_time=None)
        with pytest.raises(InvalidRecord):
            encode_event(event)

    def test_from_wire_reads_camel_case(self):
        event = event_from_wire(
            {
                "id": 17,
                "title": "Lab report",
                "type": "deadline",
                "status": "in-progress",
                "startTime": "2025-03-05T08:00:00.000Z",
                "estimatedTime": 4,
                "tags": ["lab"],
            }
        )

        assert event.id == "17"
        assert event.status is EventStatus.IN_PROGRESS
        assert event.start_time == datetime(2025, 3, 5, 8, 0, tzinfo=UTC)
        assert event.estimated_time == 4
        assert event.priority is None

    @pytest.mark.parametrize(
        "payload",
        [
            {"title": "No id", "type": "class", "status": "todo", "startTime": "2025-03-05T08:00:00Z"},
            {"id": "e1", "title": "No start", "type": "class", "status": "todo"},
            {"id": "e1", "title": "Bad type", "type": "exam", "status": "todo", "startTime": "2025-03-05T08:00:00Z"},
            ["not", "a", "record"],
        ],
    )
    def test_from_wire_rejects_incomplete_records(self, payload):
        with pytest.raises(InvalidRecord):
            event_from_wire(payload)

    def test_to_wire_omits_unset_fields(self, event_factory):
        wire = event_to_wire(event_factory())

        assert wire == {
            "id": "evt-1",
            "title": "Essay draft",
            "type": "deadline",
            "status": "todo",
            "startTime": "2025-03-03T09:00:00.000Z",
            "tags": [],
        }
        assert event_from_wire(wire) == event_factory()


class TestGoalCodec:
    def test_round_trip(self, goal_factory):
        goal = goal_factory(current=5, status=GoalStatus.PAUSED, version=3)
        assert decode_goal(encode_goal(goal)) == goal

    @pytest.mark.parametrize(
        "overrides",
        [{"target": 0}, {"target": -5}, {"current": -1}, {"streak": -1}, {"id": ""}],
    )
    def test_invalid_goals_are_rejected(self, goal_factory, overrides):
        with pytest.raises(InvalidRecord):
            encode_goal(goal_factory(**overrides))

    def test_numeric_strings_are_coerced(self, goal_factory):
        row = encode_goal(goal_factory(target="20", current="2.5", streak="3"))

        assert row.target == 20.0
        assert row.current == 2.5
        assert row.streak == 3

    @pytest.mark.parametrize(
        "overrides",
        [{"target": "abc"}, {"current": None}, {"target": True}, {"streak": 1.5}],
    )
    def test_non_numeric_values_are_rejected(self, goal_factory, overrides):
        with pytest.raises(InvalidRecord):
            encode_goal(goal_factory(**overrides))


class TestNumericFields:
    def test_event_durations_accept_numeric_strings(self, event_factory):
        row = encode_event(event_factory(estimated_time="90", actual_time=""))

        assert row.estimated_time == 90.0
        assert row.actual_time is None

    def test_event_rejects_non_numeric_duration(self, event_factory):
        with pytest.raises(InvalidRecord):
            encode_event(event_factory(estimated_time="a while"))

    def test_habit_rejects_non_numeric_target(self, habit_factory):
        with pytest.raises(InvalidRecord):
            encode_habit(habit_factory(target="daily"))
