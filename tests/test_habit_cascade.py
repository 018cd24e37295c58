"""Tests for deleting a habit together with its completion records."""

from __future__ import annotations

from datetime import date, timedelta

import pytest
import sqlmodel
from sqlalchemy.exc import OperationalError

from studyplanner.errors import PartialCascadeFailure, StorageIOError
from studyplanner.models import HabitRecordRow


def _seed_records(record_repo, record_factory, habit_id: str, count: int) -> None:
    start = date(2025, 3, 1)
    for offset in range(count):
        record_repo.put(record_factory(habit_id=habit_id, date=start + timedelta(days=offset)))


@pytest.mark.parametrize("record_count", [0, 1, 5])
def test_delete_habit_removes_habit_and_all_records(
    habit_repo, record_repo, habit_factory, record_factory, record_count
):
    habit_repo.put(habit_factory(id="h1"))
    habit_repo.put(habit_factory(id="h2", name="Stretch"))
    _seed_records(record_repo, record_factory, "h1", record_count)
    _seed_records(record_repo, record_factory, "h2", 2)

    removed = habit_repo.delete_habit("h1")

    assert removed == record_count
    assert habit_repo.get_by_id("h1") is None
    assert record_repo.get_for_habit("h1") == []
    assert habit_repo.get_by_id("h2") is not None
    assert len(record_repo.get_for_habit("h2")) == 2


def test_delete_missing_habit_still_clears_orphan_records(habit_repo, record_repo, record_factory):
    _seed_records(record_repo, record_factory, "ghost", 3)

    assert habit_repo.delete_habit("ghost") == 3
    assert record_repo.get_all() == []


def test_failed_record_delete_rolls_back_the_habit(
    monkeypatch, habit_repo, record_repo, habit_factory, record_factory
):
    habit_repo.put(habit_factory(id="h1"))
    _seed_records(record_repo, record_factory, "h1", 2)

    original_delete = sqlmodel.Session.delete

    def failing_delete(self, instance):
        if isinstance(instance, HabitRecordRow):
            raise OperationalError("DELETE FROM habit_records", {}, Exception("disk I/O error"))
        return original_delete(self, instance)

    monkeypatch.setattr(sqlmodel.Session, "delete", failing_delete)

    with pytest.raises(StorageIOError):
        habit_repo.delete_habit("h1")

    monkeypatch.undo()
    assert habit_repo.get_by_id("h1") is not None
    assert len(record_repo.get_for_habit("h1")) == 2


def test_surviving_records_raise_partial_cascade_failure(
    monkeypatch, habit_repo, habit_factory
):
    habit_repo.put(habit_factory(id="h1"))
    monkeypatch.setattr(habit_repo, "_count_records", lambda habit_id: 2)

    with pytest.raises(PartialCascadeFailure) as excinfo:
        habit_repo.delete_habit("h1")

    assert excinfo.value.habit_id == "h1"
    assert excinfo.value.remaining == 2


def test_plain_delete_leaves_records_alone(habit_repo, record_repo, habit_factory, record_factory):
    habit_repo.put(habit_factory(id="h1"))
    _seed_records(record_repo, record_factory, "h1", 2)

    habit_repo.delete("h1")

    assert habit_repo.get_by_id("h1") is None
    assert len(record_repo.get_for_habit("h1")) == 2
