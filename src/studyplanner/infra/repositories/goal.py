"""SQLModel implementation of the Goal repository."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from ...domain.entities import Goal
from ...errors import Conflict
from ...logging_config import get_logger
from ...models.goal import GoalRecord
from ..codec import decode_goal, encode_goal
from .base import SQLModelCollectionRepository

logger = get_logger(__name__)


class SQLModelGoalRepository(SQLModelCollectionRepository[GoalRecord, Goal]):
    """Goals with a per-record version counter.

    Every successful ``put`` stores ``version = previous + 1`` (1 for a new
    id). Passing ``expected_version`` turns the write into a compare-and-set:
    if the stored version differs, :class:`Conflict` is raised and nothing
    is written.
    """

    collection = "goals"
    row_model = GoalRecord
    indexes = {
        "status": "status",
        "category": "category",
        "type": "type",
    }

    def _encode(self, entity: Goal) -> GoalRecord:
        return encode_goal(entity)

    def _decode(self, row: GoalRecord) -> Goal:
        return decode_goal(row)

    def put(self, goal: Goal, expected_version: Optional[int] = None) -> Goal:
        # Validate before taking the write lock
        encode_goal(goal)
        with self.store.session_scope(begin="IMMEDIATE") as session:
            existing = session.get(GoalRecord, goal.id)
            stored_version = existing.version if existing is not None else None
            if expected_version is not None and stored_version != expected_version:
                logger.warning(
                    "Rejected stale goal write",
                    extra={"goal_id": goal.id, "expected": expected_version, "actual": stored_version},
                )
                raise Conflict("Goal", goal.id, expected_version, stored_version)

            row = encode_goal(replace(goal, version=(stored_version or 0) + 1))
            stored = session.merge(row)
            session.flush()
            result = decode_goal(stored)
        logger.debug("put", extra={"collection": self.collection, "version": result.version})
        return result


__all__ = ["SQLModelGoalRepository"]
