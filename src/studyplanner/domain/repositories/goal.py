"""Goal repository protocol."""

from __future__ import annotations

from typing import Any, Optional, Protocol

from ..entities import Goal


class GoalRepository(Protocol):
    """Repository for goals with optimistic version checks."""

    def init(self) -> "GoalRepository":
        ...

    def get_all(self) -> list[Goal]:
        ...

    def get_by_id(self, goal_id: str) -> Optional[Goal]:
        ...

    def get_by_index(self, index_name: str, value: Any) -> list[Goal]:
        ...

    def put(self, goal: Goal, expected_version: Optional[int] = None) -> Goal:
        """Insert or replace a goal, rejecting the write if the stored version moved."""
        ...

    def delete(self, goal_id: str) -> None:
        ...

    def clear(self) -> None:
        ...
