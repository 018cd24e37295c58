"""StudyPlanner local storage and state package."""

from __future__ import annotations

from .config import BaseConfig, TestConfig
from .context import AppContext, create_app_context

__all__ = ["AppContext", "BaseConfig", "TestConfig", "create_app_context"]
