"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

ENV_PREFIX = "STUDYPLANNER_"


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = _env(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "StudyPlanner"
    DB_FILENAME = "studyplanner.db"
    SQLITE_PRAGMAS = {"journal_mode": "wal", "foreign_keys": "on"}

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("DEV_MODE", default=True)
        self.BUSY_TIMEOUT = float(_env("BUSY_TIMEOUT", "30") or 30)
        self.DATABASE_URL = _env("DATABASE_URL") or self._build_sqlite_url()
        legacy_dir = _env("LEGACY_DIR")
        self.LEGACY_DIR = Path(legacy_dir).expanduser() if legacy_dir else self.DATA_DIR

    def _data_root(self) -> Path:
        return Path(_env("DATA_DIR", "instance") or "instance").expanduser()

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        base_path = self._data_root()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected install locations fall back to user-local storage.
            local_app_data = os.getenv("LOCALAPPDATA") or (Path.home() / ".local" / "share")
            fallback_path = Path(local_app_data).expanduser() / self.APP_NAME
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        connect_args: dict[str, Any] = {
            "check_same_thread": False,
            "timeout": self.BUSY_TIMEOUT,
        }
        return {"connect_args": connect_args}


class TestConfig(BaseConfig):
    """Configuration rooted at an explicit directory (tests, tooling)."""

    TESTING = True
    # pytest should not collect this class
    __test__ = False

    def __init__(self, data_dir: Path | str) -> None:
        self._explicit_root = Path(data_dir)
        super().__init__()
        self.DEV_MODE = True
        self.DATABASE_URL = self._build_sqlite_url()
        self.LEGACY_DIR = self.DATA_DIR

    def _data_root(self) -> Path:
        return self._explicit_root
