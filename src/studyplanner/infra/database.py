"""Database infrastructure: engine creation and the shared store handle."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from sqlalchemy import event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, create_engine

from ..config import BaseConfig
from ..errors import StorageIOError, StorageUnavailable
from ..logging_config import get_logger
from .schema import SCHEMA_VERSION, upgrade_schema

logger = get_logger(__name__)

_BEGIN_MODES = ("DEFERRED", "IMMEDIATE", "EXCLUSIVE")


def _install_sqlite_hooks(engine: Engine, pragmas: dict[str, Any]) -> None:
    """Hand transaction control to SQLAlchemy and apply connection pragmas.

    pysqlite defers BEGIN until the first DML statement, which leaves DDL and
    PRAGMA writes outside the transaction. With autocommit switched off at the
    driver and BEGIN emitted from the ``begin`` hook, every transaction (schema
    upgrades included) commits or rolls back as a whole, and callers may ask for
    ``IMMEDIATE``/``EXCLUSIVE`` locking through the ``sqlite_begin`` option.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):  # noqa: ARG001
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        try:
            for name, value in pragmas.items():
                cursor.execute(f"PRAGMA {name}={value}")
        finally:
            cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        mode = conn.get_execution_options().get("sqlite_begin", "DEFERRED")
        if mode not in _BEGIN_MODES:
            raise ValueError(f"Unsupported SQLite begin mode: {mode}")
        conn.exec_driver_sql(f"BEGIN {mode}")


def create_db_engine(config: BaseConfig) -> Engine:
    """Create the SQLModel engine from configuration."""

    url = make_url(config.DATABASE_URL)
    if url.get_backend_name() != "sqlite":
        raise StorageUnavailable(
            f"Only SQLite stores are supported, got {url.get_backend_name()!r}"
        )
    engine = create_engine(url, **config.sqlalchemy_engine_options())
    _install_sqlite_hooks(engine, config.SQLITE_PRAGMAS)
    return engine


class Store:
    """Handle to the durable store, shared by all repositories.

    Created once at startup and passed explicitly to the repositories. ``open``
    is idempotent: calling it on an open handle returns the handle unchanged.
    """

    def __init__(self, config: BaseConfig, engine: Optional[Engine] = None):
        self.config = config
        self._engine = engine
        self._engines: dict[str, Engine] = {}
        self.schema_version: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return bool(self._engines)

    @property
    def engine(self) -> Engine:
        if not self.is_open:
            raise StorageUnavailable("Store has not been opened")
        return self._engines["DEFERRED"]

    def open(self, desired_version: int = SCHEMA_VERSION) -> "Store":
        """Open (creating if needed) and upgrade the store."""

        if self.is_open:
            return self

        engine = self._engine
        try:
            if engine is None:
                engine = create_db_engine(self.config)
            self.schema_version = upgrade_schema(engine, desired_version)
        except (SQLAlchemyError, sqlite3.Error, OSError) as exc:
            logger.error("Failed to open store", exc_info=True)
            # Engines created here are not kept; release their pooled handles.
            if engine is not None and self._engine is None:
                engine.dispose()
            raise StorageUnavailable(f"Could not open store: {exc}") from exc

        self._engine = engine
        self._engines = {
            mode: engine.execution_options(sqlite_begin=mode) for mode in _BEGIN_MODES
        }
        logger.info(
            "Store opened",
            extra={"url": str(engine.url), "schema_version": self.schema_version},
        )
        return self

    def close(self) -> None:
        """Dispose of pooled connections; the handle can be opened again."""

        if self._engine is not None:
            self._engine.dispose()
        self._engines = {}

    @contextmanager
    def session_scope(self, *, begin: str = "DEFERRED") -> Iterator[Session]:
        """Provide a transactional scope around a repository operation.

        Commits on success, rolls back on any exception. SQLAlchemy failures
        surface as :class:`StorageIOError`.
        """

        if not self.is_open:
            raise StorageUnavailable("Store has not been opened")
        session = Session(self._engines[begin], expire_on_commit=False)
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StorageIOError(str(exc)) from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


__all__ = ["Store", "create_db_engine"]
