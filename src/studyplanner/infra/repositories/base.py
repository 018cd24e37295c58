"""Shared SQLModel collection repository.

Each concrete repository names its table model, its codec pair and the
secondary indexes declared for the collection. Every public call runs in its
own transaction from :meth:`Store.session_scope`.
"""

from __future__ import annotations

from typing import Any, ClassVar, Generic, Optional, TypeVar

from sqlalchemy import delete as sa_delete
from sqlalchemy import func
from sqlmodel import Session, SQLModel, select

from ...errors import UnknownIndex
from ...logging_config import get_logger
from ..codec import encode_index_value
from ..database import Store

RowT = TypeVar("RowT", bound=SQLModel)
EntityT = TypeVar("EntityT")

logger = get_logger(__name__)


class SQLModelCollectionRepository(Generic[RowT, EntityT]):
    """CRUD over one collection with codec conversion at the boundary."""

    collection: ClassVar[str]
    row_model: ClassVar[type[SQLModel]]
    # public index name -> column attribute on ``row_model``
    indexes: ClassVar[dict[str, str]] = {}

    def __init__(self, store: Store):
        """Initialize with the shared store handle."""
        self.store = store

    # -- hooks -------------------------------------------------------------

    def _encode(self, entity: EntityT) -> RowT:
        raise NotImplementedError

    def _decode(self, row: RowT) -> EntityT:
        raise NotImplementedError

    def _identity(self, key: Any) -> Any:
        """Primary key value as ``Session.get`` expects it."""
        return key

    # -- helpers -----------------------------------------------------------

    def _column(self, index_name: str):
        try:
            attr = self.indexes[index_name]
        except KeyError:
            raise UnknownIndex(self.collection, index_name) from None
        return getattr(self.row_model, attr)

    def _fetch(self, session: Session, statement) -> list[EntityT]:
        return [self._decode(row) for row in session.exec(statement).all()]

    # -- operations --------------------------------------------------------

    def init(self):
        """Open the store if nobody has yet."""
        self.store.open()
        return self

    def get_all(self) -> list[EntityT]:
        """Full scan of the collection."""
        with self.store.session_scope() as session:
            return self._fetch(session, select(self.row_model))

    def get_by_id(self, key: Any) -> Optional[EntityT]:
        """Point lookup by primary key."""
        identity = self._identity(key)
        with self.store.session_scope() as session:
            row = session.get(self.row_model, identity)
            return self._decode(row) if row is not None else None

    def get_by_index(self, index_name: str, value: Any) -> list[EntityT]:
        """Equality lookup through a declared secondary index."""
        column = self._column(index_name)
        with self.store.session_scope() as session:
            statement = select(self.row_model).where(column == encode_index_value(value))
            return self._fetch(session, statement)

    def get_by_range(
        self, index_name: str, lower: Any = None, upper: Any = None
    ) -> list[EntityT]:
        """Inclusive range scan through a declared index, ordered by that index."""
        column = self._column(index_name)
        statement = select(self.row_model)
        if lower is not None:
            statement = statement.where(column >= encode_index_value(lower))
        if upper is not None:
            statement = statement.where(column <= encode_index_value(upper))
        statement = statement.order_by(column)
        with self.store.session_scope() as session:
            return self._fetch(session, statement)

    def put(self, entity: EntityT) -> EntityT:
        """Insert or fully replace the record sharing ``entity``'s key.

        Returns the entity as stored (normalized by the codec).
        """
        row = self._encode(entity)
        with self.store.session_scope(begin="IMMEDIATE") as session:
            stored = session.merge(row)
            session.flush()
            result = self._decode(stored)
        logger.debug("put", extra={"collection": self.collection})
        return result

    def delete(self, key: Any) -> None:
        """Remove the record if present; absent keys are not an error."""
        identity = self._identity(key)
        with self.store.session_scope(begin="IMMEDIATE") as session:
            row = session.get(self.row_model, identity)
            if row is not None:
                session.delete(row)
        logger.debug("delete", extra={"collection": self.collection, "found": row is not None})

    def clear(self) -> None:
        """Empty the collection."""
        with self.store.session_scope(begin="IMMEDIATE") as session:
            session.connection().execute(sa_delete(self.row_model))
        logger.info("Collection cleared", extra={"collection": self.collection})

    def count(self) -> int:
        """Number of records in the collection."""
        with self.store.session_scope() as session:
            return session.exec(select(func.count()).select_from(self.row_model)).one()


__all__ = ["SQLModelCollectionRepository"]
