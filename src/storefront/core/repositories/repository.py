"""Generic data-access layer over SQLModel tables."""

from __future__ import annotations

from typing import Any, ClassVar, Generic, TypeVar

from loguru import logger
from pydantic import BaseModel
from sqlalchemy import ColumnElement, func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, select
from sqlmodel.sql.expression import SelectOfScalar

from src.storefront.core.exceptions import NotFoundError

EntityT = TypeVar("EntityT", bound=BaseModel)
RowT = TypeVar("RowT", bound=SQLModel)


class Repository(Generic[EntityT, RowT]):
    """CRUD access for one entity kind.

    Subclasses bind ``entity_type`` (the pydantic domain model handed to and
    returned from callers) and ``row_type`` (the SQLModel table it is stored
    in). Both must expose an ``id`` attribute holding the primary key.

    Every mutating call commits immediately, so each call is its own
    transaction. A failed commit rolls the session back and re-raises.
    """

    entity_type: ClassVar[type[BaseModel]]
    row_type: ClassVar[type[SQLModel]]

    def __init__(self, session: Session) -> None:
        self._session = session

    # ------------------------------------------------------------------ helpers
    def _to_entity(self, row: RowT) -> EntityT:
        return self.entity_type.model_validate(row, from_attributes=True)

    def _to_row(self, entity: EntityT) -> RowT:
        return self.row_type.model_validate(entity.model_dump())

    def _commit(self) -> None:
        try:
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise

    def _get_row(self, entity_id: Any) -> RowT | None:
        return self._session.get(self.row_type, entity_id)

    def _require_row(self, entity_id: Any) -> RowT:
        row = self._get_row(entity_id)
        if row is None:
            raise NotFoundError(f"{self.entity_type.__name__} {entity_id} not found")
        return row

    # -------------------------------------------------------------------- reads
    def get_by_id(self, entity_id: Any) -> EntityT | None:
        row = self._get_row(entity_id)
        if row is None:
            return None
        return self._to_entity(row)

    def list(self, *predicates: ColumnElement[bool]) -> list[EntityT]:
        """Return every row, or the rows matching all ``predicates``.

        Predicates are SQLAlchemy column expressions (``ProductTable.price < 10``)
        compiled into the ``WHERE`` clause; nothing is filtered in Python.
        """
        statement = self.query()
        if predicates:
            statement = statement.where(*predicates)
        rows = self._session.exec(statement).all()
        return [self._to_entity(row) for row in rows]

    def count(self) -> int:
        statement = select(func.count()).select_from(self.row_type)
        return self._session.exec(statement).one()

    def query(self) -> SelectOfScalar[RowT]:
        """Select statement over the row type for reads the helpers don't cover."""
        return select(self.row_type)

    # ------------------------------------------------------------------- writes
    def add(self, entity: EntityT) -> EntityT:
        """Persist a new entity and return it with its store-assigned id."""
        row = self._to_row(entity)
        self._session.add(row)
        self._commit()
        self._session.refresh(row)
        logger.debug("Added {} {}", self.entity_type.__name__, row.id)
        return self._to_entity(row)

    def update(self, entity: EntityT) -> None:
        """Copy the entity's fields onto its stored row.

        Raises:
            NotFoundError: If no row has the entity's id.
        """
        row = self._require_row(entity.id)
        row.sqlmodel_update(entity.model_dump(exclude={"id"}))
        self._session.add(row)
        self._commit()
        logger.debug("Updated {} {}", self.entity_type.__name__, row.id)

    def delete(self, entity: EntityT) -> None:
        """Remove the entity's row.

        Raises:
            NotFoundError: If no row has the entity's id.
        """
        row = self._require_row(entity.id)
        self._session.delete(row)
        self._commit()
        logger.debug("Deleted {} {}", self.entity_type.__name__, entity.id)

    def save_changes(self) -> int:
        """Flush and commit pending writes on the session.

        Returns:
            Number of rows inserted, modified or deleted by the commit.
        """
        session = self._session
        pending = len(session.new) + len(session.dirty) + len(session.deleted)
        self._commit()
        return pending
