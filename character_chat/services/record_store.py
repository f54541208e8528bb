"""Storage port for the record store services and its SQLAlchemy adapter."""
import logging
from contextlib import contextmanager
from typing import Any, ContextManager, Dict, List, Optional, Protocol, Sequence, Type, TypeVar

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from character_chat.core.exceptions import ConstraintViolationError, StorageError
from character_chat.database import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class RecordStore(Protocol):
    """Minimal persistence contract the services depend on."""

    def insert(self, model: Type[ModelT], record: Dict[str, Any]) -> ModelT:
        """Append a new row. Raises ConstraintViolationError on a broken reference."""
        ...

    def select_where(
        self, model: Type[ModelT], predicate: Any, order_by: Optional[Sequence[Any]] = None
    ) -> List[ModelT]:
        """Return all rows matching the predicate."""
        ...

    def update_where(self, model: Type[ModelT], predicate: Any, values: Dict[str, Any]) -> int:
        """Apply a partial update to matching rows and return how many matched."""
        ...

    def unit_of_work(self) -> ContextManager[None]:
        """Group writes so they commit together or not at all."""
        ...

    def refresh(self, row: ModelT) -> ModelT:
        """Reload a row from the store."""
        ...


class SqlAlchemyRecordStore:
    def __init__(self, db: Session):
        """
        Initializes the record store with a database session.

        Args:
            db (Session): The SQLAlchemy database session.
        """
        self.db = db

    def insert(self, model, record):
        row = model(**record)
        self.db.add(row)
        try:
            # Flush so foreign key and check constraints fail here, not at commit
            self.db.flush()
        except IntegrityError as e:
            logger.error(f"Constraint violation inserting into {model.__tablename__}: {e}", exc_info=True)
            raise ConstraintViolationError(f"Constraint violation on {model.__tablename__}") from e
        return row

    def select_where(self, model, predicate, order_by=None):
        stmt = select(model).where(predicate)
        if order_by:
            stmt = stmt.order_by(*order_by)
        try:
            return list(self.db.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Database error selecting from {model.__tablename__}: {e}", exc_info=True)
            raise StorageError("Database error") from e

    def update_where(self, model, predicate, values):
        stmt = update(model).where(predicate).values(**values).execution_options(synchronize_session="fetch")
        result = self.db.execute(stmt)
        logger.debug(f"Updated {result.rowcount} row(s) in {model.__tablename__}: {sorted(values)}")
        return result.rowcount

    @contextmanager
    def unit_of_work(self):
        """
        Commits everything written inside the block as one transaction.

        Any exception rolls the whole block back. SQLAlchemy errors are
        re-raised as StorageError; domain errors propagate unchanged.
        """
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error, transaction rolled back: {e}", exc_info=True)
            raise StorageError("Database error") from e
        except Exception:
            self.db.rollback()
            raise

    def refresh(self, row):
        self.db.refresh(row)
        return row
