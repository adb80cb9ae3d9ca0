import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import atomic_writes_enabled
from app.core.errors import GarageError, StorageError

logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    Commit boundary for a multi-step write.

    Call step() after each persisted stage. In atomic mode a step only flushes,
    and the whole operation commits on exit. In non-atomic mode every step
    commits, so a later failure leaves earlier stages in place.

    Any SQLAlchemy failure is rolled back, logged, and re-raised as StorageError.
    Domain errors are rolled back and re-raised unchanged.
    """

    def __init__(self, db: Session, operation: str, *, atomic: Optional[bool] = None):
        self.db = db
        self.operation = operation
        self.atomic = atomic_writes_enabled() if atomic is None else atomic

    def step(self) -> None:
        if self.atomic:
            self.db.flush()
        else:
            self.db.commit()

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            try:
                self.db.commit()
            except SQLAlchemyError as commit_exc:
                self.db.rollback()
                logger.exception("Commit failed", extra={"operation": self.operation})
                raise StorageError() from commit_exc
            return False

        self.db.rollback()

        if isinstance(exc, GarageError):
            return False

        if isinstance(exc, SQLAlchemyError):
            logger.error(
                "Storage failure",
                extra={"operation": self.operation, "atomic": self.atomic},
                exc_info=(exc_type, exc, tb),
            )
            raise StorageError() from exc

        return False
