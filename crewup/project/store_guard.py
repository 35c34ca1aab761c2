import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crewup.project.errors import StoreError

logger = logging.getLogger("crewup.store")


@contextmanager
def store_errors(db: Session, operation: str, **context):
    """Roll back and re-raise any SQLAlchemy failure as StoreError."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(
            "store_error",
            extra={"operation": operation, "error_type": type(exc).__name__, **context},
        )
        reason = getattr(exc, "orig", None) or exc
        raise StoreError(str(reason)) from exc
