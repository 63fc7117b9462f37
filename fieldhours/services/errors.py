"""
Store error handling.
Turns database failures into HTTP errors without leaking driver messages.
"""
import structlog
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session


logger = structlog.get_logger(__name__)

BUSY_MESSAGES = ("database is locked", "database table is locked", "database is busy")


def is_busy_error(exc: SQLAlchemyError) -> bool:
    """True when SQLite gave up waiting for a lock held by another writer."""
    if not isinstance(exc, OperationalError):
        return False
    message = str(getattr(exc, "orig", exc)).lower()
    return any(m in message for m in BUSY_MESSAGES)


def store_failure(db: Session, exc: SQLAlchemyError, action: str, **context) -> HTTPException:
    """Roll back the session, log the failure and build the HTTP error to raise.

    Lock timeouts answer 503 so clients can tell them apart from other
    failures; everything else is a generic 500.
    """
    db.rollback()
    if is_busy_error(exc):
        logger.warning("store_busy", action=action, error=str(exc), **context)
        return HTTPException(status_code=503, detail="Database busy, try again")
    logger.error("store_error", action=action, error=str(exc), **context)
    return HTTPException(status_code=500, detail=f"{action} failed")
