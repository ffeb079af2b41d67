"""Helpers shared by the record services."""

import logging
import uuid
from typing import Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tripnest.exceptions import DatabaseError, NotFoundError

logger = logging.getLogger(__name__)


def parse_identifier(value: Union[str, uuid.UUID], resource: str) -> uuid.UUID:
    """
    Convert a path/query identifier to a UUID.

    A malformed id cannot name an existing record, so it is reported as
    NotFoundError (404) like any other missing record.
    """
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except ValueError:
        raise NotFoundError(resource=resource, resource_id=str(value))


async def flush_or_raise(db: AsyncSession, action: str) -> None:
    """Flush pending writes; on failure roll back and raise DatabaseError."""
    try:
        await db.flush()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Database error while %s: %s", action, str(e), exc_info=True)
        raise DatabaseError(
            message=f"Could not complete {action}. Please try again.",
            context={"error_type": type(e).__name__},
        )
