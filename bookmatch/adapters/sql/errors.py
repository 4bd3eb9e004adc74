"""Translation of SQLAlchemy failures into domain errors."""

import functools
import logging

from sqlalchemy.exc import SQLAlchemyError

from bookmatch.domain.errors import InternalFailure

logger = logging.getLogger(__name__)


def storage_errors(operation: str):
    """Re-raise SQLAlchemy errors from an adapter coroutine as ``InternalFailure``."""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except SQLAlchemyError as exc:
                logger.exception("Storage error while trying to %s", operation)
                raise InternalFailure(f"Failed to {operation}") from exc

        return wrapper

    return decorator
