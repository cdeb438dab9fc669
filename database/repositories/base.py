"""Helpers shared by the Mongo repositories."""
import functools
import logging
from pymongo.errors import PyMongoError
from shared.exceptions import PersistenceError

logger = logging.getLogger(__name__)


def write_operation(description: str):
    """Translate driver errors raised by a repository write into PersistenceError."""
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except PyMongoError as e:
                logger.error(f"Failed to {description}: {e}")
                raise PersistenceError(f"Failed to {description}: {e}") from e
        return wrapper
    return decorator
