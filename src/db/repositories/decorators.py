import asyncio
from collections.abc import Callable
import functools
import logging
from typing import Any, TypeVar, cast

from sqlalchemy.exc import OperationalError, SQLAlchemyError

from core.exceptions import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")
AsyncFunc = Callable[..., Any]
AsyncFuncT = Callable[..., T]

STORAGE_FAILURE = "Database failure"


def with_retry(max_retries: int = 3, log_prefix: str = ""):
    """Decorator for retrying read operations on OperationalError.

    Args:
        max_retries: Maximum number of attempts
        log_prefix: Prefix for log messages
    """

    def decorator(func: AsyncFuncT) -> AsyncFuncT:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            func_name = getattr(func, "__name__", str(func))

            for attempt in range(max_retries):
                try:
                    return await func(*args, **kwargs)
                except OperationalError as e:
                    entity_info = _extract_entity_info(args, kwargs)
                    if attempt < max_retries - 1:
                        logger.warning(
                            "OperationalError while %s %s (attempt %s): %s",
                            log_prefix or func_name,
                            entity_info,
                            attempt + 1,
                            e,
                        )
                        await asyncio.sleep(0.1 * (2**attempt))
                        continue
                    logger.error("Database error while %s %s: %s", log_prefix or func_name, entity_info, e)
                    raise StorageError(message=STORAGE_FAILURE) from e
                except SQLAlchemyError as e:
                    entity_info = _extract_entity_info(args, kwargs)
                    logger.error("Database error while %s %s: %s", log_prefix or func_name, entity_info, e)
                    raise StorageError(message=STORAGE_FAILURE) from e

            raise StorageError(message=STORAGE_FAILURE)

        return cast(AsyncFuncT, wrapper)

    return decorator


def handle_db_errors(entity_name: str = ""):
    """Decorator for handling database errors without retries.

    Used for write operations, where replaying a statement is not safe.

    Args:
        entity_name: Entity name for logging
    """

    def decorator(func: AsyncFunc) -> AsyncFunc:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            func_name = getattr(func, "__name__", str(func))

            try:
                return await func(*args, **kwargs)
            except SQLAlchemyError as e:
                entity_info = _extract_entity_info(args, kwargs)
                log_prefix = f"{entity_name} " if entity_name else ""
                logger.error("Database error while %s%s %s: %s", log_prefix, func_name, entity_info, e)
                raise StorageError(message=STORAGE_FAILURE) from e

        return wrapper

    return decorator


def _extract_entity_info(args: tuple, kwargs: dict) -> str:
    """Extracts an identifier from the call arguments for log messages."""
    # args[0] is the store instance
    if len(args) > 1 and isinstance(args[1], int | str):
        return str(args[1])

    for key in ("post_id", "query"):
        if key in kwargs:
            return f"{key}={kwargs[key]}"

    return ""
