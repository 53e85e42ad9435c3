"""Request-scoped sessions and the service transaction decorator."""

from typing import AsyncGenerator, Callable, Optional, TypeVar
import logging
import inspect
from functools import wraps

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from snaplink.db.base import get_session

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield one session per request, rolled back if the handler fails."""
    async with get_session() as session:
        try:
            yield session
        except SQLAlchemyError:
            logger.exception("Database error during request")
            await session.rollback()
            raise
        except Exception:
            await session.rollback()
            raise


def _find_session_param(func: Callable, db_param_name: Optional[str]):
    for position, (name, param) in enumerate(inspect.signature(func).parameters.items()):
        if db_param_name is not None:
            if name == db_param_name:
                return position, name
        elif param.annotation is AsyncSession:
            return position, name
    return None, None


def db_transaction(db_param_name: Optional[str] = None) -> Callable:
    """
    Commit the wrapped service method's session when it returns.

    Any exception rolls the session back and propagates. The session is
    the argument named ``db_param_name``, or the first one annotated as
    ``AsyncSession``. Links, visits and users all reach the database
    through methods wrapped this way, e.g.
    ``ShortenedURLService.create_short_link``.

    Raises:
        ValueError: If the call carries no session
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        db_param_pos, db_param_key = _find_session_param(func, db_param_name)
        if db_param_key is None:
            logger.warning(f"No session parameter found on '{func.__name__}'")

        @wraps(func)
        async def wrapper(*args, **kwargs):
            if db_param_key in kwargs:
                db = kwargs[db_param_key]
            elif db_param_pos is not None and len(args) > db_param_pos:
                db = args[db_param_pos]
            else:
                db = next(
                    (value for value in (*args, *kwargs.values()) if isinstance(value, AsyncSession)),
                    None,
                )
            if db is None:
                raise ValueError(f"'{func.__name__}' was called without a database session")

            try:
                result = await func(*args, **kwargs)
                await db.commit()
                return result
            except Exception as e:
                await db.rollback()
                logger.debug(f"Rolled back '{func.__name__}': {e!r}")
                raise

        return wrapper
    return decorator
