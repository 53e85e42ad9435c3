"""Engine, session factory and schema creation for the link store."""

from typing import Any, AsyncGenerator, Dict
import logging
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from snaplink.core.config import EnvironmentType, settings

logger = logging.getLogger(__name__)


def get_engine_config() -> Dict[str, Any]:
    """
    Engine keyword arguments for the configured database.

    SQLite (used by the test suite) gets no connection pool; PostgreSQL
    gets the pool sized by the ``POSTGRES_POOL_*`` settings, with SQL
    echo only outside production.
    """
    if str(settings.SQLALCHEMY_DATABASE_URI).startswith("sqlite"):
        return {"echo": False, "poolclass": NullPool}
    return {
        "echo": settings.DB_ECHO and settings.ENVIRONMENT != EnvironmentType.PRODUCTION,
        "pool_size": settings.POSTGRES_POOL_SIZE,
        "max_overflow": settings.POSTGRES_POOL_MAX_OVERFLOW,
        "pool_timeout": settings.POSTGRES_POOL_TIMEOUT,
        "pool_recycle": settings.POSTGRES_POOL_RECYCLE,
        "pool_pre_ping": True,
    }


def get_engine() -> AsyncEngine:
    engine_url = str(settings.SQLALCHEMY_DATABASE_URI)
    logger.info(f"Connecting link store at {engine_url.split('@')[-1]}")
    return create_async_engine(engine_url, **get_engine_config())


engine = get_engine()

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Open a session and always close it."""
    session = async_session_factory()
    try:
        yield session
    finally:
        await session.close()


async def init_db(bind: AsyncEngine = engine) -> None:
    """Create the users, short_links and visits tables if missing."""
    import snaplink.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Link store tables ensured")
