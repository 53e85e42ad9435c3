"""Health check endpoints for monitoring application status."""

import time

from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from snaplink.core.config import settings
from snaplink.core.rate_limit import rate_limit_backend
from snaplink.core.redis import redis_manager
from snaplink.db.session import get_db

router = APIRouter(prefix="/health", tags=["health"])


async def _database_ok(db: AsyncSession) -> bool:
    try:
        result = await db.execute(text("SELECT 1"))
        return result.scalar_one() == 1
    except SQLAlchemyError as e:
        logger.warning("Database health check failed", error=str(e))
        return False


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    summary="Get system health status",
    response_description="Health status of all system components"
)
async def health_check(db: AsyncSession = Depends(get_db)):
    """Check health of the database and Redis."""
    health_status = {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "timestamp": time.time(),
        "components": {}
    }

    start_time = time.time()
    if await _database_ok(db):
        health_status["components"]["database"] = {
            "status": "healthy",
            "latency_ms": round((time.time() - start_time) * 1000, 2)
        }
    else:
        health_status["status"] = "degraded"
        health_status["components"]["database"] = {"status": "unhealthy"}

    # Redis is optional: the rate limiter falls back to memory without it
    start_time = time.time()
    if await redis_manager.ping():
        health_status["components"]["redis"] = {
            "status": "healthy",
            "latency_ms": round((time.time() - start_time) * 1000, 2)
        }
    else:
        health_status["components"]["redis"] = {
            "status": "unavailable",
            "rate_limit_backend": "redis" if rate_limit_backend.using_redis else "memory"
        }

    return health_status


@router.get(
    "/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness probe",
    response_description="Application readiness status"
)
async def readiness_probe(db: AsyncSession = Depends(get_db)):
    """Check if application is ready to handle requests."""
    components_status = {"api": True, "database": await _database_ok(db)}
    return {
        "ready": all(components_status.values()),
        "components": components_status
    }


@router.get(
    "/live",
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
    response_description="Application liveness status"
)
async def liveness_probe():
    """Simple check that application is running."""
    return {"alive": True}
