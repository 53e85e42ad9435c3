"""Per-user limit on link creation."""

from typing import Optional

from loguru import logger

from snaplink.core.config import settings
from snaplink.core.rate_limit.backends import BaseBackend, ResilientRateLimitBackend, WindowHit
from snaplink.core.redis import redis_manager
from snaplink.services.exceptions import RateLimitExceededError


class CreationRateLimiter:
    """
    Bounds how many links one user may create per fixed window.

    Keyed by user id rather than client IP, so the quota follows the
    account across devices.
    """

    def __init__(
        self,
        backend: BaseBackend,
        limit: Optional[int] = None,
        window_seconds: Optional[int] = None,
    ):
        self.backend = backend
        self.limit = limit if limit is not None else settings.RATE_LIMIT_SHORTEN_MAX
        self.window_seconds = window_seconds if window_seconds is not None else settings.RATE_LIMIT_SHORTEN_WINDOW_SECONDS

    async def hit(self, user_id: int) -> WindowHit:
        """
        Count one creation attempt for ``user_id``.

        Raises:
            RateLimitExceededError: If the user already reached the limit in this window
        """
        result = await self.backend.hit(str(user_id), self.limit, self.window_seconds)
        if not result.allowed:
            logger.info(
                "Link creation rate limit exceeded",
                user_id=user_id,
                limit=self.limit,
                retry_after=result.retry_after
            )
            raise RateLimitExceededError(
                f"Rate limit exceeded: at most {self.limit} links per "
                f"{self.window_seconds // 60} minutes. Try again in {result.retry_after} seconds.",
                retry_after=result.retry_after,
            )
        return result

    async def close(self) -> None:
        await self.backend.close()


rate_limit_backend = ResilientRateLimitBackend(redis_manager)
creation_rate_limiter = CreationRateLimiter(rate_limit_backend)


async def initialize_rate_limiting() -> None:
    """Select the rate limit backend during application startup."""
    await rate_limit_backend.initialize()
    logger.info("Rate limiting backend initialized", using_redis=rate_limit_backend.using_redis)


async def close_rate_limiting() -> None:
    """Release the rate limit backend during application shutdown."""
    await creation_rate_limiter.close()
    logger.info("Rate limiting backend closed")
