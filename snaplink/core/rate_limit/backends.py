"""Fixed-window rate limit counters with Redis failover to memory."""

import asyncio
import time
from dataclasses import dataclass
from typing import Dict, Tuple

from loguru import logger
from redis.exceptions import RedisError

from snaplink.core.config import settings
from snaplink.core.redis import RedisClientManager


@dataclass(frozen=True)
class WindowHit:
    """Outcome of counting one request against a window."""
    allowed: bool
    count: int
    limit: int
    retry_after: int  # Seconds until the window resets


def window_start(now: float, window_seconds: int) -> int:
    return int(now // window_seconds) * window_seconds


class BaseBackend:
    """Atomic increment-and-compare over ``(key, window start)`` counters."""

    async def hit(self, key: str, limit: int, window_seconds: int) -> WindowHit:
        raise NotImplementedError

    async def close(self) -> None:
        pass


class MemoryBackend(BaseBackend):
    """Process-local counters; correct for a single instance only."""

    def __init__(self, clock=time.time):
        self._clock = clock
        self._counters: Dict[Tuple[str, int], int] = {}
        self._lock = asyncio.Lock()

    async def hit(self, key: str, limit: int, window_seconds: int) -> WindowHit:
        now = self._clock()
        start = window_start(now, window_seconds)
        retry_after = max(1, int(start + window_seconds - now))

        async with self._lock:
            self._prune(start)
            count = self._counters.get((key, start), 0)
            if count >= limit:
                return WindowHit(False, count, limit, retry_after)
            count += 1
            self._counters[(key, start)] = count
            return WindowHit(True, count, limit, retry_after)

    def _prune(self, current_start: int) -> None:
        stale = [k for k in self._counters if k[1] < current_start]
        for k in stale:
            del self._counters[k]

    async def close(self) -> None:
        self._counters.clear()


class RedisBackend(BaseBackend):
    """
    Counters shared by every instance through Redis.

    INCR and EXPIRE run in one MULTI/EXEC so a key never outlives its window.
    """

    def __init__(self, redis_manager: RedisClientManager, clock=time.time):
        self.redis_manager = redis_manager
        self._clock = clock

    async def hit(self, key: str, limit: int, window_seconds: int) -> WindowHit:
        now = self._clock()
        start = window_start(now, window_seconds)
        retry_after = max(1, int(start + window_seconds - now))
        redis_key = f"{settings.RATE_LIMIT_KEY_PREFIX}:{key}:{start}"

        client = await self.redis_manager.get_client()
        async with client.pipeline(transaction=True) as pipe:
            pipe.incr(redis_key)
            pipe.expire(redis_key, window_seconds)
            count, _ = await pipe.execute()

        count = int(count)
        return WindowHit(count <= limit, min(count, limit), limit, retry_after)


class ResilientRateLimitBackend(BaseBackend):
    """Rate limit backend with Redis and memory fallback."""

    def __init__(self, redis_manager: RedisClientManager, clock=time.time):
        self.redis_manager = redis_manager
        self.redis_backend = RedisBackend(redis_manager, clock=clock)
        self.memory_backend = MemoryBackend(clock=clock)
        self.using_redis = False
        self.last_redis_check = 0.0
        self.redis_check_interval = settings.RATE_LIMIT_REDIS_CHECK_INTERVAL
        self.redis_errors = 0
        self.max_redis_errors = settings.RATE_LIMIT_REDIS_MAX_ERRORS
        self._clock = clock
        # Only guards backend switching
        self._state_lock = asyncio.Lock()

    async def initialize(self) -> bool:
        """
        Probe Redis and select the backend.

        Returns:
            bool: True if Redis is in use
        """
        async with self._state_lock:
            self.last_redis_check = self._clock()
            if await self.redis_manager.ping():
                self.using_redis = True
                self.redis_errors = 0
                logger.info("Redis rate limiting backend initialized")
            else:
                self.using_redis = False
                logger.warning("Redis unavailable, rate limiting with memory backend")
            return self.using_redis

    async def check_redis_health(self) -> bool:
        """Re-probe Redis at most once per check interval while on memory."""
        if self.using_redis:
            return True
        if self._clock() - self.last_redis_check < self.redis_check_interval:
            return False
        return await self.initialize()

    async def _handle_redis_error(self, e: Exception) -> None:
        async with self._state_lock:
            self.redis_errors += 1
            if self.redis_errors >= self.max_redis_errors:
                logger.warning(
                    "Redis error threshold reached, switching to memory backend",
                    errors=self.redis_errors,
                    max_errors=self.max_redis_errors
                )
                self.using_redis = False
                self.last_redis_check = self._clock()
            else:
                logger.warning(
                    "Redis operation failed",
                    error=str(e),
                    errors=f"{self.redis_errors}/{self.max_redis_errors}"
                )

    async def hit(self, key: str, limit: int, window_seconds: int) -> WindowHit:
        await self.check_redis_health()

        if self.using_redis:
            try:
                result = await self.redis_backend.hit(key, limit, window_seconds)
                self.redis_errors = 0
                return result
            except (RedisError, OSError) as e:
                await self._handle_redis_error(e)
                logger.warning("Using memory backend for this request due to Redis error", error=str(e))

        return await self.memory_backend.hit(key, limit, window_seconds)

    async def close(self) -> None:
        async with self._state_lock:
            await self.memory_backend.close()
            self.using_redis = False
