"""Redis-backed rate limiting with memory fallback."""

from snaplink.core.rate_limit.backends import (
    BaseBackend,
    MemoryBackend,
    RedisBackend,
    ResilientRateLimitBackend,
    WindowHit,
)
from snaplink.core.rate_limit.limiter import (
    CreationRateLimiter,
    creation_rate_limiter,
    rate_limit_backend,
    initialize_rate_limiting,
    close_rate_limiting,
)

__all__ = [
    "BaseBackend",
    "MemoryBackend",
    "RedisBackend",
    "ResilientRateLimitBackend",
    "WindowHit",
    "CreationRateLimiter",
    "creation_rate_limiter",
    "rate_limit_backend",
    "initialize_rate_limiting",
    "close_rate_limiting",
]
