"""
Redis client management module.

This module provides a Redis client manager with connection pooling
and error handling for async Redis operations.
"""

from typing import Optional

import redis.asyncio as redis
from loguru import logger
from redis.asyncio.connection import ConnectionPool
from redis.exceptions import RedisError

from snaplink.core.config import settings


class RedisClientManager:
    """
    Async Redis client manager with connection pooling.

    One pool is shared by every consumer in the process; it is created
    lazily so importing this module never opens a connection.
    """

    def __init__(self, uri: Optional[str] = None):
        self.uri = uri or settings.REDIS_URI
        self._connection_pool: Optional[ConnectionPool] = None
        self._client: Optional[redis.Redis] = None

    def _initialize(self) -> None:
        """Create the Redis connection pool."""
        self._connection_pool = redis.ConnectionPool.from_url(
            self.uri,
            max_connections=20,
            decode_responses=True
        )
        logger.debug("Redis connection pool created", uri=self.uri.split("@")[-1])

    async def get_client(self) -> redis.Redis:
        """
        Get a Redis client instance from the connection pool.

        Returns:
            redis.Redis: Redis client instance
        """
        if self._client is None:
            if self._connection_pool is None:
                self._initialize()
            self._client = redis.Redis(connection_pool=self._connection_pool)
        return self._client

    async def ping(self) -> bool:
        """
        Test the Redis connection with a ping command.

        Returns:
            bool: True if successful, False otherwise
        """
        try:
            client = await self.get_client()
            return bool(await client.ping())
        except (RedisError, OSError) as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    async def close(self) -> None:
        """Close the Redis client and connection pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

        if self._connection_pool is not None:
            await self._connection_pool.disconnect()
            self._connection_pool = None

        logger.debug("Redis connections closed")


# Shared instance
redis_manager = RedisClientManager()
