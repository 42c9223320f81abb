"""Centralized Redis connection pool management.

A single pool is shared by the event publisher and every subscription
listener.
"""

from __future__ import annotations

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from .config import settings
from .logging import get_logger

logger = get_logger(__name__)


class RedisPoolManager:
    """Singleton manager for Redis connection pool."""

    _instance: RedisPoolManager | None = None
    _pool: ConnectionPool | None = None
    _client: redis.Redis | None = None

    def __new__(cls) -> RedisPoolManager:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._pool is None:
            self._pool = redis.ConnectionPool.from_url(
                settings.redis_url,
                decode_responses=True,
                max_connections=settings.redis_max_connections,
                socket_connect_timeout=5,
                retry_on_timeout=True,
                health_check_interval=30,
            )
            self._client = redis.Redis(connection_pool=self._pool)
            logger.info(
                "Redis connection pool initialized",
                max_connections=settings.redis_max_connections,
            )

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client with connection pooling."""
        if self._client is None:
            raise RuntimeError("Redis pool not initialized")
        return self._client

    async def close(self):
        """Close the Redis connection pool."""
        if self._client:
            await self._client.aclose()
            logger.info("Redis client closed")
        if self._pool:
            await self._pool.disconnect()
            logger.info("Redis connection pool disconnected")
        self._client = None
        self._pool = None
        RedisPoolManager._instance = None

    async def health_check(self) -> bool:
        """Check if Redis connection is healthy."""
        try:
            if self._client is None:
                logger.error("Redis client not initialized")
                return False
            await self._client.ping()
            return True
        except redis.RedisError as e:
            logger.error("Redis health check failed", error=str(e))
            return False


def get_redis_client() -> redis.Redis:
    """Get a Redis client with connection pooling."""
    return RedisPoolManager().client


async def close_redis_pool():
    """Close the Redis connection pool.

    Call this during application shutdown to cleanly close connections.
    """
    await RedisPoolManager().close()


async def check_redis_health() -> bool:
    """Check if Redis is healthy and accessible."""
    return await RedisPoolManager().health_check()
