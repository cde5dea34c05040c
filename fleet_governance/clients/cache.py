# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Redis-backed result cache with TTL and graceful degradation."""

import json
import logging
from datetime import timedelta
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError, ConnectionError as RedisConnectionError

logger = logging.getLogger(__name__)


class CacheError(Exception):
    """Raised when cache operations are called with invalid arguments."""

    pass


class RedisCache:
    """
    Namespaced JSON cache on top of Redis.

    Query results are memoized here. Every operation degrades to a miss
    when Redis is unreachable, so callers can always fall back to
    recomputing.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        default_ttl: int = 300,
        namespace: str = "fleet",
    ):
        """
        Initialize Redis cache client.

        Args:
            redis_url: Redis connection URL (e.g., "redis://localhost:6379/0")
            default_ttl: Default time-to-live in seconds for cached items
            namespace: Prefix applied to every key

        Raises:
            CacheError: If Redis URL is empty
        """
        if not redis_url:
            raise CacheError("redis_url cannot be empty")

        self.redis_url = redis_url
        self.default_ttl = default_ttl
        self.namespace = namespace
        self._client: Optional[redis.Redis] = None
        self._connected = False

    @classmethod
    async def create(
        cls,
        redis_url: str = "redis://localhost:6379/0",
        default_ttl: int = 300,
        namespace: str = "fleet",
    ) -> "RedisCache":
        """Create a cache instance and try to connect."""
        cache = cls(redis_url, default_ttl, namespace)
        await cache._connect()
        return cache

    async def _connect(self) -> None:
        """
        Establish connection to Redis.

        Logs connection status but doesn't raise - allows graceful degradation.
        """
        try:
            self._client = redis.from_url(
                self.redis_url,
                decode_responses=True,
                socket_connect_timeout=2,
                socket_keepalive=True,
                health_check_interval=30,
            )
            await self._client.ping()
            self._connected = True
            logger.info(f"Connected to Redis at {self.redis_url}")
        except (RedisConnectionError, RedisError, OSError) as e:
            self._connected = False
            logger.warning(f"Failed to connect to Redis: {str(e)}. Cache will be unavailable.")

    def _key(self, key: str) -> str:
        if not key:
            raise CacheError("key cannot be empty")
        return f"{self.namespace}:{key}"

    async def is_connected(self) -> bool:
        """Check if the Redis connection is active."""
        if not self._connected or self._client is None:
            return False

        try:
            await self._client.ping()
            return True
        except (RedisConnectionError, RedisError):
            self._connected = False
            return False

    async def get(self, key: str) -> Optional[Any]:
        """
        Retrieve a value from cache.

        Returns:
            Deserialized value, or None on a miss or when the cache is unavailable

        Raises:
            CacheError: If key is empty
        """
        full_key = self._key(key)

        if not self._connected or self._client is None:
            return None

        try:
            value = await self._client.get(full_key)
        except (RedisConnectionError, RedisError) as e:
            self._connected = False
            logger.warning(f"Cache get failed for {full_key}: {str(e)}")
            return None

        if value is None:
            logger.debug(f"Cache miss: {full_key}")
            return None

        try:
            deserialized = json.loads(value)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to deserialize cache value for {full_key}: {str(e)}")
            return None

        logger.debug(f"Cache hit: {full_key}")
        return deserialized

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Store a JSON-serializable value with a TTL.

        Returns:
            True if cached, False if the cache is unavailable

        Raises:
            CacheError: If key is empty or value cannot be serialized
        """
        full_key = self._key(key)

        if not self._connected or self._client is None:
            return False

        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise CacheError(f"Cannot serialize value for key {full_key}: {str(e)}") from e

        try:
            await self._client.setex(
                full_key, timedelta(seconds=ttl or self.default_ttl), serialized
            )
        except (RedisConnectionError, RedisError) as e:
            self._connected = False
            logger.warning(f"Cache set failed for {full_key}: {str(e)}")
            return False

        logger.debug(f"Cache set: {full_key} (TTL: {ttl or self.default_ttl}s)")
        return True

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._client is not None:
            try:
                await self._client.aclose()
            except RedisError as e:
                logger.error(f"Error closing Redis connection: {str(e)}")
            self._connected = False
            logger.info("Redis connection closed")
