"""Redis-based cache for frequently read data (settings, dashboard counters)."""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Optional

import redis
from redis.exceptions import ConnectionError, RedisError

from intranet.core.config import settings

logger = logging.getLogger(__name__)

_redis_client: Optional[redis.Redis] = None


class _InMemoryCache:
    """Fallback in-memory cache when Redis is unavailable."""

    def __init__(self):
        self._cache: dict[str, tuple[Any, Optional[float]]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._cache.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= time.monotonic():
            self._cache.pop(key, None)
            return None
        return value

    def set(self, key: str, value: Any, ex: Optional[int] = None) -> None:
        expires_at = time.monotonic() + ex if ex else None
        self._cache[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        self._cache.pop(key, None)

    def clear(self) -> None:
        self._cache.clear()


def _get_redis_client() -> redis.Redis | _InMemoryCache:
    """Get or create Redis client."""
    global _redis_client

    if _redis_client is None:
        try:
            pool = redis.ConnectionPool.from_url(
                settings.REDIS_CACHE_URL,
                max_connections=50,
                decode_responses=True,
                socket_connect_timeout=1,
            )
            client = redis.Redis(connection_pool=pool)
            client.ping()
            _redis_client = client
            logger.info("Redis cache connected: %s", settings.REDIS_CACHE_URL)
        except (ConnectionError, RedisError) as e:
            logger.warning("Failed to connect to Redis cache: %s. Using fallback in-memory cache.", e)
            return _InMemoryCache()

    return _redis_client


class RedisCache:
    """Redis-based cache with TTL support."""

    def __init__(self, default_ttl: int = 300):
        """
        Initialize cache.

        Args:
            default_ttl: Default time-to-live in seconds (default: 5 minutes)
        """
        self.default_ttl = default_ttl
        self._client: redis.Redis | _InMemoryCache | None = None

    @property
    def client(self) -> redis.Redis | _InMemoryCache:
        if self._client is None:
            self._client = _get_redis_client()
        return self._client

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        try:
            if isinstance(self.client, _InMemoryCache):
                return self.client.get(key)

            value = self.client.get(key)
            if value is None:
                return None
            try:
                return json.loads(value)
            except (json.JSONDecodeError, TypeError):
                return value
        except (ConnectionError, RedisError) as e:
            logger.warning("Redis cache get error for key %s: %s", key, e)
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Set value in cache with TTL."""
        ttl = ttl or self.default_ttl
        try:
            if isinstance(self.client, _InMemoryCache):
                self.client.set(key, value, ex=ttl)
                return

            if isinstance(value, (dict, list, bool, int, float)):
                serialized = json.dumps(value)
            else:
                serialized = str(value)
            self.client.setex(key, ttl, serialized)
        except (ConnectionError, RedisError) as e:
            logger.warning("Redis cache set error for key %s: %s", key, e)

    def delete(self, key: str) -> None:
        """Delete key from cache."""
        try:
            self.client.delete(key)
        except (ConnectionError, RedisError) as e:
            logger.warning("Redis cache delete error for key %s: %s", key, e)


# Global cache instance
_cache = RedisCache(default_ttl=300)


def get_cache() -> RedisCache:
    """Get global cache instance."""
    return _cache
