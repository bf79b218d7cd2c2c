"""
Redis-backed cache shared by all API replicas.

Holds short-lived JSON copies of hot, rarely-changing rows (authenticated
user profiles, active prompt templates). The database stays the source of
truth: every cache failure is logged and treated as a miss.

Usage:
    from copydrive.db.redis_cache import get_redis_cache
    from copydrive.db.redis_db import RedisKeyPrefix

    cache = get_redis_cache()
    profile = cache.get_or_load(
        RedisKeyPrefix.user_key(user_id),
        lambda: load_profile(user_id),
        expire_seconds=900,
    )
"""

import json
import logging
from collections.abc import Callable
from typing import Any

import redis

from copydrive.db.redis_factory import create_redis_client

logger = logging.getLogger(__name__)


class RedisCache:
    """JSON values under ``copydrive:*`` keys in Redis db 0."""

    DEFAULT_DB = 0

    def __init__(self, client: redis.Redis | None = None):
        """
        Args:
            client: Pre-built client, e.g. a FakeRedis in tests
        """
        self.db = self.DEFAULT_DB
        self._client: redis.Redis | None = client

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = create_redis_client(self.db)
            logger.info(f"RedisCache connected: db={self.db}")
        return self._client

    def _call(self, op: str, key: str, fn: Callable[[], Any], default: Any) -> Any:
        """Run one Redis command, logging and returning ``default`` on failure."""
        try:
            return fn()
        except redis.RedisError as e:
            logger.error(f"Redis {op} failed for {key}: {e}")
            return default

    def get(self, key: str) -> Any | None:
        """Decoded JSON value, or None on miss, expiry, bad JSON or Redis error."""
        raw = self._call("get", key, lambda: self.client.get(key), None)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Discarding undecodable cache entry: {key}")
            return None

    def set(self, key: str, value: Any, expire_seconds: int | None = None) -> bool:
        """Store ``value`` as JSON, with a TTL when ``expire_seconds`` is given."""
        try:
            payload = json.dumps(value, default=str)
        except (TypeError, ValueError) as e:
            logger.error(f"Cannot serialize cache value for {key}: {e}")
            return False

        if expire_seconds:
            return bool(self._call("setex", key, lambda: self.client.setex(key, expire_seconds, payload), False))
        return bool(self._call("set", key, lambda: self.client.set(key, payload), False))

    def get_or_load(self, key: str, loader: Callable[[], Any], expire_seconds: int | None = None) -> Any | None:
        """Cache-aside read.

        Returns the cached value, else ``loader()``. Loaded values are cached
        unless they are None, so misses are retried on the next read.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug(f"Cache hit: {key}")
            return cached

        value = loader()
        if value is not None:
            self.set(key, value, expire_seconds=expire_seconds)
        return value

    def delete(self, key: str) -> bool:
        """True if a key was removed."""
        return bool(self._call("delete", key, lambda: self.client.delete(key), 0))

    def exists(self, key: str) -> bool:
        return bool(self._call("exists", key, lambda: self.client.exists(key), 0))

    def ping(self) -> bool:
        return bool(self._call("ping", "-", lambda: self.client.ping(), False))

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info(f"RedisCache closed: db={self.db}")


_redis_cache: RedisCache | None = None


def get_redis_cache() -> RedisCache:
    """Process-wide RedisCache."""
    global _redis_cache
    if _redis_cache is None:
        _redis_cache = RedisCache()
    return _redis_cache
