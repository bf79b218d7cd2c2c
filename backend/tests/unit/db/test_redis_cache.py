"""
Unit tests for Redis cache module

Tests cover:
- RedisKeyPrefix key layout
- RedisCache JSON operations and TTL
- Singleton instance management
"""

import redis

from copydrive.db import redis_cache as redis_cache_module
from copydrive.db.redis_cache import RedisCache, get_redis_cache
from copydrive.db.redis_db import RedisKeyPrefix


class TestRedisKeyPrefix:
    """Test suite for RedisKeyPrefix"""

    def test_user_key(self):
        assert RedisKeyPrefix.user_key("usr_1") == "copydrive:user:usr_1"

    def test_prompt_key(self):
        assert RedisKeyPrefix.prompt_key("analyze_audience_base") == "copydrive:prompt:analyze_audience_base"


class TestRedisCache:
    """Test suite for RedisCache"""

    def test_set_and_get_json(self, fake_redis_client):
        cache = RedisCache(client=fake_redis_client)
        assert cache.set("k", {"a": 1, "b": [1, 2]})
        assert cache.get("k") == {"a": 1, "b": [1, 2]}

    def test_get_missing(self, fake_redis_client):
        assert RedisCache(client=fake_redis_client).get("missing") is None

    def test_ttl(self, fake_redis_client):
        cache = RedisCache(client=fake_redis_client)
        cache.set("k", "v", expire_seconds=60)
        assert 0 < fake_redis_client.ttl("k") <= 60

    def test_delete_and_exists(self, fake_redis_client):
        cache = RedisCache(client=fake_redis_client)
        cache.set("k", 1)
        assert cache.exists("k")
        assert cache.delete("k")
        assert not cache.exists("k")
        assert not cache.delete("k")

    def test_invalid_json_is_a_miss(self, fake_redis_client):
        fake_redis_client.set("k", "{not json")
        assert RedisCache(client=fake_redis_client).get("k") is None

    def test_redis_error_is_a_miss(self, fake_redis_client, monkeypatch):
        def boom(*args, **kwargs):
            raise redis.ConnectionError("down")

        monkeypatch.setattr(fake_redis_client, "get", boom)
        assert RedisCache(client=fake_redis_client).get("k") is None

    def test_get_or_load_caches_loaded_value(self, fake_redis_client):
        cache = RedisCache(client=fake_redis_client)
        calls = []

        def loader():
            calls.append(1)
            return {"prompt": "p"}

        assert cache.get_or_load("k", loader, expire_seconds=30) == {"prompt": "p"}
        assert cache.get_or_load("k", loader, expire_seconds=30) == {"prompt": "p"}
        assert len(calls) == 1
        assert 0 < fake_redis_client.ttl("k") <= 30

    def test_get_or_load_does_not_cache_none(self, fake_redis_client):
        cache = RedisCache(client=fake_redis_client)
        assert cache.get_or_load("k", lambda: None) is None
        assert not cache.exists("k")

    def test_ping(self, fake_redis_client):
        assert RedisCache(client=fake_redis_client).ping()


class TestSingleton:
    """get_redis_cache"""

    def test_singleton(self, monkeypatch):
        monkeypatch.setattr(redis_cache_module, "_redis_cache", None)
        first = get_redis_cache()
        assert first is get_redis_cache()
        first.close()
