"""Redis client factory for different deployment modes.

Creates either an in-process FakeRedis (local development, tests) or a real
Redis client, depending on settings.redis_type.
"""

import logging

import fakeredis
import redis

from copydrive.settings import settings

logger = logging.getLogger(__name__)


def create_redis_client(db: int = 0) -> redis.Redis:
    """Create Redis client based on settings.

    Args:
        db: Database index (default: 0)

    Returns:
        Redis client (either fakeredis or real redis)
    """
    if settings.redis_type == "fake":
        client = fakeredis.FakeRedis(db=db, decode_responses=True)
        logger.info(f"Using FakeRedis (in-memory): db={db}")
        return client

    redis_config = {
        "host": settings.redis_host,
        "port": settings.redis_port,
        "db": db,
        "socket_connect_timeout": settings.redis_socket_connect_timeout,
        "socket_timeout": settings.redis_socket_timeout,
        "decode_responses": True,
    }
    if settings.redis_password:
        redis_config["password"] = settings.redis_password

    client = redis.Redis(**redis_config)
    logger.info(f"Using real Redis: {settings.redis_host}:{settings.redis_port}, db={db}")
    return client
