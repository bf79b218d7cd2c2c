"""
Redis Key Prefix Strategy (Single DB + Key Prefix Pattern)

All CopyDrive data lives in db=0 and is isolated by key prefix, which keeps
the layout Redis Cluster compatible.

Usage:
    from copydrive.db.redis_db import RedisKeyPrefix

    key = RedisKeyPrefix.user_key(user_id)
    # -> "copydrive:user:usr_abc123"
"""

from enum import Enum


class RedisKeyPrefix(str, Enum):
    """Redis key prefixes.

    Key format:
        {prefix}:{entity_type}:{entity_id}
    """

    USER = "copydrive:user"  # Authenticated user profile (String/JSON)
    PROMPT_TEMPLATE = "copydrive:prompt"  # Active system prompt (String/JSON)

    @classmethod
    def user_key(cls, user_id: str) -> str:
        """Key for a cached user profile."""
        return f"{cls.USER.value}:{user_id}"

    @classmethod
    def prompt_key(cls, prompt_key: str) -> str:
        """Key for a cached prompt template."""
        return f"{cls.PROMPT_TEMPLATE.value}:{prompt_key}"
