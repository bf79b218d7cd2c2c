"""System prompt lookup: Redis cache, then ai_prompt_templates, then a built-in fallback."""

import logging

from sqlalchemy.orm import Session

from copydrive.db.redis_cache import get_redis_cache
from copydrive.db.redis_db import RedisKeyPrefix
from copydrive.repositories.prompt_template import prompt_template_repository
from copydrive.settings import settings

logger = logging.getLogger(__name__)


def get_system_prompt(db: Session, prompt_key: str, fallback: str) -> str:
    """Active prompt for ``prompt_key``, or ``fallback`` when none is configured.

    Only database hits are cached, so a template added later is picked up
    without waiting for a TTL.
    """

    def load() -> dict | None:
        template = prompt_template_repository.get_active(db, prompt_key)
        if template is None or not template.current_prompt:
            return None
        logger.info(f"Using prompt template from database: {prompt_key}")
        return {"prompt": template.current_prompt}

    cached = get_redis_cache().get_or_load(
        RedisKeyPrefix.prompt_key(prompt_key), load, expire_seconds=settings.prompt_cache_seconds
    )
    if cached and cached.get("prompt"):
        return cached["prompt"]

    logger.info(f"Prompt template {prompt_key} not found, using fallback")
    return fallback
