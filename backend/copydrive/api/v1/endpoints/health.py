"""Health check API endpoint."""

from fastapi import APIRouter

from copydrive.db.database import check_connection
from copydrive.db.redis_cache import get_redis_cache
from copydrive.settings import settings

router = APIRouter(tags=["Health"])


@router.get("")
async def health_check():
    """Health check endpoint with database, cache and gateway status."""
    return {
        "status": "healthy",
        "database": "ok" if check_connection() else "unavailable",
        "cache": "ok" if get_redis_cache().ping() else "unavailable",
        "ai_gateway_configured": settings.is_ai_gateway_configured(),
    }
