"""API v1 Router Aggregator.

Aggregates all v1 API endpoints into a single router.
"""

from fastapi import APIRouter

from copydrive.api.v1.endpoints import analyze_audience, auth, health, optimize_copy, workspaces

api_router = APIRouter()

# Mount endpoint routers
api_router.include_router(health.router, prefix="/health", tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(workspaces.router, prefix="/workspaces", tags=["Workspaces"])
api_router.include_router(analyze_audience.router, prefix="/analyze-audience", tags=["AI"])
api_router.include_router(optimize_copy.router, prefix="/optimize-copy", tags=["AI"])
