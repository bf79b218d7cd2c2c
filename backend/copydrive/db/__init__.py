"""Database module for the CopyDrive backend.

Components:
- Relational store (SQLAlchemy): workspaces, projects, copies, credits, AI history
- Redis: short-lived cache for users and prompt templates
"""

from copydrive.db.database import (
    SessionLocal,
    check_connection,
    close_db,
    engine,
    get_db,
    init_db,
)
from copydrive.db.models import (
    AIGenerationHistory,
    AIPromptTemplate,
    Base,
    Copy,
    CreditTransaction,
    Folder,
    ModelMultiplier,
    Project,
    User,
    Workspace,
    WorkspaceCredits,
    WorkspaceMember,
)
from copydrive.db.redis_cache import RedisCache, get_redis_cache
from copydrive.db.redis_db import RedisKeyPrefix

__all__ = [
    # Redis
    "RedisCache",
    "RedisKeyPrefix",
    "get_redis_cache",
    # Connection
    "engine",
    "SessionLocal",
    "get_db",
    "init_db",
    "close_db",
    "check_connection",
    # Models
    "Base",
    "User",
    "Workspace",
    "WorkspaceMember",
    "Project",
    "Folder",
    "Copy",
    "WorkspaceCredits",
    "CreditTransaction",
    "ModelMultiplier",
    "AIPromptTemplate",
    "AIGenerationHistory",
]
