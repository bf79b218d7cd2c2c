"""Authentication service for JWT token management and password hashing."""

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from copydrive.db.models import User
from copydrive.db.redis_cache import get_redis_cache
from copydrive.db.redis_db import RedisKeyPrefix
from copydrive.repositories.user import user_repository
from copydrive.settings import settings

logger = logging.getLogger(__name__)

# Columns mirrored into the Redis user profile
_CACHED_USER_FIELDS = ("id", "name", "email", "is_admin", "created_at", "updated_at")


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Sign a JWT carrying ``data`` (the user id goes in ``sub``).

    Tokens expire after ``settings.jwt_expire_minutes`` unless
    ``expires_delta`` is given.
    """
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    return jwt.encode({**data, "exp": expire}, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> str | None:
    """User id from a valid token, None if it is invalid, expired or has no ``sub``."""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        return None
    return payload.get("sub")


def get_password_hash(password: str) -> str:
    """Hash password using bcrypt."""
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash.

    Returns:
        True if password matches, False otherwise (including malformed hashes)
    """
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError as e:
        logger.error(f"Password verification error: {e}")
        return False


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate user by email and password.

    Returns:
        User object if authentication successful, None otherwise
    """
    user = user_repository.get_by_email(db, email)
    if not user or not user.hashed_password:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def get_user_from_cache(db: Session, user_id: str) -> User | None:
    """Get user from Redis cache or database.

    A cache hit returns a detached User built from the cached profile.

    Args:
        db: Database session
        user_id: User ID

    Returns:
        User object if found, None otherwise
    """
    cache_key = RedisKeyPrefix.user_key(user_id)
    cache = get_redis_cache()

    cached_user = cache.get(cache_key)
    if cached_user:
        return User(**{field: cached_user.get(field) for field in _CACHED_USER_FIELDS})

    user = user_repository.get_by_id(db, user_id)
    if user:
        user_data = {field: getattr(user, field) for field in _CACHED_USER_FIELDS}
        cache.set(cache_key, user_data, expire_seconds=settings.user_cache_seconds)

    return user
