"""Authentication API endpoints and request-level access checks."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from copydrive.db.database import get_db
from copydrive.db.models import User
from copydrive.exceptions import ForbiddenError, InvalidRequestError, UnauthorizedError
from copydrive.models.auth_schemas import RegisterResponse, Token, UserLogin, UserRegister, UserResponse
from copydrive.repositories import credit_repository, user_repository, workspace_repository
from copydrive.services.auth_service import (
    authenticate_user,
    create_access_token,
    get_password_hash,
    get_user_from_cache,
    verify_token,
)
from copydrive.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()

# auto_error=False so a missing header surfaces as our own 401 payload
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Session = Depends(get_db),
) -> User:
    """Get current authenticated user from the Bearer token."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedError("Missing bearer token")

    user_id = verify_token(credentials.credentials)
    if not user_id:
        raise UnauthorizedError("Could not validate credentials")

    user = get_user_from_cache(db, user_id)
    if not user:
        raise UnauthorizedError("User not found")

    return user


def require_workspace_member(db: Session, workspace_id: str, user: User) -> None:
    """Raise ForbiddenError unless ``user`` belongs to the workspace."""
    if not workspace_repository.is_member(db, workspace_id, user.id):
        logger.warning(f"User {user.id} denied access to workspace {workspace_id}")
        raise ForbiddenError("You do not have access to this workspace", workspace_id=workspace_id)


@router.post("/register", response_model=RegisterResponse)
async def register(body: UserRegister, db: Session = Depends(get_db)):
    """Register a new user with a personal workspace and the free credit grant."""
    logger.info(f"POST /auth/register: email={body.email}")

    if user_repository.get_by_email(db, body.email):
        raise InvalidRequestError("Email already registered", fields=["email"])

    user = user_repository.create_user(
        db,
        name=body.name,
        email=body.email,
        hashed_password=get_password_hash(body.password),
        commit=False,
    )
    workspace = workspace_repository.create_workspace(db, owner=user, name=f"{body.name}'s workspace")
    db.refresh(user)

    credits = 0.0
    if settings.initial_free_credits > 0:
        result = credit_repository.add_workspace_credits(
            db,
            workspace.id,
            settings.initial_free_credits,
            description="Initial free credits",
            user_id=user.id,
        )
        credits = result["balance_after"]

    logger.info(f"New user registered: {user.email} (workspace={workspace.id})")

    return RegisterResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        is_admin=user.is_admin,
        created_at=user.created_at,
        workspace_id=workspace.id,
        credits=credits,
    )


@router.post("/login", response_model=Token)
async def login(body: UserLogin, db: Session = Depends(get_db)):
    """Login user and return JWT token."""
    logger.info(f"POST /auth/login: email={body.email}")

    user = authenticate_user(db, body.email, body.password)
    if not user:
        raise UnauthorizedError("Incorrect email or password")

    access_token = create_access_token(data={"sub": user.id})
    logger.info(f"User logged in: {body.email}")
    return Token(access_token=access_token, token_type="bearer")


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    logger.info(f"GET /auth/me: user_id={current_user.id}")
    return UserResponse.model_validate(current_user)
