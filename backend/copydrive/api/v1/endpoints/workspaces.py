"""Workspace, credit balance and usage history endpoints."""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from copydrive.api.v1.endpoints.auth import get_current_user, require_workspace_member
from copydrive.db.database import get_db
from copydrive.db.models import User
from copydrive.exceptions import ForbiddenError, NotFoundError
from copydrive.models.schemas import (
    AddCreditsRequest,
    AddCreditsResponse,
    CreditCheckResponse,
    CreditsResponse,
    CreditTransactionOut,
    GenerationOut,
    WorkspaceSummary,
)
from copydrive.repositories import credit_repository, generation_history_repository, workspace_repository
from copydrive.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[WorkspaceSummary])
async def list_workspaces(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List the caller's workspaces with their balances."""
    logger.info(f"GET /workspaces: user_id={current_user.id}")
    summaries = []
    for workspace in workspace_repository.list_for_user(db, current_user.id):
        member = workspace_repository.get_member(db, workspace.id, current_user.id)
        summaries.append(
            WorkspaceSummary(
                id=workspace.id,
                name=workspace.name,
                role=member.role if member else None,
                balance=credit_repository.get_balance(db, workspace.id),
                created_at=workspace.created_at,
            )
        )
    return summaries


@router.get("/{workspace_id}/credits", response_model=CreditsResponse)
async def get_credits(
    workspace_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get the credit balance of a workspace."""
    logger.info(f"GET /workspaces/{workspace_id}/credits: user_id={current_user.id}")
    require_workspace_member(db, workspace_id, current_user)

    credits = credit_repository.get_credits(db, workspace_id)
    if credits is None:
        raise NotFoundError(f"Workspace {workspace_id} has no credits account")
    return CreditsResponse(
        workspace_id=workspace_id,
        balance=credits.balance,
        total_added=credits.total_added,
        total_used=credits.total_used,
    )


@router.get("/{workspace_id}/credits/check", response_model=CreditCheckResponse)
async def check_credits(
    workspace_id: str,
    model: str | None = None,
    estimated_tokens: int = Query(5000, ge=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Check whether the balance covers an estimated generation."""
    require_workspace_member(db, workspace_id, current_user)
    result = credit_repository.check_workspace_credits(
        db, workspace_id, model or settings.ai_default_model, estimated_tokens
    )
    return CreditCheckResponse(**result)


@router.post("/{workspace_id}/credits", response_model=AddCreditsResponse)
async def add_credits(
    workspace_id: str,
    body: AddCreditsRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add credits to a workspace (platform admins only)."""
    logger.info(f"POST /workspaces/{workspace_id}/credits: amount={body.amount}, user_id={current_user.id}")
    if not current_user.is_admin:
        raise ForbiddenError("Only administrators can add credits")
    if not workspace_repository.exists(db, workspace_id):
        raise NotFoundError(f"Workspace {workspace_id} not found")

    result = credit_repository.add_workspace_credits(
        db, workspace_id, body.amount, description=body.description, user_id=current_user.id
    )
    return AddCreditsResponse(**result)


@router.get("/{workspace_id}/transactions", response_model=list[CreditTransactionOut])
async def list_transactions(
    workspace_id: str,
    limit: int = Query(50, ge=1, le=500),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Recent credit transactions of a workspace."""
    require_workspace_member(db, workspace_id, current_user)
    return credit_repository.list_transactions(db, workspace_id, limit=limit)


@router.get("/{workspace_id}/generations", response_model=list[GenerationOut])
async def list_generations(
    workspace_id: str,
    limit: int = Query(50, ge=1, le=500),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """AI generation history of a workspace."""
    require_workspace_member(db, workspace_id, current_user)
    return generation_history_repository.list_for_workspace(db, workspace_id, limit=limit)
