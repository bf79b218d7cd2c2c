"""Copy optimization / variation endpoint."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from copydrive.api.v1.endpoints.auth import get_current_user, require_workspace_member
from copydrive.components.ai_gateway import AIGatewayClient, get_ai_gateway
from copydrive.components.copy_optimizer import CopyOptimizer
from copydrive.db.database import get_db
from copydrive.db.models import User
from copydrive.models.schemas import OptimizeCopyRequest, OptimizeCopyResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=OptimizeCopyResponse)
async def optimize_copy(
    body: OptimizeCopyRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    gateway: AIGatewayClient = Depends(get_ai_gateway),
):
    """Optimize or vary the sessions of a copy."""
    logger.info(
        f"POST /optimize-copy: action={body.action}, copy_id={body.copyId}, "
        f"workspace_id={body.workspaceId}, sessions={len(body.originalContent)}"
    )
    require_workspace_member(db, body.workspaceId, current_user)

    optimizer = CopyOptimizer(db, gateway)
    sessions = await optimizer.optimize(
        action=body.action,
        original_content=[s.model_dump(exclude_none=True) for s in body.originalContent],
        instructions=body.instructions,
        copy_id=body.copyId,
        workspace_id=body.workspaceId,
        user=current_user,
        project_identity=body.projectIdentity,
        audience_segment=body.audienceSegment,
        offer=body.offer,
        regenerate_instructions=body.regenerateInstructions,
    )
    return OptimizeCopyResponse(sessions=sessions)
