"""Advanced audience analysis endpoint."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from copydrive.api.v1.endpoints.auth import get_current_user, require_workspace_member
from copydrive.components.ai_gateway import AIGatewayClient, get_ai_gateway
from copydrive.components.audience import AudienceAnalyzer
from copydrive.db.database import get_db
from copydrive.db.models import User
from copydrive.models.schemas import AnalyzeAudienceRequest, AnalyzeAudienceResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=AnalyzeAudienceResponse)
async def analyze_audience(
    body: AnalyzeAudienceRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    gateway: AIGatewayClient = Depends(get_ai_gateway),
):
    """Generate the advanced analysis of an audience segment and debit the workspace."""
    logger.info(
        f"POST /analyze-audience: workspace_id={body.workspace_id}, "
        f"segment_id={body.segment.id}, user_id={current_user.id}"
    )
    require_workspace_member(db, body.workspace_id, current_user)

    analyzer = AudienceAnalyzer(db, gateway)
    result = await analyzer.analyze(
        segment=body.segment.model_dump(),
        workspace_id=body.workspace_id,
        user=current_user,
        project_context=body.project_context.model_dump() if body.project_context else None,
        project_id=body.project_id,
    )
    return AnalyzeAudienceResponse(**result)
