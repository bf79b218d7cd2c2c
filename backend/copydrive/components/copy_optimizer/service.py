"""Copy optimization and variation.

A single forced ``generate_copy`` call rewrites the editor sessions. The
result gets fresh element IDs and is recorded in the generation history.
"""

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from copydrive.components.ai_gateway import AIGatewayClient, EmptyToolCallError
from copydrive.components.copy_optimizer.prompts import OPTIMIZE, build_system_prompt, build_user_prompt
from copydrive.components.copy_optimizer.schema import copy_tool, stamp_ids
from copydrive.db.models import User
from copydrive.repositories import generation_history_repository

logger = logging.getLogger(__name__)


class CopyOptimizer:
    """Optimizes ("otimizar") or varies ("variacao") the sessions of a copy."""

    def __init__(self, db: Session, gateway: AIGatewayClient):
        self.db = db
        self.gateway = gateway

    async def optimize(
        self,
        action: str,
        original_content: list[dict[str, Any]],
        instructions: str,
        copy_id: str,
        workspace_id: str,
        user: User,
        project_identity: dict[str, Any] | None = None,
        audience_segment: dict[str, Any] | None = None,
        offer: dict[str, Any] | None = None,
        regenerate_instructions: str | None = None,
    ) -> list[dict[str, Any]]:
        """Generate the new sessions.

        Returns:
            Sessions with fresh session/block IDs

        Raises:
            AIGatewayError: upstream failure (429/402 mapped to their subclasses)
            EmptyToolCallError: the tool call carried no sessions
        """
        logger.info(f"Optimizing copy {copy_id} with action: {action}")

        messages = [
            {"role": "system", "content": build_system_prompt(action)},
            {
                "role": "user",
                "content": build_user_prompt(
                    action,
                    original_content,
                    instructions,
                    project_identity=project_identity,
                    audience_segment=audience_segment,
                    offer=offer,
                    regenerate_instructions=regenerate_instructions,
                ),
            },
        ]
        result = await self.gateway.complete_with_tool(messages, copy_tool())

        sessions = result.arguments.get("sessions")
        if not isinstance(sessions, list):
            raise EmptyToolCallError("Tool call did not return sessions")
        sessions = stamp_ids([s for s in sessions if isinstance(s, dict)])

        self._record_history(
            action=action,
            original_content=original_content,
            sessions=sessions,
            instructions=instructions,
            copy_id=copy_id,
            workspace_id=workspace_id,
            user=user,
            project_identity=project_identity,
            audience_segment=audience_segment,
            offer=offer,
            regenerate_instructions=regenerate_instructions,
            usage=result.usage,
        )
        return sessions

    def _record_history(
        self,
        action: str,
        original_content,
        sessions,
        instructions: str,
        copy_id: str,
        workspace_id: str,
        user: User,
        project_identity,
        audience_segment,
        offer,
        regenerate_instructions,
        usage,
    ) -> None:
        """Write the generation row; failures are logged only."""
        try:
            generation_history_repository.record(
                self.db,
                copy_id=copy_id,
                workspace_id=workspace_id,
                created_by=user.id,
                generation_type="optimize" if action == OPTIMIZE else "variation",
                generation_category="text",
                copy_type="outro",
                prompt=instructions,
                parameters={
                    "action": action,
                    "regenerateInstructions": regenerate_instructions,
                    "hasProjectIdentity": bool(project_identity),
                    "hasAudienceSegment": bool(audience_segment),
                    "hasOffer": bool(offer),
                },
                original_content=original_content,
                sessions=sessions,
                project_identity=project_identity or None,
                audience_segment=audience_segment or None,
                offer=offer or None,
                model_used=self.gateway.model,
                input_tokens=usage.prompt_tokens,
                output_tokens=usage.completion_tokens,
                total_tokens=usage.total_tokens,
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving to history: {e}")
