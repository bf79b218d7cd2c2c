"""Advanced audience analysis.

One forced tool call produces the full analysis; fields under the length
floor get a single repair call limited to those fields. Credits are debited
only once the merged analysis is complete.
"""

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from copydrive.components.ai_gateway import AIGatewayClient, TokenUsage, ToolCallResult, build_function_tool
from copydrive.components.audience.fields import build_audience_registry, normalize_mental_triggers
from copydrive.components.audience.prompts import (
    FALLBACK_SYSTEM_PROMPT,
    build_analysis_prompt,
    build_repair_prompt,
)
from copydrive.components.structured import FieldRegistry, GenerationPipeline, PipelineResult, merge_fields
from copydrive.db.models import User
from copydrive.exceptions import CopyDriveError
from copydrive.repositories import credit_repository, project_repository
from copydrive.services.prompt_service import get_system_prompt
from copydrive.settings import ANALYZE_AUDIENCE_PROMPT_KEY

logger = logging.getLogger(__name__)

ANALYSIS_TOOL_NAME = "generate_audience_analysis"
REPAIR_TOOL_NAME = "complete_audience_analysis"

# Debited when the gateway omits usage
ESTIMATED_USAGE = TokenUsage(prompt_tokens=2000, completion_tokens=3000, total_tokens=5000)

# One repair round at most; every round is a paid call
MAX_REPAIRS = 1


def billable_usage(usage: TokenUsage) -> TokenUsage:
    """Reported usage with each missing count replaced by the estimate."""
    if usage.is_empty:
        logger.warning("Gateway reported no token usage, billing the estimate")
    return TokenUsage(
        prompt_tokens=usage.prompt_tokens or ESTIMATED_USAGE.prompt_tokens,
        completion_tokens=usage.completion_tokens or ESTIMATED_USAGE.completion_tokens,
        total_tokens=usage.total_tokens or ESTIMATED_USAGE.total_tokens,
    )


class AudienceAnalyzer:
    """Runs the analysis pipeline for one segment in one workspace."""

    def __init__(
        self,
        db: Session,
        gateway: AIGatewayClient,
        registry: FieldRegistry | None = None,
    ):
        self.db = db
        self.gateway = gateway
        self.registry = registry or build_audience_registry()

    async def analyze(
        self,
        segment: dict[str, Any],
        workspace_id: str,
        user: User,
        project_context: dict[str, Any] | None = None,
        project_id: str | None = None,
    ) -> dict[str, Any]:
        """Generate, validate, bill and optionally store the analysis.

        Returns:
            {"analysis", "tokens_used", "credits_debited"}

        Raises:
            IncompleteAnalysisError: fields still short after the repair round
            AIGatewayError: upstream failure on the first call
        """
        system_prompt = get_system_prompt(self.db, ANALYZE_AUDIENCE_PROMPT_KEY, FALLBACK_SYSTEM_PROMPT)
        min_length = min((f.min_length for f in self.registry.fields), default=0)
        user_prompt = build_analysis_prompt(segment, project_context, min_length)

        async def attempt() -> ToolCallResult:
            logger.info(f"Generating audience analysis for workspace {workspace_id}")
            tool = build_function_tool(
                ANALYSIS_TOOL_NAME,
                "Gera análise psicográfica profunda de público-alvo",
                self.registry.schema(),
            )
            return await self.gateway.complete_with_tool(
                [{"role": "system", "content": system_prompt}, {"role": "user", "content": user_prompt}],
                tool,
            )

        async def repair(data: dict[str, Any], incomplete: list[str]) -> ToolCallResult:
            tool = build_function_tool(
                REPAIR_TOOL_NAME,
                "Completa os campos incompletos da análise de público",
                self.registry.schema(incomplete),
            )
            prompt = build_repair_prompt(self.registry, incomplete, data, segment)
            return await self.gateway.complete_with_tool(
                [{"role": "system", "content": system_prompt}, {"role": "user", "content": prompt}],
                tool,
            )

        def commit(result: PipelineResult) -> dict[str, Any]:
            usage = billable_usage(result.usage)
            debit = credit_repository.debit_workspace_credits(
                self.db,
                workspace_id=workspace_id,
                model_name=self.gateway.model,
                tokens_used=usage.total_tokens,
                input_tokens=usage.prompt_tokens,
                output_tokens=usage.completion_tokens,
                user_id=user.id,
            )
            if not debit.get("success"):
                logger.error(f"Credit debit failed for workspace {workspace_id}: {debit}")
                raise CopyDriveError("Erro ao processar créditos")
            return {"usage": usage, "debit": debit}

        pipeline = GenerationPipeline(
            attempt=attempt,
            validator=self.registry.find_incomplete,
            repair=repair,
            commit=commit,
            max_repairs=MAX_REPAIRS,
            merge=lambda data, repaired: merge_fields(data, self.registry.pick(repaired)),
        )
        result = await pipeline.run()

        analysis = self._finalize(result.data)
        usage: TokenUsage = result.commit_result["usage"]
        debited = result.commit_result["debit"].get("debited", 0)
        logger.info(
            f"Audience analysis done: calls={result.calls}, repaired={result.repaired}, "
            f"tokens={usage.total_tokens}, credits={debited}"
        )

        segment_id = segment.get("id")
        if project_id and segment_id:
            self._store(workspace_id, project_id, segment_id, analysis)

        return {"analysis": analysis, "tokens_used": usage.total_tokens, "credits_debited": debited}

    def _finalize(self, data: dict[str, Any]) -> dict[str, Any]:
        """Registry fields in order, plus normalized mental triggers when present."""
        analysis = self.registry.pick(data)
        triggers = normalize_mental_triggers(data.get("mental_triggers"))
        if triggers:
            analysis["mental_triggers"] = triggers
        return analysis

    def _store(self, workspace_id: str, project_id: str, segment_id: str, analysis: dict[str, Any]) -> None:
        project = project_repository.get_in_workspace(self.db, workspace_id, project_id)
        if project is None:
            logger.warning(f"Project {project_id} not found in workspace {workspace_id}, analysis not stored")
            return
        try:
            project_repository.save_segment_analysis(self.db, project, segment_id, analysis)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error storing analysis for segment {segment_id} in project {project_id}: {e}")
