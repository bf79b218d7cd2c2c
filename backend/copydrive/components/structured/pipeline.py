"""Generate, validate, repair once, then commit or fail.

    attempt() -> validator(data) -> [repair(data, incomplete) -> merge -> validator(data)]
              -> commit(result)   when nothing is incomplete
              -> IncompleteAnalysisError  otherwise (commit is not called)

Gateway errors from ``attempt`` propagate unchanged. A failing repair call is
logged, its message kept as ``repair_error``, and validation runs on the
unrepaired data.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from copydrive.components.ai_gateway.client import TokenUsage, ToolCallResult
from copydrive.exceptions import IncompleteAnalysisError

logger = logging.getLogger(__name__)

AttemptFn = Callable[[], Awaitable[ToolCallResult]]
ValidatorFn = Callable[[dict[str, Any]], list[str]]
RepairFn = Callable[[dict[str, Any], list[str]], Awaitable[ToolCallResult]]
MergeFn = Callable[[dict[str, Any], dict[str, Any]], dict[str, Any]]


@dataclass
class PipelineResult:
    """Validated output of a pipeline run."""

    data: dict[str, Any]
    usage: TokenUsage = field(default_factory=TokenUsage)
    calls: int = 1
    repaired: bool = False
    commit_result: Any = None


def merge_fields(data: dict[str, Any], repaired: dict[str, Any]) -> dict[str, Any]:
    """Overlay repaired fields onto the original object."""
    merged = dict(data)
    merged.update(repaired)
    return merged


class GenerationPipeline:
    """Bounded generate-validate-repair loop."""

    def __init__(
        self,
        attempt: AttemptFn,
        validator: ValidatorFn,
        repair: RepairFn | None = None,
        commit: Callable[[PipelineResult], Any] | None = None,
        max_repairs: int = 1,
        merge: MergeFn = merge_fields,
    ):
        self.attempt = attempt
        self.validator = validator
        self.repair = repair
        self.commit = commit
        self.max_repairs = max_repairs if repair is not None else 0
        self.merge = merge
        self.state = "pending"

    async def run(self) -> PipelineResult:
        """Execute the pipeline once.

        Raises:
            IncompleteAnalysisError: fields still incomplete after the repair budget
            AIGatewayError: propagated from ``attempt``
        """
        first = await self.attempt()
        self.state = "generated"
        result = PipelineResult(data=dict(first.arguments), usage=first.usage, calls=1)

        incomplete = self.validator(result.data)
        repair_error: str | None = None
        repairs = 0

        while incomplete and repairs < self.max_repairs:
            repairs += 1
            logger.info(f"Incomplete fields before repair {repairs}: {incomplete}")
            try:
                repaired = await self.repair(result.data, incomplete)
            except Exception as e:
                logger.error(f"Repair call failed: {e}", exc_info=True)
                repair_error = str(e) or e.__class__.__name__
                break

            result.calls += 1
            result.usage = result.usage + repaired.usage
            result.data = self.merge(result.data, repaired.arguments)
            result.repaired = True
            incomplete = self.validator(result.data)

        if incomplete:
            logger.warning(f"Incomplete fields after repair: {incomplete}")
            self.state = "failed"
            raise IncompleteAnalysisError(incomplete, repair_error=repair_error)

        self.state = "validated"
        if self.commit is not None:
            result.commit_result = self.commit(result)
        return result
