"""Shared test data builders."""

from copydrive.components.ai_gateway import TokenUsage, ToolCallResult
from copydrive.components.audience.fields import AUDIENCE_FIELDS, MENTAL_TRIGGERS

TEST_MODEL = "google/gemini-2.5-flash"


def long_text(name: str, length: int = 200) -> str:
    """Deterministic text of at least ``length`` characters."""
    base = f"{name}: análise detalhada do público. "
    return (base * (length // len(base) + 1))[:length]


def make_analysis(short: tuple[str, ...] = (), length: int = 200) -> dict:
    """Analysis arguments with every field complete except ``short``."""
    data = {name: ("curto" if name in short else long_text(name, length)) for name, _ in AUDIENCE_FIELDS}
    data["mental_triggers"] = {
        trigger: {"rank": rank, "justificativa": f"Justificativa para {trigger}"}
        for rank, trigger in enumerate(MENTAL_TRIGGERS, start=1)
    }
    return data


def tool_result(arguments: dict, prompt: int = 1000, completion: int = 2000, total: int | None = None) -> ToolCallResult:
    """ToolCallResult with the given usage."""
    return ToolCallResult(
        arguments=arguments,
        usage=TokenUsage(
            prompt_tokens=prompt,
            completion_tokens=completion,
            total_tokens=prompt + completion if total is None else total,
        ),
        model=TEST_MODEL,
    )
