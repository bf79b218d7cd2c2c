"""Chat-completions client for the AI gateway.

Every call forces a single function tool, so the model's answer is the JSON
``arguments`` of that tool call rather than free text.

Request shape:
    {
        "model": "...",
        "messages": [{"role": "system", ...}, {"role": "user", ...}],
        "tools": [<function tool>],
        "tool_choice": {"type": "function", "function": {"name": "<tool>"}}
    }
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from copydrive.components.ai_gateway.errors import (
    AIGatewayError,
    EmptyToolCallError,
    InsufficientCreditsError,
    RateLimitError,
)
from copydrive.settings import settings

logger = logging.getLogger(__name__)


@dataclass
class TokenUsage:
    """Token counts reported by the gateway for one or more calls."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        return TokenUsage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )

    @property
    def is_empty(self) -> bool:
        return self.total_tokens == 0 and self.prompt_tokens == 0 and self.completion_tokens == 0

    @classmethod
    def from_response(cls, usage: dict | None) -> "TokenUsage":
        """Build from the ``usage`` object of a response; missing values are 0."""
        usage = usage or {}
        return cls(
            prompt_tokens=int(usage.get("prompt_tokens") or 0),
            completion_tokens=int(usage.get("completion_tokens") or 0),
            total_tokens=int(usage.get("total_tokens") or 0),
        )


@dataclass
class ToolCallResult:
    """Parsed result of a forced tool call."""

    arguments: dict[str, Any]
    usage: TokenUsage = field(default_factory=TokenUsage)
    model: str = ""


def build_function_tool(name: str, description: str, parameters: dict) -> dict:
    """Wrap a JSON Schema into a function tool definition."""
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": parameters,
        },
    }


class AIGatewayClient:
    """Client for an OpenAI-compatible chat-completions gateway."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            base_url: Full chat-completions URL
            api_key: Bearer key for the gateway
            model: Default model name
            timeout: Request timeout in seconds (None disables it)
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.base_url = base_url
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._transport = transport

    def _get_headers(self) -> dict:
        """Get request headers with auth token."""
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def complete_with_tool(
        self,
        messages: list[dict[str, str]],
        tool: dict,
        model: str | None = None,
    ) -> ToolCallResult:
        """Run one chat completion forced onto ``tool``.

        Args:
            messages: Chat messages (system + user)
            tool: Function tool built with build_function_tool
            model: Model override

        Returns:
            ToolCallResult with the parsed arguments and token usage

        Raises:
            RateLimitError: upstream 429
            InsufficientCreditsError: upstream 402
            AIGatewayError: any other non-2xx status
            EmptyToolCallError: no tool call or arguments are not a JSON object
        """
        model_name = model or self.model
        tool_name = tool["function"]["name"]
        payload = {
            "model": model_name,
            "messages": messages,
            "tools": [tool],
            "tool_choice": {"type": "function", "function": {"name": tool_name}},
        }

        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            resp = await client.post(self.base_url, json=payload, headers=self._get_headers())

        if resp.status_code == 429:
            logger.warning(f"AI gateway rate limited ({tool_name})")
            raise RateLimitError(body=resp.text)
        if resp.status_code == 402:
            logger.warning(f"AI gateway reported insufficient credits ({tool_name})")
            raise InsufficientCreditsError(body=resp.text)
        if resp.is_error:
            logger.error(f"AI API error: {resp.status_code} {resp.text}")
            raise AIGatewayError(status=resp.status_code, body=resp.text)

        data = resp.json()
        arguments = self._parse_tool_arguments(data)
        usage = TokenUsage.from_response(data.get("usage"))
        logger.info(
            f"AI call {tool_name} ({model_name}): prompt={usage.prompt_tokens}, "
            f"completion={usage.completion_tokens}, total={usage.total_tokens}"
        )
        return ToolCallResult(arguments=arguments, usage=usage, model=data.get("model") or model_name)

    @staticmethod
    def _parse_tool_arguments(data: dict) -> dict[str, Any]:
        """Extract ``choices[0].message.tool_calls[0].function.arguments`` as a dict."""
        try:
            tool_call = data["choices"][0]["message"]["tool_calls"][0]
            raw_arguments = tool_call["function"]["arguments"]
        except (KeyError, IndexError, TypeError):
            logger.error(f"No tool call in AI response: {json.dumps(data)[:500]}")
            raise EmptyToolCallError() from None

        if isinstance(raw_arguments, dict):
            return raw_arguments
        if not raw_arguments:
            raise EmptyToolCallError()

        try:
            arguments = json.loads(raw_arguments)
        except json.JSONDecodeError as e:
            logger.error(f"Tool call arguments are not valid JSON: {e}")
            raise EmptyToolCallError(f"Invalid tool call arguments: {e}") from e

        if not isinstance(arguments, dict):
            raise EmptyToolCallError("Tool call arguments are not a JSON object")
        return arguments


def get_ai_gateway() -> AIGatewayClient:
    """FastAPI dependency returning a client configured from settings."""
    return AIGatewayClient(
        base_url=settings.ai_gateway_url,
        api_key=settings.ai_gateway_api_key,
        model=settings.ai_default_model,
        timeout=settings.ai_gateway_timeout,
    )
