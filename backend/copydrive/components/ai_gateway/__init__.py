"""AI gateway integration.

Components:
- client.py: AIGatewayClient (forced tool calls over chat completions),
  TokenUsage, ToolCallResult, build_function_tool, get_ai_gateway
- errors.py: upstream status mapping (429, 402, other)

Usage:
    from copydrive.components.ai_gateway import build_function_tool, get_ai_gateway

    client = get_ai_gateway()
    tool = build_function_tool("generate_copy", "...", schema)
    result = await client.complete_with_tool(messages, tool)
    result.arguments, result.usage.total_tokens
"""

from copydrive.components.ai_gateway.client import (
    AIGatewayClient,
    TokenUsage,
    ToolCallResult,
    build_function_tool,
    get_ai_gateway,
)
from copydrive.components.ai_gateway.errors import (
    AIGatewayError,
    EmptyToolCallError,
    InsufficientCreditsError,
    RateLimitError,
)

__all__ = [
    "AIGatewayClient",
    "TokenUsage",
    "ToolCallResult",
    "build_function_tool",
    "get_ai_gateway",
    "AIGatewayError",
    "EmptyToolCallError",
    "InsufficientCreditsError",
    "RateLimitError",
]
