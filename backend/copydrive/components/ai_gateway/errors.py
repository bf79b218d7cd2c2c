"""Errors raised by the AI gateway client.

They subclass CopyDriveError so the application handler renders them
directly; the upstream status is kept on ``status``.
"""

from copydrive.exceptions import CopyDriveError


class AIGatewayError(CopyDriveError):
    """Upstream gateway returned an unexpected status."""

    status_code = 500
    error = "ai_gateway_error"

    def __init__(self, message: str | None = None, status: int | None = None, body: str | None = None):
        self.status = status
        self.body = body
        super().__init__(message or f"AI API error: {status}")


class RateLimitError(AIGatewayError):
    """Upstream 429."""

    status_code = 429
    error = "rate_limit"

    def __init__(self, body: str | None = None):
        super().__init__("Limite de requisições excedido. Tente novamente em alguns instantes.", status=429, body=body)


class InsufficientCreditsError(AIGatewayError):
    """Upstream 402: the gateway account has no credits left."""

    status_code = 402
    error = "insufficient_credits"

    def __init__(self, body: str | None = None):
        super().__init__("Créditos insuficientes. Adicione mais créditos para continuar.", status=402, body=body)


class EmptyToolCallError(AIGatewayError):
    """Response carried no usable tool call arguments."""

    def __init__(self, message: str = "No tool call in AI response"):
        super().__init__(message)
