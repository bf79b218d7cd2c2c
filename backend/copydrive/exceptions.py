"""Domain exceptions rendered as JSON error responses.

Every error leaves the API as ``{"error": <tag>, "message": <text>, ...extra}``
with the status code carried by the exception.
"""

from typing import Any

from fastapi import status


class CopyDriveError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "internal_error"

    def __init__(self, message: str | None = None, **extra: Any):
        self.message = message or self.error
        self.extra = extra
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error, "message": self.message}
        payload.update({k: v for k, v in self.extra.items() if v is not None})
        return payload


class InvalidRequestError(CopyDriveError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "invalid_request"


class UnauthorizedError(CopyDriveError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "unauthorized"


class ForbiddenError(CopyDriveError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "forbidden"


class NotFoundError(CopyDriveError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"


class IncompleteAnalysisError(CopyDriveError):
    """Generated object still fails the length floor after the repair round."""

    status_code = 422
    error = "incomplete_analysis"

    def __init__(self, incomplete_fields: list[str], repair_error: str | None = None):
        self.incomplete_fields = list(incomplete_fields)
        self.repair_error = repair_error
        super().__init__(
            f"Generated analysis is incomplete: {', '.join(self.incomplete_fields)}",
            incomplete_fields=self.incomplete_fields,
            repair_error=repair_error,
        )
