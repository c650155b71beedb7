"""
API error taxonomy.

Every error the API returns is rendered as
``{"error": {"code": ..., "message": ..., "details": ...}}`` by the
exception handlers registered in ``app.main``.
"""
from typing import Any, Optional

from fastapi import HTTPException, status


class APIError(HTTPException):
    """Base class for errors carrying a stable machine-readable code."""

    code: str = "INTERNAL_SERVER_ERROR"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Any = None,
        status_code: Optional[int] = None,
        headers: Optional[dict] = None,
    ):
        self.message = message or self.message
        self.details = details
        super().__init__(
            status_code=status_code or self.status_code,
            detail=self.message,
            headers=headers,
        )

    def to_dict(self) -> dict:
        return error_body(self.code, self.message, self.details)


class ValidationFailed(APIError):
    code = "VALIDATION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Validation error"


class MissingToken(APIError):
    code = "AUTH_MISSING_TOKEN"
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Authentication token not provided"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class InvalidToken(APIError):
    code = "AUTH_INVALID_TOKEN"
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid or expired token"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class InvalidCredentials(APIError):
    code = "AUTH_INVALID_CREDENTIALS"
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid email or password"


class Forbidden(APIError):
    code = "AUTH_FORBIDDEN"
    status_code = status.HTTP_403_FORBIDDEN
    message = "You do not have permission to access this resource"


class NotFound(APIError):
    code = "RESOURCE_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    message = "Resource not found"


class Conflict(APIError):
    code = "RESOURCE_CONFLICT"
    status_code = status.HTTP_409_CONFLICT
    message = "Resource already exists"


class SlotUnavailable(APIError):
    code = "SLOT_UNAVAILABLE"
    status_code = status.HTTP_409_CONFLICT
    message = "Time slot unavailable for this doctor"


class RateLimited(APIError):
    code = "RATE_LIMITED"
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    message = "Too many requests. Please try again later."


def error_body(code: str, message: str, details: Any = None) -> dict:
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"error": error}
