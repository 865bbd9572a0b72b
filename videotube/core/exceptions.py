from __future__ import annotations

"""
VideoTube · Application Exceptions
==================================
A small, consistent layer on top of FastAPI/Starlette's `HTTPException` that
lets us attach structured metadata and integrate cleanly with the JSON error
shape rendered by `videotube.core.exception_handlers`.

Key ideas
---------
- One base `AppException` that carries `code`, `request_id`, `user_id`, `details`.
- Domain exceptions inherit from it and set the fixed HTTP status of their kind.
- `to_problem` renders the canonical body; only the message reaches the client.

Usage
-----
    raise ConflictException("User already exists on this email or username")
    raise UnauthorizedException("Invalid old password", status_code=400)
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

__all__ = [
    "AppException",
    "ValidationException",
    "ConflictException",
    "NotFoundException",
    "UnauthorizedException",
    "InvalidTokenException",
    "MissingAssetException",
    "InternalException",
]


# ──────────────────────────────────────────────────────────────
# 📦 Core: AppException
# ──────────────────────────────────────────────────────────────
class AppException(HTTPException):
    """Base application-level exception with optional metadata.

    Attributes
    -----------
    status_code : int
        HTTP status code (400/401/404/409/500).
    message : str
        Human-readable error message (serialized as `detail` as well).
    code : int
        Optional internal/typed error code. Defaults to `status_code`.
    request_id : str | None
        Optional request correlation id.
    user_id : str | None
        Account id for log context; never rendered.
    details : Any
        Machine-readable details (e.g. which fields were blank).
    """

    default_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        code: Optional[int] = None,
        request_id: Optional[str] = None,
        user_id: Optional[str] = None,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        status_code = int(status_code or self.default_status)
        message = message or self.default_message
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.code: int = int(code or status_code)
        self.message: str = message
        self.request_id: Optional[str] = request_id
        self.user_id: Optional[str] = user_id
        self.details: Optional[Any] = details

    def to_problem(self, *, fallback_request_id: Optional[str] = None) -> Dict[str, Any]:
        """Return a dict matching our error JSON shape."""
        body: Dict[str, Any] = {
            "error": True,
            "message": self.message,
            "code": self.code,
            "request_id": self.request_id or fallback_request_id or "N/A",
        }
        if self.details is not None:
            body["details"] = self.details
        return body


# ──────────────────────────────────────────────────────────────
# 🧾 Input / lookup errors
# ──────────────────────────────────────────────────────────────
class ValidationException(AppException):
    """Malformed or missing input; the caller's fault, never retried."""

    default_status = status.HTTP_400_BAD_REQUEST
    default_message = "All fields are required"


class ConflictException(AppException):
    """A unique field (username, email) is already taken."""

    default_status = status.HTTP_409_CONFLICT
    default_message = "User already exists on this email or username"


class NotFoundException(AppException):
    default_status = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class MissingAssetException(AppException):
    """A required media reference (avatar) was not supplied."""

    default_status = status.HTTP_400_BAD_REQUEST
    default_message = "Avatar file is required"


class InternalException(AppException):
    """Unexpected store or hashing failure; the message stays generic."""

    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Something went wrong"


# ──────────────────────────────────────────────────────────────
# 🔑 Auth/Token exceptions
# ──────────────────────────────────────────────────────────────
class UnauthorizedException(AppException):
    """Bad credentials or a missing/invalid/stale token."""

    default_status = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized request"


class InvalidTokenException(UnauthorizedException):
    """Raised for invalid, expired or wrong-kind tokens."""

    default_message = "Invalid or expired token"

    def __init__(self, message: Optional[str] = None, **kwargs: Any) -> None:
        kwargs.setdefault("headers", {"WWW-Authenticate": "Bearer"})
        super().__init__(message, **kwargs)
