"""
API error taxonomy.

Every failure a route can report is one of the ``ApiError`` subclasses
below.  They are ``HTTPException``s, so raising one anywhere inside a
request short-circuits to the handler in ``api.middleware``, which renders
``{"error": ..., "details"?: ...}``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

from config.settings import config


class ApiError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        error: str,
        details: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(status_code=self.status_code, detail=error)
        self.details = details
        self.extra = extra or {}

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.detail}
        if self.details is not None:
            body["details"] = self.details
        body.update(self.extra)
        return body


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthenticated(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED


class Unauthorized(ApiError):
    """Credentials were presented but did not match."""

    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class InternalError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def internal_error(error: str, exc: BaseException) -> InternalError:
    """Wrap an unexpected store/crypto failure, surfacing its message if allowed."""
    details = str(exc) if config.expose_error_details else None
    return InternalError(error, details=details)
