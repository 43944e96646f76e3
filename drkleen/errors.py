# drkleen/errors.py
"""
Error taxonomy shared by every route.

Clients branch on ``ErrorCode`` only; the message is free text for humans.
Every ``ApiError`` is rendered by the handler in ``drkleen.main`` as::

    {"error": {"code": "...", "message": "...", **details}}
"""
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import status


class ErrorCode(str, Enum):
    # validation
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_EMAIL_FORMAT = "INVALID_EMAIL_FORMAT"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    INVALID_ENTITY = "INVALID_ENTITY"
    MISSING_TOKEN = "MISSING_TOKEN"
    INVALID_EMAIL_TYPE = "INVALID_EMAIL_TYPE"

    # authentication
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    TOKEN_REQUIRED = "TOKEN_REQUIRED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    USER_INACTIVE = "USER_INACTIVE"

    # account state / authorization
    EMAIL_NOT_VERIFIED = "EMAIL_NOT_VERIFIED"
    ACCOUNT_INACTIVE = "ACCOUNT_INACTIVE"
    ALREADY_VERIFIED = "ALREADY_VERIFIED"
    CANNOT_DELETE_SELF = "CANNOT_DELETE_SELF"
    SETUP_COMPLETE = "SETUP_COMPLETE"
    ILLEGAL_STATE_TRANSITION = "ILLEGAL_STATE_TRANSITION"

    # not found
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    NOT_FOUND = "NOT_FOUND"

    # conflict
    ADMIN_LIMIT_REACHED = "ADMIN_LIMIT_REACHED"
    EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
    CONFLICT = "CONFLICT"

    # upstream / server
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class ApiError(Exception):
    """Base for every error that is reported to the caller."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        status_code: Optional[int] = None,
        **details: Any,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"code": self.code.value, "message": self.message}
        body.update({k: v for k, v in self.details.items() if v is not None})
        return body


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(ApiError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ApiError):
    status_code = status.HTTP_409_CONFLICT


class UpstreamError(ApiError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class InvalidToken(AuthenticationError):
    """Bad signature, expired, wrong issuer or unreadable token."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(ErrorCode.INVALID_TOKEN, message)
