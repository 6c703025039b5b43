"""
Custom HTTP exceptions with error codes.

Extends FastAPI's HTTPException with standardized error codes
for consistent API error responses.

Example:
    from common.utils import NotFoundException

    @app.get("/users/{id}")
    async def get_user(id: str):
        user = await users.find_one({"_id": ObjectId(id)})
        if not user:
            raise NotFoundException("User not found.", code="USER_NOT_FOUND")
        return user
"""

from typing import Optional, Any, Dict
from fastapi import HTTPException


class APIException(HTTPException):
    """
    Base API exception with error code support.

    The response body is the ``detail`` dict: ``{"message": ..., "code": ...}``
    plus any echoed fields passed in ``details``.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Create an API exception.

        Args:
            status_code: HTTP status code
            message: Human-readable error message
            code: Machine-readable error code
            details: Extra fields echoed next to the message
            headers: Optional response headers
        """
        detail: Dict[str, Any] = dict(details or {})
        detail["message"] = message

        if code:
            detail["code"] = code

        super().__init__(
            status_code=status_code,
            detail=detail,
            headers=headers,
        )

    @property
    def message(self) -> str:
        return self.detail["message"]

    @property
    def code(self) -> Optional[str]:
        return self.detail.get("code")


class BadRequestException(APIException):
    """400 Bad Request - Invalid input or missing precondition."""

    def __init__(
        self,
        message: str = "Bad request",
        code: str = "BAD_REQUEST",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(400, message, code, details)


class UnauthorizedException(APIException):
    """401 Unauthorized - Missing or invalid credentials."""

    def __init__(
        self,
        message: str = "Unauthorized",
        code: str = "UNAUTHORIZED",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(401, message, code, details)


class ForbiddenException(APIException):
    """403 Forbidden - Blocked, unverified, or insufficient permissions."""

    def __init__(
        self,
        message: str = "Forbidden",
        code: str = "FORBIDDEN",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(403, message, code, details)


class NotFoundException(APIException):
    """404 Not Found - Resource doesn't exist."""

    def __init__(
        self,
        message: str = "Not found",
        code: str = "NOT_FOUND",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(404, message, code, details)


class ConflictException(APIException):
    """409 Conflict - Resource already exists."""

    def __init__(
        self,
        message: str = "Conflict",
        code: str = "CONFLICT",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(409, message, code, details)


class ValidationException(APIException):
    """422 Validation Error - Request validation failed."""

    def __init__(
        self,
        message: Any = "Validation error",
        code: str = "VALIDATION_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(422, message, code, details)


class LockedException(APIException):
    """423 Locked - Account is soft-deleted (suspended, not removed)."""

    def __init__(
        self,
        message: str = "Account is temporarily unavailable",
        code: str = "ACCOUNT_SUSPENDED",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(423, message, code, details)


class InternalServerException(APIException):
    """500 Internal Server Error - Unexpected server error."""

    def __init__(
        self,
        message: str = "Internal server error",
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(500, message, code, details)

