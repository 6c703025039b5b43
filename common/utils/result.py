"""
Explicit result type for multi-step flows.

Every pipeline step returns either ``Ok(value)`` or ``Err(kind, message)``.
The caller decides what to do with a failure; routers turn it into an
``APIException`` with ``unwrap``.

Example:
    from common.utils.result import Ok, Err, ErrorKind, unwrap

    async def find_user(email: str) -> Result[dict]:
        user = await users.find_one({"email": email})
        if not user:
            return Err(ErrorKind.NOT_FOUND, "Account not found")
        return Ok(user)

    user = unwrap(await find_user("a@x.com"))  # raises NotFoundException
"""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import wraps
from typing import Awaitable, Callable, Generic, Optional, TypeVar, Union

from common.utils.exceptions import (
    APIException,
    BadRequestException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
    ConflictException,
    ValidationException,
    LockedException,
    InternalServerException,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

INTERNAL_ERROR_MESSAGE = "Internal server error"


class ErrorKind(str, Enum):
    """Failure categories with a fixed HTTP status each."""

    BAD_REQUEST = "bad_request"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    VALIDATION = "validation"
    SUSPENDED = "suspended"
    INTERNAL = "internal"


_STATUS_CODES = {
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.AUTHENTICATION: 401,
    ErrorKind.AUTHORIZATION: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.VALIDATION: 422,
    ErrorKind.SUSPENDED: 423,
    ErrorKind.INTERNAL: 500,
}

_EXCEPTIONS = {
    ErrorKind.BAD_REQUEST: BadRequestException,
    ErrorKind.AUTHENTICATION: UnauthorizedException,
    ErrorKind.AUTHORIZATION: ForbiddenException,
    ErrorKind.NOT_FOUND: NotFoundException,
    ErrorKind.CONFLICT: ConflictException,
    ErrorKind.VALIDATION: ValidationException,
    ErrorKind.SUSPENDED: LockedException,
    ErrorKind.INTERNAL: InternalServerException,
}


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying a kind, a client-facing message and an optional code."""

    kind: ErrorKind
    message: str
    code: Optional[str] = None

    @property
    def ok(self) -> bool:
        return False

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self.kind]

    def to_exception(self) -> APIException:
        """Build the HTTP exception matching this error's kind."""
        exc_class = _EXCEPTIONS[self.kind]
        if self.code:
            return exc_class(message=self.message, code=self.code)
        return exc_class(message=self.message)


Result = Union[Ok[T], Err]


def unwrap(result: "Result[T]") -> T:
    """
    Return the value of an ``Ok`` or raise the exception for an ``Err``.

    Raises:
        APIException: Subclass matching the error kind
    """
    if isinstance(result, Err):
        raise result.to_exception()
    return result.value


def flow_boundary(
    func: Callable[..., Awaitable["Result[T]"]],
) -> Callable[..., Awaitable["Result[T]"]]:
    """
    Turn unexpected exceptions raised inside a flow into an INTERNAL ``Err``.

    The original exception is logged with its traceback; the client only
    ever sees the generic message.
    """

    @wraps(func)
    async def wrapper(*args, **kwargs) -> "Result[T]":
        try:
            return await func(*args, **kwargs)
        except Exception:
            logger.exception(f"Unexpected error in {func.__name__}")
            return Err(ErrorKind.INTERNAL, INTERNAL_ERROR_MESSAGE, "INTERNAL_ERROR")

    return wrapper
