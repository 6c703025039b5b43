"""
Utilities module - Common helpers for API responses, exceptions, and flow results.
"""

from common.utils.responses import message_response, error_response, list_response
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
from common.utils.result import Ok, Err, ErrorKind, Result, unwrap, flow_boundary

__all__ = [
    "message_response",
    "error_response",
    "list_response",
    "APIException",
    "BadRequestException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ConflictException",
    "ValidationException",
    "LockedException",
    "InternalServerException",
    "Ok",
    "Err",
    "ErrorKind",
    "Result",
    "unwrap",
    "flow_boundary",
]
