"""
Common library for reusable infrastructure components.

- database: Async MongoDB connection (Motor)
- auth: JWT token provider and credential hashing
- utils: Responses, HTTP exceptions, flow result type
- config: Base settings class
"""

from common.database import MongoDB
from common.auth import TokenProvider, InvalidTokenError, JWTAuth, CredentialHasher
from common.utils import (
    message_response,
    error_response,
    APIException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
    Ok,
    Err,
    ErrorKind,
    unwrap,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    # Auth
    "TokenProvider",
    "InvalidTokenError",
    "JWTAuth",
    "CredentialHasher",
    # Utils
    "message_response",
    "error_response",
    "APIException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ValidationException",
    "Ok",
    "Err",
    "ErrorKind",
    "unwrap",
    # Config
    "BaseAppSettings",
]
