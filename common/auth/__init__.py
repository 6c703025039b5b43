"""
Authentication module - Token providers and credential hashing.
"""

from common.auth.base import TokenProvider, InvalidTokenError
from common.auth.jwt_auth import JWTAuth
from common.auth.hasher import CredentialHasher, HashingError

__all__ = [
    "TokenProvider",
    "InvalidTokenError",
    "JWTAuth",
    "CredentialHasher",
    "HashingError",
]
