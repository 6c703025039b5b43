"""
Abstract token provider interface.

Defines the contract for signing and verifying identity tokens so the
signing strategy can be swapped without touching the auth flows.

Example:
    from common.auth import TokenProvider, JWTAuth

    def get_token_provider(settings) -> TokenProvider:
        return JWTAuth(
            access_secret=settings.JWT_ACCESS_SECRET,
            refresh_secret=settings.JWT_REFRESH_SECRET,
        )
"""

from abc import ABC, abstractmethod
from typing import Dict, Any


class InvalidTokenError(ValueError):
    """
    Raised for any token that fails verification.

    Bad signature, malformed payload and expiry all surface as this one
    error with the same message.
    """

    def __init__(self, message: str = "Invalid token."):
        super().__init__(message)


class TokenProvider(ABC):
    """
    Abstract token provider.

    Implementations sign an identity projection into a self-contained token
    and decode it again later.
    """

    @abstractmethod
    def issue_access_token(self, claims: Dict[str, Any]) -> str:
        """
        Sign a short-lived access token.

        Args:
            claims: Public identity projection to embed

        Returns:
            The encoded token string
        """
        pass

    @abstractmethod
    def issue_refresh_token(self, claims: Dict[str, Any]) -> str:
        """
        Sign a long-lived refresh token with its own secret.

        Args:
            claims: Public identity projection to embed

        Returns:
            The encoded token string
        """
        pass

    @abstractmethod
    def verify_access_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode an access token.

        Returns:
            Decoded claims

        Raises:
            InvalidTokenError: For any signature, format or expiry failure
        """
        pass

    @abstractmethod
    def verify_refresh_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a refresh token.

        Returns:
            Decoded claims

        Raises:
            InvalidTokenError: For any signature, format or expiry failure
        """
        pass
