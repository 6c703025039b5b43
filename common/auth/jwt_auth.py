"""
JWT token provider.

Signs identity projections as HS256 JWTs using python-jose. Access and
refresh tokens use separate secrets and lifetimes.

Example:
    auth = JWTAuth(
        access_secret="access-secret",
        refresh_secret="refresh-secret",
    )

    token = auth.issue_access_token({"_id": "...", "email": "a@x.com"})
    claims = auth.verify_access_token(token)
    print(claims["email"])
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

from jose import jwt, JWTError

from common.auth.base import TokenProvider, InvalidTokenError

logger = logging.getLogger(__name__)

REFRESH_TOKEN_TYPE = "refresh"


class JWTAuth(TokenProvider):
    """
    JWT token provider.

    Stateless: validity is signature + expiry. Whether a token still maps
    to a live session is decided by the caller. Each token carries a
    fresh ``jti``, so two tokens for one identity never coincide.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_token_expire_days: int = 1,
        refresh_token_expire_days: int = 7,
    ):
        """
        Initialize JWT provider.

        Args:
            access_secret: Secret key for access tokens
            refresh_secret: Secret key for refresh tokens
            algorithm: JWT algorithm (default: HS256)
            access_token_expire_days: Access token lifetime
            refresh_token_expire_days: Refresh token lifetime
        """
        if not access_secret or not refresh_secret:
            raise ValueError("JWT access and refresh secrets are required")

        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self.algorithm = algorithm
        self.access_token_expire = timedelta(days=access_token_expire_days)
        self.refresh_token_expire = timedelta(days=refresh_token_expire_days)

    def _encode(
        self,
        claims: Dict[str, Any],
        secret: str,
        lifetime: timedelta,
        **extra: Any,
    ) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            **claims,
            **extra,
            "iat": now,
            "exp": now + lifetime,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def _decode(self, token: str, secret: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug(f"Token verification failed: {e}")
            raise InvalidTokenError()

    def issue_access_token(self, claims: Dict[str, Any]) -> str:
        """Sign an access token (default lifetime 1 day)."""
        return self._encode(claims, self._access_secret, self.access_token_expire)

    def issue_refresh_token(self, claims: Dict[str, Any]) -> str:
        """Sign a refresh token (default lifetime 7 days)."""
        return self._encode(
            claims,
            self._refresh_secret,
            self.refresh_token_expire,
            type=REFRESH_TOKEN_TYPE,
        )

    def verify_access_token(self, token: str) -> Dict[str, Any]:
        """Verify and decode an access token."""
        payload = self._decode(token, self._access_secret)
        if payload.get("type") == REFRESH_TOKEN_TYPE:
            raise InvalidTokenError()
        return payload

    def verify_refresh_token(self, token: str) -> Dict[str, Any]:
        """Verify and decode a refresh token."""
        payload = self._decode(token, self._refresh_secret)
        if payload.get("type") != REFRESH_TOKEN_TYPE:
            raise InvalidTokenError()
        return payload
