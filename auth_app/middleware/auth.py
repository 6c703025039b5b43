"""
Authentication guard for protected routes.

Validates the bearer token, re-reads the identity, and confirms the
presenting device still has a live session.
"""

import hmac
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from common.auth.base import TokenProvider, InvalidTokenError
from common.utils.result import Ok, Err, ErrorKind, Result
from auth_app.models.identity import to_public_user
from auth_app.services.auth.session_store import SessionStore
from auth_app.services.user.user_service import UserService

logger = logging.getLogger(__name__)

NO_TOKEN = "No token Provided."
INVALID_TOKEN = "Invalid token."
USER_NOT_FOUND = "User not found."
ACCOUNT_BLOCKED = "This account has been blocked by members of the authority."
INVALID_SESSION = "Invalid or expired session."


@dataclass(frozen=True)
class AuthContext:
    """Authorization context attached to an authenticated request."""
    user: dict
    session: dict
    token: str

    @property
    def user_id(self) -> str:
        return self.user["_id"]

    @property
    def device_id(self) -> str:
        return self.session["deviceId"]


class AuthGuard:
    """
    Per-request authorization check.

    Status flags embedded in the token are ignored; the identity is
    re-fetched on every request so blocking and session removal take
    effect immediately.
    """

    def __init__(
        self,
        token_provider: TokenProvider,
        user_service: UserService,
        session_store: SessionStore,
        device_header: str = "X-Device-ID",
    ):
        """
        Initialize AuthGuard.

        Args:
            token_provider: For token verification
            user_service: For identity lookup
            session_store: For session lookup
            device_header: Request header carrying the device identifier
        """
        self._token_provider = token_provider
        self._user_service = user_service
        self._session_store = session_store
        self._device_header = device_header

    @property
    def device_header(self) -> str:
        return self._device_header

    async def authorize(
        self,
        authorization: Optional[str],
        device_id: Optional[str],
    ) -> Result[AuthContext]:
        """
        Decide whether a presented token grants access.

        Args:
            authorization: Raw ``Authorization`` header value
            device_id: Raw device header value

        Returns:
            Ok(AuthContext), or Err with 401/404/403
        """
        token = self._extract_token(authorization)
        if not token:
            return Err(ErrorKind.AUTHENTICATION, NO_TOKEN, "NO_TOKEN")

        try:
            claims = self._token_provider.verify_access_token(token)
        except InvalidTokenError:
            return Err(ErrorKind.AUTHENTICATION, INVALID_TOKEN, "INVALID_TOKEN")

        email = claims.get("email")
        if not email:
            return Err(ErrorKind.AUTHENTICATION, INVALID_TOKEN, "INVALID_TOKEN")

        user = await self._user_service.get_user_by_email(email)
        if not user:
            return Err(ErrorKind.NOT_FOUND, USER_NOT_FOUND, "USER_NOT_FOUND")

        if user.get("blocked"):
            return Err(ErrorKind.AUTHORIZATION, ACCOUNT_BLOCKED, "ACCOUNT_BLOCKED")

        session = None
        if device_id:
            session = await self._session_store.lookup(str(user["_id"]), device_id)

        if not session:
            return Err(ErrorKind.AUTHORIZATION, INVALID_SESSION, "INVALID_SESSION")

        # A replaced or refreshed row no longer honours the earlier token
        if not hmac.compare_digest(str(session.get("token", "")), token):
            return Err(ErrorKind.AUTHORIZATION, INVALID_SESSION, "INVALID_SESSION")

        return Ok(AuthContext(user=to_public_user(user), session=session, token=token))

    async def require_auth(self, request: Request) -> AuthContext:
        """
        Validate request is authenticated.

        Args:
            request: HTTP request object

        Returns:
            AuthContext for the request

        Raises:
            APIException: Mapped from the rejection kind

        Side Effects:
            - Attaches the context to request.state.auth
        """
        result = await self.authorize(
            request.headers.get("Authorization"),
            request.headers.get(self._device_header),
        )

        if isinstance(result, Err):
            logger.info(f"Request rejected by auth guard: {result.message}")
            raise result.to_exception()

        request.state.auth = result.value
        return result.value

    def _extract_token(self, authorization: Optional[str]) -> Optional[str]:
        """
        Extract the token from a ``"<scheme> <token>"`` header value.

        Returns:
            Token string if present, None otherwise
        """
        if not authorization:
            return None

        parts = authorization.split()

        if len(parts) != 2:
            return None

        return parts[1]
