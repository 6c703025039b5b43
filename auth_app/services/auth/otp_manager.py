"""
One-time password generation and validation.

Codes are short uppercase hex strings delivered by email. Only their hash
and expiry are stored on the identity.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from common.auth.hasher import CredentialHasher

logger = logging.getLogger(__name__)


OTP_EXPIRED = "OTP has been expired"
OTP_INVALID = "Invalid OTP"
OTP_VALID = "OTP is valid"


@dataclass(frozen=True)
class OtpBundle:
    """A freshly issued code. ``code`` is sent out-of-band and never persisted."""
    code: str
    hashed: str
    expires_at: datetime


@dataclass(frozen=True)
class OtpCheck:
    """Outcome of validating a supplied code."""
    accepted: bool
    reason: str


class OtpManager:
    """
    Issues and checks one-time passwords.
    """

    DEFAULT_BYTE_LENGTH = 3
    DEFAULT_EXPIRE_MINUTES = 10

    def __init__(
        self,
        hasher: CredentialHasher,
        byte_length: int = DEFAULT_BYTE_LENGTH,
        expire_minutes: int = DEFAULT_EXPIRE_MINUTES,
    ):
        """
        Initialize OtpManager.

        Args:
            hasher: Hasher used for the stored code digest
            byte_length: Random bytes per code (hex output is 2x length)
            expire_minutes: Code lifetime
        """
        self._hasher = hasher
        self._byte_length = byte_length
        self._expire_minutes = expire_minutes
        self._lifetime = timedelta(minutes=expire_minutes)

    @property
    def expire_minutes(self) -> int:
        return self._expire_minutes

    async def generate(self) -> OtpBundle:
        """
        Issue a new code.

        Returns:
            OtpBundle with plaintext code, its hash, and absolute expiry
        """
        code = secrets.token_hex(self._byte_length).upper()
        hashed = await self._hasher.hash(code)
        expires_at = datetime.now(timezone.utc) + self._lifetime
        return OtpBundle(code=code, hashed=hashed, expires_at=expires_at)

    async def validate(
        self,
        code: str,
        hashed: str,
        expires_at: datetime,
    ) -> OtpCheck:
        """
        Check a supplied code against the stored hash and expiry.

        Expiry is evaluated first, so a stale code is reported as expired
        whether or not it would have matched.

        Args:
            code: Code supplied by the user
            hashed: Stored digest
            expires_at: Stored expiry (naive values are taken as UTC)

        Returns:
            OtpCheck with accepted flag and reason
        """
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)

        if datetime.now(timezone.utc) > expires_at:
            return OtpCheck(accepted=False, reason=OTP_EXPIRED)

        if not await self._hasher.verify(code, hashed):
            return OtpCheck(accepted=False, reason=OTP_INVALID)

        return OtpCheck(accepted=True, reason=OTP_VALID)
