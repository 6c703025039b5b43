"""
FastAPI dependencies for the auth service.

Provides dependency injection for all services.
"""

from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.auth.hasher import CredentialHasher
from common.auth.jwt_auth import JWTAuth
from auth_app.config import Settings
from auth_app.middleware.auth import AuthGuard, AuthContext
from auth_app.services.auth.otp_manager import OtpManager
from auth_app.services.auth.session_store import SessionStore
from auth_app.services.email.email_service import EmailService
from auth_app.services.user.user_service import UserService


# ─────────────────────────────────────────────────────────────────
# Global service instances
# ─────────────────────────────────────────────────────────────────

# Auth
_hasher: Optional[CredentialHasher] = None
_token_provider: Optional[JWTAuth] = None
_otp_manager: Optional[OtpManager] = None
_session_store: Optional[SessionStore] = None
_auth_guard: Optional[AuthGuard] = None

# User
_user_service: Optional[UserService] = None

# Email
_email_service: Optional[EmailService] = None


# ─────────────────────────────────────────────────────────────────
# Cached singletons
# ─────────────────────────────────────────────────────────────────

@lru_cache()
def get_hasher(rounds: int = CredentialHasher.DEFAULT_ROUNDS) -> CredentialHasher:
    """Get cached CredentialHasher instance."""
    return CredentialHasher(rounds=rounds)


# ─────────────────────────────────────────────────────────────────
# Initialization functions
# ─────────────────────────────────────────────────────────────────

def init_user_services(db: AsyncIOMotorDatabase) -> None:
    """Initialize user services."""
    global _user_service

    _user_service = UserService(db=db)


def init_email_services(settings: Settings) -> None:
    """Initialize email services."""
    global _email_service

    _email_service = EmailService(
        mode=settings.EMAIL_MODE,
        from_email=settings.SMTP_FROM_EMAIL,
        from_name=settings.SMTP_FROM_NAME,
        resend_api_key=settings.RESEND_API_KEY,
        smtp_host=settings.SMTP_HOST,
        smtp_port=settings.SMTP_PORT,
        smtp_user=settings.SMTP_USER,
        smtp_password=settings.SMTP_PASSWORD,
    )


def init_auth_services(db: AsyncIOMotorDatabase, settings: Settings) -> None:
    """Initialize auth services. User services must be initialized first."""
    global _hasher, _token_provider, _otp_manager, _session_store, _auth_guard

    _hasher = get_hasher(settings.BCRYPT_ROUNDS)

    _token_provider = JWTAuth(
        access_secret=settings.JWT_ACCESS_SECRET,
        refresh_secret=settings.JWT_REFRESH_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        access_token_expire_days=settings.JWT_ACCESS_TOKEN_EXPIRE_DAYS,
        refresh_token_expire_days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS,
    )

    _otp_manager = OtpManager(
        hasher=_hasher,
        byte_length=settings.OTP_BYTE_LENGTH,
        expire_minutes=settings.OTP_EXPIRE_MINUTES,
    )

    _session_store = SessionStore(db=db)

    _auth_guard = AuthGuard(
        token_provider=_token_provider,
        user_service=get_user_service(),
        session_store=_session_store,
        device_header=settings.DEVICE_ID_HEADER,
    )


def init_all_services(db: AsyncIOMotorDatabase, settings: Settings) -> None:
    """
    Initialize all services at application startup.

    Args:
        db: Main MongoDB database connection
        settings: Application settings
    """
    init_user_services(db)
    init_email_services(settings)
    init_auth_services(db, settings)


async def ensure_all_indexes() -> None:
    """Create the unique indexes the stores rely on."""
    await get_user_service().ensure_indexes()
    await get_session_store().ensure_indexes()


# ─────────────────────────────────────────────────────────────────
# Auth getters
# ─────────────────────────────────────────────────────────────────

def get_token_provider() -> JWTAuth:
    """Get token provider instance."""
    if _token_provider is None:
        raise RuntimeError("Auth services not initialized.")
    return _token_provider


def get_otp_manager() -> OtpManager:
    """Get OTP manager instance."""
    if _otp_manager is None:
        raise RuntimeError("Auth services not initialized.")
    return _otp_manager


def get_session_store() -> SessionStore:
    """Get session store instance."""
    if _session_store is None:
        raise RuntimeError("Auth services not initialized.")
    return _session_store


def get_auth_guard() -> AuthGuard:
    """Get auth guard instance."""
    if _auth_guard is None:
        raise RuntimeError("Auth services not initialized.")
    return _auth_guard


def get_credential_hasher() -> CredentialHasher:
    """Get the hasher shared by the auth services."""
    if _hasher is None:
        raise RuntimeError("Auth services not initialized.")
    return _hasher


async def require_auth(
    request: Request,
    auth_guard: Annotated[AuthGuard, Depends(get_auth_guard)]
) -> AuthContext:
    """Dependency that requires authentication."""
    return await auth_guard.require_auth(request)


def get_device_id(
    request: Request,
    auth_guard: Annotated[AuthGuard, Depends(get_auth_guard)]
) -> Optional[str]:
    """Extract the device identifier header, if any."""
    return request.headers.get(auth_guard.device_header) or None


# ─────────────────────────────────────────────────────────────────
# User getters
# ─────────────────────────────────────────────────────────────────

def get_user_service() -> UserService:
    """Get user service instance."""
    if _user_service is None:
        raise RuntimeError("User services not initialized.")
    return _user_service


# ─────────────────────────────────────────────────────────────────
# Email getters
# ─────────────────────────────────────────────────────────────────

def get_email_service() -> EmailService:
    """Get email service instance."""
    if _email_service is None:
        raise RuntimeError("Email services not initialized.")
    return _email_service
