"""
FastAPI router for Auth system endpoints.

Provides endpoints for registration, login, OTP verification, password
reset, token refresh, logout, and device session management.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends

from common.auth.hasher import CredentialHasher
from common.auth.jwt_auth import JWTAuth
from common.utils import unwrap
from auth_app.dependencies import (
    require_auth,
    get_device_id,
    get_credential_hasher,
    get_token_provider,
    get_otp_manager,
    get_session_store,
    get_user_service,
    get_email_service,
)
from auth_app.middleware.auth import AuthContext
from auth_app.services.auth.otp_manager import OtpManager
from auth_app.services.auth.session_store import SessionStore
from auth_app.services.email.email_service import EmailService
from auth_app.services.user.user_service import UserService
from auth_app.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    SendOtpRequest,
    VerifyOtpRequest,
    ResetPasswordRequest,
    RefreshRequest,
)
from auth_app.pipelines import auth as pipelines

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=201)
async def register(
    body: RegisterRequest,
    user_service: Annotated[UserService, Depends(get_user_service)],
    hasher: Annotated[CredentialHasher, Depends(get_credential_hasher)],
    otp_manager: Annotated[OtpManager, Depends(get_otp_manager)],
    email_service: Annotated[EmailService, Depends(get_email_service)],
):
    """
    Register a new user account.

    The account starts unverified; an OTP is emailed for verification.
    """
    result = await pipelines.register_pipeline(
        user_service=user_service,
        hasher=hasher,
        otp_manager=otp_manager,
        email_service=email_service,
        username=body.username,
        password=body.password,
        email=body.email,
    )

    return unwrap(result)


@router.post("/login")
async def login(
    body: LoginRequest,
    device_id: Annotated[Optional[str], Depends(get_device_id)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    hasher: Annotated[CredentialHasher, Depends(get_credential_hasher)],
    token_provider: Annotated[JWTAuth, Depends(get_token_provider)],
    session_store: Annotated[SessionStore, Depends(get_session_store)],
):
    """
    Log in with email and password.

    Reuses the device identifier header when present, otherwise a new
    device identifier is returned.
    """
    result = await pipelines.login_pipeline(
        user_service=user_service,
        hasher=hasher,
        token_provider=token_provider,
        session_store=session_store,
        email=body.email,
        password=body.password,
        device_id=device_id,
    )

    return unwrap(result)


@router.post("/otp")
async def send_otp(
    body: SendOtpRequest,
    user_service: Annotated[UserService, Depends(get_user_service)],
    otp_manager: Annotated[OtpManager, Depends(get_otp_manager)],
    email_service: Annotated[EmailService, Depends(get_email_service)],
):
    """Send a fresh OTP to the account's email."""
    result = await pipelines.send_otp_pipeline(
        user_service=user_service,
        otp_manager=otp_manager,
        email_service=email_service,
        email=body.email,
    )

    return unwrap(result)


@router.post("/verify")
async def verify_otp(
    body: VerifyOtpRequest,
    user_service: Annotated[UserService, Depends(get_user_service)],
    otp_manager: Annotated[OtpManager, Depends(get_otp_manager)],
    token_provider: Annotated[JWTAuth, Depends(get_token_provider)],
):
    """Verify the account with its OTP."""
    result = await pipelines.verify_otp_pipeline(
        user_service=user_service,
        otp_manager=otp_manager,
        token_provider=token_provider,
        email=body.email,
        otp=body.otp,
    )

    return unwrap(result)


@router.patch("/reset-password")
async def reset_password(
    body: ResetPasswordRequest,
    user_service: Annotated[UserService, Depends(get_user_service)],
    hasher: Annotated[CredentialHasher, Depends(get_credential_hasher)],
    otp_manager: Annotated[OtpManager, Depends(get_otp_manager)],
    token_provider: Annotated[JWTAuth, Depends(get_token_provider)],
):
    """Reset the password using an OTP."""
    result = await pipelines.reset_password_pipeline(
        user_service=user_service,
        hasher=hasher,
        otp_manager=otp_manager,
        token_provider=token_provider,
        email=body.email,
        otp=body.otp,
        password=body.password,
    )

    return unwrap(result)


@router.post("/refresh")
async def refresh(
    body: RefreshRequest,
    device_id: Annotated[Optional[str], Depends(get_device_id)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    token_provider: Annotated[JWTAuth, Depends(get_token_provider)],
    session_store: Annotated[SessionStore, Depends(get_session_store)],
):
    """Exchange a refresh token for a new access token on this device."""
    result = await pipelines.refresh_access_pipeline(
        user_service=user_service,
        token_provider=token_provider,
        session_store=session_store,
        refresh_token=body.refreshToken,
        device_id=device_id,
    )

    return unwrap(result)


@router.post("/logout")
async def logout(
    auth: Annotated[AuthContext, Depends(require_auth)],
    session_store: Annotated[SessionStore, Depends(get_session_store)],
):
    """Log out of the current device."""
    result = await pipelines.logout_pipeline(
        session_store=session_store,
        user_id=auth.user_id,
        device_id=auth.device_id,
    )

    return unwrap(result)


@router.post("/logout-others")
async def logout_others(
    auth: Annotated[AuthContext, Depends(require_auth)],
    session_store: Annotated[SessionStore, Depends(get_session_store)],
):
    """Log out of every device except the current one."""
    result = await pipelines.logout_other_devices_pipeline(
        session_store=session_store,
        user_id=auth.user_id,
        keep_device_id=auth.device_id,
    )

    return unwrap(result)


@router.get("/sessions")
async def list_sessions(
    auth: Annotated[AuthContext, Depends(require_auth)],
    session_store: Annotated[SessionStore, Depends(get_session_store)],
):
    """List the devices the user is logged in on."""
    result = await pipelines.list_sessions_pipeline(
        session_store=session_store,
        user_id=auth.user_id,
        current_device_id=auth.device_id,
    )

    return unwrap(result)
