"""
Authentication pipeline functions.

Stateless orchestration for registration, login, OTP issuance and
verification, password reset, token refresh, and logout. Every flow returns
a ``Result``; the first failing precondition short-circuits the flow.
"""

import logging
import uuid
from typing import Optional, Dict, Any

from pymongo.errors import DuplicateKeyError

from common.auth.base import TokenProvider, InvalidTokenError
from common.auth.hasher import CredentialHasher
from common.utils.responses import message_response, list_response
from common.utils.result import Ok, Err, ErrorKind, Result, flow_boundary
from auth_app.models.identity import to_public_user, has_otp
from auth_app.services.auth.otp_manager import OtpManager
from auth_app.services.auth.session_store import SessionStore
from auth_app.services.email.email_service import EmailService
from auth_app.services.user.user_service import UserService

logger = logging.getLogger(__name__)

EMAIL_EXISTS = "Email already exists"
USERNAME_EXISTS = "Username already exists"
ACCOUNT_NOT_FOUND = "Account not found"
INVALID_CREDENTIALS = "Invalid credentials"
ACCOUNT_BLOCKED = "This account has been blocked by members of the authority."
ACCOUNT_NOT_VERIFIED = "This account has not been verified yet."
ACCOUNT_SUSPENDED = "Account is temporarily unavailable but not permanently removed."
INVALID_EMAIL = "Invalid email account."
OTP_SEND_FAILED = "Failed to send OTP."
OTP_SENT = "OTP sent successfully."
NO_OTP = "No OTP has been sent for this account."
VERIFICATION_FAILED = "Verification failed."
INVALID_TOKEN = "Invalid token."
INVALID_SESSION = "Invalid or expired session."
REGISTERED = "User registered successfully"
LOGGED_OUT = "User logged out."
LOGGED_OUT_OTHERS = "Logged out from all other devices."


def _account_gate(user: dict, require_verified: bool = False) -> Optional[Err]:
    """
    Check the status flags of an identity in a fixed order.

    Blocked is reported before unverified, which is reported before
    soft-deleted.

    Returns:
        Err for the first failing flag, None if the account may proceed
    """
    if user.get("blocked"):
        return Err(ErrorKind.AUTHORIZATION, ACCOUNT_BLOCKED, "ACCOUNT_BLOCKED")

    if require_verified and not user.get("verified"):
        return Err(ErrorKind.AUTHORIZATION, ACCOUNT_NOT_VERIFIED, "ACCOUNT_NOT_VERIFIED")

    if user.get("deleted"):
        return Err(ErrorKind.SUSPENDED, ACCOUNT_SUSPENDED, "ACCOUNT_SUSPENDED")

    return None


async def _check_otp(otp_manager: OtpManager, user: dict, code: str) -> Optional[Err]:
    if not has_otp(user):
        return Err(ErrorKind.BAD_REQUEST, NO_OTP, "NO_OTP")

    check = await otp_manager.validate(code, user["otp"], user["otpExpiresAt"])
    if not check.accepted:
        logger.warning(f"OTP rejected for user {user['_id']}: {check.reason}")
        return Err(ErrorKind.AUTHENTICATION, check.reason, "INVALID_OTP")

    return None


# ─────────────────────────────────────────────────────────────
# Registration & Login
# ─────────────────────────────────────────────────────────────

@flow_boundary
async def register_pipeline(
    user_service: UserService,
    hasher: CredentialHasher,
    otp_manager: OtpManager,
    email_service: EmailService,
    username: str,
    password: str,
    email: str,
) -> Result[Dict[str, Any]]:
    """
    Orchestrates account registration.

    Args:
        user_service: For identity persistence
        hasher: For password hashing
        otp_manager: For the verification code
        email_service: For OTP delivery
        username: Requested username
        password: Plaintext password
        email: Account email

    Returns:
        Ok({"message", "user"}) or Err 409
    """
    if await user_service.get_user_by_email(email):
        return Err(ErrorKind.CONFLICT, EMAIL_EXISTS, "EMAIL_EXISTS")

    if await user_service.get_user_by_username(username):
        return Err(ErrorKind.CONFLICT, USERNAME_EXISTS, "USERNAME_EXISTS")

    password_hash = await hasher.hash(password)
    otp = await otp_manager.generate()

    sent = await email_service.send_otp_email(
        email, otp.code, expire_minutes=otp_manager.expire_minutes
    )
    if not sent.get("success"):
        logger.error(f"Failed to send registration OTP to {email}: {sent.get('error')}")

    try:
        user = await user_service.create_user(
            username=username,
            email=email,
            password_hash=password_hash,
            otp_hash=otp.hashed,
            otp_expires_at=otp.expires_at,
        )
    except DuplicateKeyError as e:
        # Lost a race against a concurrent registration
        if "username" in str(e):
            return Err(ErrorKind.CONFLICT, USERNAME_EXISTS, "USERNAME_EXISTS")
        return Err(ErrorKind.CONFLICT, EMAIL_EXISTS, "EMAIL_EXISTS")

    logger.info(f"User registered: {user['_id']}")

    return Ok({
        "message": REGISTERED,
        "user": to_public_user(user),
    })


@flow_boundary
async def login_pipeline(
    user_service: UserService,
    hasher: CredentialHasher,
    token_provider: TokenProvider,
    session_store: SessionStore,
    email: str,
    password: str,
    device_id: Optional[str] = None,
) -> Result[Dict[str, Any]]:
    """
    Orchestrates login and per-device session creation.

    A session is only written after every check has passed.

    Args:
        user_service: For identity lookup
        hasher: For password verification
        token_provider: For access/refresh token issuance
        session_store: For the device session
        email: Account email
        password: Plaintext password
        device_id: Existing device identifier, a new one is generated if absent

    Returns:
        Ok({"accessToken", "refreshToken", "user", "deviceId"})
    """
    user = await user_service.get_user_by_email(email)
    if not user:
        return Err(ErrorKind.NOT_FOUND, ACCOUNT_NOT_FOUND, "ACCOUNT_NOT_FOUND")

    if not await hasher.verify(password, user.get("password", "")):
        logger.warning(f"Invalid credentials for user {user['_id']}")
        return Err(ErrorKind.AUTHENTICATION, INVALID_CREDENTIALS, "INVALID_CREDENTIALS")

    rejected = _account_gate(user, require_verified=True)
    if rejected:
        return rejected

    public_user = to_public_user(user)
    access_token = token_provider.issue_access_token(public_user)
    refresh_token = token_provider.issue_refresh_token(public_user)

    device_id = device_id or str(uuid.uuid4())
    await session_store.create(public_user["_id"], device_id, access_token)

    logger.info(f"User {public_user['_id']} logged in on device {device_id}")

    return Ok({
        "accessToken": access_token,
        "refreshToken": refresh_token,
        "user": public_user,
        "deviceId": device_id,
    })


# ─────────────────────────────────────────────────────────────
# OTP
# ─────────────────────────────────────────────────────────────

@flow_boundary
async def send_otp_pipeline(
    user_service: UserService,
    otp_manager: OtpManager,
    email_service: EmailService,
    email: str,
) -> Result[Dict[str, Any]]:
    """
    Issue a fresh OTP, replacing any earlier one, and email it.

    The new OTP stays persisted even when delivery fails.

    Returns:
        Ok({"message"}), Err 400 for an unknown email, Err 500 on send failure
    """
    user = await user_service.get_user_by_email(email)
    if not user:
        return Err(ErrorKind.BAD_REQUEST, INVALID_EMAIL, "INVALID_EMAIL")

    otp = await otp_manager.generate()
    await user_service.set_otp(str(user["_id"]), otp.hashed, otp.expires_at)

    sent = await email_service.send_otp_email(
        user["email"], otp.code, expire_minutes=otp_manager.expire_minutes
    )
    if not sent.get("success"):
        logger.error(f"Failed to send OTP to user {user['_id']}: {sent.get('error')}")
        return Err(ErrorKind.INTERNAL, OTP_SEND_FAILED, "OTP_SEND_FAILED")

    return Ok(message_response(OTP_SENT))


@flow_boundary
async def verify_otp_pipeline(
    user_service: UserService,
    otp_manager: OtpManager,
    token_provider: TokenProvider,
    email: str,
    otp: str,
) -> Result[Dict[str, Any]]:
    """
    Verify an account with its emailed code.

    Returns:
        Ok({"accessToken", "user"})
    """
    user = await user_service.get_user_by_email(email)
    if not user:
        return Err(ErrorKind.NOT_FOUND, ACCOUNT_NOT_FOUND, "ACCOUNT_NOT_FOUND")

    rejected = _account_gate(user) or await _check_otp(otp_manager, user, otp)
    if rejected:
        return rejected

    updated = await user_service.mark_verified(str(user["_id"]), user["otp"])
    if not updated:
        # The code was consumed or replaced between read and write
        return Err(ErrorKind.BAD_REQUEST, VERIFICATION_FAILED, "VERIFICATION_FAILED")

    public_user = to_public_user(updated)
    access_token = token_provider.issue_access_token(public_user)

    logger.info(f"User verified: {public_user['_id']}")

    return Ok({"accessToken": access_token, "user": public_user})


@flow_boundary
async def reset_password_pipeline(
    user_service: UserService,
    hasher: CredentialHasher,
    otp_manager: OtpManager,
    token_provider: TokenProvider,
    email: str,
    otp: str,
    password: str,
) -> Result[Dict[str, Any]]:
    """
    Replace the password of a verified account using an emailed code.

    Returns:
        Ok({"accessToken", "user"})
    """
    user = await user_service.get_user_by_email(email)
    if not user:
        return Err(ErrorKind.NOT_FOUND, ACCOUNT_NOT_FOUND, "ACCOUNT_NOT_FOUND")

    rejected = (
        _account_gate(user, require_verified=True)
        or await _check_otp(otp_manager, user, otp)
    )
    if rejected:
        return rejected

    password_hash = await hasher.hash(password)
    updated = await user_service.reset_password(str(user["_id"]), password_hash, user["otp"])
    if not updated:
        return Err(ErrorKind.BAD_REQUEST, VERIFICATION_FAILED, "VERIFICATION_FAILED")

    public_user = to_public_user(updated)
    access_token = token_provider.issue_access_token(public_user)

    logger.info(f"Password reset for user {public_user['_id']}")

    return Ok({"accessToken": access_token, "user": public_user})


# ─────────────────────────────────────────────────────────────
# Sessions
# ─────────────────────────────────────────────────────────────

@flow_boundary
async def logout_pipeline(
    session_store: SessionStore,
    user_id: str,
    device_id: str,
) -> Result[Dict[str, Any]]:
    """End the session of one device. Other devices stay logged in."""
    removed = await session_store.delete(user_id, device_id)
    if removed:
        logger.info(f"User {user_id} logged out of device {device_id}")

    return Ok(message_response(LOGGED_OUT))


@flow_boundary
async def refresh_access_pipeline(
    user_service: UserService,
    token_provider: TokenProvider,
    session_store: SessionStore,
    refresh_token: str,
    device_id: Optional[str],
) -> Result[Dict[str, Any]]:
    """
    Exchange a refresh token for a new access token on an existing session.

    The refresh token itself is returned unchanged to the caller's store;
    only the access token and the session row are replaced.

    Returns:
        Ok({"accessToken", "user", "deviceId"})
    """
    try:
        claims = token_provider.verify_refresh_token(refresh_token)
    except InvalidTokenError:
        return Err(ErrorKind.AUTHENTICATION, INVALID_TOKEN, "INVALID_TOKEN")

    user = await user_service.get_user_by_email(claims.get("email") or "")
    if not user:
        return Err(ErrorKind.NOT_FOUND, ACCOUNT_NOT_FOUND, "ACCOUNT_NOT_FOUND")

    rejected = _account_gate(user)
    if rejected:
        return rejected

    if not device_id:
        return Err(ErrorKind.AUTHORIZATION, INVALID_SESSION, "INVALID_SESSION")

    public_user = to_public_user(user)
    access_token = token_provider.issue_access_token(public_user)

    session = await session_store.refresh(public_user["_id"], device_id, access_token)
    if not session:
        return Err(ErrorKind.AUTHORIZATION, INVALID_SESSION, "INVALID_SESSION")

    return Ok({
        "accessToken": access_token,
        "user": public_user,
        "deviceId": device_id,
    })


@flow_boundary
async def logout_other_devices_pipeline(
    session_store: SessionStore,
    user_id: str,
    keep_device_id: str,
) -> Result[Dict[str, Any]]:
    """Revoke every session of the user except the current device's."""
    revoked = await session_store.delete_all_except(user_id, keep_device_id)

    logger.info(f"User {user_id} revoked {revoked} other session(s)")

    return Ok(message_response(LOGGED_OUT_OTHERS, revokedCount=revoked))


@flow_boundary
async def list_sessions_pipeline(
    session_store: SessionStore,
    user_id: str,
    current_device_id: str,
) -> Result[Dict[str, Any]]:
    """
    List the user's active devices. Stored tokens are never returned.

    Returns:
        Ok({"data": [...], "count"})
    """
    sessions = await session_store.list_for_user(user_id)

    data = [_format_session(s, current_device_id) for s in sessions]

    return Ok(list_response(data))


def _format_session(session: dict, current_device_id: str) -> Dict[str, Any]:
    """Format a session row for the API response."""
    created_at = session.get("createdAt")
    updated_at = session.get("updatedAt")
    return {
        "deviceId": session["deviceId"],
        "createdAt": created_at.isoformat() if created_at else None,
        "updatedAt": updated_at.isoformat() if updated_at else None,
        "isCurrent": session["deviceId"] == current_device_id,
    }
