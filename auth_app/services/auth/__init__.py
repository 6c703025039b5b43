"""Auth services."""

from auth_app.services.auth.otp_manager import OtpManager, OtpBundle, OtpCheck
from auth_app.services.auth.session_store import SessionStore

__all__ = [
    "OtpManager",
    "OtpBundle",
    "OtpCheck",
    "SessionStore",
]
