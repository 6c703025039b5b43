"""
Auth service application settings.

Extends the base settings with OTP, session and email configuration.
"""

from typing import Optional
from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """Auth-service-specific settings."""

    # ==========================================================================
    # OTP Settings
    # ==========================================================================
    # 3 random bytes render as 6 hex characters
    OTP_BYTE_LENGTH: int = 3
    OTP_EXPIRE_MINUTES: int = 10

    # ==========================================================================
    # Session Settings
    # ==========================================================================
    DEVICE_ID_HEADER: str = "X-Device-ID"

    # ==========================================================================
    # Email Settings (OTP delivery)
    # ==========================================================================
    EMAIL_MODE: str = "console"  # console, smtp, resend
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_FROM_EMAIL: str = "noreply@example.com"
    SMTP_FROM_NAME: str = "Auth Service"
    RESEND_API_KEY: Optional[str] = None


# Global settings instance
settings = Settings()
