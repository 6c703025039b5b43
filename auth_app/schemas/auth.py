"""
Pydantic models for Auth request validation.

Defines schemas for registration, login, OTP, password reset and token refresh.
"""

from pydantic import BaseModel, Field, EmailStr


class RegisterRequest(BaseModel):
    """Request body for user registration."""
    username: str = Field(..., min_length=4, max_length=50)
    password: str = Field(..., min_length=6)
    email: EmailStr


class LoginRequest(BaseModel):
    """Request body for user login."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class SendOtpRequest(BaseModel):
    """Request body for (re)issuing an OTP."""
    email: EmailStr


class VerifyOtpRequest(BaseModel):
    """Request body for account verification."""
    email: EmailStr
    otp: str = Field(..., min_length=1)


class ResetPasswordRequest(BaseModel):
    """Request body for password reset."""
    email: EmailStr
    otp: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)


class RefreshRequest(BaseModel):
    """Request body for exchanging a refresh token."""
    refreshToken: str = Field(..., min_length=1)
