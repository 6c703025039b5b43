"""
Pydantic models for user management request validation.
"""

from typing import Optional

from pydantic import BaseModel, Field

from auth_app.models.identity import Role


class ToggleBlockRequest(BaseModel):
    """Request body for blocking or unblocking a user."""
    userId: str = Field(..., min_length=1)
    block: bool


class SoftDeleteRequest(BaseModel):
    """Request body for a soft delete. Omit userId to delete your own account."""
    userId: Optional[str] = None


class RestoreRequest(BaseModel):
    """Request body for restoring a soft-deleted user."""
    userId: str = Field(..., min_length=1)


class SetRoleRequest(BaseModel):
    """Request body for changing a user's role."""
    userId: str = Field(..., min_length=1)
    role: Role
