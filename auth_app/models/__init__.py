"""Identity models."""

from auth_app.models.identity import (
    Role,
    ADMIN_ROLES,
    IdentityPatch,
    to_public_user,
    to_profile,
    has_otp,
    is_admin,
)

__all__ = [
    "Role",
    "ADMIN_ROLES",
    "IdentityPatch",
    "to_public_user",
    "to_profile",
    "has_otp",
    "is_admin",
]
