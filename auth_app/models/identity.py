"""
Identity record shape and its public projection.

Identities are stored as plain documents in the ``users`` collection.
Only ``to_public_user`` output ever leaves the service, either as a
response body or as token claims.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super-admin"


ADMIN_ROLES = {Role.ADMIN.value, Role.SUPER_ADMIN.value}

# Fields kept in the public projection, in response order
PUBLIC_FIELDS = (
    "_id",
    "name",
    "username",
    "email",
    "role",
    "verified",
    "blocked",
    "deleted",
    "createdAt",
)


def _serialize(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    # ObjectId and anything else opaque
    return str(value)


def to_public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build the sanitized identity view.

    Password and OTP material are never copied. Values are rendered
    JSON-safe so the result can be signed into a token as-is.

    Args:
        user: Raw identity document

    Returns:
        Dict with the public fields only
    """
    return {
        "_id": _serialize(user.get("_id")),
        "name": user.get("name"),
        "username": user.get("username"),
        "email": user.get("email"),
        "role": user.get("role", Role.USER.value),
        "verified": bool(user.get("verified", False)),
        "blocked": bool(user.get("blocked", False)),
        "deleted": bool(user.get("deleted", False)),
        "createdAt": _serialize(user.get("createdAt")),
    }


def to_profile(user: Dict[str, Any]) -> Dict[str, Any]:
    """Public projection plus the editable profile fields."""
    profile = to_public_user(user)
    for field in IdentityPatch.model_fields:
        if field not in user:
            continue
        if field == "interests":
            profile[field] = list(user[field] or [])
        else:
            profile[field] = _serialize(user[field])
    return profile


def has_otp(user: Dict[str, Any]) -> bool:
    """OTP hash and expiry are always set or cleared together."""
    return bool(user.get("otp")) and bool(user.get("otpExpiresAt"))


def is_admin(user: Dict[str, Any]) -> bool:
    return user.get("role") in ADMIN_ROLES


class IdentityPatch(BaseModel):
    """
    Enumerated set of profile fields a user may change.

    Password, role, status flags and OTP fields are deliberately absent;
    unknown keys are rejected. A field sent as ``null`` is removed.
    """

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=500)
    profilePic: Optional[str] = None
    gender: Optional[Literal["male", "female"]] = None
    age: Optional[int] = Field(None, ge=18, le=120)
    dob: Optional[datetime] = None
    interests: Optional[List[str]] = None

    @field_validator("interests")
    @classmethod
    def _strip_interests(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return value
        return [item.strip() for item in value if item and item.strip()]

    def to_update(self) -> Dict[str, Dict[str, Any]]:
        """
        Build a MongoDB update document from the fields that were sent.

        Returns:
            Dict with ``$set`` and/or ``$unset`` keys (empty if nothing was sent)
        """
        sent = self.model_dump(exclude_unset=True)
        to_set = {k: v for k, v in sent.items() if v is not None}
        to_unset = {k: "" for k, v in sent.items() if v is None}

        update: Dict[str, Dict[str, Any]] = {}
        if to_set:
            update["$set"] = to_set
        if to_unset:
            update["$unset"] = to_unset
        return update
