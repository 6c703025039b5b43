"""
User service for identity record storage.

Handles identity creation, retrieval, status flags, OTP fields, and
deletion. Every mutation is a single-document update, so each one is
atomic on its own.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Optional, List

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument

from auth_app.models.identity import IdentityPatch, Role

logger = logging.getLogger(__name__)


class UserService:
    """
    Manages identity records.
    """

    COLLECTION = "users"

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize UserService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._users_collection = db[self.COLLECTION]

    @staticmethod
    def _object_id(user_id: str) -> Optional[ObjectId]:
        try:
            return ObjectId(str(user_id))
        except (InvalidId, TypeError):
            return None

    async def ensure_indexes(self) -> None:
        """Create unique indexes on username and email."""
        await self._users_collection.create_index(
            [("username", ASCENDING)], unique=True, name="username_unique"
        )
        await self._users_collection.create_index(
            [("email", ASCENDING)], unique=True, name="email_unique"
        )

    # ─────────────────────────────────────────────────────────────
    # Lookups
    # ─────────────────────────────────────────────────────────────

    async def get_user_by_id(self, user_id: str) -> Optional[dict]:
        """
        Load user by MongoDB ID.

        Returns:
            User document or None if not found (including malformed IDs)
        """
        oid = self._object_id(user_id)
        if oid is None:
            return None
        return await self._users_collection.find_one({"_id": oid})

    async def get_user_by_email(self, email: str) -> Optional[dict]:
        """Load user by email address (case-insensitive)."""
        return await self._users_collection.find_one({"email": email.lower()})

    async def get_user_by_username(self, username: str) -> Optional[dict]:
        """Load user by username (case-insensitive)."""
        return await self._users_collection.find_one({"username": username.lower()})

    async def list_users(
        self,
        page: int = 1,
        limit: int = 10,
        role: str = Role.USER.value,
    ) -> List[dict]:
        """
        List users of one role, paginated.

        Args:
            page: 1-indexed page number
            limit: Page size
            role: Role to filter on
        """
        skip = (max(page, 1) - 1) * limit
        cursor = (
            self._users_collection.find({"role": role})
            .sort("createdAt", ASCENDING)
            .skip(skip)
            .limit(limit)
        )
        return await cursor.to_list(length=limit)

    async def search_users(self, search_key: str, limit: int = 50) -> List[dict]:
        """Case-insensitive match on username or name."""
        pattern = re.escape(search_key)
        cursor = self._users_collection.find({
            "$or": [
                {"username": {"$regex": pattern, "$options": "i"}},
                {"name": {"$regex": pattern, "$options": "i"}},
            ]
        }).limit(limit)
        return await cursor.to_list(length=limit)

    # ─────────────────────────────────────────────────────────────
    # Creation
    # ─────────────────────────────────────────────────────────────

    async def create_user(
        self,
        username: str,
        email: str,
        password_hash: str,
        otp_hash: Optional[str] = None,
        otp_expires_at: Optional[datetime] = None,
    ) -> dict:
        """
        Create a new, unverified identity.

        Args:
            username: Unique username (stored lowercase)
            email: Unique email (stored lowercase)
            password_hash: Hashed password
            otp_hash: Hash of the OTP sent at registration
            otp_expires_at: Expiry of that OTP

        Returns:
            Created user document
        """
        now = datetime.now(timezone.utc)

        user_doc = {
            "username": username.lower(),
            "email": email.lower(),
            "password": password_hash,
            "role": Role.USER.value,
            "interests": [],
            "verified": False,
            "blocked": False,
            "deleted": False,
            "createdAt": now,
            "updatedAt": now,
        }
        if otp_hash and otp_expires_at:
            user_doc["otp"] = otp_hash
            user_doc["otpExpiresAt"] = otp_expires_at

        result = await self._users_collection.insert_one(user_doc)
        user_doc["_id"] = result.inserted_id

        logger.info(f"User created: {result.inserted_id}")
        return user_doc

    # ─────────────────────────────────────────────────────────────
    # Updates
    # ─────────────────────────────────────────────────────────────

    async def _update(
        self,
        user_id: str,
        update: dict,
        match: Optional[dict] = None,
    ) -> Optional[dict]:
        oid = self._object_id(user_id)
        if oid is None:
            return None

        update.setdefault("$set", {})["updatedAt"] = datetime.now(timezone.utc)

        return await self._users_collection.find_one_and_update(
            {"_id": oid, **(match or {})},
            update,
            return_document=ReturnDocument.AFTER,
        )

    async def update_profile(self, user_id: str, patch: IdentityPatch) -> Optional[dict]:
        """
        Apply a profile patch.

        Returns:
            Updated user document, or None if not found
        """
        return await self._update(user_id, patch.to_update())

    async def set_otp(
        self,
        user_id: str,
        otp_hash: str,
        otp_expires_at: datetime,
    ) -> Optional[dict]:
        """Store a new OTP hash and expiry together, replacing any previous pair."""
        return await self._update(user_id, {
            "$set": {"otp": otp_hash, "otpExpiresAt": otp_expires_at}
        })

    async def mark_verified(self, user_id: str, otp_hash: str) -> Optional[dict]:
        """
        Set verified and clear the OTP pair in one update.

        Only applies while the stored OTP hash still equals ``otp_hash``, so
        a code is consumed at most once.

        Returns:
            Updated user document, or None if the OTP was already consumed
            or replaced
        """
        return await self._update(
            user_id,
            {
                "$set": {"verified": True},
                "$unset": {"otp": "", "otpExpiresAt": ""},
            },
            match={"otp": otp_hash},
        )

    async def reset_password(
        self,
        user_id: str,
        password_hash: str,
        otp_hash: str,
    ) -> Optional[dict]:
        """
        Store a new password hash, set verified and clear the OTP pair in one update.

        Same single-consumption rule as ``mark_verified``.
        """
        return await self._update(
            user_id,
            {
                "$set": {"password": password_hash, "verified": True},
                "$unset": {"otp": "", "otpExpiresAt": ""},
            },
            match={"otp": otp_hash},
        )

    async def set_blocked(self, user_id: str, blocked: bool) -> Optional[dict]:
        """Block or unblock an identity."""
        return await self._update(user_id, {"$set": {"blocked": blocked}})

    async def set_deleted(self, user_id: str, deleted: bool) -> Optional[dict]:
        """Soft-delete or restore an identity."""
        return await self._update(user_id, {"$set": {"deleted": deleted}})

    async def set_role(self, user_id: str, role: Role) -> Optional[dict]:
        """Change an identity's role. Only privileged flows call this."""
        return await self._update(user_id, {"$set": {"role": Role(role).value}})

    async def delete_user(self, user_id: str) -> bool:
        """
        Permanently remove an identity.

        Returns:
            True if a document was removed
        """
        oid = self._object_id(user_id)
        if oid is None:
            return False

        result = await self._users_collection.delete_one({"_id": oid})
        if result.deleted_count == 1:
            logger.info(f"User deleted permanently: {user_id}")
            return True
        return False
