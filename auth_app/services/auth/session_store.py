"""
Per-device session storage.

One document per (user, device) in the ``sessions`` collection. The token
field is what the auth guard compares against on every request.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Handles session CRUD operations.
    All operations are keyed by the unique (userId, deviceId) pair.
    """

    COLLECTION = "sessions"

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize SessionStore.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._sessions_collection = db[self.COLLECTION]

    @staticmethod
    def _key(user_id: str, device_id: str) -> dict:
        return {"userId": ObjectId(str(user_id)), "deviceId": device_id}

    async def ensure_indexes(self) -> None:
        """Create the unique (userId, deviceId) index."""
        await self._sessions_collection.create_index(
            [("userId", ASCENDING), ("deviceId", ASCENDING)],
            unique=True,
            name="user_device_unique",
        )

    async def create(self, user_id: str, device_id: str, token: str) -> dict:
        """
        Create or replace the session for a device.

        Args:
            user_id: MongoDB user ID
            device_id: Client-supplied device identifier
            token: Access token bound to this session

        Returns:
            The stored session document

        Side Effects:
            - Upserts the (userId, deviceId) row; a second login on the
              same device overwrites the token instead of adding a row
        """
        now = datetime.now(timezone.utc)
        session = await self._sessions_collection.find_one_and_update(
            self._key(user_id, device_id),
            {
                "$set": {"token": token, "updatedAt": now},
                "$setOnInsert": {"createdAt": now},
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

        logger.info(f"Session stored for user {user_id} on device {device_id}")
        return session

    async def refresh(self, user_id: str, device_id: str, token: str) -> Optional[dict]:
        """
        Replace the token of an existing session.

        Returns:
            Updated session, or None if no session exists for the device
        """
        return await self._sessions_collection.find_one_and_update(
            self._key(user_id, device_id),
            {"$set": {"token": token, "updatedAt": datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER,
        )

    async def lookup(self, user_id: str, device_id: str) -> Optional[dict]:
        """Find the session for a device, or None."""
        return await self._sessions_collection.find_one(self._key(user_id, device_id))

    async def list_for_user(self, user_id: str) -> list[dict]:
        """All sessions of a user, most recently updated first."""
        cursor = self._sessions_collection.find(
            {"userId": ObjectId(str(user_id))}
        ).sort("updatedAt", -1)
        return await cursor.to_list(length=None)

    async def delete(self, user_id: str, device_id: str) -> bool:
        """
        Remove the session for one device.

        Returns:
            True if a row was removed
        """
        result = await self._sessions_collection.delete_one(self._key(user_id, device_id))

        if result.deleted_count > 0:
            logger.info(f"Session for device {device_id} removed for user {user_id}")
            return True

        return False

    async def delete_all_except(self, user_id: str, keep_device_id: str) -> int:
        """
        Remove every session of a user except one device's.

        Returns:
            Number of sessions removed
        """
        result = await self._sessions_collection.delete_many({
            "userId": ObjectId(str(user_id)),
            "deviceId": {"$ne": keep_device_id},
        })

        logger.info(f"Revoked {result.deleted_count} other sessions for user {user_id}")
        return result.deleted_count

    async def delete_all(self, user_id: str) -> int:
        """
        Remove every session of a user.

        Returns:
            Number of sessions removed
        """
        result = await self._sessions_collection.delete_many(
            {"userId": ObjectId(str(user_id))}
        )

        logger.info(f"Revoked {result.deleted_count} sessions for user {user_id}")
        return result.deleted_count
