"""Shared test fixtures for auth service tests."""

import pytest
import pytest_asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId

from common.auth.hasher import CredentialHasher
from common.auth.jwt_auth import JWTAuth
from auth_app.services.auth.otp_manager import OtpManager


@pytest.fixture
def sample_user_id():
    return str(ObjectId())


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() returns a cursor synchronously (not a coroutine),
    # so use MagicMock for it. Async methods like find_one, insert_one,
    # delete_many etc. stay as AsyncMock.
    collection.find = MagicMock()
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


# ─────────────────────────────────────────────────────────────────
# Real crypto with cheap settings
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def hasher():
    # Lowest practical bcrypt cost keeps the suite fast
    return CredentialHasher(rounds=4)


@pytest.fixture
def token_provider():
    return JWTAuth(access_secret="access-test-secret", refresh_secret="refresh-test-secret")


@pytest.fixture
def otp_manager(hasher):
    return OtpManager(hasher=hasher)


# ─────────────────────────────────────────────────────────────────
# Collaborator mocks
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def user_service():
    service = AsyncMock()
    service.get_user_by_email.return_value = None
    service.get_user_by_username.return_value = None
    return service


@pytest.fixture
def session_store():
    store = AsyncMock()
    store.create.side_effect = lambda user_id, device_id, token: {
        "_id": ObjectId(),
        "userId": ObjectId(user_id),
        "deviceId": device_id,
        "token": token,
    }
    return store


@pytest.fixture
def email_service():
    service = AsyncMock()
    service.send_otp_email.return_value = {"success": True, "mode": "console"}
    return service


# ─────────────────────────────────────────────────────────────────
# Identity documents
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def make_user(sample_user_id):
    """Build a stored identity document; keyword overrides win."""

    def _make(**overrides):
        now = datetime.now(timezone.utc)
        user = {
            "_id": ObjectId(sample_user_id),
            "username": "alice",
            "email": "a@x.com",
            "password": "",
            "role": "user",
            "interests": [],
            "verified": True,
            "blocked": False,
            "deleted": False,
            "createdAt": now,
            "updatedAt": now,
        }
        user.update(overrides)
        return user

    return _make


@pytest_asyncio.fixture
async def user_with_password(make_user, hasher):
    """Verified identity whose password is ``secret1``."""
    return make_user(password=await hasher.hash("secret1"))


@pytest_asyncio.fixture
async def user_with_otp(make_user, hasher):
    """Identity holding a live OTP ``A1B2C3`` and password ``secret1``."""
    return make_user(
        password=await hasher.hash("secret1"),
        otp=await hasher.hash("A1B2C3"),
        otpExpiresAt=datetime.now(timezone.utc) + timedelta(minutes=10),
    )


# ─────────────────────────────────────────────────────────────────
# In-memory stores for multi-step scenarios
# ─────────────────────────────────────────────────────────────────


class InMemoryUserStore:
    """Keeps identities in a dict and mirrors the UserService methods the flows use."""

    def __init__(self):
        self.users = {}

    async def get_user_by_email(self, email):
        return next((u for u in self.users.values() if u["email"] == email.lower()), None)

    async def get_user_by_username(self, username):
        return next((u for u in self.users.values() if u["username"] == username.lower()), None)

    async def get_user_by_id(self, user_id):
        return self.users.get(str(user_id))

    async def create_user(self, username, email, password_hash, otp_hash=None, otp_expires_at=None):
        now = datetime.now(timezone.utc)
        user = {
            "_id": ObjectId(),
            "username": username.lower(),
            "email": email.lower(),
            "password": password_hash,
            "role": "user",
            "verified": False,
            "blocked": False,
            "deleted": False,
            "createdAt": now,
            "updatedAt": now,
        }
        if otp_hash and otp_expires_at:
            user["otp"] = otp_hash
            user["otpExpiresAt"] = otp_expires_at
        self.users[str(user["_id"])] = user
        return dict(user)

    async def set_otp(self, user_id, otp_hash, otp_expires_at):
        user = self.users.get(str(user_id))
        if user is None:
            return None
        user.update(otp=otp_hash, otpExpiresAt=otp_expires_at)
        return dict(user)

    async def _consume_otp(self, user_id, otp_hash, **fields):
        user = self.users.get(str(user_id))
        if user is None or user.get("otp") != otp_hash:
            return None
        user.pop("otp", None)
        user.pop("otpExpiresAt", None)
        user.update(fields, verified=True)
        return dict(user)

    async def mark_verified(self, user_id, otp_hash):
        return await self._consume_otp(user_id, otp_hash)

    async def reset_password(self, user_id, password_hash, otp_hash):
        return await self._consume_otp(user_id, otp_hash, password=password_hash)


class InMemorySessionStore:
    """Keeps sessions keyed by (userId, deviceId)."""

    def __init__(self):
        self.sessions = {}

    async def create(self, user_id, device_id, token):
        session = {"userId": str(user_id), "deviceId": device_id, "token": token}
        self.sessions[(str(user_id), device_id)] = session
        return session

    async def refresh(self, user_id, device_id, token):
        session = self.sessions.get((str(user_id), device_id))
        if session is not None:
            session["token"] = token
        return session

    async def lookup(self, user_id, device_id):
        return self.sessions.get((str(user_id), device_id))

    async def delete(self, user_id, device_id):
        return self.sessions.pop((str(user_id), device_id), None) is not None


@pytest.fixture
def user_store():
    return InMemoryUserStore()


@pytest.fixture
def session_rows():
    return InMemorySessionStore()
