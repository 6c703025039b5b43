"""Unit tests for OtpManager (generation and expiry-first validation)."""

import re
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

from auth_app.services.auth.otp_manager import (
    OtpManager,
    OTP_EXPIRED,
    OTP_INVALID,
    OTP_VALID,
)


class TestGenerate:
    @pytest.mark.asyncio
    async def test_code_is_six_uppercase_hex_chars(self, otp_manager):
        bundle = await otp_manager.generate()

        assert re.fullmatch(r"[0-9A-F]{6}", bundle.code)

    @pytest.mark.asyncio
    async def test_hash_verifies_against_code(self, otp_manager, hasher):
        bundle = await otp_manager.generate()

        assert bundle.hashed != bundle.code
        assert await hasher.verify(bundle.code, bundle.hashed)

    @pytest.mark.asyncio
    async def test_expiry_is_ten_minutes_out(self, otp_manager):
        before = datetime.now(timezone.utc)
        bundle = await otp_manager.generate()
        after = datetime.now(timezone.utc)

        assert before + timedelta(minutes=10) <= bundle.expires_at <= after + timedelta(minutes=10)

    @pytest.mark.asyncio
    async def test_byte_length_and_lifetime_are_configurable(self, hasher):
        manager = OtpManager(hasher=hasher, byte_length=4, expire_minutes=5)

        bundle = await manager.generate()

        assert len(bundle.code) == 8
        assert manager.expire_minutes == 5
        assert bundle.expires_at <= datetime.now(timezone.utc) + timedelta(minutes=5)


class TestValidate:
    @pytest.mark.asyncio
    async def test_accepts_matching_live_code(self, otp_manager):
        bundle = await otp_manager.generate()

        check = await otp_manager.validate(bundle.code, bundle.hashed, bundle.expires_at)

        assert check.accepted is True
        assert check.reason == OTP_VALID

    @pytest.mark.asyncio
    async def test_rejects_wrong_code(self, otp_manager):
        bundle = await otp_manager.generate()

        check = await otp_manager.validate("000000", bundle.hashed, bundle.expires_at)

        assert check.accepted is False
        assert check.reason == OTP_INVALID

    @pytest.mark.asyncio
    async def test_code_match_is_case_sensitive(self, otp_manager, hasher):
        hashed = await hasher.hash("A1B2C3")
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=10)

        check = await otp_manager.validate("a1b2c3", hashed, expires_at)

        assert check.accepted is False
        assert check.reason == OTP_INVALID
        assert (await otp_manager.validate("A1B2C3", hashed, expires_at)).accepted is True

    @pytest.mark.asyncio
    async def test_expired_matching_code_reports_expiry(self, otp_manager):
        bundle = await otp_manager.generate()
        past = datetime.now(timezone.utc) - timedelta(seconds=1)

        check = await otp_manager.validate(bundle.code, bundle.hashed, past)

        assert check.accepted is False
        assert check.reason == OTP_EXPIRED

    @pytest.mark.asyncio
    async def test_expiry_checked_before_hash(self):
        hasher = AsyncMock()
        manager = OtpManager(hasher=hasher)
        past = datetime.now(timezone.utc) - timedelta(minutes=1)

        check = await manager.validate("A1B2C3", "digest", past)

        assert check.reason == OTP_EXPIRED
        hasher.verify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_naive_expiry_is_treated_as_utc(self, otp_manager):
        bundle = await otp_manager.generate()
        naive_future = (datetime.now(timezone.utc) + timedelta(minutes=5)).replace(tzinfo=None)

        check = await otp_manager.validate(bundle.code, bundle.hashed, naive_future)

        assert check.accepted is True
