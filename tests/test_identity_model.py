"""Unit tests for the public projection and the profile patch."""

import pytest
from pydantic import ValidationError

from auth_app.models.identity import IdentityPatch, to_public_user, to_profile, has_otp


class TestPublicProjection:
    def test_never_exposes_secrets(self, make_user):
        user = make_user(password="pw-hash", otp="otp-hash", otpExpiresAt="later")

        public = to_public_user(user)

        assert "password" not in public
        assert "otp" not in public
        assert "otpExpiresAt" not in public

    def test_values_are_json_safe(self, make_user, sample_user_id):
        public = to_public_user(make_user())

        assert public["_id"] == sample_user_id
        assert isinstance(public["createdAt"], str)

    def test_profile_adds_editable_fields(self, make_user):
        profile = to_profile(make_user(name="Alice", interests=["chess"], age=30))

        assert profile["interests"] == ["chess"]
        assert profile["age"] == 30
        assert "password" not in profile


class TestHasOtp:
    def test_requires_both_fields(self, make_user):
        assert has_otp(make_user(otp="h", otpExpiresAt="t")) is True
        assert has_otp(make_user(otp="h")) is False
        assert has_otp(make_user()) is False


class TestIdentityPatch:
    def test_rejects_role(self):
        with pytest.raises(ValidationError):
            IdentityPatch(role="admin")

    def test_rejects_password_and_status_fields(self):
        for field in ("password", "verified", "blocked", "deleted", "otp"):
            with pytest.raises(ValidationError):
                IdentityPatch(**{field: True})

    def test_only_sent_fields_are_updated(self):
        update = IdentityPatch(name="Alice").to_update()

        assert update == {"$set": {"name": "Alice"}}

    def test_null_unsets(self):
        update = IdentityPatch(bio=None).to_update()

        assert update == {"$unset": {"bio": ""}}

    def test_empty_patch_is_empty_update(self):
        assert IdentityPatch().to_update() == {}

    def test_age_bounds(self):
        with pytest.raises(ValidationError):
            IdentityPatch(age=12)
