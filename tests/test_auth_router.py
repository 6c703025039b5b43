"""HTTP-level tests for the auth and user routers."""

import asyncio
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from auth_app import dependencies as deps
from auth_app.error_handlers import register_error_handlers
from auth_app.middleware.auth import AuthGuard
from auth_app.models.identity import to_public_user
from auth_app.routers import auth_router, user_router


@pytest.fixture
def app(user_service, session_store, email_service, hasher, otp_manager, token_provider):
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(auth_router)
    app.include_router(user_router)

    guard = AuthGuard(token_provider, user_service, session_store)

    app.dependency_overrides[deps.get_user_service] = lambda: user_service
    app.dependency_overrides[deps.get_session_store] = lambda: session_store
    app.dependency_overrides[deps.get_email_service] = lambda: email_service
    app.dependency_overrides[deps.get_credential_hasher] = lambda: hasher
    app.dependency_overrides[deps.get_otp_manager] = lambda: otp_manager
    app.dependency_overrides[deps.get_token_provider] = lambda: token_provider
    app.dependency_overrides[deps.get_auth_guard] = lambda: guard
    return app


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def stored_user(make_user, hasher, user_service):
    user = make_user(password=asyncio.run(hasher.hash("secret1")))
    user_service.get_user_by_email.return_value = user
    return user


@pytest.fixture
def auth_headers(stored_user, token_provider, session_store):
    token = token_provider.issue_access_token(to_public_user(stored_user))
    session_store.lookup.return_value = {"deviceId": "D1", "token": token}
    return {"Authorization": f"Bearer {token}", "X-Device-ID": "D1"}


class TestRegisterEndpoint:
    def test_returns_201(self, client, user_service, make_user):
        user_service.create_user.return_value = make_user(verified=False)

        response = client.post(
            "/auth/register",
            json={"username": "alice", "password": "secret1", "email": "a@x.com"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User registered successfully"
        assert "password" not in body["user"]

    def test_short_password_is_422(self, client):
        response = client.post(
            "/auth/register",
            json={"username": "alice", "password": "123", "email": "a@x.com"},
        )

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["message"][0]["field"] == "password"

    def test_duplicate_email_is_409(self, client, stored_user):
        response = client.post(
            "/auth/register",
            json={"username": "bob1", "password": "secret1", "email": "a@x.com"},
        )

        assert response.status_code == 409
        assert response.json()["message"] == "Email already exists"


class TestLoginEndpoint:
    def test_reuses_device_header(self, client, stored_user):
        response = client.post(
            "/auth/login",
            json={"email": "a@x.com", "password": "secret1"},
            headers={"X-Device-ID": "D7"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["deviceId"] == "D7"
        assert set(body) == {"accessToken", "refreshToken", "user", "deviceId"}

    def test_unknown_account_is_404(self, client):
        response = client.post("/auth/login", json={"email": "a@x.com", "password": "secret1"})

        assert response.status_code == 404
        assert response.json() == {"message": "Account not found", "code": "ACCOUNT_NOT_FOUND"}

    def test_internal_fault_hides_message(self, client, user_service):
        user_service.get_user_by_email.side_effect = RuntimeError("mongo is down")

        response = client.post("/auth/login", json={"email": "a@x.com", "password": "secret1"})

        assert response.status_code == 500
        assert "mongo" not in response.text


class TestProtectedEndpoints:
    def test_logout_without_token_is_401(self, client):
        response = client.post("/auth/logout")

        assert response.status_code == 401
        assert response.json()["message"] == "No token Provided."

    def test_logout_removes_current_device(self, client, auth_headers, session_store, sample_user_id):
        response = client.post("/auth/logout", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "User logged out."}
        session_store.delete.assert_awaited_once_with(sample_user_id, "D1")

    def test_unknown_device_is_403(self, client, auth_headers, session_store):
        session_store.lookup.return_value = None

        response = client.post("/auth/logout", headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["message"] == "Invalid or expired session."

    def test_profile_patch_rejects_role(self, client, auth_headers):
        response = client.put("/users", json={"role": "admin"}, headers=auth_headers)

        assert response.status_code == 422

    def test_member_cannot_toggle_block(self, client, auth_headers):
        response = client.patch(
            "/users/toggle-block",
            json={"userId": "64b000000000000000000001", "block": True},
            headers=auth_headers,
        )

        assert response.status_code == 403
