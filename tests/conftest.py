"""
Pytest fixtures: an in-memory stand-in for the Supabase auth client and a
TestClient wired to it.
"""
import os
import time
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("SESSION_BACKEND", "memory")

from fastapi.testclient import TestClient

from core.auth import AuthService
from core.session_store import MemorySessionBackend
from web.deps import get_auth_service

ORIGIN = "http://testserver"


class FakeAuthApiError(Exception):
    """Shaped like the SDK's AuthApiError: message, status, code."""

    def __init__(self, message, status=400, code=None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code


class FakeAuth:
    """Mimics the subset of `client.auth` the facade calls."""

    def __init__(self, confirm_email=False):
        self.confirm_email = confirm_email
        self.accounts = {}
        self.session = None
        self.reset_requests = []
        self.codes = {}
        self.calls = []

    def _make_session(self, user):
        return SimpleNamespace(
            access_token=f"access-{user.id}",
            refresh_token=f"refresh-{user.id}",
            expires_at=1999999999,
            token_type="bearer",
            user=user,
        )

    def issue_code(self, email):
        code = f"code-{len(self.codes) + 1}"
        self.codes[code] = email
        return code

    async def sign_up(self, credentials):
        self.calls.append(("sign_up", credentials))
        email = credentials["email"]
        if email in self.accounts:
            raise FakeAuthApiError("User already registered", 422, "user_already_exists")
        if len(credentials["password"]) < 6:
            raise FakeAuthApiError("Password should be at least 6 characters.", 422, "weak_password")
        now = datetime.now(timezone.utc)
        user = SimpleNamespace(
            id=f"user-{len(self.accounts) + 1}",
            email=email,
            user_metadata=dict(credentials.get("options", {}).get("data") or {}),
            app_metadata={"provider": "email"},
            created_at=now,
            updated_at=now,
            last_sign_in_at=None if self.confirm_email else now,
            email_confirmed_at=None if self.confirm_email else now,
        )
        self.accounts[email] = {"password": credentials["password"], "user": user}
        if self.confirm_email:
            return SimpleNamespace(user=user, session=None)
        self.session = self._make_session(user)
        return SimpleNamespace(user=user, session=self.session)

    async def sign_in_with_password(self, credentials):
        self.calls.append(("sign_in_with_password", credentials))
        account = self.accounts.get(credentials["email"])
        if not account or account["password"] != credentials["password"]:
            raise FakeAuthApiError("Invalid login credentials", 400, "invalid_credentials")
        account["user"].last_sign_in_at = datetime.now(timezone.utc)
        self.session = self._make_session(account["user"])
        return SimpleNamespace(user=account["user"], session=self.session)

    async def sign_out(self, options=None):
        self.calls.append(("sign_out", options))
        self.session = None

    async def reset_password_for_email(self, email, options=None):
        self.calls.append(("reset_password_for_email", email, options))
        self.reset_requests.append((email, options))

    async def update_user(self, attributes):
        self.calls.append(("update_user", attributes))
        if self.session is None:
            raise FakeAuthApiError("Auth session missing!", 400, None)
        self.accounts[self.session.user.email]["password"] = attributes["password"]
        return SimpleNamespace(user=self.session.user)

    async def get_session(self):
        return self.session

    async def sign_in_with_oauth(self, credentials):
        self.calls.append(("sign_in_with_oauth", credentials))
        provider = credentials["provider"]
        if provider not in ("google", "github"):
            raise FakeAuthApiError("Unsupported provider: provider is not enabled", 400, "validation_failed")
        redirect_to = credentials["options"]["redirect_to"]
        return SimpleNamespace(
            provider=provider,
            url=f"https://auth.example.test/authorize?provider={provider}&redirect_to={redirect_to}",
        )

    async def exchange_code_for_session(self, params):
        self.calls.append(("exchange_code_for_session", params))
        email = self.codes.pop(params["auth_code"], None)
        if email is None:
            raise FakeAuthApiError("invalid flow state, no valid flow state found", 404, "flow_state_not_found")
        user = self.accounts[email]["user"]
        self.session = self._make_session(user)
        return SimpleNamespace(user=user, session=self.session)


class FakeSupabase:
    def __init__(self, confirm_email=False):
        self.auth = FakeAuth(confirm_email=confirm_email)


@pytest.fixture(autouse=True)
def session_backend(monkeypatch):
    """A fresh server-side session store for every test."""
    backend = MemorySessionBackend()
    monkeypatch.setattr("core.session_store._backend", backend)
    return backend


@pytest.fixture
def provider():
    return FakeSupabase()


@pytest.fixture
def auth_service(provider):
    return AuthService(provider, ORIGIN)


@pytest.fixture
def registered(provider):
    """An existing account, signed out."""
    provider.auth.accounts["a@b.com"] = {
        "password": "Passw0rd!",
        "user": SimpleNamespace(
            id="user-existing",
            email="a@b.com",
            user_metadata={"full_name": "Jane"},
            app_metadata={"provider": "email"},
            created_at=datetime(2024, 1, 15, tzinfo=timezone.utc),
            updated_at=datetime(2024, 2, 1, tzinfo=timezone.utc),
            last_sign_in_at=None,
            email_confirmed_at=datetime(2024, 1, 15, tzinfo=timezone.utc),
        ),
    }
    return provider.auth.accounts["a@b.com"]["user"]


@pytest.fixture
def client(auth_service):
    from app import app
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    yield TestClient(app)
    app.dependency_overrides.clear()


def _google_identity_data(email, name):
    return {
        "avatar_url": "https://lh3.googleusercontent.com/a/ACg8ocKx" + "Q" * 80 + "=s96-c",
        "email": email,
        "email_verified": True,
        "full_name": name,
        "iss": "https://accounts.google.com",
        "name": name,
        "phone_verified": False,
        "picture": "https://lh3.googleusercontent.com/a/ACg8ocKx" + "Q" * 80 + "=s96-c",
        "provider_id": "104729384756102938475",
        "sub": "104729384756102938475",
    }


def gotrue_user(email="jane@example.com", name="Jane Doe", user_id="8f0c6b2e-3f4d-4a52-9d77-2b1c9e0f5a13"):
    """A user object as GoTrue returns it for a Google sign-in."""
    stamp = "2024-01-15T10:30:00.000000Z"
    identity_data = _google_identity_data(email, name)
    return {
        "id": user_id,
        "aud": "authenticated",
        "role": "authenticated",
        "email": email,
        "email_confirmed_at": stamp,
        "phone": "",
        "confirmed_at": stamp,
        "last_sign_in_at": stamp,
        "app_metadata": {"provider": "google", "providers": ["google", "email"]},
        "user_metadata": identity_data,
        "identities": [
            {
                "identity_id": "5b1f2d7c-8e9a-4c3b-a6d5-0f1e2d3c4b5a",
                "id": identity_data["sub"],
                "user_id": user_id,
                "identity_data": identity_data,
                "provider": "google",
                "last_sign_in_at": stamp,
                "created_at": stamp,
                "updated_at": stamp,
                "email": email,
            },
            {
                "identity_id": "9c8b7a6d-5e4f-4a3b-8c2d-1e0f9a8b7c6d",
                "id": user_id,
                "user_id": user_id,
                "identity_data": {"email": email, "email_verified": True, "phone_verified": False, "sub": user_id},
                "provider": "email",
                "last_sign_in_at": stamp,
                "created_at": stamp,
                "updated_at": stamp,
                "email": email,
            },
        ],
        "created_at": stamp,
        "updated_at": stamp,
        "is_anonymous": False,
    }


def gotrue_session(user=None, expires_in=3600):
    """A token grant response: JWT-sized access token, provider token, full user."""
    user = user or gotrue_user()
    return {
        "access_token": "eyJhbGciOiJIUzI1NiIsImtpZCI6IkV4YW1wbGUiLCJ0eXAiOiJKV1QifQ."
                        + "e" * 900 + "." + "s" * 43,
        "token_type": "bearer",
        "expires_in": expires_in,
        "expires_at": int(time.time()) + expires_in,
        "refresh_token": "v1.MRjcyOTQ4NzY1" + "r" * 40,
        "provider_token": "ya29.a0AfB_byC" + "p" * 200,
        "user": user,
    }
