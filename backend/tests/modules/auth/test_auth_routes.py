"""Tests for the auth and profile endpoints."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import get_auth_service
from modules.activity.service import ActivityLogger
from modules.auth.document import DocumentAuthBackend
from modules.auth.relational import RelationalAuthBackend
from modules.auth.service import AuthService
from modules.auth.tokens import SessionTokenIssuer, SupabaseIdentityVerifier
from tests.conftest import (
    TEST_BCRYPT_ROUNDS,
    TEST_JWT_SECRET,
    TEST_SESSION_SECRET,
    create_test_token,
)
from tests.fakes import (
    InMemoryActivityRepository,
    InMemoryDocumentUserRepository,
    InMemoryUserRepository,
)

PASSWORD = "Secret123"


@pytest.fixture
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def activity() -> InMemoryActivityRepository:
    return InMemoryActivityRepository()


@pytest.fixture
def client(users, activity) -> TestClient:
    """App wired to the relational backend over in-memory repositories."""
    service = AuthService(
        backend=RelationalAuthBackend(
            users=users,
            tokens=SessionTokenIssuer(TEST_SESSION_SECRET),
            identity=SupabaseIdentityVerifier(TEST_JWT_SECRET),
            bcrypt_rounds=TEST_BCRYPT_ROUNDS,
        ),
        activity=ActivityLogger(activity),
    )
    app = create_app()
    app.dependency_overrides[get_auth_service] = lambda: service
    return TestClient(app)


@pytest.fixture
def documents() -> InMemoryDocumentUserRepository:
    return InMemoryDocumentUserRepository()


@pytest.fixture
def document_client(documents) -> TestClient:
    """App wired to the document backend."""
    service = AuthService(
        backend=DocumentAuthBackend(
            users=documents,
            identity=SupabaseIdentityVerifier(TEST_JWT_SECRET),
            bcrypt_rounds=TEST_BCRYPT_ROUNDS,
        )
    )
    app = create_app()
    app.dependency_overrides[get_auth_service] = lambda: service
    return TestClient(app)


def login(client: TestClient, email: str = "alice@example.com", password: str = PASSWORD):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def session_cookie(token: str) -> dict[str, str]:
    return {"Cookie": f"token={token}"}


class TestLoginRoute:
    def test_login_sets_session_cookie(self, client, users):
        """Relational login returns the user and an HttpOnly lax cookie."""
        users.add("alice@example.com", PASSWORD)

        response = login(client)

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Login successful"
        assert data["user"]["email"] == "alice@example.com"
        assert "password_hash" not in data["user"]

        set_cookie = response.headers["set-cookie"].lower()
        assert set_cookie.startswith("token=")
        assert "httponly" in set_cookie
        assert "samesite=lax" in set_cookie
        assert "path=/" in set_cookie
        assert "max-age=604800" in set_cookie
        assert "secure" not in set_cookie

    def test_bad_credentials_bodies_are_identical(self, client, users):
        """Unknown email, wrong password and disabled account look the same."""
        users.add("alice@example.com", PASSWORD)
        users.add("off@example.com", PASSWORD, is_active=False)

        responses = [
            login(client, "nobody@example.com"),
            login(client, "alice@example.com", "Wrong1234"),
            login(client, "off@example.com"),
        ]

        assert {r.status_code for r in responses} == {401}
        bodies = [r.json() for r in responses]
        assert bodies[0] == bodies[1] == bodies[2]
        assert bodies[0] == {"error": "INVALID_CREDENTIALS", "message": "Invalid email or password"}

    def test_missing_email_is_400(self, client):
        """Request validation failures map to 400."""
        response = client.post("/api/auth/login", json={"password": PASSWORD})

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_forwarded_ip_is_logged(self, client, users, activity):
        users.add("alice@example.com", PASSWORD)

        client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": PASSWORD},
            headers={"X-Forwarded-For": "203.0.113.5, 10.0.0.1"},
        )

        assert activity.user_entries[-1].ip_address == "203.0.113.5"


class TestRegisterRoute:
    def test_register_returns_201_without_cookie(self, client, users):
        response = client.post(
            "/api/auth/register",
            json={"name": "Alice", "email": "alice@example.com", "password": PASSWORD},
        )

        assert response.status_code == 201
        assert response.json()["message"] == "Registration successful"
        assert "set-cookie" not in response.headers
        assert users.get_by_email("alice@example.com") is not None

    def test_register_then_login(self, client, users):
        """A fresh account can log in straight away and gets a session cookie."""
        registered = client.post(
            "/api/auth/register",
            json={"name": "Ann", "email": "ann@x.com", "password": PASSWORD},
        )
        stored = users.get_by_email("ann@x.com")
        assert registered.status_code == 201
        assert stored.role.value == "user"
        assert stored.is_active
        assert stored.last_login_at is None

        response = login(client, "ann@x.com")

        assert response.status_code == 200
        assert "token" in response.cookies
        assert users.get_by_email("ann@x.com").last_login_at is not None

    def test_lockout_counter_over_http(self, client, users):
        users.add("ann@x.com", PASSWORD)

        statuses = [login(client, "ann@x.com", "wrong").status_code for _ in range(3)]
        assert statuses == [401, 401, 401]
        assert users.get_by_email("ann@x.com").login_attempts == 3

        assert login(client, "ann@x.com").status_code == 200
        assert users.get_by_email("ann@x.com").login_attempts == 0

    def test_duplicate_is_409(self, client, users):
        users.add("alice@example.com", PASSWORD)

        response = client.post(
            "/api/auth/register",
            json={"name": "Alice", "email": "alice@example.com", "password": PASSWORD},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "DUPLICATE_EMAIL"


class TestSocialLoginRoute:
    def test_social_login(self, client):
        token = create_test_token(user_id="g-1", email="g@example.com")

        response = client.post(
            "/api/auth/social-login",
            json={"provider": "google", "token": token, "user": {"name": "Gee"}},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user"]["provider"] == "google"
        assert "set-cookie" in response.headers

    def test_invalid_provider_is_400(self, client):
        response = client.post(
            "/api/auth/social-login",
            json={"provider": "myspace", "token": "t", "user": {}},
        )

        assert response.status_code == 400


class TestSessionRoutes:
    def test_me_with_cookie(self, client, users):
        users.add("alice@example.com", PASSWORD)
        token = login(client).cookies["token"]

        response = client.get("/api/auth/me", headers=session_cookie(token))

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "alice@example.com"

    def test_me_without_session_is_401(self, client):
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json() == {"error": "UNAUTHORIZED", "message": "Unauthorized"}

    def test_logout_revokes_and_clears_cookie(self, client, users):
        users.add("alice@example.com", PASSWORD)
        token = login(client).cookies["token"]

        response = client.post("/api/auth/logout", headers=session_cookie(token))

        assert response.status_code == 200
        assert response.json() == {"message": "Logged out successfully"}
        assert 'token=""' in response.headers["set-cookie"] or "max-age=0" in (
            response.headers["set-cookie"].lower()
        )
        assert client.get("/api/auth/me", headers=session_cookie(token)).status_code == 401

    def test_logout_without_session_succeeds(self, client):
        response = client.post("/api/auth/logout")

        assert response.status_code == 200

    def test_logout_clears_cookie_when_revocation_fails(self, client, users, monkeypatch):
        users.add("alice@example.com", PASSWORD)
        token = login(client).cookies["token"]
        monkeypatch.setattr(
            users, "delete_session", MagicMock(side_effect=RuntimeError("db down"))
        )

        response = client.post("/api/auth/logout", headers=session_cookie(token))

        assert response.status_code == 200
        assert response.json() == {"message": "Logged out successfully"}
        assert "token=" in response.headers["set-cookie"]


class TestProfileRoutes:
    def test_get_profile(self, client, users):
        users.add("alice@example.com", PASSWORD, name="Alice")
        token = login(client).cookies["token"]

        response = client.get("/api/profile", headers=session_cookie(token))

        assert response.status_code == 200
        assert response.json()["user"]["name"] == "Alice"

    def test_update_profile(self, client, users):
        users.add("alice@example.com", PASSWORD)
        token = login(client).cookies["token"]

        response = client.put(
            "/api/profile", json={"name": "Renamed"}, headers=session_cookie(token)
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Profile updated successfully"
        assert response.json()["user"]["name"] == "Renamed"

    def test_update_profile_wrong_password_is_400(self, client, users):
        users.add("alice@example.com", PASSWORD, name="Alice")
        token = login(client).cookies["token"]

        response = client.put(
            "/api/profile",
            json={"name": "Renamed", "currentPassword": "Wrong1234", "newPassword": "NewSecret9"},
            headers=session_cookie(token),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Current password is incorrect"
        assert users.get_by_email("alice@example.com").name == "Alice"

    @pytest.mark.parametrize("field", ["name", "email"])
    def test_blank_profile_field_is_400(self, client, users, field):
        users.add("alice@example.com", PASSWORD, name="Alice")
        token = login(client).cookies["token"]

        response = client.put(
            "/api/profile", json={field: ""}, headers=session_cookie(token)
        )

        assert response.status_code == 400
        assert response.json()["message"] == f"{field.capitalize()} cannot be empty"
        stored = users.get_by_email("alice@example.com")
        assert (stored.name, stored.email) == ("Alice", "alice@example.com")

    def test_weak_password_through_profile_update_is_400(self, client, users):
        users.add("alice@example.com", PASSWORD)
        token = login(client).cookies["token"]

        response = client.put(
            "/api/profile",
            json={"currentPassword": PASSWORD, "newPassword": "weakpass1"},
            headers=session_cookie(token),
        )

        assert response.status_code == 400
        assert "uppercase letter" in response.json()["message"]
        assert login(client).status_code == 200

    def test_change_password(self, client, users):
        users.add("alice@example.com", PASSWORD)
        token = login(client).cookies["token"]

        response = client.put(
            "/api/profile/password",
            json={
                "currentPassword": PASSWORD,
                "newPassword": "NewSecret9",
                "confirmPassword": "NewSecret9",
            },
            headers=session_cookie(token),
        )

        assert response.status_code == 200
        assert response.json()["message"].startswith("Password updated successfully")
        assert login(client, password="NewSecret9").status_code == 200

    def test_weak_new_password_is_400(self, client, users):
        users.add("alice@example.com", PASSWORD)
        token = login(client).cookies["token"]

        response = client.put(
            "/api/profile/password",
            json={"currentPassword": PASSWORD, "newPassword": "weak", "confirmPassword": "weak"},
            headers=session_cookie(token),
        )

        assert response.status_code == 400
        assert "at least 8 characters" in response.json()["message"]


class TestDocumentModeRoutes:
    def test_login_returns_token_without_cookie(self, document_client, documents):
        documents.add("sub-1", "alice@example.com")
        token = create_test_token(user_id="sub-1", email="alice@example.com")

        response = document_client.post(
            "/api/auth/login", json={"email": "alice@example.com", "externalToken": token}
        )

        assert response.status_code == 200
        assert response.json()["token"] == token
        assert "set-cookie" not in response.headers

    def test_me_with_bearer(self, document_client, documents):
        documents.add("sub-1", "alice@example.com")
        token = create_test_token(user_id="sub-1", email="alice@example.com")

        response = document_client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 200
        assert response.json()["user"]["id"] == "sub-1"

    def test_email_mismatch_is_400(self, document_client, documents):
        documents.add("sub-1", "alice@example.com")
        token = create_test_token(user_id="sub-1", email="alice@example.com")

        response = document_client.post(
            "/api/auth/login", json={"email": "other@example.com", "externalToken": token}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "EMAIL_MISMATCH"

    def test_expired_bearer_is_401(self, document_client, documents):
        documents.add("sub-1", "alice@example.com")
        token = create_test_token(user_id="sub-1", email="alice@example.com", expired=True)

        response = document_client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401

    def test_blank_email_profile_update_is_400(self, document_client, documents):
        documents.add("sub-1", "alice@example.com")
        token = create_test_token(user_id="sub-1", email="alice@example.com")

        response = document_client.put(
            "/api/profile",
            json={"email": ""},
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Email cannot be empty"
        assert documents.documents["sub-1"]["email"] == "alice@example.com"
