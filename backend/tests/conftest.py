"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from datetime import datetime, timezone, timedelta
from typing import Optional
import jwt  # PyJWT

from api.dependencies import reset_container
from shared.environment import get_auth_mode


# Test secrets (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"
TEST_SESSION_SECRET = "test-session-secret-for-testing-only"

# Cheapest bcrypt work factor, keeps hashing fast in tests
TEST_BCRYPT_ROUNDS = 4


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
    email_verified: bool = True,
    name: Optional[str] = None,
    avatar: Optional[str] = None,
    secret: str = TEST_JWT_SECRET,
) -> str:
    """
    Create a test identity token shaped like a Supabase Auth JWT.

    Args:
        user_id: Subject id to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        email_verified: Whether the email should be marked as verified
        name: Optional full_name in user_metadata
        avatar: Optional avatar_url in user_metadata
        secret: Signing secret

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    metadata = {}
    if name:
        metadata["full_name"] = name
    if avatar:
        metadata["avatar_url"] = avatar

    payload = {
        "sub": user_id,
        "email": email,
        "email_confirmed_at": now.isoformat() if email_verified else None,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
        "user_metadata": metadata,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture(autouse=True)
def reset_service_container():
    """Reset the service container and cached auth mode around each test."""
    reset_container()
    get_auth_mode.cache_clear()
    yield
    reset_container()
    get_auth_mode.cache_clear()


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@example.com"


@pytest.fixture
def auth_token(test_user_id: str, test_user_email: str) -> str:
    """Create a valid identity token for testing."""
    return create_test_token(user_id=test_user_id, email=test_user_email)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}
