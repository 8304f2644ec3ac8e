"""
Shared data models used across modules.

The normalized user record lives here because every module (auth,
activity, watchlist, admin) consumes it, regardless of which backend
produced it.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class UserRole(str, Enum):
    """Roles recognised by the role guard."""

    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class AuthProvider(str, Enum):
    """How an account signs in."""

    LOCAL = "local"
    GOOGLE = "google"
    FACEBOOK = "facebook"
    EMAIL = "email"


class User(BaseModel):
    """
    Normalized user record.

    The same shape is returned by both credential backends. ``id`` is an
    opaque string: relational integer ids are stringified and document
    subject ids are passed through unchanged.
    """

    id: str = Field(..., description="Opaque user identifier")
    email: str = Field(..., description="User's email address")
    name: str = Field(default="", description="Display name")
    avatar: Optional[str] = Field(None, description="Avatar URL")
    role: UserRole = Field(default=UserRole.USER)
    is_active: bool = Field(default=True)
    email_verified: bool = Field(default=False)
    provider: AuthProvider = Field(default=AuthProvider.LOCAL)

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",  # Ignore backend-only columns (password_hash, ...)
    }

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_admin_or_moderator(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.MODERATOR)
