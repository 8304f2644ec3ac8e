"""
Authentication module data models.

Request bodies accepted by the auth routes, decoded token claims for both
token kinds, and the results returned by the auth backends.
"""

import re
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic.alias_generators import to_camel

from shared.models import AuthProvider, User, UserRole


SOCIAL_PROVIDERS = (AuthProvider.GOOGLE, AuthProvider.FACEBOOK)

PASSWORD_MIN_LENGTH = 8


class CamelModel(BaseModel):
    """Request model that accepts both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -----------------------------------------------------------------------------
# Token claims
# -----------------------------------------------------------------------------


class IdentityClaims(BaseModel):
    """
    Decoded identity token issued by Supabase Auth.

    Only the claims this backend uses are modelled.
    """

    sub: str = Field(..., description="Subject (identity provider user ID)")
    email: Optional[str] = Field(None, description="User's email")
    email_confirmed_at: Optional[str] = None
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    aud: str = Field(default="authenticated", description="Audience")

    user_metadata: dict = Field(default_factory=dict)

    @property
    def email_verified(self) -> bool:
        return self.email_confirmed_at is not None or bool(
            self.user_metadata.get("email_verified")
        )

    @property
    def name(self) -> Optional[str]:
        return self.user_metadata.get("full_name") or self.user_metadata.get("name")

    @property
    def picture(self) -> Optional[str]:
        return self.user_metadata.get("avatar_url") or self.user_metadata.get("picture")


class SessionClaims(BaseModel):
    """Claims carried by the session tokens minted in development mode."""

    id: str
    email: str
    role: str
    jti: str
    iat: int
    exp: int


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------


class LoginRequest(CamelModel):
    """POST /auth/login body. Which credential is required depends on the mode."""

    email: str = Field(..., min_length=1)
    password: Optional[str] = None
    external_token: Optional[str] = None


class RegisterRequest(CamelModel):
    """POST /auth/register body."""

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: Optional[str] = None
    external_token: Optional[str] = None


class SocialProfile(CamelModel):
    """Profile hint sent by the client alongside a social sign-in token."""

    email: Optional[str] = None
    name: Optional[str] = None
    avatar: Optional[str] = None
    provider_id: Optional[str] = None


class SocialLoginRequest(CamelModel):
    """POST /auth/social-login body."""

    provider: AuthProvider
    token: str = Field(..., min_length=1)
    user: SocialProfile

    @field_validator("provider")
    @classmethod
    def provider_must_be_social(cls, value: AuthProvider) -> AuthProvider:
        if value not in SOCIAL_PROVIDERS:
            raise ValueError("Unsupported social provider")
        return value


def check_password_strength(password: str) -> str:
    """Enforce the policy for newly chosen passwords."""
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValueError(
            f"New password must be at least {PASSWORD_MIN_LENGTH} characters long"
        )
    if not re.search(r"[A-Z]", password):
        raise ValueError("New password must contain at least one uppercase letter")
    if not re.search(r"[0-9]", password):
        raise ValueError("New password must contain at least one number")
    return password


class PasswordChangeRequest(CamelModel):
    """PUT /profile/password body."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)
    confirm_password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_new_password(self) -> "PasswordChangeRequest":
        if self.new_password != self.confirm_password:
            raise ValueError("New password and confirm password do not match")
        check_password_strength(self.new_password)
        return self


class ProfileUpdateRequest(CamelModel):
    """PUT /profile body. Every field is optional."""

    name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = None

    @field_validator("name", "email")
    @classmethod
    def not_blank(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError(f"{info.field_name.capitalize()} cannot be empty")
        return value

    @model_validator(mode="after")
    def check_new_password(self) -> "ProfileUpdateRequest":
        if self.changes_password:
            check_password_strength(self.new_password)
        return self

    @property
    def changes_password(self) -> bool:
        return bool(self.current_password and self.new_password)


# -----------------------------------------------------------------------------
# Session input and results
# -----------------------------------------------------------------------------


class SessionCredentials(BaseModel):
    """Credentials extracted from a request by the session layer."""

    cookie_token: Optional[str] = None
    bearer_token: Optional[str] = None
    ip_address: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not (self.cookie_token or self.bearer_token)


class AuthResult(BaseModel):
    """Outcome of login, register and social login."""

    user: User
    token: Optional[str] = None
    expires_at: Optional[datetime] = None
    created: bool = False

    @property
    def sets_cookie(self) -> bool:
        """Only locally minted session tokens are delivered as cookies."""
        return self.token is not None and self.expires_at is not None


class StoredUser(BaseModel):
    """
    User record as persisted, including credential columns.

    Never returned to clients; call ``to_user()`` at the backend boundary.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    email: str
    name: str = ""
    avatar: Optional[str] = None
    role: UserRole = UserRole.USER
    is_active: bool = True
    email_verified: bool = False
    provider: AuthProvider = AuthProvider.LOCAL
    provider_id: Optional[str] = None
    password_hash: Optional[str] = None
    login_attempts: int = 0

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    def to_user(self) -> User:
        return User(
            **self.model_dump(exclude={"provider_id", "password_hash", "login_attempts"})
        )


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------


class AuthResponse(BaseModel):
    """Body returned by login and register."""

    message: str
    user: User
    token: Optional[str] = None


class SocialLoginResponse(BaseModel):
    success: bool = True
    user: User
    token: Optional[str] = None


class ProfileResponse(BaseModel):
    message: str
    user: User


class UserResponse(BaseModel):
    user: User


class MessageResponse(BaseModel):
    message: str
