"""
Authentication module interfaces.

Other modules should depend on IAuthService, not the concrete implementation.
IAuthBackend is the strategy the service dispatches to; exactly one
implementation is chosen per process (relational or document).
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import User

from .models import (
    AuthResult,
    IdentityClaims,
    LoginRequest,
    PasswordChangeRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    SessionCredentials,
    SocialLoginRequest,
)


@runtime_checkable
class IIdentityVerifier(Protocol):
    """Verifies externally issued identity tokens."""

    async def verify(self, token: Optional[str]) -> IdentityClaims:
        """
        Verify an identity token and return its claims.

        Raises:
            MissingTokenError: If no token is supplied
            InvalidTokenError: If the token is invalid or expired
        """
        ...


@runtime_checkable
class IAuthBackend(Protocol):
    """
    Credential backend strategy.

    Implementations return normalized User records and raise the auth
    module exceptions; they never deal with HTTP.
    """

    async def login(self, request: LoginRequest) -> AuthResult:
        """Authenticate with email plus password or identity token."""
        ...

    async def register(self, request: RegisterRequest) -> AuthResult:
        """Create a new account."""
        ...

    async def social_login(self, request: SocialLoginRequest) -> AuthResult:
        """Upsert an account from a verified social sign-in."""
        ...

    async def get_current_user(self, credentials: SessionCredentials) -> User:
        """Resolve the session carried by a request."""
        ...

    async def update_profile(self, user: User, request: ProfileUpdateRequest) -> User:
        """Update name/email/avatar and optionally the password, atomically."""
        ...

    async def change_password(self, user: User, request: PasswordChangeRequest) -> None:
        """Replace the password after checking the current one."""
        ...

    async def logout(self, credentials: SessionCredentials) -> Optional[User]:
        """End the session; returns the user it belonged to when known."""
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to route handlers and other modules.
    """

    async def login(self, request: LoginRequest, ip_address: Optional[str] = None) -> AuthResult:
        ...

    async def register(self, request: RegisterRequest, ip_address: Optional[str] = None) -> AuthResult:
        ...

    async def social_login(self, request: SocialLoginRequest, ip_address: Optional[str] = None) -> AuthResult:
        ...

    async def get_current_user(self, credentials: SessionCredentials) -> User:
        ...

    async def update_profile(self, user: User, request: ProfileUpdateRequest) -> User:
        ...

    async def change_password(self, user: User, request: PasswordChangeRequest) -> None:
        ...

    async def logout(self, credentials: SessionCredentials) -> None:
        ...
