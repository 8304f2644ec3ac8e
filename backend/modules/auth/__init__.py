"""
Authentication module.

Environment-dispatched credential backends behind one session
abstraction: a relational backend (bcrypt passwords, session rows) for
development and a document backend (Supabase identity tokens, user
documents) for production.

Public API:
- IAuthService: Interface for auth operations
- IAuthBackend: Strategy interface implemented by both backends
- AuthResult, SessionCredentials: Inputs and outputs of the facade
- Auth exceptions: InvalidCredentialsError, UnauthorizedError, etc.
"""

from .interfaces import IAuthBackend, IAuthService, IIdentityVerifier
from .models import (
    AuthResult,
    IdentityClaims,
    LoginRequest,
    PasswordChangeRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    SessionClaims,
    SessionCredentials,
    SocialLoginRequest,
)
from .exceptions import (
    AccountDisabledError,
    DuplicateEmailError,
    EmailMismatchError,
    ExpiredTokenError,
    IncorrectPasswordError,
    InsufficientPermissionsError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    UnauthorizedError,
    UnsupportedForProviderError,
    UserNotFoundError,
)

__all__ = [
    # Interfaces
    "IAuthService",
    "IAuthBackend",
    "IIdentityVerifier",
    # Models
    "AuthResult",
    "IdentityClaims",
    "LoginRequest",
    "PasswordChangeRequest",
    "ProfileUpdateRequest",
    "RegisterRequest",
    "SessionClaims",
    "SessionCredentials",
    "SocialLoginRequest",
    # Exceptions
    "AccountDisabledError",
    "DuplicateEmailError",
    "EmailMismatchError",
    "ExpiredTokenError",
    "IncorrectPasswordError",
    "InsufficientPermissionsError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "MissingTokenError",
    "UnauthorizedError",
    "UnsupportedForProviderError",
    "UserNotFoundError",
]
