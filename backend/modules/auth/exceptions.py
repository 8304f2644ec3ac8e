"""
Authentication module exceptions.

These exceptions are raised by the auth backends and mapped to HTTP
responses by the API error handler. Credential failures share one public
message so clients cannot tell "no such user" from "wrong password" or
"account disabled".
"""

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


class CredentialError(AuthenticationError):
    """Base for login failures that must not leak which check failed."""

    public_message = "Invalid email or password"
    public_code = "INVALID_CREDENTIALS"


class InvalidCredentialsError(CredentialError):
    """Raised when the email is unknown or the password does not match."""

    def __init__(self, email: str):
        super().__init__(
            f"Invalid credentials for {email}",
            code="INVALID_CREDENTIALS",
            details={"email": email},
        )


class AccountDisabledError(CredentialError):
    """Raised when a matching account has been deactivated."""

    def __init__(self, user_id: str):
        super().__init__(
            f"Account is deactivated: {user_id}",
            code="ACCOUNT_DISABLED",
            details={"user_id": user_id},
        )


class UnauthorizedError(AuthenticationError):
    """Raised when a request carries no usable session."""

    public_message = "Unauthorized"
    public_code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="UNAUTHORIZED")


class InvalidTokenError(AuthenticationError):
    """Raised when a session or identity token is invalid or malformed."""

    public_message = "Invalid or expired token"
    public_code = "INVALID_TOKEN"

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(InvalidTokenError):
    """Raised when a token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message)
        self.code = "TOKEN_EXPIRED"


class MissingTokenError(AuthenticationError):
    """Raised when no authentication token is provided."""

    public_message = "Authentication required"
    public_code = "MISSING_TOKEN"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_TOKEN")


class EmailMismatchError(ValidationError):
    """Raised when a verified token belongs to a different email."""

    def __init__(self, requested: str, token_email: str):
        super().__init__(
            "Email mismatch",
            code="EMAIL_MISMATCH",
            details={"requested": requested, "token_email": token_email},
        )


class UserNotFoundError(NotFoundError):
    """Raised when the authenticated identity has no user record."""

    def __init__(self, user_id: str):
        super().__init__(
            "User not found",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )


class DuplicateEmailError(ConflictError):
    """Raised when registering or changing to an email that is taken."""

    def __init__(self, email: str):
        super().__init__(
            "Email already registered",
            code="DUPLICATE_EMAIL",
            details={"email": email},
        )


class IncorrectPasswordError(ValidationError):
    """Raised when the current password supplied for a change is wrong."""

    def __init__(self) -> None:
        super().__init__(
            "Current password is incorrect",
            code="INCORRECT_PASSWORD",
        )


class UnsupportedForProviderError(ValidationError):
    """Raised for password operations on social-provider accounts."""

    def __init__(self, provider: str):
        super().__init__(
            "Password change not supported for social login accounts",
            code="UNSUPPORTED_FOR_PROVIDER",
            details={"provider": provider},
        )


class InsufficientPermissionsError(AuthorizationError):
    """Raised when user lacks required permissions."""

    public_message = "Not authorized"
    public_code = "INSUFFICIENT_PERMISSIONS"

    def __init__(self, required_role: str, user_role: str):
        super().__init__(
            f"Insufficient permissions. Required: {required_role}, has: {user_role}",
            code="INSUFFICIENT_PERMISSIONS",
            details={"required_role": required_role, "user_role": user_role},
        )
