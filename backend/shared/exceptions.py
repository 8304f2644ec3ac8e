"""
Base exception classes for the Reelbase backend.

Each module should define its own exceptions that inherit from these bases.
The API layer maps each base to an HTTP status in one place.
"""

from typing import Optional, Any


class ReelbaseError(Exception):
    """
    Base exception for all Reelbase errors.

    All custom exceptions should inherit from this class.

    Subclasses that describe credential failures set ``public_message`` and
    ``public_code`` so the response body never reveals which check failed.
    """

    public_message: Optional[str] = None
    public_code: Optional[str] = None

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for server-side logging."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def to_response(self) -> dict[str, Any]:
        """Convert exception to the body returned to API clients."""
        if self.public_message is not None:
            return {
                "error": self.public_code or self.code,
                "message": self.public_message,
            }
        return {"error": self.code, "message": self.message}


class NotFoundError(ReelbaseError):
    """Resource not found."""

    pass


class ValidationError(ReelbaseError):
    """Input validation failed."""

    pass


class ConflictError(ReelbaseError):
    """Resource already exists."""

    pass


class AuthenticationError(ReelbaseError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(ReelbaseError):
    """Authorization failed (insufficient permissions)."""

    pass

