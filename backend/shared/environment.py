"""
Deployment environment selector.

Decides, once per process, which credential backend is authoritative:
the Supabase document store (production) or the PostgreSQL relational
store (development). There is no per-request override.
"""

from enum import Enum
from functools import lru_cache

from .config import Settings, get_settings


class AuthMode(str, Enum):
    """Credential backend the process runs under."""

    PRODUCTION = "production"
    DEVELOPMENT = "development"

    @property
    def uses_document_store(self) -> bool:
        return self is AuthMode.PRODUCTION


def resolve_auth_mode(settings: Settings) -> AuthMode:
    """
    Compute the auth mode from deployment settings.

    Production is selected when either ENVIRONMENT or VERCEL_ENV is
    "production"; everything else runs against the relational store.
    """
    if (
        settings.environment.lower() == "production"
        or settings.vercel_env.lower() == "production"
    ):
        return AuthMode.PRODUCTION
    return AuthMode.DEVELOPMENT


@lru_cache
def get_auth_mode() -> AuthMode:
    """Get the process-wide auth mode (computed on first call)."""
    return resolve_auth_mode(get_settings())
