"""
Shared infrastructure for Reelbase backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- environment: Process-wide auth mode selection
- database: Supabase client and PostgreSQL pool factories
- exceptions: Base exception classes
- models: Normalized user record

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings, configure_logging
from .environment import AuthMode, get_auth_mode, resolve_auth_mode
from .database import (
    get_supabase_client,
    get_connection_pool,
    transaction,
    close_connection_pool,
    reset_client_cache,
)
from .exceptions import (
    ReelbaseError,
    NotFoundError,
    ValidationError,
    ConflictError,
    AuthenticationError,
    AuthorizationError,
)
from .models import User, UserRole, AuthProvider

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "AuthMode",
    "get_auth_mode",
    "resolve_auth_mode",
    "get_supabase_client",
    "get_connection_pool",
    "transaction",
    "close_connection_pool",
    "reset_client_cache",
    "ReelbaseError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "AuthenticationError",
    "AuthorizationError",
    "User",
    "UserRole",
    "AuthProvider",
]
