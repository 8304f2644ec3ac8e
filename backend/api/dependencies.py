"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

The auth mode is read once; every repository and the auth backend are
built for that mode, and the database handle they share is created on
first use and reused by reference.
"""

from typing import TYPE_CHECKING, Any

from shared.config import get_settings
from shared.environment import AuthMode, get_auth_mode

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.activity.interfaces import (
        IActivityLogger,
        IActivityLogService,
        IActivityRepository,
    )
    from modules.admin.interfaces import IAdminUserService
    from modules.auth.interfaces import IAuthBackend, IAuthService, IIdentityVerifier
    from modules.watchlist.interfaces import IWatchlistService


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self, mode: AuthMode | None = None) -> None:
        self._mode = mode
        self._db: Any = None
        self._identity: "IIdentityVerifier | None" = None
        self._auth_backend: "IAuthBackend | None" = None
        self._auth_service: "IAuthService | None" = None
        self._activity_repository: "IActivityRepository | None" = None
        self._activity_logger: "IActivityLogger | None" = None
        self._activity_log_service: "IActivityLogService | None" = None
        self._watchlist_service: "IWatchlistService | None" = None
        self._admin_user_service: "IAdminUserService | None" = None

    @property
    def mode(self) -> AuthMode:
        """The auth mode this container wires for."""
        if self._mode is None:
            self._mode = get_auth_mode()
        return self._mode

    @property
    def db(self) -> Any:
        """
        The database handle for the active mode.

        A Supabase client in production, a psycopg2 connection pool in
        development.
        """
        if self._db is None:
            from shared.database import get_connection_pool, get_supabase_client
            if self.mode.uses_document_store:
                self._db = get_supabase_client()
            else:
                self._db = get_connection_pool()
        return self._db

    @property
    def identity(self) -> "IIdentityVerifier":
        """Get the identity-token verifier (used by social login in both modes)."""
        if self._identity is None:
            from modules.auth.tokens import SupabaseIdentityVerifier
            self._identity = SupabaseIdentityVerifier(get_settings().supabase_jwt_secret)
        return self._identity

    @property
    def auth_backend(self) -> "IAuthBackend":
        """Get the credential backend strategy for the active mode."""
        if self._auth_backend is None:
            settings = get_settings()
            if self.mode.uses_document_store:
                from modules.auth.document import DocumentAuthBackend
                from modules.auth.document_repository import DocumentUserRepository
                self._auth_backend = DocumentAuthBackend(
                    users=DocumentUserRepository(self.db),
                    identity=self.identity,
                    bcrypt_rounds=settings.bcrypt_rounds,
                )
            else:
                from modules.auth.relational import RelationalAuthBackend
                from modules.auth.repository import RelationalUserRepository
                from modules.auth.tokens import SessionTokenIssuer
                self._auth_backend = RelationalAuthBackend(
                    users=RelationalUserRepository(self.db),
                    tokens=SessionTokenIssuer(settings.jwt_secret, settings.session_ttl_days),
                    identity=self.identity,
                    bcrypt_rounds=settings.bcrypt_rounds,
                )
        return self._auth_backend

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(
                backend=self.auth_backend,
                activity=self.activity_logger,
            )
        return self._auth_service

    @property
    def activity_repository(self) -> "IActivityRepository":
        if self._activity_repository is None:
            from modules.activity.repository import (
                DocumentActivityRepository,
                RelationalActivityRepository,
            )
            if self.mode.uses_document_store:
                self._activity_repository = DocumentActivityRepository(self.db)
            else:
                self._activity_repository = RelationalActivityRepository(self.db)
        return self._activity_repository

    @property
    def activity_logger(self) -> "IActivityLogger":
        """Get the best-effort activity logger."""
        if self._activity_logger is None:
            from modules.activity.service import ActivityLogger
            self._activity_logger = ActivityLogger(self.activity_repository)
        return self._activity_logger

    @property
    def activity_logs(self) -> "IActivityLogService":
        """Get the admin activity viewer."""
        if self._activity_log_service is None:
            from modules.activity.service import ActivityLogService
            self._activity_log_service = ActivityLogService(self.activity_repository)
        return self._activity_log_service

    @property
    def watchlist(self) -> "IWatchlistService":
        """Get the watchlist service instance."""
        if self._watchlist_service is None:
            from modules.watchlist.repository import (
                DocumentWatchlistRepository,
                RelationalWatchlistRepository,
            )
            from modules.watchlist.service import WatchlistService
            if self.mode.uses_document_store:
                repository = DocumentWatchlistRepository(self.db)
            else:
                repository = RelationalWatchlistRepository(self.db)
            self._watchlist_service = WatchlistService(
                repository=repository,
                activity=self.activity_logger,
            )
        return self._watchlist_service

    @property
    def admin_users(self) -> "IAdminUserService":
        """Get the admin user management service."""
        if self._admin_user_service is None:
            from modules.admin.repository import (
                DocumentAdminUserRepository,
                RelationalAdminUserRepository,
            )
            from modules.admin.service import AdminUserService
            if self.mode.uses_document_store:
                repository = DocumentAdminUserRepository(self.db)
            else:
                repository = RelationalAdminUserRepository(self.db)
            self._admin_user_service = AdminUserService(
                repository=repository,
                activity=self.activity_logger,
            )
        return self._admin_user_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._db = None
        self._identity = None
        self._auth_backend = None
        self._auth_service = None
        self._activity_repository = None
        self._activity_logger = None
        self._activity_log_service = None
        self._watchlist_service = None
        self._admin_user_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_activity_log_service() -> "IActivityLogService":
    """FastAPI dependency for the admin activity viewer."""
    return get_container().activity_logs


def get_watchlist_service() -> "IWatchlistService":
    """FastAPI dependency for watchlist service."""
    return get_container().watchlist


def get_admin_user_service() -> "IAdminUserService":
    """FastAPI dependency for admin user management."""
    return get_container().admin_users
