"""
Authentication service implementation.

AuthService is the single entry point the routes use. It holds the
backend strategy chosen once for the process (relational or document),
logs failures server-side, and records auth activity on a best-effort
basis.
"""

import logging
from typing import Any, Optional

from shared.exceptions import AuthenticationError, ReelbaseError
from shared.models import User

from .exceptions import UnauthorizedError
from .interfaces import IAuthBackend, IAuthService
from .models import (
    AuthResult,
    LoginRequest,
    PasswordChangeRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    SessionCredentials,
    SocialLoginRequest,
)

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """
    Facade over the active auth backend.

    Callers never branch on the deployment mode; they only see User,
    AuthResult and the auth module exceptions.
    """

    def __init__(
        self,
        backend: IAuthBackend,
        activity: Any = None,  # IActivityLogger - injected
    ):
        self._backend = backend
        self._activity = activity

    @property
    def backend(self) -> IAuthBackend:
        return self._backend

    async def login(
        self, request: LoginRequest, ip_address: Optional[str] = None
    ) -> AuthResult:
        try:
            result = await self._backend.login(request)
        except ReelbaseError as e:
            logger.warning(f"Login failed for {request.email}: {e.message}")
            raise

        method = "password" if request.password else "identity_token"
        await self._log(result.user.id, "user_logged_in", {"method": method}, ip_address)
        return result

    async def register(
        self, request: RegisterRequest, ip_address: Optional[str] = None
    ) -> AuthResult:
        try:
            result = await self._backend.register(request)
        except ReelbaseError as e:
            logger.warning(f"Registration failed for {request.email}: {e.message}")
            raise

        logger.info(f"Registered user {result.user.id}")
        await self._log(
            result.user.id,
            "user_registered",
            {"provider": result.user.provider.value},
            ip_address,
        )
        return result

    async def social_login(
        self, request: SocialLoginRequest, ip_address: Optional[str] = None
    ) -> AuthResult:
        try:
            result = await self._backend.social_login(request)
        except ReelbaseError as e:
            logger.warning(f"Social login via {request.provider.value} failed: {e.message}")
            raise

        details = {"provider": request.provider.value}
        if result.created:
            await self._log(result.user.id, "user_registered", details, ip_address)
        await self._log(result.user.id, "user_logged_in", details, ip_address)
        return result

    async def get_current_user(self, credentials: SessionCredentials) -> User:
        """
        Resolve the request's session to a user.

        Raises:
            UnauthorizedError: For any missing, invalid, expired or revoked
                session, and for inactive or unknown users
        """
        try:
            return await self._backend.get_current_user(credentials)
        except UnauthorizedError:
            raise
        except AuthenticationError as e:
            logger.debug(f"Session rejected: {e.message}")
            raise UnauthorizedError(e.message)

    async def update_profile(self, user: User, request: ProfileUpdateRequest) -> User:
        try:
            updated = await self._backend.update_profile(user, request)
        except ReelbaseError as e:
            logger.warning(f"Profile update failed for {user.id}: {e.message}")
            raise

        await self._log(user.id, "profile_updated", {"password_changed": request.changes_password})
        return updated

    async def change_password(self, user: User, request: PasswordChangeRequest) -> None:
        try:
            await self._backend.change_password(user, request)
        except ReelbaseError as e:
            logger.warning(f"Password change failed for {user.id}: {e.message}")
            raise

        await self._log(user.id, "password_changed")

    async def logout(self, credentials: SessionCredentials) -> None:
        """End the session. Backend failures are logged, never raised."""
        try:
            user = await self._backend.logout(credentials)
        except Exception:
            logger.warning("Logout could not revoke the session", exc_info=True)
            return

        if user is not None:
            await self._log(
                user.id, "user_logged_out", ip_address=credentials.ip_address
            )

    async def _log(
        self,
        user_id: str,
        action: str,
        details: Optional[dict[str, Any]] = None,
        ip_address: Optional[str] = None,
    ) -> None:
        if self._activity is None:
            return
        await self._activity.log(user_id, action, details=details, ip_address=ip_address)
