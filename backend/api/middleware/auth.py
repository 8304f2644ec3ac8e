"""
Session authentication dependencies.

Extracts the session cookie or bearer token from a request and resolves
it through the auth service. Which credential matters depends on the
active backend; this layer only collects both.
"""

from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from shared.config import get_settings
from shared.models import User, UserRole
from modules.auth.exceptions import InsufficientPermissionsError
from modules.auth.interfaces import IAuthService
from modules.auth.models import SessionCredentials

from ..dependencies import get_auth_service

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


def get_client_ip(request: Request) -> Optional[str]:
    """Client address, preferring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


async def get_session_credentials(
    request: Request,
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> SessionCredentials:
    """Collect every credential the request carries."""
    settings = get_settings()
    return SessionCredentials(
        cookie_token=request.cookies.get(settings.session_cookie_name) or None,
        bearer_token=bearer.credentials if bearer else None,
        ip_address=get_client_ip(request),
    )


async def get_current_user(
    credentials: SessionCredentials = Depends(get_session_credentials),
    auth: IAuthService = Depends(get_auth_service),
) -> User:
    """
    Dependency that requires authentication.

    Use this for endpoints that require a logged-in user.

    Usage:
        @router.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    return await auth.get_current_user(credentials)


def require_role(role: UserRole) -> Callable:
    """
    Build a dependency that requires a specific role.

    Usage:
        @router.get("/admin-only")
        async def admin_route(user: User = Depends(require_role(UserRole.ADMIN))):
            ...
    """

    async def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role != role:
            raise InsufficientPermissionsError(role.value, user.role.value)
        return user

    return dependency
