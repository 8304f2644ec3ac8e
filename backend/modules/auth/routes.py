"""
Authentication and profile endpoints.

`router` is mounted at /api/auth and `profile_router` at /api/profile.
Session cookies are only set for results that carry a locally minted
session token (relational mode).
"""

from fastapi import APIRouter, Depends, Request, Response

from api.dependencies import get_auth_service
from api.middleware.auth import get_client_ip, get_current_user, get_session_credentials
from shared.config import get_settings
from shared.models import User

from .interfaces import IAuthService
from .models import (
    AuthResponse,
    AuthResult,
    LoginRequest,
    MessageResponse,
    PasswordChangeRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    SessionCredentials,
    SocialLoginRequest,
    SocialLoginResponse,
    UserResponse,
)

router = APIRouter()
profile_router = APIRouter()


def set_session_cookie(response: Response, result: AuthResult) -> None:
    if not result.sets_cookie:
        return
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=result.token,
        max_age=settings.session_ttl_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    auth: IAuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Log in with email and password (development) or an identity token
    (production).
    """
    result = await auth.login(body, ip_address=get_client_ip(request))
    set_session_cookie(response, result)
    return AuthResponse(message="Login successful", user=result.user, token=result.token)


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    body: RegisterRequest,
    request: Request,
    response: Response,
    auth: IAuthService = Depends(get_auth_service),
) -> AuthResponse:
    result = await auth.register(body, ip_address=get_client_ip(request))
    set_session_cookie(response, result)
    return AuthResponse(
        message="Registration successful", user=result.user, token=result.token
    )


@router.post("/social-login", response_model=SocialLoginResponse)
async def social_login(
    body: SocialLoginRequest,
    request: Request,
    response: Response,
    auth: IAuthService = Depends(get_auth_service),
) -> SocialLoginResponse:
    """Sign in with a verified Google or Facebook identity token."""
    result = await auth.social_login(body, ip_address=get_client_ip(request))
    set_session_cookie(response, result)
    return SocialLoginResponse(success=True, user=result.user, token=result.token)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    credentials: SessionCredentials = Depends(get_session_credentials),
    auth: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    """End the session. Always succeeds and clears the session cookie."""
    await auth.logout(credentials)
    clear_session_cookie(response)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse(user=user)


@profile_router.get("", response_model=UserResponse)
async def get_profile(user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse(user=user)


@profile_router.put("", response_model=ProfileResponse)
async def update_profile(
    body: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    auth: IAuthService = Depends(get_auth_service),
) -> ProfileResponse:
    """
    Update name, email and avatar.

    Supplying currentPassword and newPassword changes the password in the
    same operation; if that check fails nothing is changed.
    """
    updated = await auth.update_profile(user, body)
    return ProfileResponse(message="Profile updated successfully", user=updated)


@profile_router.put("/password", response_model=MessageResponse)
async def change_password(
    body: PasswordChangeRequest,
    user: User = Depends(get_current_user),
    auth: IAuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth.change_password(user, body)
    return MessageResponse(
        message=(
            "Password updated successfully. Your current session will remain "
            "active until you log out."
        )
    )
