"""
Admin user management endpoints.
"""

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_admin_user_service
from api.middleware.auth import get_client_ip, require_role
from shared.models import User, UserRole

from .interfaces import IAdminUserService
from .models import AdminUserResponse, UpdateUserRequest, UserListResponse

router = APIRouter()


@router.get("/users", response_model=UserListResponse)
async def list_users(
    admin: User = Depends(require_role(UserRole.ADMIN)),
    service: IAdminUserService = Depends(get_admin_user_service),
) -> UserListResponse:
    return UserListResponse(users=await service.list_users())


@router.patch("/users", response_model=AdminUserResponse)
async def update_user(
    body: UpdateUserRequest,
    request: Request,
    admin: User = Depends(require_role(UserRole.ADMIN)),
    service: IAdminUserService = Depends(get_admin_user_service),
) -> AdminUserResponse:
    """
    Change a user's role and active flag.

    Admins cannot drop their own admin role and cannot promote anyone to
    admin through this endpoint.
    """
    updated = await service.update_user(
        admin,
        body,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    return AdminUserResponse(user=updated)
