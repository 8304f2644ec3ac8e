"""
Admin user management service.
"""

import logging
from typing import Any, Optional

from shared.models import User, UserRole
from modules.auth.exceptions import UserNotFoundError

from .exceptions import AdminPromotionError, SelfRoleChangeError
from .interfaces import IAdminUserRepository, IAdminUserService
from .models import UpdateUserRequest

logger = logging.getLogger(__name__)


class AdminUserService(IAdminUserService):
    """
    Role and status changes made by administrators.

    Every successful update writes an UPDATE_USER admin activity entry.
    """

    def __init__(
        self,
        repository: IAdminUserRepository,
        activity: Any = None,  # IActivityLogger - injected
    ):
        self._repository = repository
        self._activity = activity

    async def list_users(self) -> list[User]:
        return self._repository.list_users()

    async def update_user(
        self,
        admin: User,
        request: UpdateUserRequest,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> User:
        if request.user_id == admin.id and admin.is_admin and request.role != UserRole.ADMIN:
            raise SelfRoleChangeError(admin.id)

        if request.role == UserRole.ADMIN:
            raise AdminPromotionError(request.user_id)

        updated = self._repository.update_user(
            request.user_id, request.role, request.is_active
        )
        if updated is None:
            raise UserNotFoundError(request.user_id)

        logger.info(
            f"Admin {admin.id} set user {updated.id} role={updated.role.value} "
            f"active={updated.is_active}"
        )

        if self._activity is not None:
            await self._activity.log_admin_action(
                admin.id,
                "UPDATE_USER",
                target_user_id=updated.id,
                description=f"Updated user {updated.name} ({updated.email})",
                metadata={"role": request.role.value, "isActive": request.is_active},
                ip_address=ip_address,
                user_agent=user_agent,
            )
        return updated
