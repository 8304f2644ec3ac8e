"""
Admin module interfaces.
"""

from typing import Optional, Protocol, runtime_checkable

from shared.models import User, UserRole

from .models import UpdateUserRequest


@runtime_checkable
class IAdminUserRepository(Protocol):
    def list_users(self) -> list[User]:
        """All users, newest first."""
        ...

    def update_user(self, user_id: str, role: UserRole, is_active: bool) -> Optional[User]:
        ...


@runtime_checkable
class IAdminUserService(Protocol):
    """Interface for admin user management."""

    async def list_users(self) -> list[User]:
        ...

    async def update_user(
        self,
        admin: User,
        request: UpdateUserRequest,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> User:
        """
        Change a user's role and active flag.

        Raises:
            SelfRoleChangeError: If the admin would drop their own admin role
            AdminPromotionError: If the new role is admin
            UserNotFoundError: If the target user does not exist
        """
        ...
