"""
Admin module.

User management for administrators: listing accounts and changing role
or active status. Accounts are never hard-deleted; deactivation is the
``is_active`` flag.
"""

from .interfaces import IAdminUserService, IAdminUserRepository
from .models import UpdateUserRequest, UserListResponse
from .exceptions import AdminPromotionError, SelfRoleChangeError

__all__ = [
    "IAdminUserService",
    "IAdminUserRepository",
    "UpdateUserRequest",
    "UserListResponse",
    "AdminPromotionError",
    "SelfRoleChangeError",
]
