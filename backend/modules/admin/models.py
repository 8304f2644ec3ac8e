"""
Admin module data models.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shared.models import User, UserRole


class UpdateUserRequest(BaseModel):
    """PATCH /admin/users body: ``{userId, role, isActive}``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str = Field(..., min_length=1)
    role: UserRole
    is_active: bool


class UserListResponse(BaseModel):
    users: list[User]


class AdminUserResponse(BaseModel):
    user: User
