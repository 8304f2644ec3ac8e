"""
Admin module exceptions.
"""

from shared.exceptions import AuthorizationError


class SelfRoleChangeError(AuthorizationError):
    """Raised when an admin tries to drop their own admin role."""

    def __init__(self, admin_id: str):
        super().__init__(
            "Cannot change your own admin role",
            code="SELF_ROLE_CHANGE",
            details={"admin_id": admin_id},
        )


class AdminPromotionError(AuthorizationError):
    """Raised when a user would be promoted to admin through the API."""

    def __init__(self, user_id: str):
        super().__init__(
            "Cannot promote users to admin role",
            code="ADMIN_PROMOTION",
            details={"user_id": user_id},
        )
