"""
Activity module interfaces.

Other modules log through IActivityLogger. Admin routes read through
IActivityLogService.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from .models import ActivityEntry, ActivityLogPage, AdminActivityEntry


@runtime_checkable
class IActivityRepository(Protocol):
    """Storage for activity entries; one implementation per backend."""

    def add_user_activity(self, entry: ActivityEntry) -> None:
        ...

    def add_admin_activity(self, entry: AdminActivityEntry) -> None:
        ...

    def list_admin_activity(self, offset: int, limit: int) -> list[AdminActivityEntry]:
        """Newest first, with admin and target user names joined."""
        ...

    def count_admin_activity(self) -> int:
        ...


@runtime_checkable
class IActivityLogger(Protocol):
    """
    Best-effort activity logging.

    Implementations must never raise: a failed write is logged and
    dropped so the calling operation still succeeds.
    """

    async def log(
        self,
        actor_id: str,
        action: str,
        details: Optional[dict[str, Any]] = None,
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
        entity_title: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> None:
        ...

    async def log_admin_action(
        self,
        admin_id: str,
        action: str,
        target_user_id: Optional[str] = None,
        description: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> None:
        ...


@runtime_checkable
class IActivityLogService(Protocol):
    """Read side of the admin activity log."""

    async def list_admin_activity(self, page: int = 1) -> ActivityLogPage:
        """
        Get one page of admin activity, newest first.

        Args:
            page: 1-indexed page number

        Returns:
            The page with pagination info and page-local stats
        """
        ...
