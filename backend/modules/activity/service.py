"""
Activity logging and the admin activity viewer.
"""

import logging
import math
from typing import Any, Optional

from .interfaces import IActivityLogger, IActivityLogService, IActivityRepository
from .models import ActivityEntry, ActivityLogPage, AdminActivityEntry

logger = logging.getLogger(__name__)

PAGE_SIZE = 10


class ActivityLogger(IActivityLogger):
    """
    Writes activity entries without ever failing the caller.

    Any exception from the repository is logged at WARNING and swallowed.
    There is no retry, ordering or deduplication.
    """

    def __init__(self, repository: IActivityRepository):
        self._repository = repository

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
        try:
            entry = ActivityEntry(
                user_id=actor_id,
                action=action,
                details=details or {},
                entity_type=entity_type,
                entity_id=entity_id,
                entity_title=entity_title,
                ip_address=ip_address,
            )
            self._repository.add_user_activity(entry)
        except Exception:
            logger.warning(
                f"Failed to log activity '{action}' for user {actor_id}", exc_info=True
            )

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
        try:
            entry = AdminActivityEntry(
                admin_id=admin_id,
                action=action,
                target_user_id=target_user_id,
                description=description,
                metadata=metadata or {},
                ip_address=ip_address,
                user_agent=user_agent,
            )
            self._repository.add_admin_activity(entry)
        except Exception:
            logger.warning(
                f"Failed to log admin action '{action}' by {admin_id}", exc_info=True
            )


class ActivityLogService(IActivityLogService):
    """Paginated read access to the admin activity log."""

    def __init__(self, repository: IActivityRepository, page_size: int = PAGE_SIZE):
        self._repository = repository
        self._page_size = page_size

    async def list_admin_activity(self, page: int = 1) -> ActivityLogPage:
        page = max(page, 1)
        offset = (page - 1) * self._page_size

        total = self._repository.count_admin_activity()
        logs = self._repository.list_admin_activity(offset, self._page_size)

        return ActivityLogPage(
            logs=logs,
            page=page,
            page_size=self._page_size,
            total=total,
            total_pages=math.ceil(total / self._page_size) if total else 0,
            critical_actions=sum(1 for entry in logs if entry.is_critical),
            active_admins=len({entry.admin_id for entry in logs}),
        )
