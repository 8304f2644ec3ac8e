"""
Admin activity log endpoints.
"""

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_activity_log_service
from api.middleware.auth import require_role
from shared.models import User, UserRole

from .interfaces import IActivityLogService
from .models import ActivityLogPage

router = APIRouter()


@router.get("/activity-logs", response_model=ActivityLogPage)
async def list_activity_logs(
    page: int = Query(default=1, ge=1, description="Page number (1-indexed)"),
    admin: User = Depends(require_role(UserRole.ADMIN)),
    service: IActivityLogService = Depends(get_activity_log_service),
) -> ActivityLogPage:
    """
    List admin activity, newest first, 10 entries per page.

    The critical action and active admin counts cover this page only.
    """
    return await service.list_admin_activity(page)
