"""
Activity module.

Best-effort audit trail for user and admin actions, plus the paginated
admin activity viewer.

Public API:
- IActivityLogger: Interface for writing log entries (never raises)
- IActivityLogService: Interface for reading admin activity
- ActivityLogPage: One page of admin activity with page-local stats
"""

from .interfaces import IActivityLogger, IActivityLogService, IActivityRepository
from .models import ActivityEntry, AdminActivityEntry, ActivityLogPage

__all__ = [
    # Interfaces
    "IActivityLogger",
    "IActivityLogService",
    "IActivityRepository",
    # Models
    "ActivityEntry",
    "AdminActivityEntry",
    "ActivityLogPage",
]
