"""
Activity module data models.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class ActivityEntry(BaseModel):
    """A user activity log entry as written by the activity logger."""

    user_id: str
    action: str
    details: dict[str, Any] = Field(default_factory=dict)
    entity_type: Optional[str] = None
    entity_id: Optional[int] = None
    entity_title: Optional[str] = None
    ip_address: Optional[str] = None

    @property
    def has_entity(self) -> bool:
        return bool(self.entity_type and self.entity_id and self.entity_title)


class AdminActivityEntry(BaseModel):
    """An admin activity log entry, with display names joined when listed."""

    id: Optional[str] = None
    admin_id: str
    admin_name: Optional[str] = None
    action: str
    target_user_id: Optional[str] = None
    target_user_name: Optional[str] = None
    description: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_critical(self) -> bool:
        return "delete" in self.action.lower()


class ActivityLogPage(BaseModel):
    """
    One page of the admin activity viewer.

    ``critical_actions`` and ``active_admins`` are computed over the
    entries on this page only, not over the whole log.
    """

    logs: list[AdminActivityEntry]
    page: int
    page_size: int
    total: int
    total_pages: int
    critical_actions: int
    active_admins: int
