"""Tests for the activity logger and the admin activity viewer."""

import pytest

from modules.activity.interfaces import IActivityLogger, IActivityLogService
from modules.activity.models import AdminActivityEntry
from modules.activity.service import ActivityLogger, ActivityLogService
from tests.fakes import InMemoryActivityRepository


def admin_entry(admin_id: str = "1", action: str = "UPDATE_USER") -> AdminActivityEntry:
    return AdminActivityEntry(admin_id=admin_id, action=action)


class TestActivityLogger:
    def test_implements_interface(self):
        assert isinstance(ActivityLogger(InMemoryActivityRepository()), IActivityLogger)

    @pytest.mark.asyncio
    async def test_log_writes_entry(self):
        repository = InMemoryActivityRepository()

        await ActivityLogger(repository).log(
            "7",
            "added_to_watchlist",
            details={"media_type": "movie"},
            entity_type="movie",
            entity_id=550,
            entity_title="Added Fight Club to watchlist",
            ip_address="10.0.0.1",
        )

        entry = repository.user_entries[0]
        assert entry.user_id == "7"
        assert entry.has_entity
        assert entry.details == {"media_type": "movie"}

    @pytest.mark.asyncio
    async def test_log_never_raises(self, caplog):
        """Store failures are logged and swallowed."""
        logger = ActivityLogger(InMemoryActivityRepository(fail=True))

        await logger.log("7", "user_logged_in")
        await logger.log_admin_action("1", "UPDATE_USER", target_user_id="7")

        assert "Failed to log activity 'user_logged_in'" in caplog.text
        assert "Failed to log admin action 'UPDATE_USER'" in caplog.text

    @pytest.mark.asyncio
    async def test_log_admin_action(self):
        repository = InMemoryActivityRepository()

        await ActivityLogger(repository).log_admin_action(
            "1",
            "UPDATE_USER",
            target_user_id="7",
            description="Updated user Bob (bob@example.com)",
            metadata={"role": "moderator", "isActive": True},
            user_agent="pytest",
        )

        entry = repository.admin_entries[0]
        assert entry.target_user_id == "7"
        assert entry.metadata == {"role": "moderator", "isActive": True}
        assert entry.user_agent == "pytest"


class TestActivityLogService:
    def test_implements_interface(self):
        assert isinstance(ActivityLogService(InMemoryActivityRepository()), IActivityLogService)

    @pytest.mark.asyncio
    async def test_empty_log(self):
        page = await ActivityLogService(InMemoryActivityRepository()).list_admin_activity()

        assert page.logs == []
        assert page.total == 0
        assert page.total_pages == 0
        assert page.critical_actions == 0
        assert page.active_admins == 0

    @pytest.mark.asyncio
    async def test_pagination_newest_first(self):
        repository = InMemoryActivityRepository()
        for i in range(25):
            repository.admin_entries.append(admin_entry(action=f"ACTION_{i}"))

        service = ActivityLogService(repository)
        first = await service.list_admin_activity(1)
        last = await service.list_admin_activity(3)

        assert first.total == 25
        assert first.total_pages == 3
        assert first.page_size == 10
        assert first.logs[0].action == "ACTION_24"
        assert len(last.logs) == 5
        assert last.logs[-1].action == "ACTION_0"

    @pytest.mark.asyncio
    async def test_page_below_one_is_clamped(self):
        repository = InMemoryActivityRepository()
        repository.admin_entries.append(admin_entry())

        page = await ActivityLogService(repository).list_admin_activity(0)

        assert page.page == 1
        assert len(page.logs) == 1

    @pytest.mark.asyncio
    async def test_stats_cover_current_page_only(self):
        """Critical and active-admin counts are computed over the page, not the log."""
        repository = InMemoryActivityRepository()
        repository.admin_entries.append(admin_entry("9", "DELETE_USER"))
        for i in range(10):
            repository.admin_entries.append(admin_entry(str(i % 2), "UPDATE_USER"))
        repository.admin_entries.append(admin_entry("3", "delete_review"))

        service = ActivityLogService(repository)
        first = await service.list_admin_activity(1)
        second = await service.list_admin_activity(2)

        assert first.critical_actions == 1
        assert first.active_admins == 3
        assert second.critical_actions == 1
        assert second.active_admins == 2
