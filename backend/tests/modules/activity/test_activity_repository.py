"""Tests for the activity repositories."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

from psycopg2.extras import Json

from modules.activity.models import ActivityEntry, AdminActivityEntry
from modules.activity.repository import (
    DocumentActivityRepository,
    RelationalActivityRepository,
    map_admin_activity,
)


def mock_pool() -> tuple[MagicMock, MagicMock]:
    pool = MagicMock()
    cursor = pool.getconn.return_value.cursor.return_value.__enter__.return_value
    return pool, cursor


class TestRelationalActivityRepository:
    def test_entry_without_entity_is_stored_as_system_event(self):
        pool, cursor = mock_pool()

        RelationalActivityRepository(pool).add_user_activity(
            ActivityEntry(user_id="7", action="user_logged_in", details={"method": "password"})
        )

        params = cursor.execute.call_args[0][1]
        assert params[:5] == (7, "user_logged_in", "system", 0, "user_logged_in")
        assert isinstance(params[5], Json)

    def test_entry_with_entity(self):
        pool, cursor = mock_pool()

        RelationalActivityRepository(pool).add_user_activity(
            ActivityEntry(
                user_id="7",
                action="added_to_watchlist",
                entity_type="movie",
                entity_id=550,
                entity_title="Added Fight Club to watchlist",
            )
        )

        params = cursor.execute.call_args[0][1]
        assert params[2:5] == ("movie", 550, "Added Fight Club to watchlist")

    def test_admin_entry(self):
        pool, cursor = mock_pool()

        RelationalActivityRepository(pool).add_admin_activity(
            AdminActivityEntry(admin_id="1", action="UPDATE_USER", target_user_id="7")
        )

        params = cursor.execute.call_args[0][1]
        assert params[:3] == (1, "UPDATE_USER", 7)

    def test_list_admin_activity_pages_newest_first(self):
        pool, cursor = mock_pool()
        cursor.fetchall.return_value = [
            {
                "id": 5,
                "admin_id": 1,
                "admin_name": "Root",
                "action": "UPDATE_USER",
                "target_user_id": 7,
                "target_user_name": "Bob",
                "description": "Updated user Bob",
                "metadata": {"role": "moderator"},
                "ip_address": None,
                "user_agent": None,
                "created_at": datetime.now(timezone.utc),
            }
        ]

        entries = RelationalActivityRepository(pool).list_admin_activity(offset=10, limit=10)

        sql, params = cursor.execute.call_args[0]
        assert "ORDER BY l.created_at DESC" in sql
        assert params == (10, 10)
        assert entries[0].id == "5"
        assert entries[0].admin_id == "1"
        assert entries[0].target_user_name == "Bob"

    def test_count(self):
        pool, cursor = mock_pool()
        cursor.fetchone.return_value = {"total": 12}

        assert RelationalActivityRepository(pool).count_admin_activity() == 12


class TestDocumentActivityRepository:
    def test_add_user_activity(self):
        db = MagicMock()

        DocumentActivityRepository(db).add_user_activity(
            ActivityEntry(user_id="sub-1", action="user_logged_in")
        )

        db.table.assert_called_once_with("user_activity_logs")
        document = db.table.return_value.insert.call_args[0][0]
        assert document["user_id"] == "sub-1"
        assert document["action"] == "user_logged_in"
        assert "created_at" in document

    def test_list_joins_user_names(self):
        db = MagicMock()
        logs = MagicMock()
        users = MagicMock()
        db.table.side_effect = lambda name: logs if name == "admin_activity_logs" else users
        logs.select.return_value.order.return_value.range.return_value.execute.return_value.data = [
            {"id": "l1", "admin_id": "a1", "action": "UPDATE_USER", "target_user_id": "u1"},
            {"id": "l2", "admin_id": "a1", "action": "DELETE_USER", "target_user_id": None},
        ]
        users.select.return_value.in_.return_value.execute.return_value.data = [
            {"id": "a1", "name": "Admin"},
            {"id": "u1", "name": "User"},
        ]

        entries = DocumentActivityRepository(db).list_admin_activity(offset=0, limit=10)

        logs.select.return_value.order.return_value.range.assert_called_once_with(0, 9)
        users.select.return_value.in_.assert_called_once_with("id", ["a1", "u1"])
        assert entries[0].admin_name == "Admin"
        assert entries[0].target_user_name == "User"
        assert entries[1].target_user_name is None
        assert entries[1].is_critical

    def test_count(self):
        db = MagicMock()
        db.table.return_value.select.return_value.execute.return_value.count = 4

        assert DocumentActivityRepository(db).count_admin_activity() == 4
        db.table.return_value.select.assert_called_once_with("id", count="exact")


class TestMapAdminActivity:
    def test_defaults(self):
        entry = map_admin_activity({"admin_id": 1, "action": "UPDATE_USER", "metadata": None})

        assert entry.id is None
        assert entry.admin_id == "1"
        assert entry.metadata == {}
