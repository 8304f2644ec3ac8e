"""Tests for the admin user repositories."""

from unittest.mock import MagicMock

from modules.admin.repository import DocumentAdminUserRepository, RelationalAdminUserRepository
from shared.models import UserRole


def user_row(**overrides) -> dict:
    row = {"id": 42, "email": "alice@example.com", "name": "Alice", "role": "user", "is_active": True}
    row.update(overrides)
    return row


def mock_pool() -> tuple[MagicMock, MagicMock, MagicMock]:
    pool = MagicMock()
    conn = pool.getconn.return_value
    cursor = conn.cursor.return_value.__enter__.return_value
    return pool, conn, cursor


class TestRelationalAdminUserRepository:
    def test_list_users_newest_first(self):
        pool, _, cursor = mock_pool()
        cursor.fetchall.return_value = [user_row(id=2), user_row(id=1, email="b@example.com")]

        users = RelationalAdminUserRepository(pool).list_users()

        assert [u.id for u in users] == ["2", "1"]
        assert "ORDER BY created_at DESC" in cursor.execute.call_args[0][0]

    def test_update_user(self):
        pool, conn, cursor = mock_pool()
        cursor.fetchone.return_value = user_row(role="moderator", is_active=False)

        user = RelationalAdminUserRepository(pool).update_user("42", UserRole.MODERATOR, False)

        assert user.role == UserRole.MODERATOR
        assert not user.is_active
        assert cursor.execute.call_args[0][1] == ("moderator", False, 42)
        conn.commit.assert_called_once()

    def test_update_missing_user(self):
        pool, _, cursor = mock_pool()
        cursor.fetchone.return_value = None

        assert RelationalAdminUserRepository(pool).update_user("42", UserRole.USER, True) is None

    def test_non_numeric_id_is_not_found(self):
        pool, _, cursor = mock_pool()

        assert RelationalAdminUserRepository(pool).update_user("abc", UserRole.USER, True) is None
        cursor.execute.assert_not_called()


class TestDocumentAdminUserRepository:
    def test_list_users(self):
        db = MagicMock()
        query = db.table.return_value.select.return_value.order.return_value
        query.execute.return_value.data = [{"id": "sub-1", "email": "a@example.com", "name": "A"}]

        users = DocumentAdminUserRepository(db).list_users()

        assert users[0].id == "sub-1"
        db.table.return_value.select.return_value.order.assert_called_once_with(
            "created_at", desc=True
        )

    def test_update_user(self):
        db = MagicMock()
        db.table.return_value.update.return_value.eq.return_value.execute.return_value.data = [
            {"id": "sub-1", "email": "a@example.com", "role": "moderator", "is_active": True}
        ]

        user = DocumentAdminUserRepository(db).update_user("sub-1", UserRole.MODERATOR, True)

        payload = db.table.return_value.update.call_args[0][0]
        assert payload["role"] == "moderator"
        assert "updated_at" in payload
        assert user.role == UserRole.MODERATOR

    def test_update_missing_user(self):
        db = MagicMock()
        db.table.return_value.update.return_value.eq.return_value.execute.return_value.data = []

        assert DocumentAdminUserRepository(db).update_user("sub-1", UserRole.USER, True) is None
