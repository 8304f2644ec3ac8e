"""
User management repositories for both backends.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from psycopg2.extras import RealDictCursor

from shared.database import transaction
from shared.models import User, UserRole
from shared.repository import BaseRepository
from modules.auth.document_repository import map_user_document
from modules.auth.repository import USER_COLUMNS, map_user_row


class RelationalAdminUserRepository(BaseRepository[User]):
    """Admin reads and writes on the users table in PostgreSQL."""

    @contextmanager
    def _cursor(self) -> Iterator[RealDictCursor]:
        with transaction(self._db) as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                yield cur

    def list_users(self) -> list[User]:
        with self._cursor() as cur:
            cur.execute(f"SELECT {USER_COLUMNS} FROM users ORDER BY created_at DESC")
            rows = cur.fetchall()
        return [map_user_row(row).to_user() for row in rows]

    def update_user(self, user_id: str, role: UserRole, is_active: bool) -> Optional[User]:
        try:
            numeric_id = int(user_id)
        except ValueError:
            return None
        with self._cursor() as cur:
            cur.execute(
                f"""
                UPDATE users SET role = %s, is_active = %s, updated_at = NOW()
                 WHERE id = %s
                RETURNING {USER_COLUMNS}
                """,
                (role.value, is_active, numeric_id),
            )
            row = cur.fetchone()
        return map_user_row(row).to_user() if row else None


class DocumentAdminUserRepository(BaseRepository[User]):
    """Admin reads and writes on the users table in Supabase."""

    TABLE = "users"

    def list_users(self) -> list[User]:
        result = (
            self._db.table(self.TABLE).select("*").order("created_at", desc=True).execute()
        )
        return [map_user_document(row).to_user() for row in result.data or []]

    def update_user(self, user_id: str, role: UserRole, is_active: bool) -> Optional[User]:
        result = (
            self._db.table(self.TABLE)
            .update(
                {
                    "role": role.value,
                    "is_active": is_active,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                }
            )
            .eq("id", user_id)
            .execute()
        )
        if not result.data:
            return None
        return map_user_document(result.data[0]).to_user()
