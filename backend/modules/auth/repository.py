"""
Relational user repository (development mode).

Encapsulates all SQL for the auth tables in PostgreSQL:
- users
- sessions
- user_preferences

Every public method borrows one pooled connection for the duration of a
single unit of work. Multi-statement operations that must be atomic go
through ``transaction()``.
"""

from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator, Optional

from psycopg2 import errors as pg_errors
from psycopg2.extras import RealDictCursor

from shared.database import transaction
from shared.models import AuthProvider
from shared.repository import BaseRepository

from .exceptions import DuplicateEmailError
from .models import StoredUser


USER_COLUMNS = """
    id, email, name, avatar, role, is_active, email_verified, provider,
    provider_id, password_hash, login_attempts, created_at, updated_at,
    last_login_at
"""


def map_user_row(row: dict[str, Any]) -> StoredUser:
    """Map a users row to a StoredUser, stringifying the integer id."""
    data = dict(row)
    data["id"] = str(data["id"])
    data["provider"] = data.get("provider") or AuthProvider.LOCAL.value
    data["avatar"] = data.get("avatar") or None
    data["login_attempts"] = data.get("login_attempts") or 0
    return StoredUser(**data)


class UserTransaction:
    """Statements that run on one connection inside one transaction."""

    def __init__(self, cursor: RealDictCursor):
        self._cur = cursor

    def get_for_update(self, user_id: str) -> Optional[StoredUser]:
        """Load a user and lock the row until the transaction ends."""
        self._cur.execute(
            f"SELECT {USER_COLUMNS} FROM users WHERE id = %s FOR UPDATE",
            (int(user_id),),
        )
        row = self._cur.fetchone()
        return map_user_row(row) if row else None

    def email_taken_by_other(self, email: str, user_id: str) -> bool:
        self._cur.execute(
            "SELECT 1 FROM users WHERE lower(email) = lower(%s) AND id <> %s",
            (email, int(user_id)),
        )
        return self._cur.fetchone() is not None

    def update_profile_fields(
        self,
        user_id: str,
        name: Optional[str],
        email: Optional[str],
        avatar: Optional[str],
    ) -> None:
        """Update whichever of name/email/avatar are provided (NULL keeps the old value)."""
        self._cur.execute(
            """
            UPDATE users
               SET name = COALESCE(%s, name),
                   email = COALESCE(%s, email),
                   avatar = COALESCE(%s, avatar),
                   updated_at = NOW()
             WHERE id = %s
            """,
            (name, email, avatar, int(user_id)),
        )

    def set_password_hash(self, user_id: str, password_hash: str) -> None:
        self._cur.execute(
            "UPDATE users SET password_hash = %s, updated_at = NOW() WHERE id = %s",
            (password_hash, int(user_id)),
        )

    def fetch(self, user_id: str) -> Optional[StoredUser]:
        self._cur.execute(
            f"SELECT {USER_COLUMNS} FROM users WHERE id = %s",
            (int(user_id),),
        )
        row = self._cur.fetchone()
        return map_user_row(row) if row else None


class RelationalUserRepository(BaseRepository[StoredUser]):
    """
    Repository for user, session and preference rows.

    Note: This repository does NOT verify passwords or tokens.
    The relational auth backend is responsible for credential checks.
    """

    @contextmanager
    def _cursor(self) -> Iterator[RealDictCursor]:
        with transaction(self._db) as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                yield cur

    @contextmanager
    def transaction(self) -> Iterator[UserTransaction]:
        """
        Open an explicit transaction.

        Commits when the block exits normally and rolls back if anything
        inside it raises, including a failed password check.
        """
        with self._cursor() as cur:
            yield UserTransaction(cur)

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def get_by_email(self, email: str) -> Optional[StoredUser]:
        with self._cursor() as cur:
            cur.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE lower(email) = lower(%s)",
                (email,),
            )
            row = cur.fetchone()
        return map_user_row(row) if row else None

    def get_by_id(self, user_id: str) -> Optional[StoredUser]:
        try:
            numeric_id = int(user_id)
        except ValueError:
            return None
        with self._cursor() as cur:
            cur.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE id = %s",
                (numeric_id,),
            )
            row = cur.fetchone()
        return map_user_row(row) if row else None

    def get_by_provider(self, provider: str, provider_id: str) -> Optional[StoredUser]:
        with self._cursor() as cur:
            cur.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE provider = %s AND provider_id = %s",
                (provider, provider_id),
            )
            row = cur.fetchone()
        return map_user_row(row) if row else None

    def create_user(
        self,
        name: str,
        email: str,
        password_hash: Optional[str] = None,
        provider: str = AuthProvider.LOCAL.value,
        provider_id: Optional[str] = None,
        avatar: Optional[str] = None,
        email_verified: bool = False,
    ) -> StoredUser:
        """
        Insert a user with role 'user', active, and return the stored row.

        Raises:
            DuplicateEmailError: If the unique email index rejects the row
        """
        try:
            with self._cursor() as cur:
                cur.execute(
                    f"""
                    INSERT INTO users (
                        name, email, password_hash, role, is_active, provider,
                        provider_id, avatar, email_verified
                    ) VALUES (%s, %s, %s, 'user', TRUE, %s, %s, %s, %s)
                    RETURNING {USER_COLUMNS}
                    """,
                    (name, email, password_hash, provider, provider_id, avatar, email_verified),
                )
                row = cur.fetchone()
        except pg_errors.UniqueViolation:
            raise DuplicateEmailError(email)
        return map_user_row(row)

    def create_default_preferences(self, user_id: str) -> None:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO user_preferences (
                    user_id, language, notifications_email, notifications_push,
                    notifications_recommendations, notifications_new_releases,
                    privacy_show_watchlist, privacy_show_ratings, privacy_show_activity
                ) VALUES (%s, 'en', TRUE, TRUE, TRUE, TRUE, TRUE, TRUE, TRUE)
                """,
                (int(user_id),),
            )

    def increment_login_attempts(self, user_id: str) -> None:
        with self._cursor() as cur:
            cur.execute(
                "UPDATE users SET login_attempts = login_attempts + 1 WHERE id = %s",
                (int(user_id),),
            )

    def record_successful_login(self, user_id: str) -> StoredUser:
        """Reset the login-attempts counter and stamp last_login_at."""
        with self._cursor() as cur:
            cur.execute(
                f"""
                UPDATE users
                   SET login_attempts = 0, last_login_at = NOW()
                 WHERE id = %s
                RETURNING {USER_COLUMNS}
                """,
                (int(user_id),),
            )
            row = cur.fetchone()
        return map_user_row(row)

    def touch_last_login(self, user_id: str) -> StoredUser:
        with self._cursor() as cur:
            cur.execute(
                f"UPDATE users SET last_login_at = NOW() WHERE id = %s RETURNING {USER_COLUMNS}",
                (int(user_id),),
            )
            row = cur.fetchone()
        return map_user_row(row)

    def link_provider(self, user_id: str, provider: str, provider_id: str) -> StoredUser:
        """Attach a social provider to an existing account and stamp the login."""
        with self._cursor() as cur:
            cur.execute(
                f"""
                UPDATE users
                   SET provider = %s, provider_id = %s, last_login_at = NOW(),
                       updated_at = NOW()
                 WHERE id = %s
                RETURNING {USER_COLUMNS}
                """,
                (provider, provider_id, int(user_id)),
            )
            row = cur.fetchone()
        return map_user_row(row)

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def create_session(
        self,
        user_id: str,
        token_id: str,
        refresh_token: str,
        expires_at: datetime,
    ) -> None:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO sessions (user_id, token_id, refresh_token, expires_at)
                VALUES (%s, %s, %s, %s)
                """,
                (int(user_id), token_id, refresh_token, expires_at),
            )

    def has_active_session(self, token_id: str) -> bool:
        with self._cursor() as cur:
            cur.execute(
                "SELECT 1 FROM sessions WHERE token_id = %s AND expires_at > NOW()",
                (token_id,),
            )
            return cur.fetchone() is not None

    def delete_session(self, token_id: str) -> None:
        with self._cursor() as cur:
            cur.execute("DELETE FROM sessions WHERE token_id = %s", (token_id,))
