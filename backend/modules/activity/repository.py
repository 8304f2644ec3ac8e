"""
Activity log repositories.

RelationalActivityRepository writes to PostgreSQL through the shared
connection pool; DocumentActivityRepository writes to Supabase tables.
Both tables are append-only.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator, Optional

from psycopg2.extras import Json, RealDictCursor

from shared.database import transaction
from shared.repository import BaseRepository

from .models import ActivityEntry, AdminActivityEntry


def _str_or_none(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def map_admin_activity(row: dict[str, Any]) -> AdminActivityEntry:
    """Map an admin_activity_logs row (or document) to an entry."""
    return AdminActivityEntry(
        id=_str_or_none(row.get("id")),
        admin_id=str(row["admin_id"]),
        admin_name=row.get("admin_name"),
        action=row["action"],
        target_user_id=_str_or_none(row.get("target_user_id")),
        target_user_name=row.get("target_user_name"),
        description=row.get("description"),
        metadata=row.get("metadata") or {},
        ip_address=row.get("ip_address"),
        user_agent=row.get("user_agent"),
        created_at=row.get("created_at"),
    )


class RelationalActivityRepository(BaseRepository[AdminActivityEntry]):
    """Activity tables in PostgreSQL."""

    @contextmanager
    def _cursor(self) -> Iterator[RealDictCursor]:
        with transaction(self._db) as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                yield cur

    def add_user_activity(self, entry: ActivityEntry) -> None:
        """
        Insert a user_activity_logs row.

        Entries without a complete entity reference are stored as
        system events: entity_type 'system', entity_id 0 and the action
        repeated as the title.
        """
        if entry.has_entity:
            entity = (entry.entity_type, entry.entity_id, entry.entity_title)
        else:
            entity = ("system", 0, entry.action)

        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO user_activity_logs (
                    user_id, activity_type, entity_type, entity_id, entity_title,
                    metadata, ip_address
                ) VALUES (%s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    int(entry.user_id),
                    entry.action,
                    *entity,
                    Json(entry.details),
                    entry.ip_address,
                ),
            )

    def add_admin_activity(self, entry: AdminActivityEntry) -> None:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO admin_activity_logs (
                    admin_id, action, target_user_id, description, metadata,
                    ip_address, user_agent
                ) VALUES (%s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    int(entry.admin_id),
                    entry.action,
                    int(entry.target_user_id) if entry.target_user_id else None,
                    entry.description,
                    Json(entry.metadata),
                    entry.ip_address,
                    entry.user_agent,
                ),
            )

    def list_admin_activity(self, offset: int, limit: int) -> list[AdminActivityEntry]:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT l.id, l.admin_id, a.name AS admin_name, l.action,
                       l.target_user_id, t.name AS target_user_name,
                       l.description, l.metadata, l.ip_address, l.user_agent,
                       l.created_at
                  FROM admin_activity_logs l
                  LEFT JOIN users a ON a.id = l.admin_id
                  LEFT JOIN users t ON t.id = l.target_user_id
                 ORDER BY l.created_at DESC, l.id DESC
                 LIMIT %s OFFSET %s
                """,
                (limit, offset),
            )
            rows = cur.fetchall()
        return [map_admin_activity(row) for row in rows]

    def count_admin_activity(self) -> int:
        with self._cursor() as cur:
            cur.execute("SELECT COUNT(*) AS total FROM admin_activity_logs")
            row = cur.fetchone()
        return int(row["total"]) if row else 0


class DocumentActivityRepository(BaseRepository[AdminActivityEntry]):
    """Activity tables in Supabase."""

    USER_TABLE = "user_activity_logs"
    ADMIN_TABLE = "admin_activity_logs"

    def add_user_activity(self, entry: ActivityEntry) -> None:
        self._db.table(self.USER_TABLE).insert(
            {
                "user_id": entry.user_id,
                "action": entry.action,
                "details": entry.details,
                "entity_type": entry.entity_type,
                "entity_id": entry.entity_id,
                "entity_title": entry.entity_title,
                "ip_address": entry.ip_address,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
        ).execute()

    def add_admin_activity(self, entry: AdminActivityEntry) -> None:
        self._db.table(self.ADMIN_TABLE).insert(
            {
                "admin_id": entry.admin_id,
                "action": entry.action,
                "target_user_id": entry.target_user_id,
                "description": entry.description,
                "metadata": entry.metadata,
                "ip_address": entry.ip_address,
                "user_agent": entry.user_agent,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
        ).execute()

    def list_admin_activity(self, offset: int, limit: int) -> list[AdminActivityEntry]:
        result = (
            self._db.table(self.ADMIN_TABLE)
            .select("*")
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        rows = result.data or []

        # Join display names with one lookup for every user on the page
        user_ids = {row["admin_id"] for row in rows}
        user_ids.update(row["target_user_id"] for row in rows if row.get("target_user_id"))
        names = self._user_names(sorted(user_ids))

        entries = []
        for row in rows:
            entries.append(
                map_admin_activity(
                    {
                        **row,
                        "admin_name": names.get(row["admin_id"]),
                        "target_user_name": names.get(row.get("target_user_id")),
                    }
                )
            )
        return entries

    def count_admin_activity(self) -> int:
        result = self._db.table(self.ADMIN_TABLE).select("id", count="exact").execute()
        return result.count or 0

    def _user_names(self, user_ids: list[str]) -> dict[str, str]:
        if not user_ids:
            return {}
        result = self._db.table("users").select("id, name").in_("id", user_ids).execute()
        return {row["id"]: row.get("name") for row in result.data or []}
