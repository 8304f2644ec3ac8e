"""
Document user repository (production mode).

Reads and writes user documents in the Supabase ``users`` table, keyed by
the identity token's subject id.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from shared.models import AuthProvider
from shared.repository import BaseRepository

from .models import StoredUser


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def map_user_document(data: dict[str, Any]) -> StoredUser:
    """Map a user document to a StoredUser."""
    doc = dict(data)
    doc["provider"] = doc.get("provider") or AuthProvider.EMAIL.value
    doc["avatar"] = doc.get("avatar") or None
    doc["name"] = doc.get("name") or ""
    return StoredUser(**doc)


class DocumentUserRepository(BaseRepository[StoredUser]):
    """
    Repository for user documents.

    All methods return StoredUser models mapped from the raw documents.
    """

    TABLE = "users"

    def get_by_id(self, user_id: str) -> Optional[StoredUser]:
        result = self._db.table(self.TABLE).select("*").eq("id", user_id).execute()
        if not result.data:
            return None
        return map_user_document(result.data[0])

    def get_by_email(self, email: str) -> Optional[StoredUser]:
        result = (
            self._db.table(self.TABLE)
            .select("*")
            .ilike("email", email)
            .limit(1)
            .execute()
        )
        if not result.data:
            return None
        return map_user_document(result.data[0])

    def get_by_provider_id(self, provider_id: str) -> Optional[StoredUser]:
        result = (
            self._db.table(self.TABLE)
            .select("*")
            .eq("provider_id", provider_id)
            .limit(1)
            .execute()
        )
        if not result.data:
            return None
        return map_user_document(result.data[0])

    def create(self, user_id: str, data: dict[str, Any]) -> StoredUser:
        """
        Create a user document under the given subject id.

        Role defaults to 'user' and the account starts active.
        """
        now = _now()
        document = {
            "id": user_id,
            "avatar": "",
            "role": "user",
            "is_active": True,
            "email_verified": False,
            "provider": AuthProvider.EMAIL.value,
            "created_at": now,
            "updated_at": now,
            "last_login_at": now,
            **data,
        }
        result = self._db.table(self.TABLE).insert(document).execute()
        return map_user_document(result.data[0])

    def update(self, user_id: str, data: dict[str, Any]) -> StoredUser:
        """Apply a partial update and return the updated document."""
        payload = {**data, "updated_at": _now()}
        result = self._db.table(self.TABLE).update(payload).eq("id", user_id).execute()
        return map_user_document(result.data[0])

    def touch_last_login(self, user_id: str) -> StoredUser:
        result = (
            self._db.table(self.TABLE)
            .update({"last_login_at": _now()})
            .eq("id", user_id)
            .execute()
        )
        return map_user_document(result.data[0])

    def link_provider(self, user_id: str, provider: str, provider_id: str) -> StoredUser:
        """Attach a social provider to an existing document and stamp the login."""
        now = _now()
        payload = {
            "provider": provider,
            "provider_id": provider_id,
            "last_login_at": now,
            "updated_at": now,
        }
        result = self._db.table(self.TABLE).update(payload).eq("id", user_id).execute()
        return map_user_document(result.data[0])
