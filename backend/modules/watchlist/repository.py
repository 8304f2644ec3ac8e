"""
Watchlist repositories for both backends.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator

from psycopg2 import errors as pg_errors
from psycopg2.extras import RealDictCursor

from shared.database import transaction
from shared.repository import BaseRepository

from .exceptions import WatchlistItemExistsError
from .models import AddWatchlistItemRequest, MediaType, WatchlistItem


def _id_column(media_type: str) -> str:
    return "movie_id" if media_type == MediaType.MOVIE.value else "tv_id"


def map_watchlist_row(row: dict[str, Any]) -> WatchlistItem:
    """Collapse movie_id/tv_id into the single catalog id the client sees."""
    media_id = row.get("movie_id") if row.get("movie_id") is not None else row.get("tv_id")
    return WatchlistItem(
        id=media_id,
        media_type=row["media_type"],
        title=row["title"],
        poster_path=row.get("poster_path") or None,
        added_at=row.get("added_at"),
    )


class RelationalWatchlistRepository(BaseRepository[WatchlistItem]):
    """The watchlist table in PostgreSQL."""

    @contextmanager
    def _cursor(self) -> Iterator[RealDictCursor]:
        with transaction(self._db) as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                yield cur

    def list_items(self, user_id: str) -> list[WatchlistItem]:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT movie_id, tv_id, media_type, title, poster_path, added_at
                  FROM watchlist
                 WHERE user_id = %s
                 ORDER BY added_at DESC
                """,
                (int(user_id),),
            )
            rows = cur.fetchall()
        return [map_watchlist_row(row) for row in rows]

    def exists(self, user_id: str, media_type: str, media_id: int) -> bool:
        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT 1 FROM watchlist
                 WHERE user_id = %s AND media_type = %s AND {_id_column(media_type)} = %s
                """,
                (int(user_id), media_type, media_id),
            )
            return cur.fetchone() is not None

    def add_item(self, user_id: str, request: AddWatchlistItemRequest) -> str:
        try:
            with self._cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO watchlist (user_id, movie_id, tv_id, media_type, title, poster_path)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    RETURNING id
                    """,
                    (
                        int(user_id),
                        request.movie_id,
                        request.tv_id,
                        request.media_type,
                        request.title,
                        request.poster_path,
                    ),
                )
                row = cur.fetchone()
        except pg_errors.UniqueViolation:
            raise WatchlistItemExistsError(request.media_type, request.media_id)
        return str(row["id"])

    def remove_item(self, user_id: str, media_type: str, media_id: int) -> bool:
        with self._cursor() as cur:
            cur.execute(
                f"""
                DELETE FROM watchlist
                 WHERE user_id = %s AND media_type = %s AND {_id_column(media_type)} = %s
                """,
                (int(user_id), media_type, media_id),
            )
            return cur.rowcount > 0


class DocumentWatchlistRepository(BaseRepository[WatchlistItem]):
    """The watchlists table in Supabase."""

    TABLE = "watchlists"

    def list_items(self, user_id: str) -> list[WatchlistItem]:
        result = (
            self._db.table(self.TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("added_at", desc=True)
            .execute()
        )
        return [map_watchlist_row(row) for row in result.data or []]

    def exists(self, user_id: str, media_type: str, media_id: int) -> bool:
        result = (
            self._db.table(self.TABLE)
            .select("id")
            .eq("user_id", user_id)
            .eq("media_type", media_type)
            .eq(_id_column(media_type), media_id)
            .execute()
        )
        return bool(result.data)

    def add_item(self, user_id: str, request: AddWatchlistItemRequest) -> str:
        now = datetime.now(timezone.utc).isoformat()
        result = self._db.table(self.TABLE).insert(
            {
                "user_id": user_id,
                "movie_id": request.movie_id,
                "tv_id": request.tv_id,
                "media_type": request.media_type,
                "title": request.title,
                "poster_path": request.poster_path or "",
                "added_at": now,
                "created_at": now,
                "updated_at": now,
            }
        ).execute()
        return str(result.data[0]["id"])

    def remove_item(self, user_id: str, media_type: str, media_id: int) -> bool:
        result = (
            self._db.table(self.TABLE)
            .delete()
            .eq("user_id", user_id)
            .eq("media_type", media_type)
            .eq(_id_column(media_type), media_id)
            .execute()
        )
        return bool(result.data)
