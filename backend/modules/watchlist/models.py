"""
Watchlist module data models.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class MediaType(str, Enum):
    MOVIE = "movie"
    TV = "tv"


class AddWatchlistItemRequest(BaseModel):
    """
    POST /watchlist body.

    Fields are loosely typed here; the service enforces the rules so the
    client gets the same messages in both modes.
    """

    movie_id: Optional[int] = None
    tv_id: Optional[int] = None
    media_type: Optional[str] = None
    title: Optional[str] = None
    poster_path: Optional[str] = None

    @property
    def media_id(self) -> Optional[int]:
        return self.movie_id if self.media_type == MediaType.MOVIE.value else self.tv_id


class WatchlistItem(BaseModel):
    """A watchlist entry; ``id`` is the catalog id of the movie or show."""

    id: int
    media_type: MediaType
    title: str
    poster_path: Optional[str] = None
    added_at: Optional[datetime] = None


class WatchlistResponse(BaseModel):
    watchlist: list[WatchlistItem]


class AddWatchlistItemResponse(BaseModel):
    message: str
    id: str
