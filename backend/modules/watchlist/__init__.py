"""
Watchlist module.

Per-user list of movies and TV shows to watch later. Adding and removing
items writes best-effort activity entries.

Public API:
- IWatchlistService: Interface for watchlist operations
- WatchlistItem, AddWatchlistItemRequest: Models
- Watchlist exceptions: WatchlistItemExistsError, WatchlistItemNotFoundError
"""

from .interfaces import IWatchlistService, IWatchlistRepository
from .models import (
    AddWatchlistItemRequest,
    AddWatchlistItemResponse,
    MediaType,
    WatchlistItem,
    WatchlistResponse,
)
from .exceptions import WatchlistItemExistsError, WatchlistItemNotFoundError

__all__ = [
    # Interfaces
    "IWatchlistService",
    "IWatchlistRepository",
    # Models
    "AddWatchlistItemRequest",
    "AddWatchlistItemResponse",
    "MediaType",
    "WatchlistItem",
    "WatchlistResponse",
    # Exceptions
    "WatchlistItemExistsError",
    "WatchlistItemNotFoundError",
]
