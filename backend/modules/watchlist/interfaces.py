"""
Watchlist module interfaces.
"""

from typing import Optional, Protocol, runtime_checkable

from .models import AddWatchlistItemRequest, WatchlistItem


@runtime_checkable
class IWatchlistRepository(Protocol):
    """Watchlist storage; one implementation per backend."""

    def list_items(self, user_id: str) -> list[WatchlistItem]:
        """Items for a user, most recently added first."""
        ...

    def exists(self, user_id: str, media_type: str, media_id: int) -> bool:
        ...

    def add_item(self, user_id: str, request: AddWatchlistItemRequest) -> str:
        """Store an item and return the new row or document id."""
        ...

    def remove_item(self, user_id: str, media_type: str, media_id: int) -> bool:
        """Delete an item; returns False if it was not there."""
        ...


@runtime_checkable
class IWatchlistService(Protocol):
    """Interface for watchlist operations."""

    async def list_items(self, user_id: str) -> list[WatchlistItem]:
        ...

    async def add_item(
        self,
        user_id: str,
        request: AddWatchlistItemRequest,
        ip_address: Optional[str] = None,
    ) -> str:
        """
        Add an item to a user's watchlist.

        Raises:
            ValidationError: If media type, title or the matching id is missing
            WatchlistItemExistsError: If the item is already on the list
        """
        ...

    async def remove_item(
        self,
        user_id: str,
        media_type: str,
        media_id: int,
        ip_address: Optional[str] = None,
    ) -> None:
        """
        Remove an item from a user's watchlist.

        Raises:
            WatchlistItemNotFoundError: If the item is not on the list
        """
        ...
