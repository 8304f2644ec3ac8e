"""
Watchlist module exceptions.
"""

from shared.exceptions import ConflictError, NotFoundError


class WatchlistItemExistsError(ConflictError):
    """Raised when the item is already on the user's watchlist."""

    def __init__(self, media_type: str, media_id: int):
        super().__init__(
            "Item already in watchlist",
            code="WATCHLIST_ITEM_EXISTS",
            details={"media_type": media_type, "media_id": media_id},
        )


class WatchlistItemNotFoundError(NotFoundError):
    """Raised when removing an item that is not on the watchlist."""

    def __init__(self, media_type: str, media_id: int):
        super().__init__(
            "Item not found in watchlist",
            code="WATCHLIST_ITEM_NOT_FOUND",
            details={"media_type": media_type, "media_id": media_id},
        )
