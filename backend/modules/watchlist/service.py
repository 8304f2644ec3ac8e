"""
Watchlist service implementation.
"""

import logging
from typing import Any, Optional

from shared.exceptions import ValidationError

from .exceptions import WatchlistItemExistsError, WatchlistItemNotFoundError
from .interfaces import IWatchlistRepository, IWatchlistService
from .models import AddWatchlistItemRequest, MediaType, WatchlistItem

logger = logging.getLogger(__name__)

MEDIA_TYPES = {m.value for m in MediaType}


def validate_add_request(request: AddWatchlistItemRequest) -> None:
    """Check an add request, raising ValidationError with a client-facing message."""
    if not request.media_type or not request.title:
        raise ValidationError("Media type and title are required")

    if request.media_type not in MEDIA_TYPES:
        raise ValidationError("Invalid media type")

    if request.media_type == MediaType.MOVIE.value and not request.movie_id:
        raise ValidationError("Movie ID is required for movie type")

    if request.media_type == MediaType.TV.value and not request.tv_id:
        raise ValidationError("TV ID is required for TV type")


class WatchlistService(IWatchlistService):
    """
    Watchlist operations for the active backend.

    Activity logging is best-effort: a failed log write never fails an
    add or remove.
    """

    def __init__(
        self,
        repository: IWatchlistRepository,
        activity: Any = None,  # IActivityLogger - injected
    ):
        self._repository = repository
        self._activity = activity

    async def list_items(self, user_id: str) -> list[WatchlistItem]:
        return self._repository.list_items(user_id)

    async def add_item(
        self,
        user_id: str,
        request: AddWatchlistItemRequest,
        ip_address: Optional[str] = None,
    ) -> str:
        validate_add_request(request)
        media_id = request.media_id

        if self._repository.exists(user_id, request.media_type, media_id):
            raise WatchlistItemExistsError(request.media_type, media_id)

        item_id = self._repository.add_item(user_id, request)
        logger.debug(f"User {user_id} added {request.media_type} {media_id} to watchlist")

        if self._activity is not None:
            await self._activity.log(
                user_id,
                "added_to_watchlist",
                details={"media_type": request.media_type},
                entity_type=request.media_type,
                entity_id=media_id,
                entity_title=f"Added {request.title} to watchlist",
                ip_address=ip_address,
            )
        return item_id

    async def remove_item(
        self,
        user_id: str,
        media_type: str,
        media_id: int,
        ip_address: Optional[str] = None,
    ) -> None:
        if media_type not in MEDIA_TYPES:
            raise ValidationError("Invalid media type")

        if not self._repository.remove_item(user_id, media_type, media_id):
            raise WatchlistItemNotFoundError(media_type, media_id)

        if self._activity is not None:
            await self._activity.log(
                user_id,
                "removed_from_watchlist",
                details={"media_type": media_type},
                entity_type=media_type,
                entity_id=media_id,
                entity_title=f"Removed {media_type} {media_id} from watchlist",
                ip_address=ip_address,
            )
