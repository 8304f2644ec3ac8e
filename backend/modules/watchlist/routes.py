"""
Watchlist endpoints.
"""

from fastapi import APIRouter, Depends, Request, Response

from api.dependencies import get_watchlist_service
from api.middleware.auth import get_client_ip, get_current_user
from shared.models import User

from .interfaces import IWatchlistService
from .models import AddWatchlistItemRequest, AddWatchlistItemResponse, WatchlistResponse

router = APIRouter()


@router.get("", response_model=WatchlistResponse)
async def list_watchlist(
    user: User = Depends(get_current_user),
    service: IWatchlistService = Depends(get_watchlist_service),
) -> WatchlistResponse:
    """List the current user's watchlist, most recently added first."""
    return WatchlistResponse(watchlist=await service.list_items(user.id))


@router.post("", response_model=AddWatchlistItemResponse, status_code=201)
async def add_to_watchlist(
    body: AddWatchlistItemRequest,
    request: Request,
    user: User = Depends(get_current_user),
    service: IWatchlistService = Depends(get_watchlist_service),
) -> AddWatchlistItemResponse:
    item_id = await service.add_item(user.id, body, ip_address=get_client_ip(request))
    return AddWatchlistItemResponse(message="Successfully added to watchlist", id=item_id)


@router.delete("/{media_type}/{media_id}", status_code=204)
async def remove_from_watchlist(
    media_type: str,
    media_id: int,
    request: Request,
    user: User = Depends(get_current_user),
    service: IWatchlistService = Depends(get_watchlist_service),
) -> Response:
    await service.remove_item(user.id, media_type, media_id, ip_address=get_client_ip(request))
    return Response(status_code=204)
