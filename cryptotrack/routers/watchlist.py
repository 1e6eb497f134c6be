# cryptotrack/routers/watchlist.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from cryptotrack.deps import current_user, get_store
from cryptotrack.errors import not_found
from cryptotrack.schemas import User, WatchlistCreate, WatchlistItem, WatchlistStatus
from cryptotrack.store import RecordStore

router = APIRouter(prefix="/api/watchlist", tags=["watchlist"])


@router.get("", response_model=list[WatchlistItem])
def list_watchlist(user: User = Depends(current_user), store: RecordStore = Depends(get_store)):
    return store.list_watchlist(user.id)


@router.get("/contains/{coin_id}", response_model=WatchlistStatus)
def watchlist_contains(
    coin_id: str, user: User = Depends(current_user), store: RecordStore = Depends(get_store)
):
    return WatchlistStatus(coin_id=coin_id, in_watchlist=store.is_in_watchlist(user.id, coin_id))


@router.post("", response_model=WatchlistItem, status_code=status.HTTP_201_CREATED)
def add_to_watchlist(
    body: WatchlistCreate, user: User = Depends(current_user), store: RecordStore = Depends(get_store)
):
    """Adding a coin that is already watched returns the existing entry."""
    return store.add_to_watchlist(user.id, body.coin_id)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_from_watchlist(
    item_id: int, user: User = Depends(current_user), store: RecordStore = Depends(get_store)
):
    item = store.get_watchlist_item(item_id)
    if item is None or item.user_id != user.id or not store.remove_from_watchlist(item_id):
        raise not_found("Watchlist item")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
