# cryptotrack/routers/portfolio.py
from __future__ import annotations

from functools import partial

from fastapi import APIRouter, Depends, Query, Response, status

from cryptotrack.cache import TTLCache, make_key
from cryptotrack.deps import current_user, get_cache, get_gateway, get_store
from cryptotrack.errors import not_found
from cryptotrack.gateway import MarketDataGateway
from cryptotrack.routers.market import cached_fetch
from cryptotrack.schemas import PortfolioCreate, PortfolioItem, PortfolioUpdate, PortfolioValuation, User
from cryptotrack.store import RecordStore
from cryptotrack.valuation import value_portfolio

router = APIRouter(prefix="/api/portfolio", tags=["portfolio"])


def _owned_item(store: RecordStore, item_id: int, user: User) -> PortfolioItem:
    item = store.get_portfolio_item(item_id)
    if item is None or item.user_id != user.id:
        raise not_found("Portfolio item")
    return item


@router.get("", response_model=list[PortfolioItem])
def list_portfolio(user: User = Depends(current_user), store: RecordStore = Depends(get_store)):
    return store.list_portfolio(user.id)


@router.get("/summary", response_model=PortfolioValuation)
async def portfolio_summary(
    currency: str = Query("usd", min_length=1),
    user: User = Depends(current_user),
    store: RecordStore = Depends(get_store),
    cache: TTLCache = Depends(get_cache),
    gateway: MarketDataGateway = Depends(get_gateway),
):
    """Current value and gain/loss of every holding, priced from the market list."""
    currency = currency.strip().lower()
    items = store.list_portfolio(user.id)
    if not items:
        return value_portfolio([], [], currency)

    ids = tuple(sorted({item.coin_id for item in items}))
    key = make_key("portfolio-prices", ids=ids, currency=currency)
    fetch = partial(gateway.fetch_coins, page=1, per_page=len(ids), currency=currency, ids=list(ids))
    coins = await cached_fetch(cache, key, fetch, "portfolio prices")
    return value_portfolio(items, coins, currency)


@router.get("/{item_id}", response_model=PortfolioItem)
def get_portfolio_item(
    item_id: int, user: User = Depends(current_user), store: RecordStore = Depends(get_store)
):
    return _owned_item(store, item_id, user)


@router.post("", response_model=PortfolioItem, status_code=status.HTTP_201_CREATED)
def add_portfolio_item(
    body: PortfolioCreate, user: User = Depends(current_user), store: RecordStore = Depends(get_store)
):
    return store.add_portfolio_item(body, user.id)


@router.put("/{item_id}", response_model=PortfolioItem)
def update_portfolio_item(
    item_id: int,
    body: PortfolioUpdate,
    user: User = Depends(current_user),
    store: RecordStore = Depends(get_store),
):
    _owned_item(store, item_id, user)
    updated = store.update_portfolio_item(item_id, body.model_dump(exclude_unset=True, exclude_none=True))
    if updated is None:
        # deleted between the ownership check and the update
        raise not_found("Portfolio item")
    return updated


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_portfolio_item(
    item_id: int, user: User = Depends(current_user), store: RecordStore = Depends(get_store)
):
    _owned_item(store, item_id, user)
    if not store.delete_portfolio_item(item_id):
        raise not_found("Portfolio item")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
