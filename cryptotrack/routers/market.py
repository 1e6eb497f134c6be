# cryptotrack/routers/market.py
# Cached pass-through endpoints over the market-data provider.
from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from functools import partial
from typing import Any

from fastapi import APIRouter, Depends, Query, status

from cryptotrack.cache import CacheKey, TTLCache, make_key
from cryptotrack.deps import get_cache, get_gateway
from cryptotrack.errors import http_error
from cryptotrack.gateway import GatewayError, MarketDataGateway
from cryptotrack.news import filter_news, static_news
from cryptotrack.schemas import ErrorCode

logger = logging.getLogger("cryptotrack.market")

router = APIRouter(prefix="/api", tags=["market"])

DAYS_PATTERN = r"^(0*[1-9]\d*|max)$"


async def cached_fetch(
    cache: TTLCache,
    key: CacheKey,
    fetch: Callable[[], Awaitable[Any]],
    what: str,
) -> Any:
    """
    Serve ``key`` from the cache, else call ``fetch`` once and store the result.
    A GatewayError becomes a 500 with a generic message; the cache is not
    touched and the lock is never held while awaiting.
    """
    hit = cache.get(key)
    if hit is not None:
        return hit
    try:
        payload = await fetch()
    except GatewayError as e:
        logger.error("Error fetching %s: %s", what, e, extra={"resource": key[0], "status_code": e.status_code})
        raise http_error(
            ErrorCode.UPSTREAM_FAILURE,
            f"Failed to fetch {what}",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        ) from e
    cache.put(key, payload)
    return payload


@router.get("/trending")
async def trending(
    cache: TTLCache = Depends(get_cache),
    gateway: MarketDataGateway = Depends(get_gateway),
):
    return await cached_fetch(cache, make_key("trending"), gateway.fetch_trending, "trending coins")


@router.get("/market-data")
async def market_data(
    cache: TTLCache = Depends(get_cache),
    gateway: MarketDataGateway = Depends(get_gateway),
):
    return await cached_fetch(cache, make_key("market-data"), gateway.fetch_global, "market data")


@router.get("/coins")
async def coins(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=250, description="Coins per page"),
    currency: str = Query("usd", min_length=1, description="Quote currency, e.g. usd"),
    cache: TTLCache = Depends(get_cache),
    gateway: MarketDataGateway = Depends(get_gateway),
):
    """Top coins by market cap with 7d sparkline and 1h/24h/7d change."""
    currency = currency.strip().lower()
    key = make_key("coins", page=page, limit=limit, currency=currency)
    fetch = partial(gateway.fetch_coins, page=page, per_page=limit, currency=currency)
    return await cached_fetch(cache, key, fetch, "coins")


@router.get("/coins/{coin_id}")
async def coin_detail(
    coin_id: str,
    cache: TTLCache = Depends(get_cache),
    gateway: MarketDataGateway = Depends(get_gateway),
):
    key = make_key("coin", coin_id=coin_id)
    return await cached_fetch(cache, key, partial(gateway.fetch_coin, coin_id), f"coin {coin_id}")


@router.get("/coins/{coin_id}/chart")
async def coin_chart(
    coin_id: str,
    days: str = Query("1", pattern=DAYS_PATTERN, description="Day range: integer or 'max'"),
    currency: str = Query("usd", min_length=1),
    cache: TTLCache = Depends(get_cache),
    gateway: MarketDataGateway = Depends(get_gateway),
):
    """Price history: {prices: [[timestamp_ms, price], ...], market_caps, total_volumes}."""
    currency = currency.strip().lower()
    days = days if days == "max" else str(int(days))
    key = make_key("chart", coin_id=coin_id, days=days, currency=currency)
    fetch = partial(gateway.fetch_chart, coin_id, days=days, currency=currency)
    return await cached_fetch(cache, key, fetch, f"chart data for {coin_id}")


@router.get("/news")
async def news(
    category: str = Query("all", description="all, market, regulation, bitcoin, ethereum, ..."),
    cache: TTLCache = Depends(get_cache),
):
    async def _load() -> list[dict]:
        return static_news()

    items = await cached_fetch(cache, make_key("news"), _load, "news")
    return filter_news(items, category)
