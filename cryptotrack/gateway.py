"""
Thin async client for the CoinGecko v3 REST API.

Every public coroutine issues exactly one request and returns the parsed JSON.
There is no caching and no retry here; callers decide what to do with a
GatewayError.

Notes / Pitfalls:
- The public API rate-limits aggressively (HTTP 429); the handlers sit behind
  a TTL cache for that reason.
- A fresh AsyncClient is opened per call, so there is nothing to close.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from cryptotrack.config import DEFAULT_COINGECKO_BASE_URL
from cryptotrack.observability import UPSTREAM_REQUESTS

logger = logging.getLogger("cryptotrack.gateway")


class GatewayError(Exception):
    """The provider could not complete a call.

    ``status_code`` is the upstream HTTP status, or None when the request
    never got a response (DNS, connect, timeout).
    """

    def __init__(self, status_code: int | None, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.status_code}: {self.message}"


class MarketDataGateway:
    def __init__(
        self,
        base_url: str = DEFAULT_COINGECKO_BASE_URL,
        timeout: float = 10.0,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.api_key = api_key
        self._transport = transport

    # ---------- Public API ----------

    async def fetch_trending(self) -> Any:
        return await self._get("trending", "/search/trending")

    async def fetch_global(self) -> Any:
        return await self._get("market-data", "/global")

    async def fetch_coins(
        self,
        page: int = 1,
        per_page: int = 10,
        currency: str = "usd",
        ids: list[str] | None = None,
    ) -> Any:
        params: dict[str, Any] = {
            "vs_currency": currency,
            "order": "market_cap_desc",
            "per_page": per_page,
            "page": page,
            "sparkline": "true",
            "price_change_percentage": "1h,24h,7d",
        }
        if ids:
            params["ids"] = ",".join(ids)
        return await self._get("coins", "/coins/markets", params)

    async def fetch_coin(self, coin_id: str) -> Any:
        params = {
            "localization": "false",
            "tickers": "false",
            "market_data": "true",
            "community_data": "false",
            "developer_data": "false",
        }
        return await self._get("coin", f"/coins/{coin_id}", params)

    async def fetch_chart(self, coin_id: str, days: str = "1", currency: str = "usd") -> Any:
        params = {"vs_currency": currency, "days": days}
        return await self._get("chart", f"/coins/{coin_id}/market_chart", params)

    # ---------- internals ----------

    def _headers(self) -> dict[str, str]:
        headers = {"accept": "application/json"}
        if self.api_key:
            headers["x-cg-demo-api-key"] = self.api_key
        return headers

    async def _get(self, resource: str, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        status: int | None = None
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, headers=self._headers(), transport=self._transport
            ) as client:
                r = await client.get(url, params=params)
                status = r.status_code
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPStatusError as e:
            UPSTREAM_REQUESTS.labels(resource=resource, outcome="http_error").inc()
            logger.warning(
                "upstream %s returned %s", path, status, extra={"resource": resource, "status_code": status}
            )
            raise GatewayError(status, f"upstream returned HTTP {status} for {path}") from e
        except httpx.RequestError as e:
            UPSTREAM_REQUESTS.labels(resource=resource, outcome="network_error").inc()
            logger.warning("upstream %s unreachable: %s", path, e, extra={"resource": resource})
            raise GatewayError(None, f"upstream request failed for {path}: {e}") from e
        except ValueError as e:
            # body was not JSON
            UPSTREAM_REQUESTS.labels(resource=resource, outcome="bad_payload").inc()
            raise GatewayError(status, f"upstream returned invalid JSON for {path}") from e

        UPSTREAM_REQUESTS.labels(resource=resource, outcome="ok").inc()
        return data
