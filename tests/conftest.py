"""
Shared pytest fixtures: a fake clock, a fake market-data gateway that counts
calls, and a TestClient wired to both.
"""

import pytest
from fastapi.testclient import TestClient

from cryptotrack.cache import TTLCache
from cryptotrack.config import Settings
from cryptotrack.gateway import GatewayError
from cryptotrack.main import create_app
from cryptotrack.store import RecordStore


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


COINS = [
    {"id": "bitcoin", "symbol": "btc", "name": "Bitcoin", "current_price": 30000.0, "market_cap_rank": 1},
    {"id": "ethereum", "symbol": "eth", "name": "Ethereum", "current_price": 2000.0, "market_cap_rank": 2},
]


class FakeGateway:
    """Stands in for MarketDataGateway; records every call."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.fail_with: GatewayError | None = None

    def _record(self, *call):
        self.calls.append(call)
        if self.fail_with is not None:
            raise self.fail_with

    def count(self, name: str) -> int:
        return sum(1 for c in self.calls if c[0] == name)

    async def fetch_trending(self):
        self._record("trending")
        return {"coins": [{"item": {"id": "pepe"}}]}

    async def fetch_global(self):
        self._record("global")
        return {"data": {"active_cryptocurrencies": 10000}}

    async def fetch_coins(self, page=1, per_page=10, currency="usd", ids=None):
        self._record("coins", page, per_page, currency, tuple(ids or ()))
        coins = [c for c in COINS if not ids or c["id"] in ids]
        return [{**c, "page": page} for c in coins[:per_page]]

    async def fetch_coin(self, coin_id):
        self._record("coin", coin_id)
        return {"id": coin_id, "market_data": {}}

    async def fetch_chart(self, coin_id, days="1", currency="usd"):
        self._record("chart", coin_id, days, currency)
        return {"prices": [[1700000000000, 30000.0], [1700000300000, 30100.0]]}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def store():
    return RecordStore()


@pytest.fixture
def client(clock, gateway, store):
    app = create_app(
        Settings(),
        cache=TTLCache(ttl_seconds=60, clock=clock),
        gateway=gateway,
        store=store,
    )
    with TestClient(app) as c:
        yield c
