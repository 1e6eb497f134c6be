from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from cryptotrack.schemas import HoldingValuation, PortfolioItem, PortfolioValuation


def _pct(delta: float, base: float) -> float:
    """Percentage of ``delta`` over ``base``; 0 when base is 0."""
    return (delta / base) * 100.0 if base > 0 else 0.0


def price_index(coins: Iterable[dict[str, Any]]) -> dict[str, float]:
    """Map coin id -> current_price from a /coins/markets payload."""
    out: dict[str, float] = {}
    for coin in coins or []:
        cid = coin.get("id")
        price = coin.get("current_price")
        if cid and isinstance(price, int | float):
            out[cid] = float(price)
    return out


def value_portfolio(
    items: list[PortfolioItem], coins: Iterable[dict[str, Any]], currency: str = "usd"
) -> PortfolioValuation:
    """Price each holding at its current market price; unknown coins are priced at 0."""
    prices = price_index(coins)
    holdings: list[HoldingValuation] = []
    for item in items:
        current_price = prices.get(item.coin_id, 0.0)
        current_value = item.amount * current_price
        purchase_value = item.amount * item.purchase_price
        profit = current_value - purchase_value
        holdings.append(
            HoldingValuation(
                **item.model_dump(),
                current_price=current_price,
                current_value=current_value,
                purchase_value=purchase_value,
                profit=profit,
                profit_percentage=_pct(profit, purchase_value),
            )
        )

    total_value = sum(h.current_value for h in holdings)
    total_cost = sum(h.purchase_value for h in holdings)
    total_profit = total_value - total_cost
    return PortfolioValuation(
        currency=currency,
        holdings=holdings,
        total_value=total_value,
        total_cost=total_cost,
        total_profit=total_profit,
        total_profit_percentage=_pct(total_profit, total_cost),
    )
