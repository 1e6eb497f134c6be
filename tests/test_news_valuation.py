from datetime import UTC, datetime

from cryptotrack.news import filter_news, static_news
from cryptotrack.schemas import PortfolioItem
from cryptotrack.valuation import price_index, value_portfolio


def _item(coin_id, amount, price, item_id=1):
    return PortfolioItem(
        id=item_id,
        user_id=1,
        coin_id=coin_id,
        symbol=coin_id[:3],
        name=coin_id.title(),
        amount=amount,
        purchase_price=price,
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
    )


def test_static_news_has_iso_timestamps():
    for item in static_news():
        datetime.fromisoformat(item["publishedAt"])


def test_filter_all_keeps_everything():
    items = static_news()
    assert filter_news(items, "all") == items
    assert filter_news(items, None) == items


def test_filter_text_category_matches_title():
    items = [
        {"category": "market", "title": "Bitcoin rallies", "summary": ""},
        {"category": "market", "title": "Stocks flat", "summary": ""},
    ]
    assert filter_news(items, "Bitcoin") == [items[0]]


def test_price_index_skips_missing_prices():
    assert price_index([{"id": "a", "current_price": 2}, {"id": "b", "current_price": None}]) == {"a": 2.0}


def test_value_portfolio_gain_and_loss():
    coins = [{"id": "bitcoin", "current_price": 30000}, {"id": "ethereum", "current_price": 1000}]
    items = [_item("bitcoin", 1.0, 20000), _item("ethereum", 2.0, 1500, item_id=2)]

    v = value_portfolio(items, coins, "usd")

    btc, eth = v.holdings
    assert btc.profit == 10000
    assert btc.profit_percentage == 50.0
    assert eth.profit == -1000
    assert v.total_value == 32000
    assert v.total_cost == 23000
    assert v.total_profit == 9000


def test_unknown_coin_priced_at_zero():
    v = value_portfolio([_item("mystery", 3.0, 10)], [], "usd")
    assert v.holdings[0].current_value == 0
    assert v.holdings[0].profit_percentage == -100.0
