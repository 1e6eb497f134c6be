# cryptotrack/news.py
# Static news feed. There is no news provider behind it; the list is rebuilt
# with publish times relative to "now" and served through the same cache path
# as the market endpoints.

from __future__ import annotations

from cryptotrack.schemas import NewsItem
from cryptotrack.utils import iso_hours_ago

_IMG = "https://images.unsplash.com/photo-{}?ixlib=rb-1.2.1&auto=format&fit=crop&w=100&q=80"

# (title, summary, source, hours ago, image id, url, category)
_HEADLINES: list[tuple[str, str, str, float, str, str, str]] = [
    (
        "Bitcoin Surpasses $63K as Institutional Adoption Continues",
        "The world's largest cryptocurrency by market cap has reached new heights "
        "as institutional investors continue to...",
        "CoinDesk",
        2.0,
        "1621761663457-38c28f830623",
        "https://www.coindesk.com/",
        "bitcoin",
    ),
    (
        "Ethereum's Shanghai Upgrade on Track for March Release",
        "Ethereum developers have confirmed the Shanghai upgrade is proceeding as planned, "
        "which will enable staked ETH withdrawals...",
        "The Block",
        5.0,
        "1639152201720-5e6e620cce34",
        "https://www.theblock.co/",
        "ethereum",
    ),
    (
        "Crypto Market Analysis: Key Trends for Q3 2023",
        "Several key trends are emerging in the cryptocurrency market. DeFi protocols continue "
        "to gain traction, while regulatory clarity improves across major jurisdictions.",
        "CryptoAnalytics",
        1.25,
        "1605792657660-596af9009e82",
        "#",
        "market",
    ),
    (
        "Institutional Investors Allocate Record Amount to Crypto Assets",
        "Institutional investment in cryptocurrency has reached all-time highs, with asset "
        "managers, hedge funds, and even pension funds allocating capital to digital assets.",
        "FinanceInsider",
        1.5,
        "1551135049-8a33b5883817",
        "#",
        "market",
    ),
    (
        "SEC Chairman Discusses Future of Crypto Regulation in Senate Hearing",
        "The SEC Chairman outlined the agency's approach to cryptocurrency regulation, "
        "emphasizing investor protection while acknowledging the need for innovation.",
        "RegulatoryWatch",
        2.5,
        "1589578228447-e1a4e481c6c8",
        "#",
        "regulation",
    ),
    (
        "New Crypto Tax Reporting Requirements to Take Effect Next Year",
        "Tax authorities have announced new reporting requirements for cryptocurrency "
        "transactions. Exchanges and individuals will need to comply with stricter documentation.",
        "TaxReporter",
        3.5,
        "1554224155-6726b3ff858f",
        "#",
        "regulation",
    ),
]

# categories that also match on free text in the title/summary
_TEXT_CATEGORIES = {"bitcoin", "ethereum"}


def static_news() -> list[dict]:
    """Return the demo feed as JSON-ready dicts (camelCase keys)."""
    items = [
        NewsItem(
            id=i,
            title=title,
            summary=summary,
            source=source,
            published_at=iso_hours_ago(hours),
            image_url=_IMG.format(image),
            url=url,
            category=category,
        )
        for i, (title, summary, source, hours, image, url, category) in enumerate(_HEADLINES, start=1)
    ]
    return [item.model_dump(by_alias=True) for item in items]


def filter_news(items: list[dict], category: str | None) -> list[dict]:
    """Filter by category; 'all' or None keeps everything."""
    category = (category or "all").strip().lower()
    if category == "all":
        return list(items)
    if category in _TEXT_CATEGORIES:
        return [
            item
            for item in items
            if item.get("category") == category
            or category in item.get("title", "").lower()
            or category in item.get("summary", "").lower()
        ]
    return [item for item in items if item.get("category") == category]
