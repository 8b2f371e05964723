"""Ticker news from the Alpha Vantage NEWS_SENTIMENT feed.

Only items whose ``ticker_sentiment`` mentions the symbol are kept, most
relevant first.  Alpha Vantage reports quota and key problems inside a 200
body; those are reclassified as failures.
"""

from __future__ import annotations

from typing import Any, Mapping

from stockresearch.normalize import extract_rows, resolve_fields
from stockresearch.normalize import aliases
from stockresearch.providers import endpoints
from stockresearch.providers.base import ProviderOk
from stockresearch.providers.client import ProviderClient
from stockresearch.providers.gather import gather
from stockresearch.schemas.activity import News
from stockresearch.services.assembler import assemble, body_failure, collect_failures
from stockresearch.services.insider_service import text

MAX_ITEMS = 5


def ticker_sentiment(item: Mapping[str, Any], symbol: str) -> Mapping[str, Any] | None:
    for entry in extract_rows(item.get("ticker_sentiment")):
        ticker = entry.get("ticker")
        if isinstance(ticker, str) and ticker.upper() == symbol.upper():
            return entry
    return None


def news_items(payload: Any, symbol: str, limit: int = MAX_ITEMS) -> list[dict]:
    items = []
    for item in extract_rows(payload, "feed"):
        sentiment = ticker_sentiment(item, symbol)
        if sentiment is None:
            continue
        authors = item.get("authors")
        items.append(
            {
                "title": text(item, "title"),
                "url": text(item, "url"),
                "time_published": text(item, "time_published"),
                "authors": [a for a in authors if isinstance(a, str)]
                if isinstance(authors, list)
                else [],
                "summary": text(item, "summary"),
                "source": text(item, "source"),
                "sentiment_label": text(sentiment, "ticker_sentiment_label"),
                **resolve_fields(sentiment, aliases.ALPHA_VANTAGE_TICKER_SENTIMENT),
            }
        )
    items.sort(
        key=lambda i: i["relevance_score"] if i["relevance_score"] is not None else -1.0,
        reverse=True,
    )
    return items[:limit]


async def get_news(client: ProviderClient, symbol: str) -> News:
    results = await gather(client, [endpoints.alpha_vantage_news(symbol)])
    result = results[0]
    failures = collect_failures(results)
    if isinstance(result, ProviderOk):
        failure = body_failure(result)
        if failure is not None:
            failures.append(failure)

    usable = not failures
    return assemble(
        News,
        {"symbol": symbol, "data": news_items(result.payload, symbol) if usable else []},
        {},
        failures,
        usable=usable,
        error="Failed to fetch news data",
    )
