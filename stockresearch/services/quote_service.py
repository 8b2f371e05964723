"""Price snapshot from FMP: quote, profile, share float and a 52-week range."""

from __future__ import annotations

from datetime import date, timedelta

from stockresearch.normalize import extract_rows, first_row, resolve_fields
from stockresearch.normalize import aliases
from stockresearch.providers import endpoints
from stockresearch.providers.client import ProviderClient
from stockresearch.providers.gather import gather
from stockresearch.schemas.fundamentals import Quote
from stockresearch.services.assembler import (
    assemble,
    collect_failures,
    describe_failure,
    payload_of,
)
from stockresearch.services.metrics import price_range


async def get_quote(client: ProviderClient, symbol: str, today: date | None = None) -> Quote:
    """Profile values win over the quote; bar-derived 52-week range wins over both."""
    today = today or date.today()
    results = await gather(
        client,
        [
            endpoints.fmp_quote(symbol),
            endpoints.fmp_profile(symbol),
            endpoints.fmp_shares_float(symbol),
            endpoints.fmp_historical_prices(
                symbol,
                today - timedelta(days=365),
                today,
                timeout_ms=client.config.historical_prices_timeout_ms,
            ),
        ],
    )
    quote, profile, shares_float, history = (payload_of(r) for r in results)

    q = resolve_fields(first_row(quote), aliases.FMP_QUOTE)
    p = resolve_fields(first_row(profile), aliases.FMP_PROFILE)
    sf = resolve_fields(first_row(shares_float), aliases.FMP_SHARES_FLOAT)

    market_cap = p["market_cap"] if p["market_cap"] is not None else q["market_cap"]
    candidates = (p["shares_outstanding"], q["shares_outstanding"], sf["shares_outstanding"])
    shares = next((v for v in candidates if v is not None), None)

    bars = [resolve_fields(row, aliases.PRICE_BAR) for row in extract_rows(history, "historical")]
    year_high, year_low = price_range(bars)
    if year_high is None or year_low is None:
        year_high, year_low = q["year_high"], q["year_low"]

    # The price-history call only refines the range; its failure is not reported.
    failures = collect_failures(results[:3])
    return assemble(
        Quote,
        {
            "symbol": symbol,
            "price": q["price"],
            "fmp_pe": q["pe"],
            "market_cap": market_cap,
            "shares_outstanding": shares,
            "change_percent": q["change_percent"],
            "errors": [describe_failure(failure) for failure in failures],
        },
        {"year_high": year_high, "year_low": year_low},
        failures,
        usable=any(v is not None for v in (q["price"], market_cap, shares)),
        error="Failed to fetch FMP data",
    )
