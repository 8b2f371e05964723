"""Trailing and forward P/E, dividend snapshot and sector benchmark (Finnhub)."""

from __future__ import annotations

from datetime import date

from stockresearch.normalize import (
    RecordKind,
    SchemaHints,
    extract_rows,
    first_row,
    normalize_all,
    resolve_fields,
)
from stockresearch.normalize import aliases
from stockresearch.providers import endpoints
from stockresearch.providers.base import Provider
from stockresearch.providers.client import ProviderClient
from stockresearch.providers.gather import gather
from stockresearch.schemas.fundamentals import PERatios
from stockresearch.services.assembler import assemble, collect_failures, payload_of, positive
from stockresearch.services.metrics import forward_pe, price_to_earnings

FINNHUB_ESTIMATES = SchemaHints(RecordKind.ESTIMATE, Provider.FINNHUB)

INDUSTRY_AVERAGE_PE: dict[str, float] = {
    "Restaurants": 20.72,
    "Technology": 25.5,
    "Healthcare": 22.8,
    "Financial Services": 12.4,
    "Consumer Discretionary": 18.9,
    "Consumer Staples": 19.2,
    "Energy": 15.6,
    "Industrials": 17.8,
    "Materials": 16.2,
    "Real Estate": 14.3,
    "Utilities": 18.1,
    "Communication Services": 21.7,
}


def industry_average_pe(sector: str | None) -> float | None:
    """Exact sector match first, then a case-insensitive containment match."""
    if not sector:
        return None
    if sector in INDUSTRY_AVERAGE_PE:
        return INDUSTRY_AVERAGE_PE[sector]
    lowered = sector.lower()
    for industry, pe in INDUSTRY_AVERAGE_PE.items():
        if industry.lower() in lowered or lowered in industry.lower():
            return pe
    return None


async def get_pe_ratios(
    client: ProviderClient, symbol: str, today: date | None = None
) -> PERatios:
    today = today or date.today()
    results = await gather(
        client,
        [
            endpoints.finnhub_quote(symbol),
            endpoints.finnhub_metric(symbol),
            endpoints.finnhub_profile(symbol),
        ],
    )
    quote, metric, profile = (payload_of(r) for r in results)

    price = positive(resolve_fields(first_row(quote), aliases.FINNHUB_QUOTE)["price"])
    metric_block = metric.get("metric") if isinstance(metric, dict) else None
    m = resolve_fields(metric_block, aliases.FINNHUB_METRIC)

    profile_row = first_row(profile) or {}
    sector = next(
        (
            value
            for value in (profile_row.get("finnhubIndustry"), profile_row.get("sector"))
            if isinstance(value, str) and value
        ),
        None,
    )
    estimates = {
        e.fiscal_year: e
        for e in normalize_all(extract_rows(profile_row, "estimates"), FINNHUB_ESTIMATES)
    }

    year1, year2 = today.year, today.year + 1
    est1, est2 = estimates.get(year1), estimates.get(year2)
    growth = m["eps_growth_3y"] / 100 if m["eps_growth_3y"] is not None else None

    fwd1 = forward_pe(
        price,
        analyst_eps=est1.eps_avg if est1 else None,
        metrics_forward_pe=m["forward_pe"],
        trailing_eps=m["eps_ttm"],
        growth_rate=growth,
        years_forward=1,
    )
    fwd2 = forward_pe(
        price,
        analyst_eps=est2.eps_avg if est2 else None,
        trailing_eps=m["eps_ttm"],
        growth_rate=growth,
        years_forward=2,
    )

    current_pe = m["pe_ttm"]
    if current_pe is None:
        current_pe = price_to_earnings(price, m["eps_ttm"])

    usable = price is not None or any(v is not None for v in m.values()) or bool(sector)
    return assemble(
        PERatios,
        {
            "symbol": symbol,
            "current_price": price,
            "sector": sector,
            "dividend_per_share": m["dividend_per_share"],
            "dividend_yield": m["dividend_yield"],
            "dividend_growth_rate": m["dividend_growth_rate"],
            "target_year_1": year1,
            "target_year_2": year2,
        },
        {
            "current_pe": current_pe,
            "forward_pe_1_year": fwd1.value if fwd1 else None,
            "forward_pe_2_year": fwd2.value if fwd2 else None,
            "forward_pe_source": fwd1.source if fwd1 else None,
            "forward_eps_1_year": fwd1.eps if fwd1 else None,
            "forward_eps_2_year": fwd2.eps if fwd2 else None,
            "industry_average_pe": industry_average_pe(sector),
        },
        collect_failures(results),
        usable=usable,
        error="Failed to fetch PE ratio data",
    )
