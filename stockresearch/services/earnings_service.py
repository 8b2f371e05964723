"""Earnings growth: historical EPS CAGR plus any analyst-published growth rate."""

from __future__ import annotations

from typing import Any, Mapping

from stockresearch.models.records import GrowthEstimate
from stockresearch.normalize import RecordKind, SchemaHints, extract_rows, normalize_all, resolve_field
from stockresearch.normalize.aliases import ANALYST_GROWTH
from stockresearch.providers import endpoints
from stockresearch.providers.base import Provider, ProviderOk
from stockresearch.providers.client import ProviderClient
from stockresearch.providers.gather import gather
from stockresearch.schemas.fundamentals import EarningsGrowth
from stockresearch.services.assembler import assemble, collect_failures
from stockresearch.services.metrics import series_cagr

FMP_INCOME = SchemaHints(RecordKind.INCOME, Provider.FMP)


def analyst_growth_rate(payload: Any) -> float | None:
    """Look for a published growth figure in the analyst payload."""
    candidates = [payload] if isinstance(payload, Mapping) else extract_rows(payload)
    for item in candidates:
        rate = resolve_field(item, ANALYST_GROWTH)
        if rate is not None:
            return rate
    return None


def _growth_out(estimate: GrowthEstimate | None) -> dict | None:
    if estimate is None:
        return None
    return {
        "rate": estimate.rate,
        "basis_years": estimate.basis_years,
        "method": estimate.method,
    }


async def get_earnings_growth(client: ProviderClient, symbol: str) -> EarningsGrowth:
    """EPS CAGR over the last five annual statements, oldest to newest.

    A failed or empty analyst-estimates call only nulls the analyst fields.
    """
    results = await gather(
        client,
        [endpoints.fmp_income_statement(symbol, limit=5), endpoints.fmp_analyst_estimates(symbol)],
    )
    income, estimates = results

    records = []
    if isinstance(income, ProviderOk):
        records = normalize_all(extract_rows(income.payload, "data"), FMP_INCOME)
    records.sort(key=lambda r: r.period_end_date)

    historical = None
    if len(records) >= 2:
        rate = series_cagr([r.eps for r in records])
        if rate is not None:
            historical = GrowthEstimate(rate, len(records) - 1, "cagr")

    analyst_data = None
    analyst = None
    if isinstance(estimates, ProviderOk) and estimates.payload is not None:
        analyst_data = estimates.payload
        rate = analyst_growth_rate(analyst_data)
        if rate is not None:
            # A published rate is a point estimate, not a span of history.
            analyst = GrowthEstimate(rate, 1, "analyst")

    usable = bool(records) or bool(analyst_data)
    return assemble(
        EarningsGrowth,
        {
            "symbol": symbol,
            "eps_data": [
                {"date": r.period_end_date.isoformat(), "eps": r.eps} for r in records
            ],
            "analyst_data": analyst_data,
        },
        {
            "historical_growth_rate": historical.rate if historical else None,
            "analyst_growth_rate": analyst.rate if analyst else None,
            "historical_growth": _growth_out(historical),
            "analyst_growth": _growth_out(analyst),
        },
        collect_failures(results),
        usable=usable,
        error="Failed to fetch earnings growth data",
    )
