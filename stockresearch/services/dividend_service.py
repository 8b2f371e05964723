"""Dividend history with provider fallback (FMP, then Finnhub, then Alpha Vantage).

All configured providers are queried concurrently; the first one in
priority order that yields at least one positive dividend is used.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from stockresearch.models.records import AnnualAggregate, DividendEvent
from stockresearch.normalize import RecordKind, SchemaHints, extract_rows, normalize_all
from stockresearch.providers import endpoints
from stockresearch.providers.base import (
    FailureKind,
    Provider,
    ProviderFailure,
    ProviderOk,
    ProviderResult,
)
from stockresearch.providers.client import ProviderClient
from stockresearch.providers.gather import gather
from stockresearch.schemas.dividends import DividendHistory
from stockresearch.services.assembler import assemble, body_failure
from stockresearch.services.metrics import (
    aggregate_by_year,
    annual_growth_rate,
    filter_trailing_window,
    project_current_year,
)

logger = logging.getLogger("stockresearch.services.dividends")


@dataclass(frozen=True)
class DividendSummary:
    provider: Provider
    events: list[DividendEvent]
    """Trailing-window events, most recent first."""
    by_year: AnnualAggregate
    current_year_projected: bool
    growth_rate: float | None

    @property
    def latest(self) -> DividendEvent | None:
        return self.events[0] if self.events else None


def events_from(result: ProviderOk) -> tuple[list[DividendEvent], ProviderFailure | None]:
    """Normalized events, or the failure explaining why there are none."""
    rows = extract_rows(result.payload, "data", "dividends", "historical")
    events = normalize_all(rows, SchemaHints(RecordKind.DIVIDEND, result.provider))
    if events:
        return events, None
    failure = body_failure(result)
    if failure is not None:
        return [], failure
    return [], ProviderFailure(
        result.provider, FailureKind.NO_DATA, result.http_status, "No dividend data in response"
    )


def summarize(
    provider: Provider, events: list[DividendEvent], today: date, window_years: int
) -> DividendSummary:
    ordered = sorted(events, key=lambda e: e.ex_date, reverse=True)
    window = filter_trailing_window(ordered, window_years, today)
    by_year, projected = project_current_year(aggregate_by_year(window), today.year)
    return DividendSummary(
        provider=provider,
        events=window,
        by_year=by_year,
        current_year_projected=projected,
        growth_rate=annual_growth_rate(by_year),
    )


async def load_dividends(
    client: ProviderClient, symbol: str, today: date | None = None
) -> tuple[DividendSummary | None, list[ProviderFailure]]:
    today = today or date.today()
    window_years = client.config.dividend_history_years
    calls = [
        endpoints.fmp_dividends(symbol),
        endpoints.finnhub_dividends(symbol, date(today.year - window_years, 1, 1), today),
        endpoints.alpha_vantage_dividends(symbol),
    ]
    results: list[ProviderResult] = await gather(client, calls)

    failures: list[ProviderFailure] = []
    for result in results:
        if isinstance(result, ProviderFailure):
            failures.append(result)
            continue
        events, failure = events_from(result)
        if failure is not None:
            failures.append(failure)
            continue
        if failures:
            logger.info(
                "dividends symbol=%s source=%s after %d failed provider(s)",
                symbol,
                result.provider.value,
                len(failures),
            )
        return summarize(result.provider, events, today, window_years), failures
    return None, failures


async def get_dividend_history(
    client: ProviderClient, symbol: str, today: date | None = None
) -> DividendHistory:
    summary, failures = await load_dividends(client, symbol, today)
    if summary is None:
        return assemble(
            DividendHistory, {}, {}, failures, usable=False, error="No dividend data available"
        )
    return assemble(
        DividendHistory,
        {
            "symbol": symbol,
            "source": summary.provider.label,
            "historical_dividends": [
                {
                    "date": e.ex_date.isoformat(),
                    "dividend": e.amount_per_share,
                    "adjusted_dividend": e.adjusted_amount,
                }
                for e in summary.events
            ],
        },
        {
            "dividends_by_year": {str(y): v for y, v in sorted(summary.by_year.items())},
            "current_year_projected": summary.current_year_projected,
            "dividend_growth_rate": summary.growth_rate,
            "latest_dividend": summary.latest.amount_per_share if summary.latest else None,
        },
        failures,
    )
