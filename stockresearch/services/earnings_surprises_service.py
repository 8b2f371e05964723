"""Reported against estimated EPS per quarter, from FMP earnings surprises."""

from __future__ import annotations

from typing import Any

from stockresearch.normalize import extract_rows, parse_date, resolve_fields
from stockresearch.normalize import aliases
from stockresearch.providers import endpoints
from stockresearch.providers.base import ProviderOk
from stockresearch.providers.client import ProviderClient
from stockresearch.providers.gather import gather
from stockresearch.schemas.activity import EarningsSurprises
from stockresearch.services.assembler import assemble, body_failure, collect_failures, payload_of
from stockresearch.services.metrics import percent_change


def surprise_rows(payload: Any) -> list[dict]:
    """Most recent quarter first; ``eps`` is the actual, else the estimate."""
    rows = []
    for row in extract_rows(payload, "data"):
        day = parse_date(row.get("date"))
        if day is None:
            continue
        values = resolve_fields(row, aliases.FMP_EARNINGS_SURPRISE)
        actual, estimate = values["actual"], values["estimate"]
        rows.append(
            {
                "date": day.isoformat(),
                "eps": actual if actual is not None else estimate,
                "eps_estimate": estimate,
                "eps_actual": actual,
                "surprise": actual - estimate
                if actual is not None and estimate is not None
                else None,
                "surprise_rate": percent_change(estimate, actual),
            }
        )
    return sorted(rows, key=lambda r: r["date"], reverse=True)


async def get_earnings_surprises(client: ProviderClient, symbol: str) -> EarningsSurprises:
    results = await gather(client, [endpoints.fmp_earnings_surprises(symbol)])
    failures = collect_failures(results)
    if isinstance(results[0], ProviderOk):
        failure = body_failure(results[0])
        if failure is not None:
            failures.append(failure)

    rows = [] if failures else surprise_rows(payload_of(results[0]))
    return assemble(
        EarningsSurprises,
        {"symbol": symbol, "data": rows},
        {},
        failures,
        usable=bool(rows),
        error="Failed to fetch earnings data",
    )
