"""Shares outstanding, valuation and payout figures from FMP key-metrics and ratios."""

from __future__ import annotations

from typing import Any, Mapping

from stockresearch.normalize import extract_rows, first_row, resolve_fields
from stockresearch.normalize import aliases
from stockresearch.providers import endpoints
from stockresearch.providers.base import (
    FailureKind,
    ProviderCall,
    ProviderFailure,
    ProviderOk,
    ProviderResult,
)
from stockresearch.providers.client import ProviderClient
from stockresearch.providers.gather import gather
from stockresearch.schemas.fundamentals import KeyMetrics
from stockresearch.services.assembler import assemble, describe_failure

_SUBSCRIPTION_MARKERS = ("Premium", "limit", "subscription")


def subscription_limited(result: ProviderResult) -> bool:
    """FMP answers over-limit requests with a plain-text message."""
    if isinstance(result, ProviderOk) and isinstance(result.payload, str):
        text = result.payload
    elif isinstance(result, ProviderFailure) and result.kind is FailureKind.MALFORMED:
        text = result.message or ""
    else:
        return False
    return any(marker in text for marker in _SUBSCRIPTION_MARKERS)


def classify(
    call: ProviderCall, result: ProviderResult
) -> tuple[list[Mapping[str, Any]], ProviderFailure | None]:
    """Rows of a key-metrics/ratios call, or the failure explaining their absence."""
    if subscription_limited(result):
        return [], ProviderFailure(
            call.provider,
            FailureKind.PAYMENT_REQUIRED,
            None,
            "Subscription limit (limit parameter must be 0-5)",
        )
    if isinstance(result, ProviderFailure):
        return [], result
    rows = extract_rows(result.payload, "data")
    if not rows:
        return [], ProviderFailure(
            call.provider, FailureKind.NO_DATA, result.http_status, "No data available"
        )
    return rows, None


async def get_key_metrics(client: ProviderClient, symbol: str) -> KeyMetrics:
    calls = [endpoints.fmp_key_metrics(symbol), endpoints.fmp_ratios(symbol)]
    results = await gather(client, calls)

    classified = [classify(call, result) for call, result in zip(calls, results)]
    (metric_rows, _), (ratio_rows, _) = classified
    failures = [failure for _, failure in classified if failure is not None]
    errors = [
        f"{describe_failure(failure)} ({call.endpoint.rsplit('/', 1)[-1]})"
        for call, (_, failure) in zip(calls, classified)
        if failure is not None
    ]

    latest = metric_rows[0] if metric_rows else None
    values = resolve_fields(latest, aliases.FMP_KEY_METRICS)
    payout = resolve_fields(first_row(ratio_rows), aliases.FMP_RATIOS)["payout_ratio"]

    return assemble(
        KeyMetrics,
        {
            "symbol": symbol,
            "date": latest.get("date") if latest else None,
            "shares_outstanding": values["shares_outstanding"],
            "market_cap": values["market_cap"],
            "enterprise_value": values["enterprise_value"],
            "roic": values["roic"],
            "errors": errors,
        },
        {"payout_ratio": payout},
        failures,
        usable=latest is not None or payout is not None,
        error="Failed to fetch key metrics",
    )
