"""The full Finnhub ``/stock/metric`` snapshot, passed through as reported."""

from __future__ import annotations

from typing import Any, Mapping

from stockresearch.providers import endpoints
from stockresearch.providers.base import ProviderOk
from stockresearch.providers.client import ProviderClient
from stockresearch.providers.gather import gather
from stockresearch.schemas.activity import MetricSnapshot
from stockresearch.services.assembler import assemble, body_failure, collect_failures


def mapping(payload: Any, key: str) -> dict:
    value = payload.get(key) if isinstance(payload, Mapping) else None
    return dict(value) if isinstance(value, Mapping) else {}


async def get_metric_snapshot(client: ProviderClient, symbol: str) -> MetricSnapshot:
    results = await gather(client, [endpoints.finnhub_metric(symbol)])
    result = results[0]
    failures = collect_failures(results)
    payload = None
    if isinstance(result, ProviderOk):
        failure = body_failure(result)
        if failure is not None:
            failures.append(failure)
        else:
            payload = result.payload

    metric = mapping(payload, "metric")
    metric_type = payload.get("metricType") if isinstance(payload, Mapping) else None
    return assemble(
        MetricSnapshot,
        {
            "symbol": symbol,
            "metric_type": metric_type if isinstance(metric_type, str) else None,
            "metric": metric,
            "series": mapping(payload, "series"),
        },
        {},
        failures,
        usable=bool(metric),
        error="Failed to fetch metrics data",
    )
