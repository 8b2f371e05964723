"""Company name, historical price series and the CNN Fear & Greed index."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Mapping

from stockresearch.normalize import extract_rows, first_row, parse_date, resolve_fields, to_number
from stockresearch.normalize import aliases
from stockresearch.providers import endpoints
from stockresearch.providers.base import Provider
from stockresearch.providers.client import ProviderClient
from stockresearch.providers.gather import gather
from stockresearch.schemas.market import CompanyName, FearGreed, HistoricalPrices
from stockresearch.services.assembler import assemble, collect_failures, payload_of

logger = logging.getLogger("stockresearch.services.market")


# ── Company name ─────────────────────────────────────────────────────────────


async def get_company_name(client: ProviderClient, symbol: str) -> CompanyName:
    """A profile without a name is still a 200 with ``name: null``."""
    results = await gather(client, [endpoints.finnhub_profile(symbol)])
    profile = first_row(payload_of(results[0]))
    name = profile.get("name") if profile else None
    return assemble(
        CompanyName,
        {"symbol": symbol, "name": name or None},
        {},
        collect_failures(results),
        usable=profile is not None,
        error="Failed to fetch company name",
    )


# ── Historical prices ────────────────────────────────────────────────────────


def fred_bars(payload: Any) -> list[dict]:
    """FRED carries one value per day; it stands in for every OHLC field."""
    bars = []
    for row in extract_rows(payload, "observations"):
        value = to_number(row.get("value"))  # "." marks a missing observation
        day = parse_date(row.get("date"))
        if value is None or day is None:
            continue
        bars.append(
            {
                "date": day.isoformat(),
                "open": value,
                "high": value,
                "low": value,
                "close": value,
                "volume": 0,
                "change": 0,
                "change_percent": 0,
            }
        )
    return sorted(bars, key=lambda bar: bar["date"])


def fmp_bars(payload: Any) -> list[dict]:
    bars = []
    for row in extract_rows(payload, "historical"):
        day = parse_date(row.get("date"))
        if day is None:
            continue
        bars.append({"date": day.isoformat(), **resolve_fields(row, aliases.PRICE_BAR)})
    return sorted(bars, key=lambda bar: bar["date"])


async def get_historical_prices(
    client: ProviderClient,
    symbol: str,
    start: date | None = None,
    end: date | None = None,
    data_source: str | None = None,
    fred_series_id: str | None = None,
) -> HistoricalPrices:
    use_fred = (data_source or "").upper() == Provider.FRED.label and bool(fred_series_id)
    if use_fred:
        call = endpoints.fred_observations(fred_series_id, start, end)
    else:
        call = endpoints.fmp_historical_prices(
            symbol, start, end, timeout_ms=client.config.historical_prices_timeout_ms
        )
    results = await gather(client, [call])
    payload = payload_of(results[0])
    bars = fred_bars(payload) if use_fred else fmp_bars(payload)

    return assemble(
        HistoricalPrices,
        {"symbol": symbol, "source": call.provider.label, "historical": bars},
        {"count": len(bars)},
        collect_failures(results),
        usable=bool(bars),
        error=f"No historical data available from {call.provider.label}",
    )


# ── Fear & Greed ─────────────────────────────────────────────────────────────


def _epoch_day(value: Any) -> str | None:
    millis = to_number(value)
    if millis is None:
        return None
    try:
        moment = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    return moment.date().isoformat()


def _point(x: Any, y: Any) -> tuple[str, float] | None:
    day, value = _epoch_day(x), to_number(y)
    if day is None or value is None:
        return None
    return day, value


def fear_greed_points(payload: Any) -> list[tuple[str, float]]:
    """``(date, value)`` pairs from the current or one of the legacy shapes."""
    if not isinstance(payload, Mapping):
        return []
    candidates: list[tuple[str, float] | None] = []
    current = payload.get("fear_and_greed_historical")
    if isinstance(current, Mapping):
        candidates = [_point(row.get("x"), row.get("y")) for row in extract_rows(current, "data")]
    if not any(candidates):
        legacy = payload.get("historical") or payload.get("data")
        if isinstance(legacy, list):
            candidates = [_point(row.get("x"), row.get("y")) for row in extract_rows(legacy)]
        elif isinstance(legacy, Mapping):
            xs, ys = legacy.get("x"), legacy.get("y")
            if isinstance(xs, list) and isinstance(ys, list):
                candidates = [_point(x, y) for x, y in zip(xs, ys)]
    return sorted(p for p in candidates if p is not None)


async def get_fear_greed(client: ProviderClient) -> FearGreed:
    results = await gather(client, [endpoints.cnn_fear_greed()])
    payload = payload_of(results[0])
    points = fear_greed_points(payload)

    summary = payload.get("fear_and_greed") if isinstance(payload, Mapping) else None
    summary = summary if isinstance(summary, Mapping) else {}
    score = to_number(summary.get("score"))
    if score is None and points:
        score = points[-1][1]
    rating = summary.get("rating") if isinstance(summary.get("rating"), str) else None

    if payload is not None and not points:
        logger.warning("fear-greed payload had no recognizable points")
    return assemble(
        FearGreed,
        {"score": score, "rating": rating},
        {"historical": [{"date": day, "close": value} for day, value in points]},
        collect_failures(results),
        usable=bool(points),
        error="Failed to fetch Fear & Greed Index data",
    )
