"""Upcoming and past earnings dates from API Ninjas."""

from __future__ import annotations

from datetime import date
from typing import Any

from stockresearch.normalize import extract_rows, parse_date, resolve_fields, to_number
from stockresearch.normalize import aliases
from stockresearch.providers import endpoints
from stockresearch.providers.client import ProviderClient
from stockresearch.providers.gather import gather
from stockresearch.schemas.activity import EarningsCalendar
from stockresearch.services.assembler import assemble, collect_failures, payload_of


def whole(value: Any) -> int | None:
    number = to_number(value)
    return int(number) if number is not None else None


def calendar_events(payload: Any) -> list[dict]:
    """Dated rows in ascending date order; undated rows are dropped."""
    events = []
    for row in extract_rows(payload, "data"):
        day = parse_date(row.get("date"))
        if day is None:
            continue
        events.append(
            {
                "date": day.isoformat(),
                **resolve_fields(row, aliases.API_NINJAS_EARNINGS),
                "quarter": whole(row.get("quarter")),
                "year": whole(row.get("year")),
            }
        )
    return sorted(events, key=lambda e: e["date"])


def next_earnings(events: list[dict], today: date) -> dict | None:
    """First date strictly after today, else the latest past one."""
    upcoming = [e for e in events if e["date"] > today.isoformat()]
    if upcoming:
        return upcoming[0]
    return events[-1] if events else None


async def get_earnings_calendar(
    client: ProviderClient, symbol: str, today: date | None = None
) -> EarningsCalendar:
    today = today or date.today()
    results = await gather(client, [endpoints.api_ninjas_earnings_calendar(symbol)])
    events = calendar_events(payload_of(results[0]))
    return assemble(
        EarningsCalendar,
        {"symbol": symbol, "all_earnings": events},
        {"next_earnings": next_earnings(events, today)},
        collect_failures(results),
        usable=bool(events),
        error="No earnings data available",
    )
