"""Ten-year free cash flow, share buyback and revenue series (FMP)."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from stockresearch.normalize import extract_rows, resolve_field, resolve_fields, year_of
from stockresearch.normalize import aliases
from stockresearch.normalize.aliases import FieldAliases
from stockresearch.providers import endpoints
from stockresearch.providers.client import ProviderClient
from stockresearch.providers.gather import gather
from stockresearch.schemas.fundamentals import Graphs
from stockresearch.services.assembler import assemble, collect_failures, payload_of
from stockresearch.services.metrics import percent_change

_REVENUE = FieldAliases(("revenue", "revenues"))


def statement_year(row: Mapping[str, Any]) -> int | None:
    return year_of(row.get("calendarYear")) or year_of(row.get("date"))


def free_cash_flow(row: Mapping[str, Any]) -> float | None:
    values = resolve_fields(row, aliases.FMP_CASH_FLOW)
    ocf, capex = values["operating_cash_flow"], values["capital_expenditure"]
    if ocf is None:
        return None
    fcf = ocf - abs(capex or 0.0)
    return fcf or None


def net_buybacks(row: Mapping[str, Any]) -> float | None:
    """Repurchases net of issuance; capex-style negative signs are ignored."""
    values = resolve_fields(row, aliases.FMP_CASH_FLOW)
    repurchased, issued = values["stock_repurchased"], values["stock_issued"]
    if repurchased is None and issued is None:
        return None
    net = abs(repurchased or 0.0) - abs(issued or 0.0)
    return net or None


def revenue(row: Mapping[str, Any]) -> float | None:
    value = resolve_field(row, _REVENUE)
    return value if value is not None and value > 0 else None


def build_series(points: Iterable[tuple[int, float]]) -> list[dict]:
    """Change against the prior year; most recent first."""
    by_year: dict[int, float] = {}
    for year, value in points:
        by_year.setdefault(year, value)
    series = []
    previous = None
    for year in sorted(by_year):
        value = by_year[year]
        series.append(
            {"year": str(year), "value": value, "change": percent_change(previous, value)}
        )
        previous = value
    series.reverse()
    return series


def _points(rows: list[Mapping[str, Any]], extractor) -> list[tuple[int, float]]:
    points = []
    for row in rows:
        year = statement_year(row)
        value = extractor(row)
        if year is not None and value is not None:
            points.append((year, value))
    return points


async def get_graphs(client: ProviderClient, symbol: str) -> Graphs:
    results = await gather(
        client,
        [
            endpoints.fmp_cash_flow_statement(symbol),
            endpoints.fmp_income_statement_history(symbol),
        ],
    )
    cash_flow, income = (extract_rows(payload_of(r), "data") for r in results)

    derived = {
        "free_cash_flow": build_series(_points(cash_flow, free_cash_flow)),
        "share_buybacks": build_series(_points(cash_flow, net_buybacks)),
        "revenue": build_series(_points(income, revenue)),
    }
    return assemble(
        Graphs,
        {"symbol": symbol},
        derived,
        collect_failures(results),
        usable=any(derived.values()),
        error="Failed to fetch graph data",
    )
