"""Latest-period margins from Finnhub XBRL filings, with FMP as fallback."""

from __future__ import annotations

from dataclasses import replace

from stockresearch.models.records import FinancialPeriodRecord
from stockresearch.normalize import RecordKind, SchemaHints, extract_rows, normalize_all
from stockresearch.providers import endpoints
from stockresearch.providers.base import Provider
from stockresearch.providers.client import ProviderClient
from stockresearch.providers.gather import gather
from stockresearch.schemas.fundamentals import Financials
from stockresearch.services.assembler import assemble, collect_failures, payload_of
from stockresearch.services.metrics import gross_margin, net_margin, operating_margin

FINNHUB_XBRL = SchemaHints(RecordKind.INCOME, Provider.FINNHUB)
FMP_INCOME = SchemaHints(RecordKind.INCOME, Provider.FMP)

_FILLABLE = ("revenue", "cost_of_revenue", "net_income", "operating_income", "gross_profit", "eps")


def latest(records: list[FinancialPeriodRecord]) -> FinancialPeriodRecord | None:
    return max(records, key=lambda r: r.period_end_date, default=None)


def merge_same_year(
    primary: FinancialPeriodRecord | None, secondary: FinancialPeriodRecord | None
) -> FinancialPeriodRecord | None:
    """Fill fields missing from ``primary`` with ``secondary`` of the same fiscal year."""
    if primary is None:
        return secondary
    if secondary is None or secondary.year != primary.year:
        return primary
    missing = {
        name: getattr(secondary, name)
        for name in _FILLABLE
        if getattr(primary, name) is None and getattr(secondary, name) is not None
    }
    return replace(primary, **missing) if missing else primary


def gross_profit_margin(record: FinancialPeriodRecord) -> float | None:
    margin = gross_margin(record.revenue, record.cost_of_revenue)
    if margin is None and record.gross_profit is not None and record.revenue and record.revenue > 0:
        margin = record.gross_profit / record.revenue
    return margin


async def get_financials(client: ProviderClient, symbol: str) -> Financials:
    results = await gather(
        client,
        [endpoints.finnhub_financials_reported(symbol), endpoints.fmp_income_statement(symbol)],
    )
    reported, income = (payload_of(r) for r in results)

    xbrl_latest = latest(normalize_all(extract_rows(reported, "data"), FINNHUB_XBRL))
    fmp_latest = latest(normalize_all(extract_rows(income, "data"), FMP_INCOME))
    record = merge_same_year(xbrl_latest, fmp_latest)

    if record is None:
        return assemble(
            Financials,
            {},
            {},
            collect_failures(results),
            usable=False,
            error="Failed to fetch financial data",
        )

    eps = fmp_latest.eps if fmp_latest and fmp_latest.eps is not None else record.eps
    return assemble(
        Financials,
        {
            "symbol": symbol,
            "period_end_date": record.period_end_date.isoformat(),
            "source": record.source,
            "revenue": record.revenue,
            "cost_of_goods_sold": record.cost_of_revenue,
            "net_income": record.net_income,
            "operating_income": record.operating_income,
            "eps": eps,
        },
        {
            "gross_profit_margin": gross_profit_margin(record),
            "net_margin": net_margin(record.revenue, record.net_income),
            "operating_margin": operating_margin(record.revenue, record.operating_income),
        },
        collect_failures(results),
    )
