"""HTTP routes under ``/api``.

Each route validates the symbol, hands the shared ``ProviderClient`` to a
service and returns its response model.  Services raise ``ResearchError``
subclasses; ``main`` renders them.
"""

from __future__ import annotations

import logging
import re
import time
from datetime import date
from typing import Awaitable, TypeVar

from fastapi import APIRouter, Depends, Query, Request

from stockresearch.errors import InvalidParameter, MissingParameter
from stockresearch.providers.client import ProviderClient
from stockresearch.schemas import (
    Compare,
    CompanyName,
    DcfRequest,
    DcfValuation,
    DdmValuation,
    DividendHistory,
    EarningsCalendar,
    EarningsGrowth,
    EarningsSurprises,
    FearGreed,
    Financials,
    Graphs,
    HistoricalPrices,
    InsiderActivity,
    KeyMetrics,
    MetricSnapshot,
    News,
    PERatios,
    Quote,
)
from stockresearch.services import valuation_service
from stockresearch.services.compare_service import get_compare
from stockresearch.services.dividend_service import get_dividend_history
from stockresearch.services.earnings_calendar_service import get_earnings_calendar
from stockresearch.services.earnings_service import get_earnings_growth
from stockresearch.services.earnings_surprises_service import get_earnings_surprises
from stockresearch.services.financials_service import get_financials
from stockresearch.services.graphs_service import get_graphs
from stockresearch.services.insider_service import get_insider_activity
from stockresearch.services.key_metrics_service import get_key_metrics
from stockresearch.services.market_service import (
    get_company_name,
    get_fear_greed,
    get_historical_prices,
)
from stockresearch.services.metric_snapshot_service import get_metric_snapshot
from stockresearch.services.news_service import get_news
from stockresearch.services.pe_service import get_pe_ratios
from stockresearch.services.quote_service import get_quote

logger = logging.getLogger("stockresearch.api")

router = APIRouter(prefix="/api")

T = TypeVar("T")

_SYMBOL = re.compile(r"^[A-Z0-9.\-^=]{1,15}$")


# ── Dependencies ─────────────────────────────────────────────────────────────


def require_symbol(symbol: str | None = Query(None, description="Ticker, e.g. AAPL")) -> str:
    if symbol is None or not symbol.strip():
        raise MissingParameter("Stock symbol is required")
    symbol = symbol.strip().upper()
    if not _SYMBOL.match(symbol):
        raise InvalidParameter("Invalid stock symbol", [symbol[:20]])
    return symbol


def get_provider_client(request: Request) -> ProviderClient:
    return request.app.state.provider_client


async def _timed(endpoint: str, symbol: str | None, work: Awaitable[T]) -> T:
    t0 = time.perf_counter()
    try:
        return await work
    finally:
        elapsed = round((time.perf_counter() - t0) * 1000, 2)
        logger.info("%s symbol=%s ms=%.1f", endpoint, symbol, elapsed)


# ── Fundamentals ─────────────────────────────────────────────────────────────


@router.get("/earnings-growth", response_model=EarningsGrowth)
async def earnings_growth(
    symbol: str = Depends(require_symbol),
    client: ProviderClient = Depends(get_provider_client),
):
    return await _timed("earnings-growth", symbol, get_earnings_growth(client, symbol))


@router.get("/dividend-history", response_model=DividendHistory)
async def dividend_history(
    symbol: str = Depends(require_symbol),
    client: ProviderClient = Depends(get_provider_client),
):
    return await _timed("dividend-history", symbol, get_dividend_history(client, symbol))


@router.get("/pe-ratios", response_model=PERatios)
async def pe_ratios(
    symbol: str = Depends(require_symbol),
    client: ProviderClient = Depends(get_provider_client),
):
    return await _timed("pe-ratios", symbol, get_pe_ratios(client, symbol))


@router.get("/financials", response_model=Financials)
async def financials(
    symbol: str = Depends(require_symbol),
    client: ProviderClient = Depends(get_provider_client),
):
    return await _timed("financials", symbol, get_financials(client, symbol))


@router.get("/key-metrics", response_model=KeyMetrics)
async def key_metrics(
    symbol: str = Depends(require_symbol),
    client: ProviderClient = Depends(get_provider_client),
):
    return await _timed("key-metrics", symbol, get_key_metrics(client, symbol))


@router.get("/quote", response_model=Quote)
async def quote(
    symbol: str = Depends(require_symbol),
    client: ProviderClient = Depends(get_provider_client),
):
    return await _timed("quote", symbol, get_quote(client, symbol))


@router.get("/compare", response_model=Compare)
async def compare(
    symbol: str = Depends(require_symbol),
    client: ProviderClient = Depends(get_provider_client),
):
    return await _timed("compare", symbol, get_compare(client, symbol))


@router.get("/graphs", response_model=Graphs)
async def graphs(
    symbol: str = Depends(require_symbol),
    client: ProviderClient = Depends(get_provider_client),
):
    return await _timed("graphs", symbol, get_graphs(client, symbol))


# ── Market ───────────────────────────────────────────────────────────────────


@router.get("/company-name", response_model=CompanyName)
async def company_name(
    symbol: str = Depends(require_symbol),
    client: ProviderClient = Depends(get_provider_client),
):
    return await _timed("company-name", symbol, get_company_name(client, symbol))


@router.get("/historical-prices", response_model=HistoricalPrices)
async def historical_prices(
    symbol: str = Depends(require_symbol),
    start: date | None = Query(None, alias="from"),
    end: date | None = Query(None, alias="to"),
    data_source: str | None = Query(None, alias="dataSource", description="FMP or FRED"),
    fred_series_id: str | None = Query(None, alias="fredSeriesId"),
    client: ProviderClient = Depends(get_provider_client),
):
    if start is not None and end is not None and start > end:
        raise InvalidParameter("'from' must not be after 'to'")
    return await _timed(
        "historical-prices",
        symbol,
        get_historical_prices(client, symbol, start, end, data_source, fred_series_id),
    )


@router.get("/fear-greed", response_model=FearGreed)
async def fear_greed(client: ProviderClient = Depends(get_provider_client)):
    return await _timed("fear-greed", None, get_fear_greed(client))


# ── Activity ─────────────────────────────────────────────────────────────────


@router.get("/finnhub", response_model=InsiderActivity)
async def insider_activity(
    symbol: str = Depends(require_symbol),
    client: ProviderClient = Depends(get_provider_client),
):
    return await _timed("finnhub", symbol, get_insider_activity(client, symbol))


@router.get("/finnhub-metrics", response_model=MetricSnapshot)
async def metric_snapshot(
    symbol: str = Depends(require_symbol),
    client: ProviderClient = Depends(get_provider_client),
):
    return await _timed("finnhub-metrics", symbol, get_metric_snapshot(client, symbol))


@router.get("/news", response_model=News)
async def news(
    symbol: str = Depends(require_symbol),
    client: ProviderClient = Depends(get_provider_client),
):
    return await _timed("news", symbol, get_news(client, symbol))


@router.get("/earnings", response_model=EarningsSurprises)
async def earnings_surprises(
    symbol: str = Depends(require_symbol),
    client: ProviderClient = Depends(get_provider_client),
):
    return await _timed("earnings", symbol, get_earnings_surprises(client, symbol))


@router.get("/earnings-calendar", response_model=EarningsCalendar)
async def earnings_calendar(
    symbol: str = Depends(require_symbol),
    client: ProviderClient = Depends(get_provider_client),
):
    return await _timed("earnings-calendar", symbol, get_earnings_calendar(client, symbol))


# ── Valuation ────────────────────────────────────────────────────────────────


@router.get("/valuation/ddm", response_model=DdmValuation)
async def ddm_valuation(
    symbol: str = Depends(require_symbol),
    wacc: float = Query(valuation_service.DEFAULT_WACC, description="Percent"),
    stable_growth_rate: float = Query(
        valuation_service.DEFAULT_STABLE_GROWTH, alias="stableGrowthRate"
    ),
    high_growth_years: int = Query(
        valuation_service.DEFAULT_HIGH_GROWTH_YEARS, alias="highGrowthYears"
    ),
    margin_of_safety: float = Query(
        valuation_service.DEFAULT_MARGIN_OF_SAFETY, alias="marginOfSafety"
    ),
    high_growth_rate: float | None = Query(None, alias="highGrowthRate"),
    current_price: float | None = Query(None, alias="currentPrice"),
    client: ProviderClient = Depends(get_provider_client),
):
    return await _timed(
        "valuation/ddm",
        symbol,
        valuation_service.get_ddm_valuation(
            client,
            symbol,
            wacc=wacc,
            stable_growth_rate=stable_growth_rate,
            high_growth_years=high_growth_years,
            margin_of_safety=margin_of_safety,
            high_growth_rate=high_growth_rate,
            current_price=current_price,
        ),
    )


@router.post("/valuation/dcf", response_model=DcfValuation)
async def dcf_valuation(body: DcfRequest):
    t0 = time.perf_counter()
    result = valuation_service.get_dcf_valuation(body)
    elapsed = round((time.perf_counter() - t0) * 1000, 2)
    logger.info("valuation/dcf symbol=%s ms=%.1f", body.symbol, elapsed)
    return result
