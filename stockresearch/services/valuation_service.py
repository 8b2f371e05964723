"""Dividend discount and scenario DCF valuations.

Rates arrive as percentages from the HTTP layer and are converted to
decimals here; the math in ``metrics`` only sees decimals.
"""

from __future__ import annotations

import math
from datetime import date

from stockresearch.errors import InvalidParameter
from stockresearch.models.records import AnnualAggregate
from stockresearch.providers.client import ProviderClient
from stockresearch.schemas.valuation import DcfRequest, DcfValuation, DdmValuation
from stockresearch.services.assembler import assemble
from stockresearch.services.dividend_service import DividendSummary, load_dividends
from stockresearch.services.metrics import (
    dividend_discount_model,
    project_dividends,
    project_scenario,
)

DEFAULT_WACC = 8.5
DEFAULT_STABLE_GROWTH = 3.0
DEFAULT_HIGH_GROWTH_YEARS = 5
DEFAULT_MARGIN_OF_SAFETY = 20.0

MAX_HIGH_GROWTH_YEARS = 50
MAX_RATE_PERCENT = 1000.0


def _check_rate(name: str, value: float) -> None:
    if not math.isfinite(value) or not -100 < value <= MAX_RATE_PERCENT:
        raise InvalidParameter(
            f"{name} must be a finite percentage above -100 and at most {MAX_RATE_PERCENT:g}"
        )


def validate_ddm_inputs(
    *,
    wacc: float,
    stable_growth_rate: float,
    high_growth_years: int,
    margin_of_safety: float,
    high_growth_rate: float | None,
    current_price: float | None,
) -> None:
    """Reject inputs the two-stage model cannot turn into finite numbers."""
    if not 1 <= high_growth_years <= MAX_HIGH_GROWTH_YEARS:
        raise InvalidParameter(
            f"highGrowthYears must be between 1 and {MAX_HIGH_GROWTH_YEARS}"
        )
    if not math.isfinite(margin_of_safety) or not 0 <= margin_of_safety < 100:
        raise InvalidParameter("marginOfSafety must be between 0 and 100")
    _check_rate("wacc", wacc)
    _check_rate("stableGrowthRate", stable_growth_rate)
    if high_growth_rate is not None:
        _check_rate("highGrowthRate", high_growth_rate)
    if current_price is not None and not math.isfinite(current_price):
        raise InvalidParameter("currentPrice must be a finite number")


def base_dividend(summary: DividendSummary, current_year: int) -> float | None:
    """Projected current year, else the last complete year, else the latest paying year."""
    by_year: AnnualAggregate = summary.by_year
    if summary.current_year_projected and by_year.get(current_year):
        return by_year[current_year]
    if by_year.get(current_year - 1):
        return by_year[current_year - 1]
    for year in sorted(by_year, reverse=True):
        if by_year[year] > 0:
            return by_year[year]
    return None


async def get_ddm_valuation(
    client: ProviderClient,
    symbol: str,
    *,
    wacc: float = DEFAULT_WACC,
    stable_growth_rate: float = DEFAULT_STABLE_GROWTH,
    high_growth_years: int = DEFAULT_HIGH_GROWTH_YEARS,
    margin_of_safety: float = DEFAULT_MARGIN_OF_SAFETY,
    high_growth_rate: float | None = None,
    current_price: float | None = None,
    today: date | None = None,
) -> DdmValuation:
    validate_ddm_inputs(
        wacc=wacc,
        stable_growth_rate=stable_growth_rate,
        high_growth_years=high_growth_years,
        margin_of_safety=margin_of_safety,
        high_growth_rate=high_growth_rate,
        current_price=current_price,
    )

    today = today or date.today()
    summary, failures = await load_dividends(client, symbol, today)
    base = base_dividend(summary, today.year) if summary else None
    if base is None:
        return assemble(
            DdmValuation, {}, {}, failures, usable=False, error="No dividend data available"
        )

    wacc_rate = wacc / 100
    stable = stable_growth_rate / 100
    if high_growth_rate is not None:
        growth = high_growth_rate / 100
    elif summary.growth_rate is not None:
        growth = summary.growth_rate
    else:
        growth = stable

    valuation = dividend_discount_model(
        project_dividends(base, growth, high_growth_years),
        wacc_rate,
        stable,
        margin_of_safety / 100,
        current_price,
    )
    if valuation is None:
        raise InvalidParameter("wacc must be greater than -100")

    return assemble(
        DdmValuation,
        {
            "symbol": symbol,
            "current_price": current_price,
            "base_dividend": base,
            "high_growth_rate": growth,
            "stable_growth_rate": stable,
            "wacc": wacc_rate,
            "margin_of_safety": margin_of_safety / 100,
            "high_growth_years": high_growth_years,
        },
        {
            "projections": [
                {
                    "year": row.year,
                    "dividend": row.dividend,
                    "discount_factor": row.discount_factor,
                    "present_value": row.present_value,
                }
                for row in valuation.projections
            ],
            "terminal_value": valuation.terminal_value,
            "terminal_present_value": valuation.terminal_present_value,
            "intrinsic_value": valuation.intrinsic_value,
            "value_with_safety": valuation.value_with_safety,
            "verdict": valuation.verdict,
        },
        failures,
    )


def get_dcf_valuation(request: DcfRequest) -> DcfValuation:
    scenarios = {}
    for name in ("bear", "base", "bull"):
        scenario = getattr(request, name)
        projection = project_scenario(
            revenue=request.revenue,
            net_income=request.net_income,
            shares_outstanding=request.shares_outstanding,
            revenue_growth=scenario.revenue_growth / 100,
            net_income_growth=scenario.net_income_growth / 100,
            pe_low=scenario.pe_low,
            pe_high=scenario.pe_high,
            stock_price=request.stock_price,
            current_eps=request.current_eps,
            years=request.years,
        )
        scenarios[name] = {
            "years": [
                {
                    "year": row.year,
                    "revenue": row.revenue,
                    "net_income": row.net_income,
                    "eps": row.eps,
                    "share_price_low": row.share_price_low,
                    "share_price_high": row.share_price_high,
                }
                for row in projection.years
            ],
            "cagr_low": projection.cagr_low,
            "cagr_high": projection.cagr_high,
        }
    return DcfValuation.model_validate(
        {"symbol": request.symbol, "stock_price": request.stock_price, **scenarios}
    )
