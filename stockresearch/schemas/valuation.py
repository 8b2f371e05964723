"""Dividend-discount and discounted-cash-flow schemas.

Rates supplied by callers are percentages (8.5 means 8.5 %); results that
are rates are returned as decimals.
"""

from __future__ import annotations

from pydantic import Field

from stockresearch.schemas.common import CamelModel


class DiscountedDividendOut(CamelModel):
    year: int
    dividend: float
    discount_factor: float
    present_value: float


class DdmValuation(CamelModel):
    symbol: str | None = None
    current_price: float | None = None
    base_dividend: float | None = None
    high_growth_rate: float | None = None
    stable_growth_rate: float | None = None
    wacc: float | None = None
    margin_of_safety: float | None = None
    high_growth_years: int | None = None
    projections: list[DiscountedDividendOut] = Field(default_factory=list)
    terminal_value: float | None = None
    terminal_present_value: float | None = None
    intrinsic_value: float | None = None
    value_with_safety: float | None = None
    verdict: str | None = None


MAX_GROWTH_PERCENT = 1000.0
MAX_AMOUNT = 1e15


class DcfScenarioInput(CamelModel):
    revenue_growth: float = Field(
        ...,
        ge=-100,
        le=MAX_GROWTH_PERCENT,
        allow_inf_nan=False,
        description="Annual revenue growth, percent",
    )
    net_income_growth: float = Field(
        ...,
        ge=-100,
        le=MAX_GROWTH_PERCENT,
        allow_inf_nan=False,
        description="Annual net income growth, percent",
    )
    pe_low: float = Field(..., gt=0, le=10_000, allow_inf_nan=False)
    pe_high: float = Field(..., gt=0, le=10_000, allow_inf_nan=False)


class DcfRequest(CamelModel):
    symbol: str | None = None
    revenue: float = Field(..., ge=-MAX_AMOUNT, le=MAX_AMOUNT, allow_inf_nan=False)
    net_income: float = Field(..., ge=-MAX_AMOUNT, le=MAX_AMOUNT, allow_inf_nan=False)
    shares_outstanding: float = Field(..., ge=1, le=MAX_AMOUNT, allow_inf_nan=False)
    stock_price: float | None = Field(None, le=MAX_AMOUNT, allow_inf_nan=False)
    current_eps: float | None = Field(None, ge=-MAX_AMOUNT, le=MAX_AMOUNT, allow_inf_nan=False)
    years: int = Field(5, ge=1, le=30)
    bear: DcfScenarioInput
    base: DcfScenarioInput
    bull: DcfScenarioInput


class DcfYear(CamelModel):
    year: int
    revenue: float
    net_income: float
    eps: float | None = None
    share_price_low: float | None = None
    share_price_high: float | None = None


class DcfScenarioOut(CamelModel):
    years: list[DcfYear] = Field(default_factory=list)
    cagr_low: float | None = None
    cagr_high: float | None = None


class DcfValuation(CamelModel):
    symbol: str | None = None
    stock_price: float | None = None
    bear: DcfScenarioOut
    base: DcfScenarioOut
    bull: DcfScenarioOut
