"""Response schemas for per-symbol fundamentals endpoints.

Every field defaults to None so a response always has the full shape.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from stockresearch.schemas.common import CamelModel


class GrowthEstimateOut(CamelModel):
    rate: float
    basis_years: int
    method: str


class EpsPoint(CamelModel):
    date: str
    eps: float | None = None


class EarningsGrowth(CamelModel):
    symbol: str | None = None
    historical_growth_rate: float | None = None
    analyst_growth_rate: float | None = None
    historical_growth: GrowthEstimateOut | None = None
    analyst_growth: GrowthEstimateOut | None = None
    eps_data: list[EpsPoint] = Field(default_factory=list)
    analyst_data: Any | None = None


class PERatios(CamelModel):
    symbol: str | None = None
    current_pe: float | None = Field(None, alias="currentPE")
    forward_pe_1_year: float | None = Field(None, alias="forwardPE1Year")
    forward_pe_2_year: float | None = Field(None, alias="forwardPE2Year")
    forward_pe_source: str | None = Field(None, alias="forwardPESource")
    current_price: float | None = None
    forward_eps_1_year: float | None = Field(None, alias="forwardEps1Year")
    forward_eps_2_year: float | None = Field(None, alias="forwardEps2Year")
    target_year_1: int | None = Field(None, alias="targetYear1")
    target_year_2: int | None = Field(None, alias="targetYear2")
    dividend_per_share: float | None = None
    dividend_yield: float | None = None
    dividend_growth_rate: float | None = None
    industry_average_pe: float | None = Field(None, alias="industryAveragePE")
    sector: str | None = None


class Financials(CamelModel):
    symbol: str | None = None
    period_end_date: str | None = None
    source: str | None = None
    gross_profit_margin: float | None = None
    net_margin: float | None = None
    operating_margin: float | None = None
    revenue: float | None = None
    cost_of_goods_sold: float | None = None
    net_income: float | None = None
    operating_income: float | None = None
    eps: float | None = None


class KeyMetrics(CamelModel):
    symbol: str | None = None
    date: str | None = None
    shares_outstanding: float | None = None
    market_cap: float | None = None
    enterprise_value: float | None = None
    roic: float | None = None
    payout_ratio: float | None = None
    errors: list[str] = Field(default_factory=list)


class Quote(CamelModel):
    symbol: str | None = None
    price: float | None = None
    fmp_pe: float | None = Field(None, alias="fmpPE")
    market_cap: float | None = None
    shares_outstanding: float | None = None
    year_high: float | None = None
    year_low: float | None = None
    change_percent: float | None = None
    errors: list[str] = Field(default_factory=list)


class Compare(CamelModel):
    """Side-by-side valuation snapshot; growth and margin values are percent."""

    symbol: str | None = None
    ttm_pe: float | None = Field(None, alias="ttmPE")
    forward_pe: float | None = Field(None, alias="forwardPE")
    two_year_pe: float | None = Field(None, alias="twoYearPE")
    ttm_eps_growth: float | None = Field(None, alias="ttmEPSGrowth")
    current_year_expected_eps_growth: float | None = Field(
        None, alias="currentYearExpectedEPSGrowth"
    )
    next_year_eps_growth: float | None = Field(None, alias="nextYearEPSGrowth")
    ttm_revenue_growth: float | None = None
    current_year_expected_revenue_growth: float | None = None
    next_year_revenue_growth: float | None = None
    gross_margin: float | None = None
    net_margin: float | None = None
    ttm_ps_ratio: float | None = Field(None, alias="ttmPSRatio")
    forward_ps_ratio: float | None = Field(None, alias="forwardPSRatio")


class SeriesPoint(CamelModel):
    year: str
    value: float
    change: float | None = None


class Graphs(CamelModel):
    symbol: str | None = None
    free_cash_flow: list[SeriesPoint] = Field(default_factory=list)
    share_buybacks: list[SeriesPoint] = Field(default_factory=list)
    revenue: list[SeriesPoint] = Field(default_factory=list)
