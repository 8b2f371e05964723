"""Dividend history schemas."""

from __future__ import annotations

from pydantic import Field

from stockresearch.schemas.common import CamelModel


class DividendOut(CamelModel):
    date: str
    dividend: float
    adjusted_dividend: float | None = None


class DividendHistory(CamelModel):
    symbol: str | None = None
    source: str | None = None
    historical_dividends: list[DividendOut] = Field(default_factory=list)
    dividends_by_year: dict[str, float] = Field(default_factory=dict)
    current_year_projected: bool = False
    dividend_growth_rate: float | None = None
    latest_dividend: float | None = None
