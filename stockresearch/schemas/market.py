"""Market-wide and price-series schemas."""

from __future__ import annotations

from pydantic import Field

from stockresearch.schemas.common import CamelModel


class CompanyName(CamelModel):
    symbol: str | None = None
    name: str | None = None


class PriceBar(CamelModel):
    date: str
    open: float | None = None
    high: float | None = None
    low: float | None = None
    close: float | None = None
    volume: float | None = None
    change: float | None = None
    change_percent: float | None = None


class HistoricalPrices(CamelModel):
    symbol: str | None = None
    source: str | None = None
    historical: list[PriceBar] = Field(default_factory=list)
    count: int = 0


class FearGreedPoint(CamelModel):
    date: str
    close: float
    volume: float = 0


class FearGreed(CamelModel):
    score: float | None = None
    rating: str | None = None
    historical: list[FearGreedPoint] = Field(default_factory=list)
