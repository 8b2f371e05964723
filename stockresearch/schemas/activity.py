"""Insider activity, news sentiment, earnings surprises and calendar schemas."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from stockresearch.schemas.common import CamelModel


class InsiderTransaction(CamelModel):
    name: str | None = None
    share: float | None = None
    change: float | None = None
    transaction_price: float | None = None
    transaction_code: str | None = None
    transaction_date: str | None = None
    filing_date: str | None = None


class OwnershipPosition(CamelModel):
    name: str | None = None
    share: float | None = None
    change: float | None = None
    filing_date: str | None = None


class InsiderActivity(CamelModel):
    symbol: str | None = None
    transactions: list[InsiderTransaction] = Field(default_factory=list)
    ownership: list[OwnershipPosition] = Field(default_factory=list)


class NewsItem(CamelModel):
    title: str | None = None
    url: str | None = None
    time_published: str | None = None
    authors: list[str] = Field(default_factory=list)
    summary: str | None = None
    source: str | None = None
    sentiment_label: str | None = None
    sentiment_score: float | None = None
    relevance_score: float | None = None


class News(CamelModel):
    symbol: str | None = None
    data: list[NewsItem] = Field(default_factory=list)


class EarningsSurprise(CamelModel):
    date: str
    eps: float | None = None
    eps_estimate: float | None = None
    eps_actual: float | None = None
    surprise: float | None = None
    surprise_rate: float | None = None


class EarningsSurprises(CamelModel):
    symbol: str | None = None
    data: list[EarningsSurprise] = Field(default_factory=list)


class EarningsEvent(CamelModel):
    date: str
    actual_eps: float | None = None
    estimated_eps: float | None = None
    actual_revenue: float | None = None
    estimated_revenue: float | None = None
    quarter: int | None = None
    year: int | None = None


class EarningsCalendar(CamelModel):
    symbol: str | None = None
    next_earnings: EarningsEvent | None = None
    all_earnings: list[EarningsEvent] = Field(default_factory=list)


class MetricSnapshot(CamelModel):
    symbol: str | None = None
    metric_type: str | None = None
    metric: dict[str, Any] = Field(default_factory=dict)
    series: dict[str, Any] = Field(default_factory=dict)
