"""Canonical records produced by the schema normalizer."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date


class PeriodType(str, enum.Enum):
    ANNUAL = "annual"
    QUARTERLY = "quarterly"


@dataclass(frozen=True)
class FinancialPeriodRecord:
    """One reporting period with canonical, individually optional fields.

    Absent values stay ``None``; a reported zero stays ``0.0``.
    """

    period_end_date: date
    period_type: PeriodType = PeriodType.ANNUAL
    eps: float | None = None
    revenue: float | None = None
    cost_of_revenue: float | None = None
    net_income: float | None = None
    operating_income: float | None = None
    gross_profit: float | None = None
    source: str | None = None

    @property
    def year(self) -> int:
        return self.period_end_date.year


@dataclass(frozen=True)
class DividendEvent:
    """A single dividend payment; ``amount_per_share`` is always > 0."""

    ex_date: date
    amount_per_share: float
    adjusted_amount: float | None = None
    source: str | None = None

    @property
    def year(self) -> int:
        return self.ex_date.year


@dataclass(frozen=True)
class AnalystEstimate:
    """Consensus estimate for one fiscal year."""

    fiscal_year: int
    period_end_date: date | None = None
    eps_avg: float | None = None
    revenue_avg: float | None = None


@dataclass(frozen=True)
class GrowthEstimate:
    rate: float
    basis_years: int
    method: str  # "cagr" | "analyst"


AnnualAggregate = dict[int, float]
"""Calendar year -> summed value; gap years carry an explicit 0."""
