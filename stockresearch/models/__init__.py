"""Request-scoped value objects shared by the normalizer and metrics engine."""

from stockresearch.models.records import (
    AnalystEstimate,
    AnnualAggregate,
    DividendEvent,
    FinancialPeriodRecord,
    GrowthEstimate,
    PeriodType,
)

__all__ = [
    "AnalystEstimate",
    "AnnualAggregate",
    "DividendEvent",
    "FinancialPeriodRecord",
    "GrowthEstimate",
    "PeriodType",
]
