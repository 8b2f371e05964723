"""Pydantic response schemas."""

from stockresearch.schemas.activity import (
    EarningsCalendar,
    EarningsEvent,
    EarningsSurprise,
    EarningsSurprises,
    InsiderActivity,
    InsiderTransaction,
    MetricSnapshot,
    News,
    NewsItem,
    OwnershipPosition,
)
from stockresearch.schemas.common import CamelModel, ErrorBody, Health
from stockresearch.schemas.dividends import DividendHistory, DividendOut
from stockresearch.schemas.fundamentals import (
    Compare,
    EarningsGrowth,
    EpsPoint,
    Financials,
    Graphs,
    GrowthEstimateOut,
    KeyMetrics,
    PERatios,
    Quote,
    SeriesPoint,
)
from stockresearch.schemas.market import (
    CompanyName,
    FearGreed,
    FearGreedPoint,
    HistoricalPrices,
    PriceBar,
)
from stockresearch.schemas.valuation import (
    DcfRequest,
    DcfScenarioInput,
    DcfScenarioOut,
    DcfValuation,
    DcfYear,
    DdmValuation,
    DiscountedDividendOut,
)

__all__ = [
    "EarningsCalendar",
    "EarningsEvent",
    "EarningsSurprise",
    "EarningsSurprises",
    "InsiderActivity",
    "InsiderTransaction",
    "MetricSnapshot",
    "News",
    "NewsItem",
    "OwnershipPosition",
    "CamelModel",
    "ErrorBody",
    "Health",
    "DividendHistory",
    "DividendOut",
    "Compare",
    "EarningsGrowth",
    "EpsPoint",
    "Financials",
    "Graphs",
    "GrowthEstimateOut",
    "KeyMetrics",
    "PERatios",
    "Quote",
    "SeriesPoint",
    "CompanyName",
    "FearGreed",
    "FearGreedPoint",
    "HistoricalPrices",
    "PriceBar",
    "DcfRequest",
    "DcfScenarioInput",
    "DcfScenarioOut",
    "DcfValuation",
    "DcfYear",
    "DdmValuation",
    "DiscountedDividendOut",
]
