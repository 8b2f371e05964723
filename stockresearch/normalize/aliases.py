"""Ordered field-alias tables, one per provider payload shape.

For every canonical field the first alias present with a usable value wins,
so the order inside each tuple is the priority order.  XBRL tables match
``concept`` first, then fall back to a case-sensitive substring match on
the human-readable ``label``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping


@dataclass(frozen=True)
class FieldAliases:
    keys: tuple[str, ...] = ()
    labels: tuple[str, ...] = ()


@dataclass(frozen=True)
class RecordSchema:
    """Where the period date lives and how each canonical field is named."""

    date_keys: tuple[str, ...]
    fields: Mapping[str, FieldAliases] = field(default_factory=dict)
    concept_lines: tuple[str, ...] = ()
    """Path to an XBRL line-item list (e.g. ``("report", "ic")``); empty for flat JSON."""


# ── Income statements ────────────────────────────────────────────────────────

FMP_INCOME = RecordSchema(
    date_keys=("date", "fiscalDateEnding"),
    fields={
        "revenue": FieldAliases(("revenues", "revenue")),
        "cost_of_revenue": FieldAliases(("costOfRevenue", "costOfGoodsSold", "costOfSales")),
        "eps": FieldAliases(("eps", "epsDiluted", "epsdiluted")),
        "net_income": FieldAliases(("netIncome",)),
        "operating_income": FieldAliases(("operatingIncome",)),
        "gross_profit": FieldAliases(("grossProfit",)),
    },
)

FINNHUB_XBRL_INCOME = RecordSchema(
    date_keys=("endDate", "filedDate"),
    concept_lines=("report", "ic"),
    fields={
        "revenue": FieldAliases(
            (
                "us-gaap_Revenues",
                "us-gaap_RevenueFromContractWithCustomerExcludingAssessedTax",
                "Revenues",
            ),
            labels=("Revenue",),
        ),
        "cost_of_revenue": FieldAliases(
            (
                "us-gaap_CostOfGoodsAndServicesSold",
                "us-gaap_CostOfRevenue",
                "CostOfRevenue",
                "cake_FoodAndBeverageCosts",
            ),
            labels=("Cost of Goods", "Food and Beverage"),
        ),
        "net_income": FieldAliases(("us-gaap_NetIncomeLoss",), labels=("Net income",)),
        "operating_income": FieldAliases(
            ("us-gaap_OperatingIncomeLoss",), labels=("Operating income",)
        ),
        "gross_profit": FieldAliases(("us-gaap_GrossProfit",), labels=("Gross profit",)),
        "eps": FieldAliases(
            ("us-gaap_EarningsPerShareDiluted", "us-gaap_EarningsPerShareBasic")
        ),
    },
)

# ── Dividends ────────────────────────────────────────────────────────────────

FMP_DIVIDEND = RecordSchema(
    date_keys=("date", "exDividendDate"),
    fields={
        "amount": FieldAliases(("dividend", "adjDividend")),
        "adjusted": FieldAliases(("adjDividend", "adjustedDividend")),
    },
)

FINNHUB_DIVIDEND = RecordSchema(
    date_keys=("date", "exDate"),
    fields={
        "amount": FieldAliases(("amount", "adjustedAmount")),
        "adjusted": FieldAliases(("adjustedAmount",)),
    },
)

ALPHA_VANTAGE_DIVIDEND = RecordSchema(
    date_keys=("ex_dividend_date", "date"),
    fields={
        "amount": FieldAliases(("amount", "dividend")),
        "adjusted": FieldAliases(("adjusted_amount", "amount", "dividend")),
    },
)

# ── Analyst estimates ────────────────────────────────────────────────────────

FMP_ESTIMATE = RecordSchema(
    date_keys=("date", "fiscalDateEnding", "period"),
    fields={
        "eps_avg": FieldAliases(("epsAvg", "estimatedEpsAvg")),
        "revenue_avg": FieldAliases(("revenueAvg", "estimatedRevenueAvg")),
    },
)

FINNHUB_ESTIMATE = RecordSchema(
    date_keys=("period",),
    fields={
        "eps_avg": FieldAliases(("epsAvg",)),
        "revenue_avg": FieldAliases(("revenueAvg",)),
    },
)

ANALYST_GROWTH = FieldAliases(
    ("growthRate", "growth", "epsGrowth", "longTermGrowth", "analystGrowth")
)

# ── Snapshots (single objects, no period date) ───────────────────────────────

FINNHUB_QUOTE = {"price": FieldAliases(("c",))}

FINNHUB_METRIC = {
    "pe_ttm": FieldAliases(("peTTM", "peBasicExclExtraTTM")),
    "forward_pe": FieldAliases(("forwardPE",)),
    "dividend_per_share": FieldAliases(("dividendPerShareTTM", "dividendPerShareAnnual")),
    "dividend_yield": FieldAliases(("currentDividendYieldTTM", "dividendYieldIndicatedAnnual")),
    "dividend_growth_rate": FieldAliases(("dividendGrowthRate5Y",)),
    "eps_ttm": FieldAliases(("epsTTM", "epsBasicExclExtraItemsTTM")),
    "eps_growth_1y": FieldAliases(("epsGrowth1Y", "epsGrowthTTMYoy")),
    "eps_growth_2y": FieldAliases(("epsGrowth2Y",)),
    "eps_growth_3y": FieldAliases(("epsGrowth3Y",)),
}

FMP_QUOTE = {
    "price": FieldAliases(("price",)),
    "pe": FieldAliases(("pe",)),
    "year_high": FieldAliases(("yearHigh52", "yearHigh")),
    "year_low": FieldAliases(("yearLow52", "yearLow")),
    "change_percent": FieldAliases(("changesPercentage", "changePercent", "changePercentage")),
    "market_cap": FieldAliases(("marketCap",)),
    "shares_outstanding": FieldAliases(("sharesOutstanding",)),
}

FMP_PROFILE = {
    "market_cap": FieldAliases(("mktCap", "marketCap")),
    "shares_outstanding": FieldAliases(("sharesOutstanding", "sharesFloat", "numberOfShares")),
}

FMP_SHARES_FLOAT = {
    "shares_outstanding": FieldAliases(
        ("sharesOutstanding", "numberOfShares", "totalShares", "sharesFloat")
    ),
}

FMP_KEY_METRICS = {
    "shares_outstanding": FieldAliases(("numberOfShares", "sharesOutstanding")),
    "market_cap": FieldAliases(("marketCap",)),
    "enterprise_value": FieldAliases(("enterpriseValue",)),
    "roic": FieldAliases(("roic", "returnOnInvestedCapital")),
    "gross_margin": FieldAliases(("grossProfitMargin",)),
}

FMP_RATIOS = {
    "payout_ratio": FieldAliases(("payoutRatio", "dividendPayoutRatio")),
    "gross_margin": FieldAliases(("grossProfitMargin",)),
}

FMP_CASH_FLOW = {
    "operating_cash_flow": FieldAliases(
        ("netCashProvidedByOperatingActivities", "operatingCashFlow")
    ),
    "capital_expenditure": FieldAliases(("capitalExpenditure",)),
    "stock_repurchased": FieldAliases(("commonStockRepurchased",)),
    "stock_issued": FieldAliases(("commonStockIssued",)),
}

PRICE_BAR = {
    "open": FieldAliases(("open",)),
    "high": FieldAliases(("high",)),
    "low": FieldAliases(("low",)),
    "close": FieldAliases(("close", "adjClose")),
    "volume": FieldAliases(("volume",)),
    "change": FieldAliases(("change",)),
    "change_percent": FieldAliases(("changePercent", "changePercentage")),
}

# ── Insider activity ─────────────────────────────────────────────────────────

FINNHUB_INSIDER_TRANSACTION = {
    "share": FieldAliases(("share",)),
    "change": FieldAliases(("change",)),
    "transaction_price": FieldAliases(("transactionPrice", "price")),
}

FINNHUB_OWNERSHIP = {
    "share": FieldAliases(("share", "shares")),
    "change": FieldAliases(("change",)),
}

# ── News sentiment (per-ticker block of an Alpha Vantage feed item) ──────────

ALPHA_VANTAGE_TICKER_SENTIMENT = {
    "sentiment_score": FieldAliases(("ticker_sentiment_score",)),
    "relevance_score": FieldAliases(("relevance_score",)),
}

# ── Earnings ─────────────────────────────────────────────────────────────────

FMP_EARNINGS_SURPRISE = {
    "actual": FieldAliases(("actualEarningResult", "epsActual", "actualEps")),
    "estimate": FieldAliases(("estimatedEarning", "epsEstimated", "estimatedEps")),
}

API_NINJAS_EARNINGS = {
    "actual_eps": FieldAliases(("actual_eps",)),
    "estimated_eps": FieldAliases(("estimated_eps",)),
    "actual_revenue": FieldAliases(("actual_revenue",)),
    "estimated_revenue": FieldAliases(("estimated_revenue",)),
}
