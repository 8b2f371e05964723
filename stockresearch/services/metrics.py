"""Pure math / metric helpers (no I/O).

Every function returns None when its precondition cannot be met instead of
raising; partial results are the normal case.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Sequence

from stockresearch.models.records import AnnualAggregate, DividendEvent

# ── Growth ───────────────────────────────────────────────────────────────────


def cagr(start_value: float | None, end_value: float | None, periods: int) -> float | None:
    """Compound growth rate between two values with sign handling.

    The rate is computed on magnitudes.  When both values are negative it is
    negated, so a widening loss is negative and a narrowing loss positive.
    A move from loss to profit keeps the magnitude rate unchanged.
    Returns None when either value is absent or zero, or periods < 1.
    """
    if start_value is None or end_value is None or periods < 1:
        return None
    if start_value == 0 or end_value == 0:
        return None
    rate = (abs(end_value) / abs(start_value)) ** (1.0 / periods) - 1.0
    if not math.isfinite(rate):
        return None
    if start_value < 0 and end_value < 0:
        return -rate
    return rate


def series_cagr(values: Sequence[float | None]) -> float | None:
    """CAGR from the first to the last value over ``len(values) - 1`` periods."""
    if len(values) < 2:
        return None
    return cagr(values[0], values[-1], len(values) - 1)


def percent_change(previous: float | None, current: float | None) -> float | None:
    """Relative change against ``|previous|``."""
    if previous is None or current is None or previous == 0:
        return None
    return (current - previous) / abs(previous)


def ratio_growth(base: float | None, target: float | None) -> float | None:
    """``target / base - 1`` for estimate-to-estimate growth; needs base > 0."""
    if base is None or target is None or base <= 0:
        return None
    return target / base - 1.0


# ── Annual aggregation ───────────────────────────────────────────────────────


def filter_trailing_window(
    events: Iterable[DividendEvent], years: int, today: date
) -> list[DividendEvent]:
    """Keep events on or after Jan 1 of ``today.year - years``."""
    cutoff = date(today.year - years, 1, 1)
    return [event for event in events if event.ex_date >= cutoff]


def fill_missing_years(aggregate: Mapping[int, float]) -> AnnualAggregate:
    """Insert an explicit 0 for every gap year between min and max."""
    if not aggregate:
        return {}
    return {year: aggregate.get(year, 0.0) for year in range(min(aggregate), max(aggregate) + 1)}


def aggregate_by_year(events: Iterable[DividendEvent]) -> AnnualAggregate:
    """Sum amounts per calendar year, then fill gap years with 0."""
    totals: dict[int, float] = {}
    for event in events:
        totals[event.year] = totals.get(event.year, 0.0) + event.amount_per_share
    return fill_missing_years(totals)


def project_current_year(
    aggregate: Mapping[int, float],
    current_year: int,
    min_years: int = 6,
    complete_years: int = 5,
) -> tuple[AnnualAggregate, bool]:
    """Replace the in-progress year's partial total with a projection.

    Applies only when ``current_year`` is present and at least ``min_years``
    years exist.  The average year-over-year growth of the last
    ``complete_years`` complete years (transitions from a 0 year skipped)
    is applied to the last complete year.
    """
    result = dict(aggregate)
    if current_year not in result or len(result) < min_years:
        return result, False
    history = sorted(year for year in result if year != current_year)[-complete_years:]
    if len(history) < complete_years:
        return result, False

    rates = []
    for prev_year, year in zip(history, history[1:]):
        prev = result[prev_year]
        if prev > 0:
            rates.append((result[year] - prev) / prev)
    avg_growth = sum(rates) / len(rates) if rates else 0.0
    result[current_year] = result[history[-1]] * (1.0 + avg_growth)
    return result, True


def annual_growth_rate(aggregate: Mapping[int, float]) -> float | None:
    """CAGR from the oldest to the newest annual total, over the year span."""
    if len(aggregate) < 2:
        return None
    first, last = min(aggregate), max(aggregate)
    if aggregate[first] <= 0:
        return None
    return cagr(aggregate[first], aggregate[last], last - first)


# ── Margins / ratios ─────────────────────────────────────────────────────────


def gross_margin(revenue: float | None, cost_of_revenue: float | None) -> float | None:
    if revenue is None or cost_of_revenue is None or revenue <= 0:
        return None
    return (revenue - cost_of_revenue) / revenue


def net_margin(revenue: float | None, net_income: float | None) -> float | None:
    if revenue is None or net_income is None or revenue <= 0:
        return None
    return net_income / revenue


def operating_margin(revenue: float | None, operating_income: float | None) -> float | None:
    if revenue is None or operating_income is None or revenue <= 0:
        return None
    return operating_income / revenue


def price_to_earnings(price: float | None, eps: float | None) -> float | None:
    if price is None or eps is None or eps <= 0:
        return None
    return price / eps


def price_to_sales(market_cap: float | None, revenue: float | None) -> float | None:
    if market_cap is None or revenue is None or revenue <= 0:
        return None
    return market_cap / revenue


def project_eps(eps: float | None, growth_rate: float | None, years: int) -> float | None:
    if eps is None or growth_rate is None:
        return None
    return eps * (1.0 + growth_rate) ** years


@dataclass(frozen=True)
class ForwardPE:
    value: float
    eps: float | None
    source: str  # "analyst" | "metrics" | "projection"


def forward_pe(
    price: float | None,
    *,
    analyst_eps: float | None = None,
    metrics_forward_pe: float | None = None,
    trailing_eps: float | None = None,
    growth_rate: float | None = None,
    years_forward: int = 1,
) -> ForwardPE | None:
    """Forward P/E: analyst estimate, then metrics value, then projected EPS."""
    from_analyst = price_to_earnings(price, analyst_eps)
    if from_analyst is not None:
        return ForwardPE(from_analyst, analyst_eps, "analyst")
    if metrics_forward_pe is not None:
        return ForwardPE(metrics_forward_pe, None, "metrics")
    projected = project_eps(trailing_eps, growth_rate, years_forward)
    from_projection = price_to_earnings(price, projected)
    if from_projection is not None:
        return ForwardPE(from_projection, projected, "projection")
    return None


# ── Dividend discount model ──────────────────────────────────────────────────


def discount_factor(wacc: float, year: int) -> float:
    return (1.0 + wacc) ** -year


def project_dividends(base_dividend: float, growth_rate: float, years: int) -> list[float]:
    """Dividends for years 1..n compounded from ``base_dividend``."""
    return [base_dividend * (1.0 + growth_rate) ** year for year in range(1, years + 1)]


def gordon_terminal_value(last_dividend: float, stable_growth: float, wacc: float) -> float:
    """Gordon growth terminal value; 0 when ``wacc <= stable_growth``."""
    if wacc <= stable_growth:
        return 0.0
    return last_dividend * (1.0 + stable_growth) / (wacc - stable_growth)


@dataclass(frozen=True)
class DiscountedDividend:
    year: int
    dividend: float
    discount_factor: float
    present_value: float


@dataclass(frozen=True)
class DividendDiscountValuation:
    projections: list[DiscountedDividend]
    terminal_value: float
    terminal_present_value: float
    intrinsic_value: float
    value_with_safety: float
    verdict: str | None


def dividend_discount_model(
    projected: Sequence[float],
    wacc: float,
    stable_growth: float,
    margin_of_safety: float = 0.0,
    current_price: float | None = None,
) -> DividendDiscountValuation | None:
    """Sum of discounted projected dividends plus discounted terminal value."""
    if not projected or wacc <= -1.0:
        return None
    rows = []
    for year, dividend in enumerate(projected, start=1):
        factor = discount_factor(wacc, year)
        rows.append(DiscountedDividend(year, dividend, factor, dividend * factor))
    terminal = gordon_terminal_value(projected[-1], stable_growth, wacc)
    terminal_pv = terminal * discount_factor(wacc, len(projected))
    intrinsic = sum(row.present_value for row in rows) + terminal_pv
    with_safety = intrinsic * (1.0 - margin_of_safety)
    return DividendDiscountValuation(
        projections=rows,
        terminal_value=terminal,
        terminal_present_value=terminal_pv,
        intrinsic_value=intrinsic,
        value_with_safety=with_safety,
        verdict=valuation_verdict(current_price, intrinsic, with_safety),
    )


def valuation_verdict(
    price: float | None, intrinsic_value: float, value_with_safety: float
) -> str | None:
    if price is None or price <= 0:
        return None
    if price <= value_with_safety:
        return "BUY"
    if price <= intrinsic_value:
        return "HOLD"
    return "WAIT"


# ── DCF scenarios ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ScenarioYear:
    year: int
    revenue: float
    net_income: float
    eps: float | None
    share_price_low: float | None
    share_price_high: float | None


@dataclass(frozen=True)
class ScenarioProjection:
    years: list[ScenarioYear]
    cagr_low: float | None
    cagr_high: float | None


def project_scenario(
    revenue: float,
    net_income: float,
    shares_outstanding: float,
    revenue_growth: float,
    net_income_growth: float,
    pe_low: float,
    pe_high: float,
    stock_price: float | None,
    current_eps: float | None = None,
    years: int = 5,
) -> ScenarioProjection:
    """Compound revenue and net income for ``years`` periods (year 0 = inputs)."""
    rows = []
    for year in range(years):
        projected_revenue = revenue * (1.0 + revenue_growth) ** year
        projected_income = net_income * (1.0 + net_income_growth) ** year
        if year == 0 and current_eps is not None and current_eps > 0:
            eps = current_eps
        elif shares_outstanding > 0:
            eps = projected_income / shares_outstanding
        else:
            eps = None
        rows.append(
            ScenarioYear(
                year=year,
                revenue=projected_revenue,
                net_income=projected_income,
                eps=eps,
                share_price_low=eps * pe_low if eps is not None else None,
                share_price_high=eps * pe_high if eps is not None else None,
            )
        )
    final = rows[-1] if rows else None
    cagr_low = cagr_high = None
    if final is not None and stock_price is not None and stock_price > 0:
        if final.share_price_low is not None and final.share_price_low > 0:
            cagr_low = cagr(stock_price, final.share_price_low, years)
        if final.share_price_high is not None and final.share_price_high > 0:
            cagr_high = cagr(stock_price, final.share_price_high, years)
    return ScenarioProjection(rows, cagr_low, cagr_high)


# ── Prices ───────────────────────────────────────────────────────────────────


def price_range(bars: Iterable[Mapping[str, float | None]]) -> tuple[float | None, float | None]:
    """(max high, min low) over the bars that carry them."""
    high = low = None
    for bar in bars:
        bar_high, bar_low = bar.get("high"), bar.get("low")
        if bar_high is not None and (high is None or bar_high > high):
            high = bar_high
        if bar_low is not None and (low is None or bar_low < low):
            low = bar_low
    return high, low
