"""Comparison snapshot combining Finnhub and FMP (growth and margins in percent)."""

from __future__ import annotations

from datetime import date

from stockresearch.models.records import AnalystEstimate, FinancialPeriodRecord
from stockresearch.normalize import (
    RecordKind,
    SchemaHints,
    extract_rows,
    first_row,
    normalize_all,
    resolve_fields,
)
from stockresearch.normalize import aliases
from stockresearch.providers import endpoints
from stockresearch.providers.base import Provider
from stockresearch.providers.client import ProviderClient
from stockresearch.providers.gather import gather
from stockresearch.schemas.fundamentals import Compare
from stockresearch.services.assembler import assemble, collect_failures, payload_of, positive
from stockresearch.services.financials_service import gross_profit_margin, latest
from stockresearch.services.metrics import (
    forward_pe,
    net_margin,
    percent_change,
    price_to_earnings,
    price_to_sales,
    ratio_growth,
)

FMP_INCOME = SchemaHints(RecordKind.INCOME, Provider.FMP)
FINNHUB_XBRL = SchemaHints(RecordKind.INCOME, Provider.FINNHUB)
FMP_ESTIMATES = SchemaHints(RecordKind.ESTIMATE, Provider.FMP)
FINNHUB_ESTIMATES = SchemaHints(RecordKind.ESTIMATE, Provider.FINNHUB)


def locate_estimates(
    estimates: list[AnalystEstimate], years: tuple[int, ...]
) -> list[AnalystEstimate | None]:
    """One estimate per requested year.

    Matching is by fiscal year.  Only when none of ``years`` matches (fiscal
    calendars offset from the calendar year) are the estimates taken
    positionally, oldest first.
    """
    by_year = {e.fiscal_year: e for e in estimates}
    if any(year in by_year for year in years):
        return [by_year.get(year) for year in years]
    ordered = sorted(estimates, key=lambda e: e.fiscal_year)
    return [ordered[i] if i < len(ordered) else None for i in range(len(years))]


def as_percent(value: float | None) -> float | None:
    return value * 100 if value is not None else None


def first_value(*values: float | None) -> float | None:
    return next((v for v in values if v is not None), None)


async def get_compare(client: ProviderClient, symbol: str, today: date | None = None) -> Compare:
    today = today or date.today()
    results = await gather(
        client,
        [
            endpoints.finnhub_quote(symbol),
            endpoints.finnhub_metric(symbol),
            endpoints.finnhub_profile(symbol),
            endpoints.finnhub_financials_reported(symbol),
            endpoints.fmp_income_statement(symbol),
            endpoints.fmp_analyst_estimates(symbol),
            endpoints.fmp_key_metrics(symbol),
            endpoints.fmp_ratios(symbol),
        ],
    )
    quote, metric, profile, reported, income, estimates, key_metrics, ratios = (
        payload_of(r) for r in results
    )

    price = positive(resolve_fields(first_row(quote), aliases.FINNHUB_QUOTE)["price"])
    m = resolve_fields(
        metric.get("metric") if isinstance(metric, dict) else None, aliases.FINNHUB_METRIC
    )
    km = resolve_fields(first_row(key_metrics), aliases.FMP_KEY_METRICS)
    ratio = resolve_fields(first_row(ratios), aliases.FMP_RATIOS)

    statements: list[FinancialPeriodRecord] = sorted(
        normalize_all(extract_rows(income, "data"), FMP_INCOME),
        key=lambda r: r.period_end_date,
    )
    last = statements[-1] if statements else None
    prev = statements[-2] if len(statements) >= 2 else None

    fmp_estimates = normalize_all(extract_rows(estimates, "data"), FMP_ESTIMATES)
    finnhub_estimates = normalize_all(
        extract_rows(first_row(profile), "estimates"), FINNHUB_ESTIMATES
    )
    cy = today.year

    fh_fy, fh_fy1 = locate_estimates(finnhub_estimates, (cy, cy + 1))
    fmp_prior, fmp_fy, fmp_fy1 = locate_estimates(fmp_estimates, (cy - 1, cy, cy + 1))

    # ── P/E ──
    eps_fy = first_value(fh_fy and fh_fy.eps_avg, fmp_fy and fmp_fy.eps_avg)
    eps_fy1 = first_value(fh_fy1 and fh_fy1.eps_avg, fmp_fy1 and fmp_fy1.eps_avg)

    growth = first_value(m["eps_growth_3y"], m["eps_growth_2y"], m["eps_growth_1y"])
    growth = growth / 100 if growth is not None else None
    if growth is None and last and prev:
        growth = ratio_growth(prev.eps, last.eps)
    trailing_eps = last.eps if last else None

    ttm_pe = first_value(m["pe_ttm"], price_to_earnings(price, trailing_eps))
    fwd1 = forward_pe(
        price,
        analyst_eps=eps_fy,
        metrics_forward_pe=m["forward_pe"],
        trailing_eps=trailing_eps,
        growth_rate=growth,
        years_forward=1,
    )
    fwd2 = forward_pe(
        price, analyst_eps=eps_fy1, trailing_eps=trailing_eps, growth_rate=growth, years_forward=2
    )

    # ── EPS growth ──
    ttm_eps_growth = percent_change(prev.eps, last.eps) if last and prev else None
    eps_prior = first_value(fmp_prior and fmp_prior.eps_avg, trailing_eps)
    current_eps_growth = first_value(
        ratio_growth(eps_prior, eps_fy),
        m["eps_growth_1y"] / 100 if m["eps_growth_1y"] is not None else None,
        m["eps_growth_3y"] / 100 if m["eps_growth_3y"] is not None else None,
    )
    next_eps_growth = first_value(
        ratio_growth(eps_fy, eps_fy1),
        m["eps_growth_2y"] / 100 if m["eps_growth_2y"] is not None else None,
    )

    # ── Revenue growth ──
    ttm_revenue_growth = None
    if last and prev and prev.revenue is not None and prev.revenue > 0:
        ttm_revenue_growth = percent_change(prev.revenue, last.revenue)
    rev_fy = fmp_fy.revenue_avg if fmp_fy else None
    rev_fy1 = fmp_fy1.revenue_avg if fmp_fy1 else None
    rev_prior = first_value(
        fmp_prior and fmp_prior.revenue_avg, last.revenue if last else None
    )
    current_revenue_growth = ratio_growth(rev_prior, rev_fy)
    if current_revenue_growth is None and fh_fy:
        fh_prior = next((e for e in finnhub_estimates if e.fiscal_year == cy - 1), None)
        current_revenue_growth = ratio_growth(
            fh_prior.revenue_avg if fh_prior else None, fh_fy.revenue_avg
        )
    next_revenue_growth = ratio_growth(rev_fy, rev_fy1)

    # ── Margins ──
    xbrl_latest = latest(normalize_all(extract_rows(reported, "data"), FINNHUB_XBRL))
    gross = first_value(
        gross_profit_margin(xbrl_latest) if xbrl_latest else None,
        gross_profit_margin(last) if last else None,
        km["gross_margin"],
        ratio["gross_margin"],
    )
    net = net_margin(last.revenue, last.net_income) if last else None

    # ── P/S ──
    market_cap = km["market_cap"]
    ttm_ps = price_to_sales(market_cap, last.revenue if last else None)
    forward_ps = price_to_sales(market_cap, rev_fy)

    derived = {
        "ttm_pe": ttm_pe,
        "forward_pe": fwd1.value if fwd1 else None,
        "two_year_pe": fwd2.value if fwd2 else None,
        "ttm_eps_growth": as_percent(ttm_eps_growth),
        "current_year_expected_eps_growth": as_percent(current_eps_growth),
        "next_year_eps_growth": as_percent(next_eps_growth),
        "ttm_revenue_growth": as_percent(ttm_revenue_growth),
        "current_year_expected_revenue_growth": as_percent(current_revenue_growth),
        "next_year_revenue_growth": as_percent(next_revenue_growth),
        "gross_margin": as_percent(gross),
        "net_margin": as_percent(net),
        "ttm_ps_ratio": ttm_ps,
        "forward_ps_ratio": forward_ps,
    }
    return assemble(
        Compare,
        {"symbol": symbol},
        derived,
        collect_failures(results),
        usable=any(v is not None for v in derived.values()),
        error="Failed to fetch compare data",
    )
