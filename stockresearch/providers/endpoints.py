"""Catalogue of upstream endpoints as ``ProviderCall`` builders.

Paths are relative to the provider base URLs in ``Settings``; the API key
is appended by ``ProviderClient``.
"""

from __future__ import annotations

from datetime import date

from stockresearch.providers.base import Provider, ProviderCall

# ── FMP ──────────────────────────────────────────────────────────────────────


def fmp_income_statement(symbol: str, limit: int = 5) -> ProviderCall:
    return ProviderCall(
        Provider.FMP, "/stable/income-statement", {"symbol": symbol, "limit": limit}
    )


def fmp_analyst_estimates(symbol: str) -> ProviderCall:
    return ProviderCall(Provider.FMP, "/stable/analyst-estimates", {"symbol": symbol})


def fmp_key_metrics(symbol: str, limit: int = 5) -> ProviderCall:
    # Free tier rejects limit > 5.
    return ProviderCall(
        Provider.FMP, "/stable/key-metrics", {"symbol": symbol, "limit": min(limit, 5)}
    )


def fmp_ratios(symbol: str, limit: int = 1) -> ProviderCall:
    return ProviderCall(Provider.FMP, "/stable/ratios", {"symbol": symbol, "limit": limit})


def fmp_quote(symbol: str) -> ProviderCall:
    return ProviderCall(Provider.FMP, "/stable/quote", {"symbol": symbol})


def fmp_profile(symbol: str) -> ProviderCall:
    return ProviderCall(Provider.FMP, "/api/v3/profile/{symbol}", {"symbol": symbol})


def fmp_shares_float(symbol: str) -> ProviderCall:
    return ProviderCall(Provider.FMP, "/api/v4/shares_float", {"symbol": symbol})


def fmp_dividends(symbol: str) -> ProviderCall:
    return ProviderCall(Provider.FMP, "/stable/dividends", {"symbol": symbol})


def fmp_historical_prices(
    symbol: str,
    start: date | None = None,
    end: date | None = None,
    timeout_ms: int | None = None,
) -> ProviderCall:
    params: dict = {"symbol": symbol}
    if start is not None and end is not None:
        params["from"] = start.isoformat()
        params["to"] = end.isoformat()
    return ProviderCall(Provider.FMP, "/stable/historical-price-full", params, timeout_ms)


def fmp_cash_flow_statement(symbol: str, limit: int = 10) -> ProviderCall:
    return ProviderCall(
        Provider.FMP,
        "/api/v3/cash-flow-statement/{symbol}",
        {"symbol": symbol, "limit": limit},
    )


def fmp_income_statement_history(symbol: str, limit: int = 10) -> ProviderCall:
    return ProviderCall(
        Provider.FMP,
        "/api/v3/income-statement/{symbol}",
        {"symbol": symbol, "limit": limit},
    )


# ── Finnhub ──────────────────────────────────────────────────────────────────


def finnhub_quote(symbol: str) -> ProviderCall:
    return ProviderCall(Provider.FINNHUB, "/quote", {"symbol": symbol})


def finnhub_metric(symbol: str) -> ProviderCall:
    return ProviderCall(Provider.FINNHUB, "/stock/metric", {"symbol": symbol, "metric": "all"})


def finnhub_profile(symbol: str) -> ProviderCall:
    return ProviderCall(Provider.FINNHUB, "/stock/profile2", {"symbol": symbol})


def finnhub_financials_reported(symbol: str) -> ProviderCall:
    return ProviderCall(Provider.FINNHUB, "/stock/financials-reported", {"symbol": symbol})


def finnhub_dividends(symbol: str, start: date, end: date) -> ProviderCall:
    return ProviderCall(
        Provider.FINNHUB,
        "/stock/dividend",
        {"symbol": symbol, "from": start.isoformat(), "to": end.isoformat()},
    )


# ── Alpha Vantage ────────────────────────────────────────────────────────────


def alpha_vantage_dividends(symbol: str) -> ProviderCall:
    return ProviderCall(
        Provider.ALPHA_VANTAGE, "/query", {"function": "DIVIDENDS", "symbol": symbol}
    )


# ── CNN / FRED ───────────────────────────────────────────────────────────────


def cnn_fear_greed() -> ProviderCall:
    return ProviderCall(Provider.CNN, "/index/fearandgreed/graphdata")


def fred_observations(
    series_id: str, start: date | None = None, end: date | None = None
) -> ProviderCall:
    return ProviderCall(
        Provider.FRED,
        "/series/observations",
        {
            "series_id": series_id,
            "file_type": "json",
            "observation_start": start.isoformat() if start else None,
            "observation_end": end.isoformat() if end else None,
        },
    )


# ── Insider activity / news / earnings calendar ──────────────────────────────


def finnhub_insider_transactions(symbol: str) -> ProviderCall:
    return ProviderCall(Provider.FINNHUB, "/stock/insider-transactions", {"symbol": symbol})


def finnhub_ownership(symbol: str) -> ProviderCall:
    return ProviderCall(Provider.FINNHUB, "/stock/ownership", {"symbol": symbol})


def alpha_vantage_news(symbol: str, limit: int = 50) -> ProviderCall:
    return ProviderCall(
        Provider.ALPHA_VANTAGE,
        "/query",
        {"function": "NEWS_SENTIMENT", "tickers": symbol, "limit": limit},
    )


def fmp_earnings_surprises(symbol: str) -> ProviderCall:
    # The earnings calendar endpoint is premium-only.
    return ProviderCall(
        Provider.FMP, "/api/v3/earnings-surprises/{symbol}", {"symbol": symbol}
    )


def api_ninjas_earnings_calendar(symbol: str, limit: int = 10) -> ProviderCall:
    # Free keys get at most 3 rows whatever the limit.
    return ProviderCall(
        Provider.API_NINJAS, "/earningscalendar", {"ticker": symbol, "limit": limit}
    )
