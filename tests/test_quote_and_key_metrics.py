"""Tests for /api/quote and /api/key-metrics."""

from __future__ import annotations

import pytest

from conftest import FMP


class TestQuote:
    @pytest.mark.asyncio
    async def test_profile_and_bars_take_priority(self, api, upstream):
        upstream.json(
            FMP,
            "/stable/quote",
            [{"price": 190.0, "pe": 29.5, "marketCap": 1, "yearHigh": 999, "yearLow": 1,
              "changesPercentage": 1.2}],
        )
        upstream.json(FMP, "/api/v3/profile/AAPL", [{"mktCap": 2.9e12, "sharesOutstanding": 15.2e9}])
        upstream.json(FMP, "/api/v4/shares_float", [{"outstandingShares": 1}])
        upstream.json(
            FMP,
            "/stable/historical-price-full",
            {"historical": [{"date": "2024-01-02", "high": 200.0, "low": 150.0},
                            {"date": "2024-06-03", "high": 220.0, "low": 170.0}]},
        )

        response = await api.get("/api/quote", params={"symbol": "AAPL"})

        assert response.status_code == 200
        body = response.json()
        assert body["price"] == 190.0
        assert body["fmpPE"] == 29.5
        assert body["marketCap"] == 2.9e12
        assert body["sharesOutstanding"] == 15.2e9
        assert body["yearHigh"] == 220.0
        assert body["yearLow"] == 150.0
        assert body["changePercent"] == 1.2
        assert body["errors"] == []

    @pytest.mark.asyncio
    async def test_quote_range_and_errors_when_profile_fails(self, api, upstream):
        upstream.json(FMP, "/stable/quote", [{"price": 190.0, "yearHigh": 199.6, "yearLow": 164.1}])
        upstream.status(FMP, "/api/v3/profile/AAPL", 429)
        upstream.json(FMP, "/api/v4/shares_float", [{"sharesOutstanding": 15.1e9}])

        body = (await api.get("/api/quote", params={"symbol": "AAPL"})).json()

        assert body["yearHigh"] == 199.6
        assert body["yearLow"] == 164.1
        assert body["sharesOutstanding"] == 15.1e9
        assert body["errors"] == ["FMP: Rate limit exceeded"]

    @pytest.mark.asyncio
    async def test_nothing_usable_is_404(self, api, upstream):
        upstream.status(FMP, "/stable/quote", 403)

        response = await api.get("/api/quote", params={"symbol": "AAPL"})

        assert response.status_code == 404
        assert response.json()["error"] == "Failed to fetch FMP data"


class TestKeyMetrics:
    @pytest.mark.asyncio
    async def test_latest_metrics_and_payout(self, api, upstream):
        upstream.json(
            FMP,
            "/stable/key-metrics",
            [
                {"date": "2024-09-28", "marketCap": 3.4e12, "enterpriseValue": 3.5e12,
                 "returnOnInvestedCapital": 0.55, "numberOfShares": 15.1e9},
                {"date": "2023-09-30", "marketCap": 2.7e12},
            ],
        )
        upstream.json(FMP, "/stable/ratios", [{"payoutRatio": 0.16}])

        body = (await api.get("/api/key-metrics", params={"symbol": "AAPL"})).json()

        assert body["date"] == "2024-09-28"
        assert body["marketCap"] == 3.4e12
        assert body["roic"] == 0.55
        assert body["sharesOutstanding"] == 15.1e9
        assert body["payoutRatio"] == 0.16
        assert body["errors"] == []

    @pytest.mark.asyncio
    async def test_subscription_limit_is_reported(self, api, upstream):
        upstream.text(FMP, "/stable/key-metrics", "Premium Query Parameter: limit must be 0-5")
        upstream.json(FMP, "/stable/ratios", [{"payoutRatio": 0.6}])

        response = await api.get("/api/key-metrics", params={"symbol": "KO"})

        assert response.status_code == 200
        body = response.json()
        assert body["marketCap"] is None
        assert body["payoutRatio"] == 0.6
        assert body["errors"] == [
            "FMP: Subscription limit (limit parameter must be 0-5) (key-metrics)"
        ]

    @pytest.mark.asyncio
    async def test_key_metrics_limit_is_capped(self, api, upstream):
        upstream.json(FMP, "/stable/key-metrics", [{"marketCap": 1.0}])
        upstream.json(FMP, "/stable/ratios", [])

        await api.get("/api/key-metrics", params={"symbol": "KO"})

        request = next(r for r in upstream.requests if r.url.path == "/stable/key-metrics")
        assert int(request.url.params["limit"]) <= 5
