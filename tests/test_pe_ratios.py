"""Tests for /api/pe-ratios."""

from __future__ import annotations

from datetime import date

import pytest

from conftest import FINNHUB

THIS_YEAR = date.today().year

METRIC = {
    "metric": {
        "peTTM": 30.0,
        "epsTTM": 6.0,
        "epsGrowth3Y": 10.0,
        "dividendPerShareTTM": 0.96,
        "currentDividendYieldTTM": 0.5,
        "dividendGrowthRate5Y": 5.2,
    }
}


def register(upstream, metric=METRIC, profile=None):
    upstream.json(FINNHUB, "/quote", {"c": 180.0})
    upstream.json(FINNHUB, "/stock/metric", metric)
    upstream.json(FINNHUB, "/stock/profile2", profile or {"finnhubIndustry": "Technology"})


@pytest.mark.asyncio
async def test_projected_forward_pe(api, upstream):
    register(upstream)

    response = await api.get("/api/pe-ratios", params={"symbol": "AAPL"})

    assert response.status_code == 200
    body = response.json()
    assert body["currentPE"] == 30.0
    assert body["forwardPE1Year"] == pytest.approx(180.0 / 6.6)
    assert body["forwardPE2Year"] == pytest.approx(180.0 / 7.26)
    assert body["forwardPESource"] == "projection"
    assert body["forwardEps1Year"] == pytest.approx(6.6)
    assert body["targetYear1"] == THIS_YEAR
    assert body["targetYear2"] == THIS_YEAR + 1
    assert body["industryAveragePE"] == 25.5
    assert body["sector"] == "Technology"
    assert body["dividendPerShare"] == 0.96


@pytest.mark.asyncio
async def test_analyst_estimates_take_priority(api, upstream):
    profile = {
        "finnhubIndustry": "Restaurants",
        "estimates": [
            {"period": f"{THIS_YEAR}-12-31", "epsAvg": 9.0},
            {"period": f"{THIS_YEAR + 1}-12-31", "epsAvg": 10.0},
        ],
    }
    register(upstream, profile=profile)

    body = (await api.get("/api/pe-ratios", params={"symbol": "CMG"})).json()

    assert body["forwardPE1Year"] == pytest.approx(20.0)
    assert body["forwardPE2Year"] == pytest.approx(18.0)
    assert body["forwardPESource"] == "analyst"
    assert body["industryAveragePE"] == 20.72


@pytest.mark.asyncio
async def test_trailing_pe_falls_back_to_price_over_eps(api, upstream):
    register(upstream, metric={"metric": {"epsTTM": 4.0}})

    body = (await api.get("/api/pe-ratios", params={"symbol": "AAPL"})).json()

    assert body["currentPE"] == pytest.approx(45.0)
    assert body["forwardPE1Year"] is None


@pytest.mark.asyncio
async def test_unknown_sector_has_no_benchmark(api, upstream):
    register(upstream, profile={"finnhubIndustry": "Shell Companies"})

    body = (await api.get("/api/pe-ratios", params={"symbol": "XYZ"})).json()

    assert body["industryAveragePE"] is None


@pytest.mark.asyncio
async def test_non_string_industry_is_ignored(api, upstream):
    register(upstream, profile={"finnhubIndustry": 42, "sector": "Energy"})

    response = await api.get("/api/pe-ratios", params={"symbol": "XOM"})

    assert response.status_code == 200
    body = response.json()
    assert body["sector"] == "Energy"
    assert body["industryAveragePE"] == 15.6
