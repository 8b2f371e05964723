"""Tests for /api/financials."""

from __future__ import annotations

import pytest

from conftest import FINNHUB, FMP


def xbrl_report(end_date, lines):
    return {"endDate": end_date, "report": {"ic": lines}}


@pytest.mark.asyncio
async def test_xbrl_margins_with_fmp_eps(api, upstream):
    upstream.json(
        FINNHUB,
        "/stock/financials-reported",
        {
            "data": [
                xbrl_report(
                    "2023-12-31",
                    [
                        {"concept": "us-gaap_Revenues", "label": "Revenue", "value": 1000},
                        {"concept": "cake_FoodAndBeverageCosts", "label": "Food", "value": 250},
                        {"concept": "us-gaap_NetIncomeLoss", "label": "Net income", "value": 100},
                        {"concept": "us-gaap_OperatingIncomeLoss", "value": 150},
                    ],
                ),
                xbrl_report("2022-12-31", [{"concept": "us-gaap_Revenues", "value": 900}]),
            ]
        },
    )
    upstream.json(
        FMP,
        "/stable/income-statement",
        [{"date": "2023-12-31", "revenue": 1000, "eps": 3.5}],
    )

    response = await api.get("/api/financials", params={"symbol": "CAKE"})

    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "Finnhub"
    assert body["periodEndDate"] == "2023-12-31"
    assert body["grossProfitMargin"] == pytest.approx(0.75)
    assert body["netMargin"] == pytest.approx(0.1)
    assert body["operatingMargin"] == pytest.approx(0.15)
    assert body["costOfGoodsSold"] == 250
    assert body["eps"] == 3.5


@pytest.mark.asyncio
async def test_fmp_only_with_gross_profit(api, upstream):
    upstream.status(FINNHUB, "/stock/financials-reported", 403)
    upstream.json(
        FMP,
        "/stable/income-statement",
        [
            {"date": "2024-12-31", "revenue": 200, "grossProfit": 80, "netIncome": -20},
            {"date": "2023-12-31", "revenue": 150},
        ],
    )

    body = (await api.get("/api/financials", params={"symbol": "XYZ"})).json()

    assert body["source"] == "FMP"
    assert body["grossProfitMargin"] == pytest.approx(0.4)
    assert body["netMargin"] == pytest.approx(-0.1)
    assert body["operatingMargin"] is None


@pytest.mark.asyncio
async def test_zero_revenue_leaves_margins_null(api, upstream):
    upstream.json(FINNHUB, "/stock/financials-reported", {"data": []})
    upstream.json(
        FMP, "/stable/income-statement", [{"date": "2024-12-31", "revenue": 0, "netIncome": 5}]
    )

    body = (await api.get("/api/financials", params={"symbol": "XYZ"})).json()

    assert body["revenue"] == 0
    assert body["netMargin"] is None
    assert body["grossProfitMargin"] is None


@pytest.mark.asyncio
async def test_no_statements_is_404(api, upstream):
    upstream.status(FINNHUB, "/stock/financials-reported", 500)
    upstream.json(FMP, "/stable/income-statement", [])

    response = await api.get("/api/financials", params={"symbol": "XYZ"})

    assert response.status_code == 404
    assert response.json()["error"] == "Failed to fetch financial data"
    assert response.json()["details"] == ["Finnhub: Internal Server Error (HTTP 500)"]
