"""Tests for request validation and error rendering."""

from __future__ import annotations

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from stockresearch.api.routes import get_provider_client
from stockresearch.main import create_app
from stockresearch.providers.client import ProviderClient

from conftest import FINNHUB, make_settings

SYMBOL_ROUTES = [
    "/api/earnings-growth",
    "/api/dividend-history",
    "/api/pe-ratios",
    "/api/financials",
    "/api/key-metrics",
    "/api/quote",
    "/api/compare",
    "/api/graphs",
    "/api/company-name",
    "/api/historical-prices",
    "/api/valuation/ddm",
]


@pytest.mark.asyncio
@pytest.mark.parametrize("path", SYMBOL_ROUTES)
async def test_missing_symbol_is_400(api, upstream, path):
    response = await api.get(path)

    assert response.status_code == 400
    assert response.json() == {"error": "Stock symbol is required", "details": []}
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_blank_symbol_is_400(api):
    response = await api.get("/api/quote", params={"symbol": "   "})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_malformed_symbol_is_400(api, upstream):
    response = await api.get("/api/quote", params={"symbol": "AAPL;DROP"})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid stock symbol"
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_symbol_is_normalized_to_upper_case(api, upstream):
    upstream.json(FINNHUB, "/stock/profile2", {"name": "Berkshire Hathaway"})

    body = (await api.get("/api/company-name", params={"symbol": " brk.b "})).json()

    assert body["symbol"] == "BRK.B"
    assert upstream.requests[0].url.params["symbol"] == "BRK.B"


@pytest.mark.asyncio
async def test_unconfigured_providers_is_500(upstream):
    config = make_settings(fmp_api_key=None, finnhub_api_key=None, alpha_vantage_api_key=None)
    client = ProviderClient(config, transport=httpx.MockTransport(upstream.handler))
    app = create_app(config)
    app.dependency_overrides[get_provider_client] = lambda: client
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as http:
            response = await http.get("/api/dividend-history", params={"symbol": "KO"})
    finally:
        await client.aclose()

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Provider API key not configured"
    assert "Alpha Vantage: API key not configured" in body["details"]
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_unexpected_exception_is_generic_500(api, upstream):
    def explode(request):
        raise RuntimeError("defect")

    upstream.routes[(FINNHUB, "/api/v1/stock/profile2")] = explode

    response = await api.get("/api/company-name", params={"symbol": "AAPL"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error", "details": []}


@pytest.mark.asyncio
async def test_health(api):
    response = await api.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
