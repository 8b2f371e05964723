"""Tests for the provider HTTP client, endpoint rendering and fan-out."""

from __future__ import annotations

import httpx
import pytest

from stockresearch.providers import endpoints
from stockresearch.providers.base import FailureKind, Provider, ProviderFailure, ProviderOk
from stockresearch.providers.client import ProviderClient, render_endpoint
from stockresearch.providers.gather import gather
from stockresearch.services.assembler import describe_failure

from conftest import CNN, FINNHUB, FMP, make_settings


class TestRenderEndpoint:
    def test_path_placeholder_is_filled_and_removed_from_query(self):
        path, query = render_endpoint("/api/v3/profile/{symbol}", {"symbol": "BRK.B", "limit": 1})
        assert path == "/api/v3/profile/BRK.B"
        assert query == {"limit": 1}

    def test_path_values_are_escaped(self):
        path, _ = render_endpoint("/x/{symbol}", {"symbol": "A/B"})
        assert path == "/x/A%2FB"

    def test_none_params_are_dropped(self):
        _, query = render_endpoint("/q", {"a": None, "b": 2})
        assert query == {"b": 2}


class TestFetch:
    @pytest.mark.asyncio
    async def test_success_injects_key(self, provider_client, upstream):
        upstream.json(FINNHUB, "/quote", {"c": 190.5})
        result = await provider_client.fetch(Provider.FINNHUB, "/quote", {"symbol": "AAPL"})

        assert isinstance(result, ProviderOk)
        assert result.payload == {"c": 190.5}
        request = upstream.calls_to(FINNHUB)[0]
        assert request.url.params["token"] == "test-finnhub"
        assert request.url.params["symbol"] == "AAPL"
        assert "Mozilla" in request.headers["user-agent"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,kind",
        [
            (402, FailureKind.PAYMENT_REQUIRED),
            (403, FailureKind.FORBIDDEN),
            (404, FailureKind.NOT_FOUND),
            (429, FailureKind.RATE_LIMITED),
            (503, FailureKind.TRANSPORT_ERROR),
        ],
    )
    async def test_status_classification(self, provider_client, upstream, status, kind):
        upstream.status(FMP, "/stable/quote", status)
        result = await provider_client.fetch(Provider.FMP, "/stable/quote", {"symbol": "AAPL"})

        assert isinstance(result, ProviderFailure)
        assert result.kind is kind
        assert result.http_status == status

    @pytest.mark.asyncio
    async def test_timeout(self, provider_client, upstream):
        upstream.timeout(FMP, "/stable/quote")
        result = await provider_client.fetch(Provider.FMP, "/stable/quote", timeout_ms=50)
        assert result.kind is FailureKind.TIMEOUT
        assert "50 ms" in result.message

    @pytest.mark.asyncio
    async def test_connection_error_keeps_upstream_message(self, provider_client, upstream):
        upstream.unreachable(FMP, "/stable/quote", "boom")
        result = await provider_client.fetch(Provider.FMP, "/stable/quote", {"symbol": "AAPL"})

        assert isinstance(result, ProviderFailure)
        assert result.kind is FailureKind.TRANSPORT_ERROR
        assert result.http_status is None
        assert result.message == "boom"
        assert describe_failure(result) == "FMP: boom"

    @pytest.mark.asyncio
    async def test_malformed_body(self, provider_client, upstream):
        upstream.text(FMP, "/stable/key-metrics", "Premium endpoint")
        result = await provider_client.fetch(Provider.FMP, "/stable/key-metrics")
        assert result.kind is FailureKind.MALFORMED
        assert result.message == "Premium endpoint"

    @pytest.mark.asyncio
    async def test_unconfigured_provider_is_not_called(self, upstream):
        config = make_settings(fmp_api_key=None)
        async with ProviderClient(config, transport=httpx.MockTransport(upstream.handler)) as client:
            result = await client.fetch(Provider.FMP, "/stable/quote")
        assert result.kind is FailureKind.NOT_CONFIGURED
        assert result.message == "FMP API key not configured"
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_keyless_provider_needs_no_configuration(self, provider_client, upstream):
        upstream.json(CNN, "/index/fearandgreed/graphdata", {"ok": True})
        result = await provider_client.fetch(Provider.CNN, "/index/fearandgreed/graphdata")
        assert result.ok
        assert "apikey" not in upstream.requests[0].url.params

    @pytest.mark.asyncio
    async def test_non_positive_timeout_is_rejected(self, provider_client):
        with pytest.raises(ValueError):
            await provider_client.fetch(Provider.FMP, "/stable/quote", timeout_ms=0)


class TestGather:
    @pytest.mark.asyncio
    async def test_results_are_positional(self, provider_client, upstream):
        upstream.json(FINNHUB, "/quote", {"c": 1.0})
        upstream.status(FMP, "/stable/quote", 429)
        results = await gather(
            provider_client, [endpoints.fmp_quote("AAPL"), endpoints.finnhub_quote("AAPL")]
        )
        assert results[0].kind is FailureKind.RATE_LIMITED
        assert results[1].payload == {"c": 1.0}

    @pytest.mark.asyncio
    async def test_empty_batch(self, provider_client):
        assert await gather(provider_client, []) == []
