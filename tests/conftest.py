"""Shared pytest fixtures – upstream providers are faked with httpx.MockTransport."""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from stockresearch.api.routes import get_provider_client
from stockresearch.config import Settings
from stockresearch.main import create_app
from stockresearch.providers.client import ProviderClient

FMP = "financialmodelingprep.com"
FINNHUB = "finnhub.io"
ALPHA_VANTAGE = "www.alphavantage.co"
CNN = "production.dataviz.cnn.io"
FRED = "api.stlouisfed.org"
API_NINJAS = "api.api-ninjas.com"

Responder = Callable[[httpx.Request], httpx.Response]


class FakeUpstream:
    """Route table keyed by (host, path); unknown routes answer 404.

    Finnhub paths are registered without the ``/api/v1`` prefix, FRED
    paths without ``/fred`` and API Ninjas paths without ``/v1``.
    """

    _PREFIXES = {FINNHUB: "/api/v1", FRED: "/fred", API_NINJAS: "/v1"}

    def __init__(self):
        self.routes: dict[tuple[str, str], Responder] = {}
        self.requests: list[httpx.Request] = []

    def _key(self, host: str, path: str) -> tuple[str, str]:
        return host, self._PREFIXES.get(host, "") + path

    def json(self, host: str, path: str, payload: Any, status: int = 200) -> None:
        self.routes[self._key(host, path)] = lambda request: httpx.Response(status, json=payload)

    def text(self, host: str, path: str, body: str, status: int = 200) -> None:
        self.routes[self._key(host, path)] = lambda request: httpx.Response(status, text=body)

    def status(self, host: str, path: str, status: int) -> None:
        self.routes[self._key(host, path)] = lambda request: httpx.Response(status, json={})

    def timeout(self, host: str, path: str) -> None:
        def raise_timeout(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        self.routes[self._key(host, path)] = raise_timeout

    def unreachable(self, host: str, path: str, message: str = "connection refused") -> None:
        def raise_connect_error(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError(message, request=request)

        self.routes[self._key(host, path)] = raise_connect_error

    def calls_to(self, host: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get((request.url.host, request.url.path))
        if responder is None:
            return httpx.Response(404, json={"error": "not found"})
        return responder(request)


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "fmp_api_key": "test-fmp",
        "finnhub_api_key": "test-finnhub",
        "alpha_vantage_api_key": "test-av",
        "fred_api_key": "test-fred",
        "api_ninjas_api_key": "test-ninjas",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def config() -> Settings:
    return make_settings()


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest_asyncio.fixture
async def provider_client(config, upstream):
    client = ProviderClient(config, transport=httpx.MockTransport(upstream.handler))
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def api(config, provider_client):
    """HTTP client against the app with the faked provider client injected."""
    app = create_app(config)
    app.dependency_overrides[get_provider_client] = lambda: provider_client
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
