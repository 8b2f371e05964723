"""Single-request HTTP client for every upstream financial data provider.

``ProviderClient.fetch`` performs exactly one GET with a bounded timeout and
classifies the outcome.  It never retries and never raises for upstream
problems; API keys are injected here and never logged.
"""

from __future__ import annotations

import logging
import time
from string import Formatter
from typing import Any, Mapping
from urllib.parse import quote

import httpx

from stockresearch.config import Settings
from stockresearch.providers.base import (
    FailureKind,
    Provider,
    ProviderFailure,
    ProviderOk,
    ProviderResult,
)

logger = logging.getLogger("stockresearch.providers")

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Query parameter each provider expects its key under; CNN is keyless.
_KEY_PARAMS: dict[Provider, str] = {
    Provider.FMP: "apikey",
    Provider.FINNHUB: "token",
    Provider.ALPHA_VANTAGE: "apikey",
    Provider.FRED: "api_key",
}

# API Ninjas takes its key as a header instead.
_KEY_HEADERS: dict[Provider, str] = {Provider.API_NINJAS: "X-Api-Key"}

_STATUS_KINDS: dict[int, FailureKind] = {
    402: FailureKind.PAYMENT_REQUIRED,
    403: FailureKind.FORBIDDEN,
    404: FailureKind.NOT_FOUND,
    429: FailureKind.RATE_LIMITED,
}


def render_endpoint(endpoint: str, params: Mapping[str, Any]) -> tuple[str, dict[str, Any]]:
    """Fill ``{name}`` path placeholders and return (path, remaining query)."""
    names = {name for _, name, _, _ in Formatter().parse(endpoint) if name}
    path = endpoint.format(**{name: quote(str(params[name]), safe="") for name in names})
    query = {k: v for k, v in params.items() if k not in names and v is not None}
    return path, query


class ProviderClient:
    """Owns the pooled ``httpx.AsyncClient`` and the provider credentials."""

    def __init__(
        self,
        config: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._config = config
        self._base_urls = {
            Provider.FMP: config.fmp_base_url,
            Provider.FINNHUB: config.finnhub_base_url,
            Provider.ALPHA_VANTAGE: config.alpha_vantage_base_url,
            Provider.CNN: config.cnn_base_url,
            Provider.FRED: config.fred_base_url,
            Provider.API_NINJAS: config.api_ninjas_base_url,
        }
        self._keys = {
            Provider.FMP: config.fmp_api_key,
            Provider.FINNHUB: config.finnhub_api_key,
            Provider.ALPHA_VANTAGE: config.alpha_vantage_api_key,
            Provider.FRED: config.fred_api_key,
            Provider.API_NINJAS: config.api_ninjas_api_key,
        }
        self._http = httpx.AsyncClient(
            transport=transport,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            follow_redirects=True,
        )

    @property
    def config(self) -> Settings:
        return self._config

    def is_configured(self, provider: Provider) -> bool:
        if provider not in _KEY_PARAMS and provider not in _KEY_HEADERS:
            return True
        secret = self._keys.get(provider)
        return secret is not None and bool(secret.get_secret_value())

    async def fetch(
        self,
        provider: Provider,
        endpoint: str,
        params: Mapping[str, Any] | None = None,
        timeout_ms: int | None = None,
    ) -> ProviderResult:
        """Issue one GET and classify the outcome."""
        if timeout_ms is None:
            timeout_ms = self._config.provider_timeout_ms
        if timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive, got {timeout_ms}")

        if not self.is_configured(provider):
            return ProviderFailure(
                provider,
                FailureKind.NOT_CONFIGURED,
                message=f"{provider.label} API key not configured",
            )

        path, query = render_endpoint(endpoint, params or {})
        key_param = _KEY_PARAMS.get(provider)
        if key_param is not None:
            query[key_param] = self._keys[provider].get_secret_value()
        headers: dict[str, str] = {}
        key_header = _KEY_HEADERS.get(provider)
        if key_header is not None:
            headers[key_header] = self._keys[provider].get_secret_value()
        url = self._base_urls[provider].rstrip("/") + path

        t0 = time.perf_counter()
        try:
            response = await self._http.get(
                url, params=query, headers=headers, timeout=timeout_ms / 1000
            )
        except httpx.TimeoutException:
            logger.warning("provider=%s endpoint=%s failure=timeout", provider.value, endpoint)
            return ProviderFailure(
                provider,
                FailureKind.TIMEOUT,
                message=f"Request timed out after {timeout_ms} ms",
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "provider=%s endpoint=%s failure=transport_error (%s)",
                provider.value,
                endpoint,
                exc.__class__.__name__,
            )
            return ProviderFailure(
                provider,
                FailureKind.TRANSPORT_ERROR,
                message=str(exc) or exc.__class__.__name__,
            )
        elapsed = (time.perf_counter() - t0) * 1000

        if not response.is_success:
            kind = _STATUS_KINDS.get(response.status_code, FailureKind.TRANSPORT_ERROR)
            logger.warning(
                "provider=%s endpoint=%s failure=%s status=%d ms=%.1f",
                provider.value,
                endpoint,
                kind.value,
                response.status_code,
                elapsed,
            )
            # Classified statuses speak for themselves; keep the phrase for the rest.
            message = None
            if kind is FailureKind.TRANSPORT_ERROR:
                message = response.reason_phrase or f"HTTP {response.status_code}"
            return ProviderFailure(provider, kind, http_status=response.status_code, message=message)

        try:
            payload = response.json()
        except ValueError:
            logger.warning(
                "provider=%s endpoint=%s failure=malformed_body", provider.value, endpoint
            )
            return ProviderFailure(
                provider,
                FailureKind.MALFORMED,
                http_status=response.status_code,
                message=response.text[:200],
            )

        logger.debug(
            "provider=%s endpoint=%s status=%d ms=%.1f",
            provider.value,
            endpoint,
            response.status_code,
            elapsed,
        )
        return ProviderOk(provider, payload, response.status_code)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> ProviderClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
