"""Tests for response assembly and failure reporting."""

from __future__ import annotations

import pytest

from stockresearch.errors import ProviderNotConfigured, UpstreamUnavailable
from stockresearch.providers.base import FailureKind, Provider, ProviderFailure
from stockresearch.schemas import Quote
from stockresearch.services.assembler import assemble, describe_failure, failure_details


def test_describe_failure_uses_generic_reason():
    failure = ProviderFailure(Provider.FMP, FailureKind.RATE_LIMITED, 429, "Too Many Requests")
    assert describe_failure(failure) == "FMP: Rate limit exceeded"


def test_describe_failure_keeps_transport_message_and_status():
    failure = ProviderFailure(Provider.FINNHUB, FailureKind.TRANSPORT_ERROR, 502, "Bad Gateway")
    assert describe_failure(failure) == "Finnhub: Bad Gateway (HTTP 502)"


def test_failure_details_are_deduplicated():
    failure = ProviderFailure(Provider.FMP, FailureKind.TIMEOUT)
    assert failure_details([failure, failure]) == ["FMP: Request timed out"]


def test_assemble_fills_defaults():
    quote = assemble(Quote, {"symbol": "AAPL", "price": 190.0}, {"year_high": 200.0})
    assert quote.price == 190.0
    assert quote.market_cap is None
    assert quote.errors == []
    assert quote.model_dump(by_alias=True)["yearHigh"] == 200.0


def test_unusable_result_is_404_with_details():
    failures = [ProviderFailure(Provider.FMP, FailureKind.FORBIDDEN, 403)]
    with pytest.raises(UpstreamUnavailable) as excinfo:
        assemble(Quote, {}, {}, failures, usable=False, error="Failed to fetch FMP data")
    assert excinfo.value.status_code == 404
    assert excinfo.value.error == "Failed to fetch FMP data"
    assert excinfo.value.details == ["FMP: Access forbidden (403)"]


def test_only_missing_keys_is_500():
    failures = [
        ProviderFailure(Provider.FMP, FailureKind.NOT_CONFIGURED),
        ProviderFailure(Provider.FINNHUB, FailureKind.NOT_CONFIGURED),
    ]
    with pytest.raises(ProviderNotConfigured) as excinfo:
        assemble(Quote, {}, {}, failures, usable=False)
    assert excinfo.value.status_code == 500
    assert excinfo.value.error == "Provider API key not configured"


def test_mixed_failures_stay_404():
    failures = [
        ProviderFailure(Provider.FMP, FailureKind.NOT_CONFIGURED),
        ProviderFailure(Provider.FINNHUB, FailureKind.TIMEOUT),
    ]
    with pytest.raises(UpstreamUnavailable):
        assemble(Quote, {}, {}, failures, usable=False)
