"""Result assembler: fixed-shape responses and error selection."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, TypeVar

from pydantic import BaseModel

from stockresearch.errors import ProviderNotConfigured, UpstreamUnavailable
from stockresearch.providers.base import FailureKind, ProviderFailure, ProviderOk, ProviderResult

M = TypeVar("M", bound=BaseModel)

_REASONS = {
    FailureKind.TIMEOUT: "Request timed out",
    FailureKind.RATE_LIMITED: "Rate limit exceeded",
    FailureKind.FORBIDDEN: "Access forbidden (403)",
    FailureKind.NOT_FOUND: "Not found (404)",
    FailureKind.PAYMENT_REQUIRED: "Payment required (402)",
    FailureKind.MALFORMED: "Malformed response body",
    FailureKind.TRANSPORT_ERROR: "Request failed",
    FailureKind.NOT_CONFIGURED: "API key not configured",
    FailureKind.NO_DATA: "No data in response",
}

_BODY_ERROR_KEYS = ("Error Message", "Note", "Information", "error")
_RATE_LIMIT_MARKERS = ("rate limit", "spreading out", "25 requests per day", "call frequency")

# Kinds whose upstream message says more than the generic reason.
_USE_MESSAGE = (FailureKind.TRANSPORT_ERROR, FailureKind.NO_DATA, FailureKind.PAYMENT_REQUIRED)


def describe_failure(failure: ProviderFailure) -> str:
    """Human-readable one-liner, e.g. ``"FMP: Rate limit exceeded"``."""
    reason = _REASONS[failure.kind]
    if failure.kind in _USE_MESSAGE and failure.message:
        reason = failure.message
        if failure.kind is FailureKind.TRANSPORT_ERROR and failure.http_status:
            reason = f"{reason} (HTTP {failure.http_status})"
    return f"{failure.provider.label}: {reason}"


def collect_failures(results: Iterable[ProviderResult]) -> list[ProviderFailure]:
    return [result for result in results if isinstance(result, ProviderFailure)]


def failure_details(failures: Iterable[ProviderFailure]) -> list[str]:
    """One reason per failure, duplicates dropped, order kept."""
    details: list[str] = []
    for failure in failures:
        line = describe_failure(failure)
        if line not in details:
            details.append(line)
    return details


def require_configured(failures: Iterable[ProviderFailure]) -> None:
    """Raise 500 when every failure is a missing API key."""
    failures = list(failures)
    if failures and all(f.kind is FailureKind.NOT_CONFIGURED for f in failures):
        raise ProviderNotConfigured(
            "Provider API key not configured", failure_details(failures)
        )


def assemble(
    model: type[M],
    normalized: Mapping[str, Any],
    derived: Mapping[str, Any],
    failures: Iterable[ProviderFailure] = (),
    *,
    usable: bool = True,
    error: str = "No data available",
) -> M:
    """Merge normalized and derived values into ``model``.

    Fields not supplied keep the model default (None / empty).  When no
    provider produced a usable record the request fails as a whole: 500 if
    the only reason is missing configuration, 404 otherwise.
    """
    failures = list(failures)
    if not usable:
        require_configured(failures)
        raise UpstreamUnavailable(error, failure_details(failures))
    return model.model_validate({**normalized, **derived})


def body_error(payload: Any) -> str | None:
    """Error text some providers return inside a 200 body."""
    if not isinstance(payload, Mapping):
        return None
    for key in _BODY_ERROR_KEYS:
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def is_rate_limit_message(message: str) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in _RATE_LIMIT_MARKERS)


def body_failure(result: ProviderOk) -> ProviderFailure | None:
    """Reclassify a 200 whose body is an error notice."""
    message = body_error(result.payload)
    if not message:
        return None
    kind = FailureKind.RATE_LIMITED if is_rate_limit_message(message) else FailureKind.NO_DATA
    return ProviderFailure(result.provider, kind, result.http_status, message[:200])


def payload_of(result: ProviderResult) -> Any:
    """The payload of a successful call, else None."""
    return result.payload if isinstance(result, ProviderOk) else None


def positive(value: float | None) -> float | None:
    return value if value is not None and value > 0 else None
