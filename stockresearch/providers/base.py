"""Provider identities and the tagged result of a single upstream call.

A call never raises for an upstream problem: it yields either ``ProviderOk``
or a classified ``ProviderFailure`` so a batch can be inspected as a whole.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Union


class Provider(str, enum.Enum):
    FMP = "fmp"
    FINNHUB = "finnhub"
    ALPHA_VANTAGE = "alpha_vantage"
    CNN = "cnn"
    FRED = "fred"
    API_NINJAS = "api_ninjas"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    Provider.FMP: "FMP",
    Provider.FINNHUB: "Finnhub",
    Provider.ALPHA_VANTAGE: "Alpha Vantage",
    Provider.CNN: "CNN",
    Provider.FRED: "FRED",
    Provider.API_NINJAS: "API Ninjas",
}


class FailureKind(str, enum.Enum):
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    PAYMENT_REQUIRED = "payment_required"
    MALFORMED = "malformed_body"
    TRANSPORT_ERROR = "transport_error"
    NOT_CONFIGURED = "not_configured"
    NO_DATA = "no_data"


@dataclass(frozen=True)
class ProviderOk:
    provider: Provider
    payload: Any
    http_status: int = 200

    ok = True


@dataclass(frozen=True)
class ProviderFailure:
    provider: Provider
    kind: FailureKind
    http_status: int | None = None
    message: str | None = None

    ok = False


ProviderResult = Union[ProviderOk, ProviderFailure]


@dataclass(frozen=True)
class ProviderCall:
    """One planned GET against a provider.

    ``endpoint`` is a path template; ``{name}`` placeholders are filled from
    ``params`` and the remaining non-None params become the query string.
    """

    provider: Provider
    endpoint: str
    params: dict[str, Any] = field(default_factory=dict)
    timeout_ms: int | None = None
