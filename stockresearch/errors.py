"""Request-level error taxonomy.

Provider failures are values (see ``providers.base``), not exceptions.  The
classes here are raised by services and routes when a whole request cannot
be answered, and are rendered to JSON by the handlers in ``main``.
"""

from __future__ import annotations


class ResearchError(Exception):
    """Base class for errors that map onto an HTTP error response."""

    status_code: int = 500

    def __init__(self, error: str, details: list[str] | None = None):
        super().__init__(error)
        self.error = error
        self.details = list(details or [])


class MissingParameter(ResearchError):
    """A required query parameter was not supplied."""

    status_code = 400


class InvalidParameter(ResearchError):
    status_code = 400


class UpstreamUnavailable(ResearchError):
    """Every provider consulted for a logical fetch failed to yield data."""

    status_code = 404


class ProviderNotConfigured(ResearchError):
    """No API key is configured for any provider able to serve the request."""

    status_code = 500
