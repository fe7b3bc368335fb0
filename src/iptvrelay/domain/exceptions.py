"""Relay and catalog error hierarchy.

Routers map these to HTTP responses; nothing below the interfaces layer
knows about status codes except :attr:`RelayError.status_code`.
"""

from __future__ import annotations


class RelayError(Exception):
    """Base class for all errors surfaced to the client as JSON."""

    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class InvalidRequestError(RelayError):
    """Bad id, bad url parameter or unknown content kind. No upstream call."""

    status_code = 400
    public_message = "Invalid request"


class UpstreamUnreachableError(RelayError):
    """Connect, DNS or timeout failure before any response header arrived."""

    status_code = 500
    public_message = "Streaming failed"


class UpstreamServerError(UpstreamUnreachableError):
    """Upstream answered with a 5xx status; reported as a generic 500."""

    def __init__(self, upstream_status: int, message: str | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


class UpstreamStreamError(RelayError):
    """Upstream dropped after the status line was committed to the client."""


class CatalogError(RelayError):
    """A ``player_api.php`` lookup failed (network, 4xx/5xx or bad JSON)."""

    public_message = "Failed to fetch catalog"


class ProviderNotConfiguredError(RelayError):
    """Provider base URL or credentials are missing."""

    status_code = 503
    public_message = "Service not configured"
