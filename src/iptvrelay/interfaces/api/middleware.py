"""ASGI middleware: request guards and access logging.

Written as plain ASGI callables rather than ``BaseHTTPMiddleware`` so that
streamed relay responses and ``http.disconnect`` messages pass through
untouched.
"""

from __future__ import annotations

import time
from collections.abc import Iterable

import structlog
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from iptvrelay.domain.exceptions import ProviderNotConfiguredError

log = structlog.get_logger(__name__)

BLOCKED_PATH_FRAGMENTS: tuple[str, ...] = (
    ".env",
    ".git",
    "pyproject.toml",
    "config.yaml",
)

# Paths that need provider credentials to do anything useful.
_PROVIDER_PREFIXES: tuple[str, ...] = ("/api/", "/stream/")
_ALWAYS_AVAILABLE: frozenset[str] = frozenset({"/api/health"})


class BlockedPathMiddleware:
    """Reject requests whose path mentions secrets or project files (403)."""

    def __init__(
        self,
        app: ASGIApp,
        fragments: Iterable[str] = BLOCKED_PATH_FRAGMENTS,
    ) -> None:
        self.app = app
        self._fragments = tuple(f.lower() for f in fragments)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            path = scope["path"].lower()
            if any(fragment in path for fragment in self._fragments):
                log.warning("blocked_path", path=scope["path"])
                response = JSONResponse(
                    {"success": False, "error": "Forbidden"}, status_code=403
                )
                await response(scope, receive, send)
                return
        await self.app(scope, receive, send)


class ProviderConfiguredMiddleware:
    """Answer 503 on provider-backed routes while credentials are missing.

    Args:
        app: ASGI application.
        configured: Whether provider base URL and credentials are set.
    """

    def __init__(self, app: ASGIApp, configured: bool) -> None:
        self.app = app
        self._configured = configured

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and not self._configured:
            path = scope["path"]
            if path.startswith(_PROVIDER_PREFIXES) and path not in _ALWAYS_AVAILABLE:
                exc = ProviderNotConfiguredError()
                response = JSONResponse(
                    {"success": False, "error": exc.message},
                    status_code=exc.status_code,
                )
                await response(scope, receive, send)
                return
        await self.app(scope, receive, send)


class RequestLogMiddleware:
    """Emit one ``http_request`` event per request.

    Duration covers the whole response, i.e. the full stream for relayed
    media.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        status_code = 500
        start = time.perf_counter()

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            client = scope.get("client")
            log.info(
                "http_request",
                method=scope["method"],
                path=scope["path"],
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_host=client[0] if client else None,
            )
