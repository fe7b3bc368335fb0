"""FastAPI application factory (create_app)."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from iptvrelay.infrastructure.config import AppConfig
from iptvrelay.infrastructure.stream_tracker import StreamTracker
from iptvrelay.interfaces.api.middleware import (
    BlockedPathMiddleware,
    ProviderConfiguredMiddleware,
    RequestLogMiddleware,
)
from iptvrelay.interfaces.app_state import AppState
from iptvrelay.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    error = "Not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(
        {"success": False, "error": error},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error("unhandled_exception", path=request.url.path, exc_info=exc)
    return JSONResponse(
        {"success": False, "error": "Internal server error"}, status_code=500
    )


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app: configuration ONLY, NO resource initialization.

    Resources (HTTP client, cache, use cases) are created in lifespan().
    """
    app = FastAPI(
        title="IPTV Relay",
        description="Credential-hiding relay for Xtream-style IPTV providers",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config
    app.state.stream_tracker = StreamTracker()

    # Added innermost first: guards run inside CORS, logging wraps everything.
    app.add_middleware(
        ProviderConfiguredMiddleware, configured=config.provider.is_configured
    )
    app.add_middleware(BlockedPathMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Range"],
        expose_headers=["Content-Length", "Content-Range", "Accept-Ranges"],
    )
    app.add_middleware(RequestLogMiddleware)

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)

    from iptvrelay.interfaces.api.catalog.router import router as catalog_router
    from iptvrelay.interfaces.api.stream.router import router as stream_router

    app.include_router(stream_router)
    app.include_router(catalog_router)

    @app.get("/api/health")
    async def health() -> dict[str, object]:
        """Liveness probe; reports configuration state but never credentials."""
        state: AppState = app.state
        return {
            "success": True,
            "status": "ok",
            "configured": state.config.provider.is_configured,
            "live_mode": state.config.relay.live_mode,
            "active_streams": state.stream_tracker.active_streams,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app
