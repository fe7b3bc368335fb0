"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from iptvrelay.application.use_cases.catalog import CatalogUseCase
from iptvrelay.application.use_cases.playback import PlaybackUseCase
from iptvrelay.infrastructure.cache import MemoryCacheAdapter
from iptvrelay.infrastructure.provider.catalog_client import HttpxCatalogClient
from iptvrelay.infrastructure.provider.locator import ResourceLocator
from iptvrelay.infrastructure.provider.relay import StreamRelay
from iptvrelay.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

# Upper bound on waiting for open streams at shutdown.
_DRAIN_TIMEOUT_SECONDS = 5.0


def build_http_client(timeout_seconds: float) -> httpx.AsyncClient:
    """Shared upstream client for relay and catalog calls.

    No pool cap: every concurrent viewer holds one upstream connection for
    the whole stream.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_seconds),
        follow_redirects=True,
        limits=httpx.Limits(max_connections=None, max_keepalive_connections=20),
    )


def wire_services(state: AppState) -> None:
    """Build locator, relay, catalog client and use cases from *state*."""
    config = state.config

    locator = ResourceLocator(config.provider, live_port=config.relay.live_port)
    relay = StreamRelay(
        http_client=state.http_client,
        user_agent=config.relay.user_agent,
        timeout_seconds=config.relay.timeout_seconds,
        chunk_size=config.relay.chunk_size,
        forward_cache_headers=config.relay.forward_cache_headers,
        tracker=state.stream_tracker,
    )
    state.playback_uc = PlaybackUseCase(
        locator=locator,
        relay=relay,
        live_mode=config.relay.live_mode,
    )

    client = HttpxCatalogClient(
        provider=config.provider,
        catalog=config.catalog,
        http_client=state.http_client,
    )
    state.catalog_uc = CatalogUseCase(
        client=client,
        cache=state.cache,
        cache_ttl_seconds=config.catalog.cache_ttl_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. Cache (catalog use case depends on it)
        2. HTTP Client (relay + catalog client)
        3. Locator, relay, catalog client, use cases
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) Cache
    cache = MemoryCacheAdapter(ttl_seconds=config.catalog.cache_ttl_seconds)
    await cache.__aenter__()
    state.cache = cache
    log.info("cache_initialized", ttl_seconds=config.catalog.cache_ttl_seconds)

    # 2) HTTP client
    state.http_client = build_http_client(config.relay.timeout_seconds)
    log.info("http_client_initialized", timeout=config.relay.timeout_seconds)

    # 3) Services
    wire_services(state)
    log.info(
        "services_initialized",
        live_mode=config.relay.live_mode,
        live_port=config.relay.live_port,
    )

    if not config.provider.is_configured:
        log.warning(
            "provider_not_configured",
            hint="set IPTV_SERVER_URL, IPTV_USERNAME and IPTV_PASSWORD",
        )

    state.stream_tracker.mark_ready()
    log.info("app_startup_complete")
    try:
        yield
    finally:
        await state.stream_tracker.wait_for_drain(timeout=_DRAIN_TIMEOUT_SECONDS)

        await state.http_client.aclose()
        log.info("http_client_closed")

        await state.cache.aclose()
        log.info("cache_closed")

        log.info("app_shutdown_complete")
