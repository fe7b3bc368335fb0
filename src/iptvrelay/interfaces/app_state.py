"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from iptvrelay.infrastructure.config import AppConfig
from iptvrelay.infrastructure.stream_tracker import StreamTracker

if TYPE_CHECKING:
    from iptvrelay.application.use_cases.catalog import CatalogUseCase
    from iptvrelay.application.use_cases.playback import PlaybackUseCase
    from iptvrelay.domain.ports import CachePort


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    cache: CachePort
    http_client: httpx.AsyncClient

    # Application Services
    playback_uc: PlaybackUseCase
    catalog_uc: CatalogUseCase

    # Open relay sessions (health endpoint + shutdown drain)
    stream_tracker: StreamTracker
