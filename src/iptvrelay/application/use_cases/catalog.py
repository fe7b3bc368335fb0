"""Catalog use case: provider listings reshaped into the client schema."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from iptvrelay.domain.entities.catalog import (
    PLACEHOLDER_ICON,
    Category,
    ChannelSummary,
    MovieSummary,
    SeriesSummary,
)
from iptvrelay.domain.exceptions import InvalidRequestError
from iptvrelay.domain.ports.cache import CachePort
from iptvrelay.domain.ports.catalog import CatalogClientPort
from iptvrelay.domain.sanitize import sanitize_id

log = structlog.get_logger(__name__)

MOVIES_CACHE_KEY = "catalog:vod_streams"


@dataclass(frozen=True)
class MovieListing:
    movies: list[MovieSummary]
    cached: bool


def _rows(payload: Any) -> list[dict[str, Any]]:
    """Provider lists come back as ``[]``, ``null`` or an error object."""
    if not isinstance(payload, list):
        return []
    return [row for row in payload if isinstance(row, dict)]


def to_category(row: dict[str, Any]) -> Category:
    return Category(
        id=str(row.get("category_id", "")),
        name=row.get("category_name") or "",
        parent_id=row.get("parent_id"),
    )


def to_movie(row: dict[str, Any]) -> MovieSummary:
    return MovieSummary(
        id=row.get("stream_id"),
        name=row.get("name") or "Unknown",
        icon=row.get("stream_icon") or PLACEHOLDER_ICON,
        extension=row.get("container_extension") or "mp4",
        rating=row.get("rating") or "N/A",
        year=row.get("releasedate") or row.get("year") or "N/A",
        category=row.get("category_id"),
    )


def to_series(row: dict[str, Any]) -> SeriesSummary:
    return SeriesSummary(
        id=row.get("series_id"),
        name=row.get("name") or "Unknown",
        icon=row.get("cover") or PLACEHOLDER_ICON,
        rating=row.get("rating") or "N/A",
        year=row.get("releaseDate") or "N/A",
        category=row.get("category_id"),
        plot=row.get("plot") or "",
    )


def to_channel(row: dict[str, Any]) -> ChannelSummary:
    return ChannelSummary(
        id=row.get("stream_id"),
        name=row.get("name") or "Unknown",
        icon=row.get("stream_icon") or PLACEHOLDER_ICON,
        category=row.get("category_id"),
        epg_channel_id=row.get("epg_channel_id"),
    )


def _require_id(raw: str, label: str) -> str:
    value = sanitize_id(raw)
    if value is None:
        raise InvalidRequestError(f"Invalid {label} ID")
    return value


class CatalogUseCase:
    """Browse movies, series and live channels.

    Only the full VOD listing is cached; it is the one expensive call
    (tens of thousands of rows on large panels).  Everything else goes
    straight to the provider.

    Errors from the client (``CatalogError``) propagate to the router.
    """

    def __init__(
        self,
        *,
        client: CatalogClientPort,
        cache: CachePort,
        cache_ttl_seconds: int = 3600,
    ) -> None:
        self._client = client
        self._cache = cache
        self._ttl = cache_ttl_seconds

    async def movie_categories(self) -> list[Category]:
        return [to_category(r) for r in _rows(await self._client.fetch("get_vod_categories"))]

    async def series_categories(self) -> list[Category]:
        return [to_category(r) for r in _rows(await self._client.fetch("get_series_categories"))]

    async def live_categories(self) -> list[Category]:
        return [to_category(r) for r in _rows(await self._client.fetch("get_live_categories"))]

    async def all_movies(self) -> MovieListing:
        """Full VOD listing, served from cache while fresh."""
        cached = await self._cache.get(MOVIES_CACHE_KEY)
        if cached is not None:
            log.debug("catalog_cache_hit", key=MOVIES_CACHE_KEY, count=len(cached))
            return MovieListing(movies=cached, cached=True)

        payload = await self._client.fetch("get_vod_streams", listing=True)
        movies = [to_movie(r) for r in _rows(payload)]
        await self._cache.set(MOVIES_CACHE_KEY, movies, ttl=self._ttl)
        log.info("catalog_movies_loaded", count=len(movies), ttl=self._ttl)
        return MovieListing(movies=movies, cached=False)

    async def movies_in_category(self, category_id: str) -> list[MovieSummary]:
        cid = _require_id(category_id, "category")
        payload = await self._client.fetch(
            "get_vod_streams", {"category_id": cid}, listing=True
        )
        return [to_movie(r) for r in _rows(payload)]

    async def series_in_category(self, category_id: str) -> list[SeriesSummary]:
        cid = _require_id(category_id, "category")
        payload = await self._client.fetch(
            "get_series", {"category_id": cid}, listing=True
        )
        return [to_series(r) for r in _rows(payload)]

    async def channels_in_category(self, category_id: str) -> list[ChannelSummary]:
        cid = _require_id(category_id, "category")
        payload = await self._client.fetch(
            "get_live_streams", {"category_id": cid}, listing=True
        )
        return [to_channel(r) for r in _rows(payload)]

    async def movie_info(self, movie_id: str) -> Any:
        """Raw ``get_vod_info`` payload (info + movie_data)."""
        vod_id = _require_id(movie_id, "movie")
        return await self._client.fetch("get_vod_info", {"vod_id": vod_id})

    async def series_info(self, series_id: str) -> Any:
        """Raw ``get_series_info`` payload (seasons + episodes)."""
        sid = _require_id(series_id, "series")
        return await self._client.fetch("get_series_info", {"series_id": sid})

    async def clear_cache(self) -> None:
        await self._cache.clear()
        log.info("catalog_cache_cleared")
