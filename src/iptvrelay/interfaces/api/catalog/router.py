"""Catalog browsing endpoints backed by the provider's player_api.php."""

from __future__ import annotations

from typing import Any, cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from iptvrelay.domain.exceptions import CatalogError, RelayError
from iptvrelay.interfaces.api.catalog.presenter import (
    present_category,
    present_channel,
    present_movie,
    present_series,
)
from iptvrelay.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["catalog"])


def _ok(**payload: Any) -> JSONResponse:
    return JSONResponse({"success": True, **payload})


def _failure(exc: RelayError, what: str) -> JSONResponse:
    """Upstream failures get a route-specific message; bad ids keep theirs."""
    message = f"Failed to fetch {what}" if isinstance(exc, CatalogError) else exc.message
    return JSONResponse(
        {"success": False, "error": message},
        status_code=exc.status_code,
    )


def _state(request: Request) -> AppState:
    return cast(AppState, request.app.state)


@router.get("/categories")
@router.get("/movies/categories")
async def movie_categories(request: Request) -> JSONResponse:
    try:
        categories = await _state(request).catalog_uc.movie_categories()
    except RelayError as exc:
        return _failure(exc, "categories")
    return _ok(categories=[present_category(c) for c in categories])


@router.get("/movies")
async def all_movies(request: Request) -> JSONResponse:
    """Full VOD listing; ``cached`` tells whether it came from the TTL cache."""
    try:
        listing = await _state(request).catalog_uc.all_movies()
    except RelayError as exc:
        return _failure(exc, "movies")
    return _ok(
        cached=listing.cached,
        count=len(listing.movies),
        movies=[present_movie(m) for m in listing.movies],
    )


@router.get("/movies/category/{category_id}")
async def movies_in_category(request: Request, category_id: str) -> JSONResponse:
    try:
        movies = await _state(request).catalog_uc.movies_in_category(category_id)
    except RelayError as exc:
        return _failure(exc, "movies")
    return _ok(count=len(movies), movies=[present_movie(m) for m in movies])


@router.get("/movie/{movie_id}")
async def movie_info(request: Request, movie_id: str) -> JSONResponse:
    try:
        movie = await _state(request).catalog_uc.movie_info(movie_id)
    except RelayError as exc:
        return _failure(exc, "movie info")
    return _ok(movie=movie)


@router.get("/series/categories")
async def series_categories(request: Request) -> JSONResponse:
    try:
        categories = await _state(request).catalog_uc.series_categories()
    except RelayError as exc:
        return _failure(exc, "series categories")
    return _ok(categories=[present_category(c) for c in categories])


@router.get("/series/category/{category_id}")
async def series_in_category(request: Request, category_id: str) -> JSONResponse:
    try:
        series = await _state(request).catalog_uc.series_in_category(category_id)
    except RelayError as exc:
        return _failure(exc, "series")
    return _ok(count=len(series), series=[present_series(s) for s in series])


@router.get("/series/{series_id}/info")
async def series_info(request: Request, series_id: str) -> JSONResponse:
    try:
        data = await _state(request).catalog_uc.series_info(series_id)
    except RelayError as exc:
        return _failure(exc, "series info")
    return _ok(data=data)


@router.get("/live/categories")
async def live_categories(request: Request) -> JSONResponse:
    try:
        categories = await _state(request).catalog_uc.live_categories()
    except RelayError as exc:
        return _failure(exc, "live categories")
    return _ok(categories=[present_category(c) for c in categories])


@router.get("/live/category/{category_id}")
async def channels_in_category(request: Request, category_id: str) -> JSONResponse:
    try:
        channels = await _state(request).catalog_uc.channels_in_category(category_id)
    except RelayError as exc:
        return _failure(exc, "channels")
    return _ok(count=len(channels), channels=[present_channel(c) for c in channels])


@router.post("/cache/clear")
async def clear_cache(request: Request) -> JSONResponse:
    await _state(request).catalog_uc.clear_cache()
    return _ok(message="Cache cleared")
