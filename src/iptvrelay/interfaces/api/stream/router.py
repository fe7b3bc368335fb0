"""Media playback endpoints: movies, series episodes, live channels, segments."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.responses import Response

from iptvrelay.application.use_cases.playback import LiveRedirect
from iptvrelay.domain.entities.playback import ContentKind, PlaybackRequest
from iptvrelay.domain.exceptions import RelayError
from iptvrelay.infrastructure.provider.relay import CancellationToken
from iptvrelay.interfaces.api.stream.response import RelayResponse
from iptvrelay.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/stream", tags=["stream"])


def _error_response(exc: RelayError) -> JSONResponse:
    return JSONResponse(
        {"success": False, "error": exc.message},
        status_code=exc.status_code,
    )


async def _relay(request: Request, playback: PlaybackRequest) -> Response:
    """Open the upstream stream and hand it to a RelayResponse."""
    state = cast(AppState, request.app.state)
    token = CancellationToken()
    try:
        session = await state.playback_uc.open(playback, cancel_token=token)
    except RelayError as exc:
        return _error_response(exc)
    return RelayResponse(session, token)


# Registered before "/{stream_id}", which would otherwise match it.
@router.get("/live-segment")
async def stream_live_segment(request: Request, url: str | None = None) -> Response:
    """Pass an already-resolved HLS segment or sub-playlist through."""
    return await _relay(
        request,
        PlaybackRequest(
            kind=ContentKind.RAW_SEGMENT,
            content_id=url or "",
            range_header=request.headers.get("range"),
        ),
    )


@router.get("/live/{channel_id}")
async def stream_live(request: Request, channel_id: str) -> Response:
    """Live channel: 302 to the provider or relay, depending on live_mode."""
    state = cast(AppState, request.app.state)
    token = CancellationToken()
    try:
        result = await state.playback_uc.open_live(
            channel_id,
            range_header=request.headers.get("range"),
            cancel_token=token,
        )
    except RelayError as exc:
        return _error_response(exc)

    if isinstance(result, LiveRedirect):
        return RedirectResponse(result.location, status_code=302)
    return RelayResponse(result, token)


@router.get("/series/{episode_id}/{extension}")
async def stream_series_episode(
    request: Request, episode_id: str, extension: str
) -> Response:
    return await _relay(
        request,
        PlaybackRequest(
            kind=ContentKind.SERIES_EPISODE,
            content_id=episode_id,
            extension=extension,
            range_header=request.headers.get("range"),
        ),
    )


@router.get("/{stream_id}")
async def stream_movie(request: Request, stream_id: str, ext: str = "mp4") -> Response:
    return await _relay(
        request,
        PlaybackRequest(
            kind=ContentKind.MOVIE,
            content_id=stream_id,
            extension=ext,
            range_header=request.headers.get("range"),
        ),
    )
