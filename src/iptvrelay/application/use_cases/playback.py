"""Playback use case: resolve a request and open (or redirect) its stream."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from iptvrelay.domain.entities.playback import ContentKind, PlaybackRequest
from iptvrelay.domain.ports.relay import (
    CancellationTokenPort,
    RelaySessionPort,
    ResourceLocatorPort,
    StreamRelayPort,
)

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LiveRedirect:
    """Send the player straight to the provider (no bytes pass through us)."""

    location: str


class PlaybackUseCase:
    """Open relay sessions for movies, episodes, live channels and segments.

    All kinds share one relay path; the only branch is the live channel
    in ``redirect`` mode, which never contacts the upstream.
    """

    def __init__(
        self,
        *,
        locator: ResourceLocatorPort,
        relay: StreamRelayPort,
        live_mode: str = "redirect",
    ) -> None:
        self._locator = locator
        self._relay = relay
        self._live_mode = live_mode

    @property
    def live_mode(self) -> str:
        return self._live_mode

    async def open(
        self,
        request: PlaybackRequest,
        *,
        cancel_token: CancellationTokenPort | None = None,
    ) -> RelaySessionPort:
        """Relay *request* through the provider.

        Raises:
            InvalidRequestError: before any upstream call.
            UpstreamUnreachableError: upstream gave no usable response.
        """
        target = self._locator.locate(request)
        log.debug("playback_resolved", target=target.safe_url)
        return await self._relay.open(
            target,
            range_header=request.range_header,
            cancel_token=cancel_token,
        )

    async def open_live(
        self,
        channel_id: str,
        *,
        range_header: str | None = None,
        cancel_token: CancellationTokenPort | None = None,
    ) -> RelaySessionPort | LiveRedirect:
        request = PlaybackRequest(
            kind=ContentKind.LIVE_CHANNEL,
            content_id=channel_id,
            range_header=range_header,
        )
        if self._live_mode == "redirect":
            target = self._locator.locate(request)
            log.info("live_redirect", target=target.safe_url)
            return LiveRedirect(location=target.url)
        return await self.open(request, cancel_token=cancel_token)
