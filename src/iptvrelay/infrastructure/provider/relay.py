"""Stream relay: fetch provider media and hand it to the client byte by byte.

One parameterized implementation serves movies, series episodes, relayed
live channels and raw segments.  The flow per request is::

    StreamRelay.open()  -> upstream GET, wait for headers, apply header policy
    RelaySession.body() -> yield raw upstream chunks as they arrive
    RelaySession.aclose() -> release the upstream connection (exactly once)

The inbound side owns a :class:`CancellationToken`; when the client goes
away it cancels the token and the session stops reading and closes the
upstream response.  Bodies are never buffered: VOD files can be several
gigabytes.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Mapping

import anyio
import httpx
import structlog

from iptvrelay.domain.entities.playback import RelayState, UpstreamTarget
from iptvrelay.domain.exceptions import (
    UpstreamServerError,
    UpstreamStreamError,
    UpstreamUnreachableError,
)
from iptvrelay.infrastructure.stream_tracker import StreamTracker

log = structlog.get_logger(__name__)

RELAY_HEADERS: tuple[str, ...] = (
    "content-type",
    "content-length",
    "content-range",
    "accept-ranges",
)
CACHE_HEADERS: tuple[str, ...] = ("cache-control", "last-modified", "etag")

HLS_CONTENT_TYPE = "application/x-mpegURL"
FALLBACK_CONTENT_TYPE = "video/mp4"


def apply_header_policy(
    upstream_headers: Mapping[str, str],
    extension: str | None,
    *,
    forward_cache_headers: bool = True,
) -> dict[str, str]:
    """Select and rewrite the upstream headers that may reach the client.

    - Only the allow-list is copied; everything else (server identity,
      redirects, cookies) stays upstream.
    - ``m3u8`` is always served as ``application/x-mpegURL``.
    - ``mkv`` and responses without a content type are served as
      ``video/mp4``; browsers refuse to play ``video/x-matroska`` inline.
    - ``accept-ranges: bytes`` is advertised when upstream omits it.
    """
    source = httpx.Headers(upstream_headers)
    allowed = RELAY_HEADERS + (CACHE_HEADERS if forward_cache_headers else ())

    headers: dict[str, str] = {}
    for name in allowed:
        value = source.get(name)
        if value:
            headers[name] = value

    if extension == "m3u8":
        headers["content-type"] = HLS_CONTENT_TYPE
    elif extension == "mkv" or "content-type" not in headers:
        headers["content-type"] = FALLBACK_CONTENT_TYPE

    headers.setdefault("accept-ranges", "bytes")
    return headers


class CancellationToken:
    """One-shot signal from the inbound connection to the relay session."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()


class RelaySession:
    """Live upstream response: status and headers known, body pending.

    Created by :meth:`StreamRelay.open`; destroyed by :meth:`aclose`, which
    runs once no matter whether the body completed, the client aborted or
    the upstream failed.
    """

    def __init__(
        self,
        *,
        response: httpx.Response,
        target: UpstreamTarget,
        headers: dict[str, str],
        chunk_size: int,
        cancel_token: CancellationToken,
        tracker: StreamTracker | None = None,
    ) -> None:
        self.status_code = response.status_code
        self.headers = headers
        self.target = target
        self.state = RelayState.HEADERS_RECEIVED
        self.bytes_relayed = 0
        self._response = response
        self._chunk_size = chunk_size
        self._token = cancel_token
        self._tracker = tracker
        self._closed = False

        if tracker is not None:
            tracker.stream_opened()

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def body(self) -> AsyncIterator[bytes]:
        """Yield raw (undecoded) upstream chunks until either side stops.

        Raises:
            UpstreamStreamError: the upstream connection failed mid-body.
        """
        self.state = RelayState.STREAMING
        try:
            async for chunk in self._response.aiter_raw(self._chunk_size):
                if self._token.is_cancelled:
                    break
                self.bytes_relayed += len(chunk)
                yield chunk
            else:
                self.state = RelayState.COMPLETED
        except httpx.HTTPError as exc:
            self.state = RelayState.UPSTREAM_ERRORED
            log.warning(
                "relay_upstream_stream_failed",
                kind=self.target.kind.value,
                target=self.target.safe_url,
                bytes_relayed=self.bytes_relayed,
                error=type(exc).__name__,
            )
            raise UpstreamStreamError("Upstream stream failed") from exc
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        """Release the upstream connection. Safe to call repeatedly."""
        if self._closed:
            return
        self._closed = True

        if not self.state.is_terminal:
            self.state = RelayState.CLIENT_ABORTED

        # Runs inside cancelled scopes when the client disconnects; the
        # upstream socket must still be released.
        with anyio.CancelScope(shield=True):
            await self._response.aclose()

        if self._tracker is not None:
            self._tracker.stream_closed()

        event = (
            "relay_client_aborted"
            if self.state is RelayState.CLIENT_ABORTED
            else "relay_session_closed"
        )
        log.info(
            event,
            kind=self.target.kind.value,
            target=self.target.safe_url,
            state=self.state.value,
            status_code=self.status_code,
            bytes_relayed=self.bytes_relayed,
        )


class StreamRelay:
    """Open relay sessions against the provider.

    Args:
        http_client: Shared client (connection pool) for upstream requests.
        user_agent: Media-player User-Agent sent upstream.
        timeout_seconds: Connect/idle budget per upstream operation; never a
            cap on the total transfer time.
        chunk_size: Read size for relayed bytes.
        forward_cache_headers: Also pass cache validators downstream.
        tracker: Optional counter of open sessions.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        user_agent: str,
        timeout_seconds: float = 30.0,
        chunk_size: int = 65_536,
        forward_cache_headers: bool = True,
        tracker: StreamTracker | None = None,
    ) -> None:
        self._http = http_client
        self._user_agent = user_agent
        self._timeout = httpx.Timeout(timeout_seconds)
        self._chunk_size = chunk_size
        self._forward_cache_headers = forward_cache_headers
        self._tracker = tracker

    def _upstream_headers(self, range_header: str | None) -> dict[str, str]:
        headers = {
            "User-Agent": self._user_agent,
            "Accept": "*/*",
            # Byte ranges address the stored representation.
            "Accept-Encoding": "identity",
        }
        if range_header:
            headers["Range"] = range_header
        return headers

    async def open(
        self,
        target: UpstreamTarget,
        *,
        range_header: str | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> RelaySession:
        """Issue the upstream GET and return once its headers arrived.

        Statuses below 500 (including 206, 403 and 404) are relayed as-is;
        players depend on seeing them.

        Raises:
            UpstreamUnreachableError: connect, DNS or timeout failure.
            UpstreamServerError: upstream status >= 500.
        """
        request = self._http.build_request(
            "GET",
            target.url,
            headers=self._upstream_headers(range_header),
            timeout=self._timeout,
        )
        log.info(
            "relay_upstream_request",
            kind=target.kind.value,
            target=target.safe_url,
            range=range_header,
        )

        try:
            response = await self._http.send(
                request, stream=True, follow_redirects=True
            )
        except httpx.HTTPError as exc:
            log.warning(
                "relay_upstream_unreachable",
                kind=target.kind.value,
                target=target.safe_url,
                error=type(exc).__name__,
            )
            raise UpstreamUnreachableError() from exc

        if response.status_code >= 500:
            await response.aclose()
            log.warning(
                "relay_upstream_server_error",
                kind=target.kind.value,
                target=target.safe_url,
                upstream_status=response.status_code,
            )
            raise UpstreamServerError(response.status_code)

        headers = apply_header_policy(
            response.headers,
            target.extension,
            forward_cache_headers=self._forward_cache_headers,
        )
        log.info(
            "relay_headers_received",
            kind=target.kind.value,
            target=target.safe_url,
            status_code=response.status_code,
            content_range=headers.get("content-range"),
        )
        return RelaySession(
            response=response,
            target=target,
            headers=headers,
            chunk_size=self._chunk_size,
            cancel_token=cancel_token or CancellationToken(),
            tracker=self._tracker,
        )
