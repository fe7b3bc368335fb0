"""Ports for the media relay path."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Protocol, runtime_checkable

from iptvrelay.domain.entities.playback import (
    PlaybackRequest,
    RelayState,
    UpstreamTarget,
)


@runtime_checkable
class ResourceLocatorPort(Protocol):
    """Maps playback requests to upstream targets. Pure; no I/O."""

    def locate(self, request: PlaybackRequest) -> UpstreamTarget:
        """Raises InvalidRequestError for invalid ids or segment URLs."""
        ...


@runtime_checkable
class CancellationTokenPort(Protocol):
    """Signal raised by the inbound transport when the client goes away."""

    @property
    def is_cancelled(self) -> bool: ...

    def cancel(self) -> None: ...


@runtime_checkable
class RelaySessionPort(Protocol):
    """An upstream response whose headers arrived and whose body is pending."""

    status_code: int
    headers: dict[str, str]
    state: RelayState

    def body(self) -> AsyncIterator[bytes]:
        """Yield upstream bytes until the upstream ends or the token fires."""
        ...

    async def aclose(self) -> None:
        """Release the upstream connection. Idempotent."""
        ...


@runtime_checkable
class StreamRelayPort(Protocol):
    """Opens relay sessions against resolved upstream targets."""

    async def open(
        self,
        target: UpstreamTarget,
        *,
        range_header: str | None = None,
        cancel_token: CancellationTokenPort | None = None,
    ) -> RelaySessionPort:
        """Issue the upstream GET and wait for its headers.

        Raises:
            UpstreamUnreachableError: no response headers arrived.
            UpstreamServerError: upstream answered with status >= 500.
        """
        ...
