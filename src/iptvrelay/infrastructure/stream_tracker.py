"""Track open relay sessions and drain them on shutdown."""

from __future__ import annotations

import asyncio

import structlog

log = structlog.get_logger(__name__)


class StreamTracker:
    """Count in-flight relay sessions and wait for them before shutdown.

    Usage::

        tracker = StreamTracker()

        # StreamRelay.open() / RelaySession.aclose():
        tracker.stream_opened()
        ...
        tracker.stream_closed()

        # In lifespan finally:
        await tracker.wait_for_drain(timeout=10.0)

    VOD streams can last for hours, so draining is bounded by *timeout*;
    whatever is still open afterwards is cut when the HTTP client closes.
    """

    def __init__(self) -> None:
        self._active = 0
        self._total = 0
        self._shutting_down = False
        self._drained = asyncio.Event()
        self._drained.set()  # starts drained (0 active)
        self._ready = False

    @property
    def active_streams(self) -> int:
        return self._active

    @property
    def total_streams(self) -> int:
        return self._total

    @property
    def is_shutting_down(self) -> bool:
        return self._shutting_down

    @property
    def is_ready(self) -> bool:
        """True once startup finished and shutdown has not begun."""
        return self._ready and not self._shutting_down

    def mark_ready(self) -> None:
        self._ready = True

    def stream_opened(self) -> None:
        self._active += 1
        self._total += 1
        self._drained.clear()

    def stream_closed(self) -> None:
        self._active -= 1
        if self._active <= 0:
            self._active = 0
            self._drained.set()

    async def wait_for_drain(self, *, timeout: float = 10.0) -> None:
        """Wait for all open streams to finish, up to *timeout* seconds."""
        self._shutting_down = True
        if self._active == 0:
            return
        log.info("stream_drain_started", active_streams=self._active)
        try:
            await asyncio.wait_for(self._drained.wait(), timeout=timeout)
            log.info("stream_drain_complete")
        except asyncio.TimeoutError:
            log.warning(
                "stream_drain_timeout",
                remaining_streams=self._active,
                timeout=timeout,
            )
