"""Domain entities for media playback relaying.

Pure value objects, no framework dependencies, no I/O.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class ContentKind(str, Enum):
    """What an inbound playback request points at."""

    MOVIE = "movie"
    SERIES_EPISODE = "series"
    LIVE_CHANNEL = "live"
    RAW_SEGMENT = "segment"


class RelayState(str, Enum):
    """Lifecycle of an opened relay session.

    ``headers_received -> streaming`` and then one of the terminal states.
    A request that fails before headers arrive never becomes a session;
    :meth:`StreamRelay.open` raises instead.
    """

    HEADERS_RECEIVED = "headers_received"
    STREAMING = "streaming"
    COMPLETED = "completed"
    CLIENT_ABORTED = "client_aborted"
    UPSTREAM_ERRORED = "upstream_errored"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset(
    {
        RelayState.COMPLETED,
        RelayState.CLIENT_ABORTED,
        RelayState.UPSTREAM_ERRORED,
    }
)

ALLOWED_EXTENSIONS: tuple[str, ...] = ("mp4", "mkv", "avi", "m3u8", "ts")
DEFAULT_EXTENSION = "mp4"
LIVE_EXTENSION = "m3u8"

CONTENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,50}$")


@dataclass(frozen=True)
class PlaybackRequest:
    """A validated request to play one piece of content.

    For :attr:`ContentKind.RAW_SEGMENT` ``content_id`` carries the absolute
    upstream URL supplied by the client.
    """

    kind: ContentKind
    content_id: str
    extension: str = DEFAULT_EXTENSION
    range_header: str | None = None


@dataclass(frozen=True)
class UpstreamTarget:
    """Fully-qualified provider URL for one playback request.

    ``url`` embeds the provider credentials for VOD and live kinds, so it
    must only ever be used for the outbound request.  ``safe_url`` is the
    form that may be logged.
    """

    kind: ContentKind
    url: str
    extension: str | None
    safe_url: str = ""

    def __repr__(self) -> str:
        return (
            f"UpstreamTarget(kind={self.kind.value!r}, "
            f"url={self.safe_url or '<redacted>'!r}, extension={self.extension!r})"
        )
