from .catalog import (
    PLACEHOLDER_ICON,
    Category,
    ChannelSummary,
    MovieSummary,
    SeriesSummary,
)
from .playback import (
    ALLOWED_EXTENSIONS,
    CONTENT_ID_PATTERN,
    DEFAULT_EXTENSION,
    LIVE_EXTENSION,
    ContentKind,
    PlaybackRequest,
    RelayState,
    UpstreamTarget,
)

__all__ = [
    "ALLOWED_EXTENSIONS",
    "CONTENT_ID_PATTERN",
    "DEFAULT_EXTENSION",
    "LIVE_EXTENSION",
    "PLACEHOLDER_ICON",
    "Category",
    "ChannelSummary",
    "ContentKind",
    "MovieSummary",
    "PlaybackRequest",
    "RelayState",
    "SeriesSummary",
    "UpstreamTarget",
]
