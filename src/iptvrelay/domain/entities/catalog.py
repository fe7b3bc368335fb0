"""Client-facing catalog entities.

The provider's ``player_api.php`` responses are inconsistent between
panels; these value objects are the stable schema the browser sees.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

PLACEHOLDER_ICON = "/placeholder.jpg"


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    parent_id: int | None = None


@dataclass(frozen=True)
class MovieSummary:
    id: Any  # provider stream_id, passed through unchanged
    name: str = "Unknown"
    icon: str = PLACEHOLDER_ICON
    extension: str = "mp4"
    rating: Any = "N/A"
    year: Any = "N/A"
    category: Any = None


@dataclass(frozen=True)
class SeriesSummary:
    id: Any
    name: str = "Unknown"
    icon: str = PLACEHOLDER_ICON
    rating: Any = "N/A"
    year: Any = "N/A"
    category: Any = None
    plot: str = ""


@dataclass(frozen=True)
class ChannelSummary:
    id: Any
    name: str = "Unknown"
    icon: str = PLACEHOLDER_ICON
    category: Any = None
    epg_channel_id: str | None = None
