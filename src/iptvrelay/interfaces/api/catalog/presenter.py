"""JSON presenter for catalog entities.

Keys follow what the browser frontend reads: provider-style
``category_id``/``category_name`` for categories, camelCase
``epgChannelId`` for channels.
"""

from __future__ import annotations

from typing import Any

from iptvrelay.domain.entities.catalog import (
    Category,
    ChannelSummary,
    MovieSummary,
    SeriesSummary,
)


def present_category(category: Category) -> dict[str, Any]:
    return {
        "category_id": category.id,
        "category_name": category.name,
        "parent_id": category.parent_id,
    }


def present_movie(movie: MovieSummary) -> dict[str, Any]:
    return {
        "id": movie.id,
        "name": movie.name,
        "icon": movie.icon,
        "extension": movie.extension,
        "rating": movie.rating,
        "year": movie.year,
        "category": movie.category,
    }


def present_series(series: SeriesSummary) -> dict[str, Any]:
    return {
        "id": series.id,
        "name": series.name,
        "icon": series.icon,
        "rating": series.rating,
        "year": series.year,
        "category": series.category,
        "plot": series.plot,
    }


def present_channel(channel: ChannelSummary) -> dict[str, Any]:
    return {
        "id": channel.id,
        "name": channel.name,
        "icon": channel.icon,
        "category": channel.category,
        "epgChannelId": channel.epg_channel_id,
    }
