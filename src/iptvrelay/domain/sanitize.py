"""Input filters applied to route parameters before they reach the provider."""

from __future__ import annotations

import re

from iptvrelay.domain.entities.playback import (
    ALLOWED_EXTENSIONS,
    CONTENT_ID_PATTERN,
    DEFAULT_EXTENSION,
)

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def sanitize_id(raw: object) -> str | None:
    """Return *raw* as a content id, or None if it is not one.

    Ids are 1-50 characters of ``[A-Za-z0-9_-]``.  Anything else is
    rejected outright rather than stripped, so ``"12/../34"`` never turns
    into a different, valid id.

    >>> sanitize_id("12345")
    '12345'
    >>> sanitize_id("12 34") is None
    True
    """
    if raw is None:
        return None
    value = str(raw)
    if CONTENT_ID_PATTERN.fullmatch(value) is None:
        return None
    return value


def sanitize_extension(raw: object) -> str:
    """Coerce a container extension into the allow-list (default ``mp4``).

    >>> sanitize_extension(".MKV")
    'mkv'
    >>> sanitize_extension("exe")
    'mp4'
    """
    if raw is None:
        return DEFAULT_EXTENSION
    clean = _NON_ALNUM.sub("", str(raw).lower())
    return clean if clean in ALLOWED_EXTENSIONS else DEFAULT_EXTENSION
