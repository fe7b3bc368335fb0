"""Resource locator: playback requests -> upstream provider URLs.

Pure and deterministic.  The provider configuration is injected once at
construction; the locator never reads ambient state.

URL shapes (Xtream Codes conventions)::

    {base}/movie/{user}/{pass}/{id}.{ext}        (id is numeric)
    {base}/series/{user}/{pass}/{id}.{ext}
    {base}/live/{user}/{pass}/{id}.m3u8
"""

from __future__ import annotations

from urllib.parse import quote, urlsplit, urlunsplit

from iptvrelay.domain.entities.playback import (
    ALLOWED_EXTENSIONS,
    LIVE_EXTENSION,
    ContentKind,
    PlaybackRequest,
    UpstreamTarget,
)
from iptvrelay.domain.exceptions import InvalidRequestError
from iptvrelay.domain.sanitize import sanitize_extension, sanitize_id
from iptvrelay.infrastructure.config.schema import ProviderConfig

_PATH_SEGMENT = {
    ContentKind.MOVIE: "movie",
    ContentKind.SERIES_EPISODE: "series",
    ContentKind.LIVE_CHANNEL: "live",
}


def is_absolute_http_url(url: str) -> bool:
    """True for well-formed absolute ``http``/``https`` URLs with a host."""
    try:
        parsed = urlsplit(url)
        # Accessing .port validates the port component.
        parsed.port
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.hostname)


def extension_from_url(url: str) -> str | None:
    """Allow-listed container extension of the URL path, if any.

    >>> extension_from_url("http://cdn.example/hls/seg-12.ts?token=x")
    'ts'
    >>> extension_from_url("http://cdn.example/chunk") is None
    True
    """
    path = urlsplit(url).path
    last = path.rsplit("/", 1)[-1]
    if "." not in last:
        return None
    ext = last.rsplit(".", 1)[-1].lower()
    return ext if ext in ALLOWED_EXTENSIONS else None


def _with_port(base_url: str, port: int) -> str:
    """Origin of *base_url* with its port replaced (path is dropped)."""
    parts = urlsplit(base_url)
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    return urlunsplit((parts.scheme, f"{host}:{port}", "", "", ""))


class ResourceLocator:
    """Build upstream URLs for movies, series episodes, live channels and segments.

    Args:
        provider: Provider base URL and credentials.
        live_port: Alternate port for live channel URLs; ``None`` keeps the
            base URL's own port.
    """

    def __init__(self, provider: ProviderConfig, *, live_port: int | None = None) -> None:
        self._provider = provider
        self._live_base = (
            _with_port(provider.base_url, live_port)
            if live_port is not None and provider.base_url
            else provider.base_url
        )

    def locate(self, request: PlaybackRequest) -> UpstreamTarget:
        """Resolve *request* to an :class:`UpstreamTarget`.

        Raises:
            InvalidRequestError: invalid id, malformed segment URL or
                unknown content kind.
        """
        try:
            kind = ContentKind(request.kind)
        except ValueError:
            raise InvalidRequestError(
                f"Unsupported content kind: {request.kind!r}"
            ) from None

        if kind is ContentKind.RAW_SEGMENT:
            return self.locate_segment(request.content_id)

        content_id = sanitize_id(request.content_id)
        # Movies are addressed by numeric stream id only.
        if content_id is None or (
            kind is ContentKind.MOVIE and not content_id.isdigit()
        ):
            raise InvalidRequestError(f"Invalid {kind.value} ID")

        if kind is ContentKind.LIVE_CHANNEL:
            base = self._live_base
            extension = LIVE_EXTENSION
        else:
            base = self._provider.base_url
            extension = sanitize_extension(request.extension)

        user = quote(self._provider.username, safe="")
        password = quote(self._provider.password, safe="")
        segment = _PATH_SEGMENT[kind]
        tail = f"{content_id}.{extension}"
        return UpstreamTarget(
            kind=kind,
            url=f"{base}/{segment}/{user}/{password}/{tail}",
            extension=extension,
            safe_url=f"{base}/{segment}/***/***/{tail}",
        )

    def locate_segment(self, url: str) -> UpstreamTarget:
        """Validate a client-supplied absolute URL for raw pass-through."""
        if not url or not is_absolute_http_url(url):
            raise InvalidRequestError("Invalid segment URL")
        return UpstreamTarget(
            kind=ContentKind.RAW_SEGMENT,
            url=url,
            extension=extension_from_url(url),
            safe_url=urlunsplit(urlsplit(url)._replace(query="", fragment="")),
        )
