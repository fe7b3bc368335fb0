"""Port for provider catalog lookups (``player_api.php``)."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CatalogClientPort(Protocol):
    """Async interface for raw provider API actions.

    Implementations return the decoded JSON payload unchanged and raise
    ``CatalogError`` on any transport, status or decoding failure.
    """

    async def fetch(
        self,
        action: str,
        params: dict[str, str] | None = None,
        *,
        listing: bool = False,
    ) -> Any:
        """Run one provider action.

        Args:
            action: Provider action name, e.g. ``get_vod_streams``.
            params: Extra query parameters (``category_id``, ``vod_id``, ...).
            listing: Use the longer listing timeout (full stream lists).
        """
        ...
