"""Cache Port - Interface for the catalog listing cache."""

from __future__ import annotations

from typing import Any, Protocol


class CachePort(Protocol):
    """Port for an async key-value cache with a fixed per-entry expiry.

    One value per key; a ``set`` replaces the previous value and restarts
    its expiry.  There is no eviction policy beyond expiry.
    """

    async def get(self, key: str) -> Any:
        """Retrieve value. None = not found / expired."""
        ...

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        """Set value with optional TTL (seconds)."""
        ...

    async def delete(self, key: str) -> bool:
        """Delete key. True = deleted, False = did not exist."""
        ...

    async def clear(self) -> None:
        """Delete ALL keys (``POST /api/cache/clear``)."""
        ...

    async def aclose(self) -> None: ...
