"""In-process cache with fixed per-entry expiry."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any, Optional

import structlog

log = structlog.get_logger(__name__)


class MemoryCacheAdapter:
    """Dict-backed cache: one entry per key, fixed expiry, no eviction policy.

    Only touched from the event loop thread, so no locking is needed.
    Expired entries are dropped lazily on read.

    Args:
        ttl_seconds: Default TTL for ``set()`` without explicit value.
            ``0`` disables caching (every ``set`` is a no-op).
        clock: Monotonic time source (injectable for tests).
    """

    def __init__(
        self,
        ttl_seconds: int = 3600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}

        log.info("memory_cache_init", default_ttl=ttl_seconds)

    async def __aenter__(self) -> MemoryCacheAdapter:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        self._entries.clear()

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            log.debug("cache_get", key=key, hit=False)
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            log.debug("cache_expired", key=key)
            return None
        log.debug("cache_get", key=key, hit=True)
        return value

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        expire_time = ttl if ttl is not None else self.default_ttl
        if expire_time <= 0:
            return
        self._entries[key] = (value, self._clock() + expire_time)
        log.debug("cache_set", key=key, ttl=expire_time)

    async def delete(self, key: str) -> bool:
        deleted = self._entries.pop(key, None) is not None
        log.debug("cache_delete", key=key, deleted=deleted)
        return deleted

    async def clear(self) -> None:
        count = len(self._entries)
        self._entries.clear()
        log.info("cache_cleared", entries=count)
