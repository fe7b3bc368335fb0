"""Tests for MemoryCacheAdapter."""

from __future__ import annotations

import pytest

from iptvrelay.infrastructure.cache import MemoryCacheAdapter


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cache(clock: FakeClock) -> MemoryCacheAdapter:
    return MemoryCacheAdapter(ttl_seconds=60, clock=clock)


class TestGetSet:
    @pytest.mark.asyncio()
    async def test_miss_returns_none(self, cache: MemoryCacheAdapter) -> None:
        assert await cache.get("missing") is None

    @pytest.mark.asyncio()
    async def test_set_then_get(self, cache: MemoryCacheAdapter) -> None:
        await cache.set("k", [1, 2, 3])
        assert await cache.get("k") == [1, 2, 3]

    @pytest.mark.asyncio()
    async def test_set_replaces_value(self, cache: MemoryCacheAdapter) -> None:
        await cache.set("k", "old")
        await cache.set("k", "new")
        assert await cache.get("k") == "new"


class TestExpiry:
    @pytest.mark.asyncio()
    async def test_fresh_before_ttl(
        self, cache: MemoryCacheAdapter, clock: FakeClock
    ) -> None:
        await cache.set("k", "v")
        clock.now += 59
        assert await cache.get("k") == "v"

    @pytest.mark.asyncio()
    async def test_expired_at_ttl(
        self, cache: MemoryCacheAdapter, clock: FakeClock
    ) -> None:
        await cache.set("k", "v")
        clock.now += 60
        assert await cache.get("k") is None

    @pytest.mark.asyncio()
    async def test_explicit_ttl_overrides_default(
        self, cache: MemoryCacheAdapter, clock: FakeClock
    ) -> None:
        await cache.set("k", "v", ttl=5)
        clock.now += 6
        assert await cache.get("k") is None

    @pytest.mark.asyncio()
    async def test_set_restarts_expiry(
        self, cache: MemoryCacheAdapter, clock: FakeClock
    ) -> None:
        await cache.set("k", "v1")
        clock.now += 50
        await cache.set("k", "v2")
        clock.now += 50
        assert await cache.get("k") == "v2"

    @pytest.mark.asyncio()
    async def test_zero_ttl_disables_caching(self, clock: FakeClock) -> None:
        cache = MemoryCacheAdapter(ttl_seconds=0, clock=clock)
        await cache.set("k", "v")
        assert await cache.get("k") is None


class TestDeleteClear:
    @pytest.mark.asyncio()
    async def test_delete_existing(self, cache: MemoryCacheAdapter) -> None:
        await cache.set("k", "v")
        assert await cache.delete("k") is True
        assert await cache.get("k") is None

    @pytest.mark.asyncio()
    async def test_delete_missing(self, cache: MemoryCacheAdapter) -> None:
        assert await cache.delete("nope") is False

    @pytest.mark.asyncio()
    async def test_clear_removes_everything(self, cache: MemoryCacheAdapter) -> None:
        await cache.set("a", 1)
        await cache.set("b", 2)
        await cache.clear()
        assert await cache.get("a") is None
        assert await cache.get("b") is None

    @pytest.mark.asyncio()
    async def test_context_manager_closes(self, clock: FakeClock) -> None:
        async with MemoryCacheAdapter(ttl_seconds=60, clock=clock) as cache:
            await cache.set("k", "v")
        assert await cache.get("k") is None
