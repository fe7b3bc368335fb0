"""Shared test fixtures for the IPTV relay test suite."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable

import httpx
import pytest

from iptvrelay.infrastructure.config import AppConfig, ProviderConfig, RelayConfig

PROVIDER_BASE = "http://provider.example"
PROVIDER_USER = "alice"
PROVIDER_PASS = "s3cret"


# ---------------------------------------------------------------------------
# Upstream stream doubles
# ---------------------------------------------------------------------------


class CountingStream(httpx.AsyncByteStream):
    """Upstream body that records how often it was closed.

    Args:
        chunks: Byte chunks to yield in order.
        fail_at: Raise ``httpx.ReadError`` instead of yielding this index.
        stall_at: Block forever (until cancelled) instead of yielding this
            index; simulates an upstream that is slow to send.
    """

    def __init__(
        self,
        chunks: Iterable[bytes],
        *,
        fail_at: int | None = None,
        stall_at: int | None = None,
    ) -> None:
        self.chunks = list(chunks)
        self.fail_at = fail_at
        self.stall_at = stall_at
        self.close_calls = 0
        self.yielded = 0

    async def __aiter__(self):
        for index, chunk in enumerate(self.chunks):
            if index == self.fail_at:
                raise httpx.ReadError("connection reset by peer")
            if index == self.stall_at:
                await asyncio.Event().wait()
            self.yielded += 1
            yield chunk

    async def aclose(self) -> None:
        self.close_calls += 1


@pytest.fixture()
def make_stream() -> type[CountingStream]:
    return CountingStream


@pytest.fixture()
def make_client() -> Callable[..., httpx.AsyncClient]:
    """AsyncClient factory whose transport is served by a handler."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def provider_config() -> ProviderConfig:
    return ProviderConfig(
        base_url=PROVIDER_BASE,
        username=PROVIDER_USER,
        password=PROVIDER_PASS,
    )


@pytest.fixture()
def app_config(provider_config: ProviderConfig) -> AppConfig:
    """Configured provider, relay-mode live channels."""
    return AppConfig(
        environment="test",
        provider=provider_config,
        relay=RelayConfig(live_mode="relay"),
    )


@pytest.fixture()
def unconfigured_config() -> AppConfig:
    return AppConfig(environment="test")
