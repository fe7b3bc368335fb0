"""Shared fixtures for integration tests.

These tests use the real composition root (lifespan, MemoryCacheAdapter,
StreamRelay, HttpxCatalogClient) with mocked HTTP via respx.
"""

from __future__ import annotations

import pytest

_ENV_VARS = (
    "IPTV_SERVER_URL",
    "IPTV_USERNAME",
    "IPTV_PASSWORD",
    "HOST",
    "PORT",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the host's provider variables out of config precedence tests."""
    import os

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    for name in list(os.environ):
        if name.startswith("IPTVRELAY_"):
            monkeypatch.delenv(name, raising=False)
