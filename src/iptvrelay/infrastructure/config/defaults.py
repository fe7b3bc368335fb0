"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "iptv-relay",
    "environment": "dev",
    "server": {
        "host": "0.0.0.0",
        "port": 3000,
    },
    "provider": {
        "base_url": "",
        "username": "",
        "password": "",
    },
    "relay": {
        "timeout_seconds": 30.0,
        "user_agent": "VLC/3.0.18 LibVLC/3.0.18",
        "chunk_size": 65_536,
        "live_mode": "redirect",
        "live_port": None,
        "forward_cache_headers": True,
    },
    "catalog": {
        "timeout_seconds": 10.0,
        "listing_timeout_seconds": 20.0,
        "user_agent": "Mozilla/5.0 (compatible; IPTV-Relay/1.0)",
        "cache_ttl_seconds": 3600,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
}
