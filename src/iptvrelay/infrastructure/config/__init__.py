from __future__ import annotations

from .load import load_config
from .schema import AppConfig, CatalogConfig, EnvOverrides, ProviderConfig, RelayConfig

__all__ = [
    "AppConfig",
    "CatalogConfig",
    "EnvOverrides",
    "ProviderConfig",
    "RelayConfig",
    "load_config",
]
