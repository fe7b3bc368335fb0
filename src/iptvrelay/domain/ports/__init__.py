from .cache import CachePort
from .catalog import CatalogClientPort
from .relay import (
    CancellationTokenPort,
    RelaySessionPort,
    ResourceLocatorPort,
    StreamRelayPort,
)

__all__ = [
    "CachePort",
    "CancellationTokenPort",
    "CatalogClientPort",
    "RelaySessionPort",
    "ResourceLocatorPort",
    "StreamRelayPort",
]
