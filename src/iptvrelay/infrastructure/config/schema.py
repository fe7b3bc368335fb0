"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional
from urllib.parse import urlparse

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]
LiveMode = Literal["redirect", "relay"]


def _normalize_base_url(value: Any) -> str:
    """Strip whitespace and trailing slashes; empty means "not configured"."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"Expected URL string, got: {type(value)!r}")
    url = value.strip().rstrip("/")
    if not url:
        return ""
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"base_url must be an absolute http(s) URL, got: {url!r}")
    return url


class ProviderConfig(BaseModel):
    """Upstream provider address and the credentials embedded in its URLs.

    Injected into the locator, relay and catalog client at construction
    time; nothing reads credentials from global state.
    """

    base_url: str = Field(
        default="",
        description="Provider base URL, e.g. http://provider.example:80",
    )
    username: str = Field(default="", description="Provider account username.")
    password: str = Field(default="", description="Provider account password.")

    @field_validator("base_url", mode="before")
    @classmethod
    def _validate_base_url(cls, v: Any) -> str:
        return _normalize_base_url(v)

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url and self.username and self.password)


class RelayConfig(BaseModel):
    """Media relay behaviour (movies, episodes, live channels, segments)."""

    timeout_seconds: float = Field(
        default=30.0,
        description="Upstream connect/idle timeout. Does not cap total transfer time.",
    )
    user_agent: str = Field(
        default="VLC/3.0.18 LibVLC/3.0.18",
        description="Media-player User-Agent; some providers gate on it.",
    )
    chunk_size: int = Field(
        default=65_536,
        description="Read size for relayed upstream bytes.",
    )
    live_mode: LiveMode = Field(
        default="redirect",
        description="'redirect' sends players to the provider, 'relay' proxies bytes.",
    )
    live_port: Optional[int] = Field(
        default=None,
        description="Alternate provider port for live URLs (e.g. 8080). None = same base.",
    )
    forward_cache_headers: bool = Field(
        default=True,
        description="Also forward cache-control, last-modified and etag.",
    )

    @field_validator("timeout_seconds")
    @classmethod
    def _validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("relay.timeout_seconds must be > 0")
        return v

    @field_validator("chunk_size")
    @classmethod
    def _validate_chunk_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("relay.chunk_size must be > 0")
        return v

    @field_validator("live_port")
    @classmethod
    def _validate_live_port(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and not 0 < v < 65_536:
            raise ValueError("relay.live_port must be a valid TCP port")
        return v


class CatalogConfig(BaseModel):
    """Provider ``player_api.php`` lookups and the listing cache."""

    timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for category and info lookups.",
    )
    listing_timeout_seconds: float = Field(
        default=20.0,
        description="Timeout for full stream/series listings.",
    )
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; IPTV-Relay/1.0)",
        description="User-Agent for catalog API calls.",
    )
    cache_ttl_seconds: int = Field(
        default=3600,
        description="Fixed expiry of the cached VOD listing. 0 = disabled.",
    )

    @field_validator("timeout_seconds", "listing_timeout_seconds")
    @classmethod
    def _validate_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("catalog timeouts must be > 0")
        return v

    @field_validator("cache_ttl_seconds")
    @classmethod
    def _validate_cache_ttl(cls, v: int) -> int:
        if v < 0:
            raise ValueError("catalog.cache_ttl_seconds must be >= 0")
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (server/provider/relay/catalog/logging).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="iptv-relay", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # Server (YAML section: server.*)
    host: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices("host", AliasPath("server", "host")),
        description="Bind host.",
    )
    port: int = Field(
        default=3000,
        validation_alias=AliasChoices("port", AliasPath("server", "port")),
        description="Bind port.",
    )

    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    relay: RelayConfig = Field(default_factory=RelayConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    @field_validator("port")
    @classmethod
    def _validate_port(cls, v: int) -> int:
        if not 0 < v < 65_536:
            raise ValueError("port must be a valid TCP port")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.

        The provider password is masked.
        """
        provider = self.provider.model_dump()
        if provider["password"]:
            provider["password"] = "***"
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "server": {"host": self.host, "port": self.port},
            "provider": provider,
            "relay": self.relay.model_dump(),
            "catalog": self.catalog.model_dump(),
            "logging": {"level": self.log_level, "format": self.log_format},
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read IPTVRELAY_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - IPTVRELAY_PROVIDER_BASE_URL (or IPTV_SERVER_URL)
    - IPTVRELAY_PROVIDER_USERNAME (or IPTV_USERNAME)
    - IPTVRELAY_PROVIDER_PASSWORD (or IPTV_PASSWORD)
    - IPTVRELAY_RELAY_LIVE_MODE
    - IPTVRELAY_LOG_LEVEL
    - PORT
    """

    model_config = SettingsConfigDict(
        env_prefix="IPTVRELAY_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    host: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("IPTVRELAY_HOST", "HOST")
    )
    port: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("IPTVRELAY_PORT", "PORT")
    )

    provider_base_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("IPTVRELAY_PROVIDER_BASE_URL", "IPTV_SERVER_URL"),
    )
    provider_username: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("IPTVRELAY_PROVIDER_USERNAME", "IPTV_USERNAME"),
    )
    provider_password: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("IPTVRELAY_PROVIDER_PASSWORD", "IPTV_PASSWORD"),
    )

    relay_timeout_seconds: Optional[float] = None
    relay_user_agent: Optional[str] = None
    relay_live_mode: Optional[LiveMode] = None
    relay_live_port: Optional[int] = None
    relay_forward_cache_headers: Optional[bool] = None

    catalog_timeout_seconds: Optional[float] = None
    catalog_cache_ttl_seconds: Optional[int] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
