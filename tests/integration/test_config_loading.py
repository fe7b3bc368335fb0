"""Integration tests for configuration loading with layered precedence.

Tests the real load_config() function with actual YAML files, environment
variables, and CLI overrides to verify precedence: defaults < YAML < ENV < CLI.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from iptvrelay.infrastructure.config.load import load_config
from iptvrelay.interfaces.cli.cli import _parse_args, build_cli_overrides

pytestmark = pytest.mark.integration


@pytest.fixture()
def yaml_config(tmp_path: Path) -> Path:
    """Write a minimal YAML config and return its path."""
    config = {
        "app_name": "iptv-relay-test",
        "environment": "test",
        "server": {"port": 4000},
        "provider": {
            "base_url": "http://yaml-provider.example/",
            "username": "yaml-user",
            "password": "yaml-pass",
        },
        "relay": {"timeout_seconds": 15.0, "live_mode": "relay", "live_port": 8080},
        "catalog": {"cache_ttl_seconds": 1800},
        "logging": {"level": "DEBUG", "format": "console"},
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump(config), encoding="utf-8")
    return path


class TestDefaultsOnly:
    """Load with nothing but the built-in defaults."""

    def test_defaults_produce_valid_config(self) -> None:
        config = load_config()
        assert config.app_name == "iptv-relay"
        assert config.environment == "dev"
        assert config.port == 3000
        assert config.relay.timeout_seconds == 30.0
        assert config.relay.user_agent == "VLC/3.0.18 LibVLC/3.0.18"
        assert config.relay.live_mode == "redirect"
        assert config.relay.live_port is None
        assert config.catalog.cache_ttl_seconds == 3600
        assert config.log_level == "INFO"
        assert config.log_format == "console"  # dev → console

    def test_defaults_are_unconfigured(self) -> None:
        assert load_config().provider.is_configured is False

    def test_defaults_derive_log_format_from_environment(self) -> None:
        config = load_config(cli_overrides={"environment": "prod"})
        assert config.log_format == "json"


class TestYamlOverrides:
    """YAML values override defaults."""

    def test_yaml_overrides_defaults(self, yaml_config: Path) -> None:
        config = load_config(config_path=yaml_config)
        assert config.app_name == "iptv-relay-test"
        assert config.port == 4000
        assert config.provider.base_url == "http://yaml-provider.example"
        assert config.provider.is_configured
        assert config.relay.timeout_seconds == 15.0
        assert config.relay.live_mode == "relay"
        assert config.relay.live_port == 8080
        assert config.catalog.cache_ttl_seconds == 1800
        assert config.log_level == "DEBUG"

    def test_yaml_file_not_found_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(config_path=tmp_path / "nonexistent.yaml")

    def test_yaml_partial_override_preserves_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "partial.yaml"
        path.write_text(yaml.dump({"relay": {"timeout_seconds": 99.0}}), encoding="utf-8")

        config = load_config(config_path=path)
        assert config.relay.timeout_seconds == 99.0
        assert config.relay.chunk_size == 65_536  # default preserved
        assert config.app_name == "iptv-relay"

    def test_invalid_live_mode_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.dump({"relay": {"live_mode": "proxy"}}), encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(config_path=path)

    def test_relative_base_url_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text(
            yaml.dump({"provider": {"base_url": "provider.example"}}), encoding="utf-8"
        )
        with pytest.raises(ValidationError):
            load_config(config_path=path)


class TestEnvOverrides:
    """Environment variables override YAML and defaults."""

    def test_env_overrides_yaml(
        self, yaml_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("IPTVRELAY_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("IPTVRELAY_RELAY_TIMEOUT_SECONDS", "60.0")

        config = load_config(config_path=yaml_config)
        assert config.log_level == "WARNING"
        assert config.relay.timeout_seconds == 60.0
        # YAML values not overridden by ENV stay
        assert config.app_name == "iptv-relay-test"

    def test_legacy_provider_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("IPTV_SERVER_URL", "http://legacy.example:8000")
        monkeypatch.setenv("IPTV_USERNAME", "legacy")
        monkeypatch.setenv("IPTV_PASSWORD", "pw")
        monkeypatch.setenv("PORT", "3100")

        config = load_config()
        assert config.provider.base_url == "http://legacy.example:8000"
        assert config.provider.username == "legacy"
        assert config.provider.is_configured
        assert config.port == 3100

    def test_dotenv_file_is_loaded(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        # load_dotenv writes os.environ directly; record the keys so teardown
        # removes them again.
        for name in ("IPTV_SERVER_URL", "IPTV_USERNAME", "IPTV_PASSWORD"):
            monkeypatch.setenv(name, "")
            monkeypatch.delenv(name)

        dotenv = tmp_path / ".env"
        dotenv.write_text(
            "IPTV_SERVER_URL=http://dotenv.example\n"
            "IPTV_USERNAME=du\n"
            "IPTV_PASSWORD=dp\n",
            encoding="utf-8",
        )
        config = load_config(dotenv_path=dotenv)
        assert config.provider.base_url == "http://dotenv.example"
        assert config.provider.is_configured

    def test_missing_dotenv_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(dotenv_path=tmp_path / "missing.env")


class TestCliOverrides:
    """CLI overrides beat everything (highest precedence)."""

    def test_cli_overrides_yaml_and_env(
        self, yaml_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("IPTVRELAY_LOG_LEVEL", "WARNING")

        config = load_config(
            config_path=yaml_config,
            cli_overrides={"log_level": "ERROR"},
        )
        assert config.log_level == "ERROR"

    def test_cli_flags_map_to_overrides(self, yaml_config: Path) -> None:
        args = _parse_args(
            ["--port", "5000", "--live-mode", "redirect", "--log-format", "json"]
        )
        config = load_config(
            config_path=yaml_config, cli_overrides=build_cli_overrides(args)
        )
        assert config.port == 5000
        assert config.relay.live_mode == "redirect"
        assert config.log_format == "json"

    def test_sectioned_dump_masks_password(self, yaml_config: Path) -> None:
        dumped = load_config(config_path=yaml_config).to_sectioned_dict()
        assert dumped["provider"]["password"] == "***"
        assert dumped["server"]["port"] == 4000
