"""Tests for the structlog/stdlib logging configuration."""

from __future__ import annotations

from iptvrelay.infrastructure.config import AppConfig, ProviderConfig
from iptvrelay.infrastructure.logging.setup import (
    _CredentialRedactor,
    build_logging_config,
)


class TestCredentialRedactor:
    def test_masks_password_in_string_values(self) -> None:
        redact = _CredentialRedactor(["s3cret"])
        event = redact(
            None,
            "info",
            {"event": "x", "url": "http://p/movie/alice/s3cret/1.mp4", "n": 3},
        )
        assert event["url"] == "http://p/movie/alice/***/1.mp4"
        assert event["n"] == 3

    def test_no_secret_is_noop(self) -> None:
        redact = _CredentialRedactor([""])
        event = {"event": "x", "url": "http://p/a"}
        assert redact(None, "info", dict(event)) == event


class TestBuildLoggingConfig:
    def _config(self, **kwargs: object) -> AppConfig:
        return AppConfig(
            provider=ProviderConfig(
                base_url="http://p.example", username="u", password="pw"
            ),
            **kwargs,
        )

    def test_uvicorn_loggers_follow_level(self) -> None:
        cfg = build_logging_config(self._config(log_level="DEBUG"))

        assert cfg["loggers"]["uvicorn"]["level"] == "DEBUG"
        assert cfg["root"]["level"] == "DEBUG"
        assert cfg["handlers"]["default"]["formatter"] == "structlog"

    def test_http_client_loggers_stay_quiet(self) -> None:
        cfg = build_logging_config(self._config(log_level="DEBUG"))

        # httpx logs full request URLs, which embed credentials.
        assert cfg["loggers"]["httpx"]["level"] == "WARNING"
        assert cfg["loggers"]["httpcore"]["level"] == "WARNING"

    def test_http_client_loggers_raised_with_error_level(self) -> None:
        cfg = build_logging_config(self._config(log_level="ERROR"))
        assert cfg["loggers"]["httpx"]["level"] == "ERROR"
