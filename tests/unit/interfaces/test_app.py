"""Tests for create_app: middleware, health, error envelopes."""

from __future__ import annotations

from fastapi.testclient import TestClient

from iptvrelay.domain.exceptions import ProviderNotConfiguredError
from iptvrelay.infrastructure.config import AppConfig
from iptvrelay.interfaces.app import create_app


class TestHealth:
    def test_health_when_configured(self, app_config: AppConfig) -> None:
        resp = TestClient(create_app(app_config)).get("/api/health")

        body = resp.json()
        assert resp.status_code == 200
        assert body["success"] is True
        assert body["status"] == "ok"
        assert body["configured"] is True
        assert body["live_mode"] == "relay"
        assert body["active_streams"] == 0
        assert "timestamp" in body
        assert "s3cret" not in resp.text
        assert "alice" not in resp.text

    def test_health_available_when_unconfigured(
        self, unconfigured_config: AppConfig
    ) -> None:
        resp = TestClient(create_app(unconfigured_config)).get("/api/health")

        assert resp.status_code == 200
        assert resp.json()["configured"] is False


class TestProviderGuard:
    def test_api_routes_503_when_unconfigured(
        self, unconfigured_config: AppConfig
    ) -> None:
        client = TestClient(create_app(unconfigured_config))

        resp = client.get("/api/movies")
        assert resp.status_code == 503
        assert resp.json() == {"success": False, "error": "Service not configured"}

    def test_stream_routes_503_when_unconfigured(
        self, unconfigured_config: AppConfig
    ) -> None:
        client = TestClient(create_app(unconfigured_config))

        assert client.get("/stream/1").status_code == 503
        assert client.get("/stream/live/1").status_code == 503

    def test_guard_reports_not_configured_error(
        self, unconfigured_config: AppConfig
    ) -> None:
        resp = TestClient(create_app(unconfigured_config)).get("/stream/1")

        expected = ProviderNotConfiguredError()
        assert resp.status_code == expected.status_code
        assert resp.json()["error"] == expected.message


class TestBlockedPaths:
    def test_dotenv_is_forbidden(self, app_config: AppConfig) -> None:
        client = TestClient(create_app(app_config))

        for path in ("/.env", "/.git/config", "/static/pyproject.toml", "/config.yaml"):
            resp = client.get(path)
            assert resp.status_code == 403, path
            assert resp.json() == {"success": False, "error": "Forbidden"}

    def test_blocked_even_when_unconfigured(
        self, unconfigured_config: AppConfig
    ) -> None:
        resp = TestClient(create_app(unconfigured_config)).get("/api/.env")
        assert resp.status_code == 403


class TestNotFound:
    def test_unknown_path_json_404(self, app_config: AppConfig) -> None:
        resp = TestClient(create_app(app_config)).get("/nope")

        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Not found"}


class TestCors:
    def test_preflight_allows_range(self, app_config: AppConfig) -> None:
        resp = TestClient(create_app(app_config)).options(
            "/stream/1",
            headers={
                "Origin": "http://player.example",
                "Access-Control-Request-Method": "GET",
                "Access-Control-Request-Headers": "Range",
            },
        )

        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "*"
        assert "GET" in resp.headers["access-control-allow-methods"]

    def test_exposes_range_headers(self, app_config: AppConfig) -> None:
        resp = TestClient(create_app(app_config)).get(
            "/api/health", headers={"Origin": "http://player.example"}
        )

        exposed = resp.headers["access-control-expose-headers"].lower()
        assert "content-range" in exposed
        assert "accept-ranges" in exposed
