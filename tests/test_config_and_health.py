# =============================================================================
# tests/test_config_and_health.py - Settings and Health Endpoint Tests
# =============================================================================

import pytest

from app.config import DEFAULT_ALPHA_ORIGIN, Settings, normalize_base_path, normalize_origin


# =============================================================================
# Settings
# =============================================================================

class TestNormalizeOrigin:
    """Tests for ALPHA_ORIGIN normalization."""

    @pytest.mark.parametrize("raw, expected", [
        ("https://alpha.nafez.app", "https://alpha.nafez.app"),
        ("https://alpha.nafez.app/some/path?x=1", "https://alpha.nafez.app"),
        ("alpha.nafez.app", "https://alpha.nafez.app"),
        ("http://localhost:4000/", "http://localhost:4000"),
        ("HTTPS://Alpha.Nafez.App", "https://alpha.nafez.app"),
        ("  https://alpha.nafez.app  ", "https://alpha.nafez.app"),
    ])
    def test_normalizes(self, raw, expected):
        assert normalize_origin(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", None, "https://", "http://host:notaport"])
    def test_falls_back_to_default(self, raw):
        assert normalize_origin(raw) == DEFAULT_ALPHA_ORIGIN


class TestNormalizeBasePath:
    """Tests for ALPHA_BASE_PATH normalization."""

    @pytest.mark.parametrize("raw, expected", [
        ("/alpha", "/alpha"),
        ("alpha", "/alpha"),
        ("/alpha///", "/alpha"),
        ("/", ""),
        ("", ""),
        ("  /beta/app/ ", "/beta/app"),
    ])
    def test_normalizes(self, raw, expected):
        assert normalize_base_path(raw) == expected


class TestSettings:
    """Tests for the Settings class."""

    def test_defaults(self):
        config = Settings(_env_file=None)

        assert config.PORT == 3000
        assert config.MAX_BODY_SIZE_BYTES == 1_000_000
        assert config.ALPHA_ORIGIN == "http://localhost:4000"
        assert config.ALPHA_BASE_PATH == "/alpha"
        assert config.subscribers_path.as_posix() == "data/subscribers.json"

    def test_alpha_values_are_normalized(self):
        config = Settings(_env_file=None, ALPHA_ORIGIN="alpha.nafez.app/login", ALPHA_BASE_PATH="/")

        assert config.ALPHA_ORIGIN == "https://alpha.nafez.app"
        assert config.ALPHA_BASE_PATH == ""

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("DATA_DIR", "/var/lib/nafez")

        config = Settings(_env_file=None)

        assert config.PORT == 8080
        assert config.subscribers_path.as_posix() == "/var/lib/nafez/subscribers.json"

    def test_cors_origins_list(self):
        config = Settings(_env_file=None, CORS_ORIGINS="http://localhost:3000, https://nafez.app")
        assert config.cors_origins_list == ["http://localhost:3000", "https://nafez.app"]


# =============================================================================
# Health Endpoints
# =============================================================================

class TestHealth:
    """Tests for /api/v1/health*."""

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["version"] == "1.0.0"

    def test_live(self, client):
        assert client.get("/api/v1/health/live").json()["status"] == "alive"

    def test_ready_counts_subscribers(self, client):
        client.post("/subscribe", json={"email": "ann@example.com"})

        body = client.get("/api/v1/health/ready").json()

        assert body["status"] == "ready"
        assert body["checks"]["storage"] == "healthy"
        assert body["subscribers"] == 1

    def test_ready_reports_corrupt_store(self, client, subscribers_path):
        subscribers_path.write_text("{not json", encoding="utf-8")

        body = client.get("/api/v1/health/ready").json()

        assert body["status"] == "degraded"
        assert body["checks"]["storage"] == "corrupt"
        assert body["subscribers"] is None
