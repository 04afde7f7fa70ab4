"""Tests for settings and the application lifecycle."""

import logging
from unittest.mock import patch

from fastapi.testclient import TestClient

from recipe_favorites.api.app import build_keepalive, create_app
from recipe_favorites.config import DEFAULT_CORS_ORIGINS, DEFAULT_DATABASE_URL, Settings
from recipe_favorites.worker.keepalive import KeepaliveJob

KEEPALIVE_URL = "https://favorites.example.com/health"


class TestSettings:
    """Test Settings.from_env."""

    def test_defaults(self, monkeypatch):
        """Unset variables fall back to defaults."""
        for name in ("PORT", "HOST", "APP_ENV", "DATABASE_URL", "KEEPALIVE_URL",
                     "CORS_ORIGINS", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()

        assert settings.port == 5001
        assert settings.app_env == "development"
        assert not settings.is_production
        assert settings.database_url == DEFAULT_DATABASE_URL
        assert settings.keepalive_url is None
        assert settings.cors_origins == DEFAULT_CORS_ORIGINS

    def test_reads_environment(self, monkeypatch):
        """Variables override defaults."""
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg://u:p@db/favs")
        monkeypatch.setenv("KEEPALIVE_URL", KEEPALIVE_URL)
        monkeypatch.setenv("CORS_ORIGINS", "https://a.test, https://b.test,")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = Settings.from_env()

        assert settings.port == 8080
        assert settings.is_production
        assert settings.database_url == "postgresql+psycopg://u:p@db/favs"
        assert settings.keepalive_url == KEEPALIVE_URL
        assert settings.cors_origins == ("https://a.test", "https://b.test")
        assert settings.log_level == "DEBUG"

    def test_empty_keepalive_url_is_none(self, monkeypatch):
        monkeypatch.setenv("KEEPALIVE_URL", "")
        assert Settings.from_env().keepalive_url is None


class TestBuildKeepalive:
    """Keepalive only runs in production with a URL."""

    def test_none_outside_production(self):
        assert build_keepalive(Settings(keepalive_url=KEEPALIVE_URL)) is None

    def test_created_in_production(self):
        job = build_keepalive(Settings(app_env="production", keepalive_url=KEEPALIVE_URL))
        assert isinstance(job, KeepaliveJob)
        assert job.url == KEEPALIVE_URL
        assert not job.running

    def test_production_without_url_warns(self, caplog):
        caplog.set_level(logging.WARNING)
        assert build_keepalive(Settings(app_env="production")) is None
        assert "KEEPALIVE_URL is not set" in caplog.text


class TestLifespan:
    """Startup creates tables; keepalive follows the app's lifetime."""

    def test_production_starts_and_stops_keepalive(self):
        """Job starts on startup and is stopped on shutdown."""
        settings = Settings(
            app_env="production",
            keepalive_url=KEEPALIVE_URL,
            database_url="sqlite:///:memory:",
        )
        app = create_app(settings)

        with patch.object(KeepaliveJob, "start") as start, patch.object(
            KeepaliveJob, "stop"
        ) as stop:
            with TestClient(app) as client:
                assert isinstance(app.state.keepalive, KeepaliveJob)
                start.assert_called_once()
                stop.assert_not_called()
                assert client.get("/health").status_code == 200
            stop.assert_called_once()

    def test_development_has_no_keepalive(self):
        """No job outside production."""
        app = create_app(Settings(database_url="sqlite:///:memory:"))

        with TestClient(app):
            assert app.state.keepalive is None

    def test_startup_creates_tables(self):
        """Requests work against the configured database after startup."""
        app = create_app(Settings(database_url="sqlite:///:memory:"))

        with TestClient(app) as client:
            response = client.post(
                "/favorites", json={"userId": "u1", "recipeId": 1, "title": "Soup"}
            )
            assert response.status_code == 201
            assert len(client.get("/favorites/u1").json()) == 1
