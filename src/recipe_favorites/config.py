"""Runtime configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_DATABASE_URL = "sqlite:///data/favorites.db"
DEFAULT_PORT = 5001

# Local web dev server and Expo web
DEFAULT_CORS_ORIGINS = ("http://localhost:8081", "http://localhost:19006")

# Expo Go on the LAN
MOBILE_DEV_ORIGIN_PATTERN = r"^exp://192\.168\.\d{1,3}\.\d{1,3}:19000$"

PRODUCTION = "production"


def _split_origins(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return DEFAULT_CORS_ORIGINS
    return tuple(o.strip() for o in raw.split(",") if o.strip())


@dataclass(frozen=True)
class Settings:
    """Service settings.

    Attributes:
        host: Bind address for the HTTP server.
        port: Listening port.
        app_env: Runtime mode. The keepalive job only runs in production.
        database_url: SQLAlchemy database URL.
        keepalive_url: URL the keepalive job pings. None disables the job.
        cors_origins: Exact origins allowed to call the API from a browser.
        log_level: Root logging level name.
    """

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    app_env: str = "development"
    database_url: str = DEFAULT_DATABASE_URL
    keepalive_url: str | None = None
    cors_origins: tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.app_env == PRODUCTION

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from environment variables."""
        return cls(
            host=os.environ.get("HOST", "0.0.0.0"),
            port=int(os.environ.get("PORT", DEFAULT_PORT)),
            app_env=os.environ.get("APP_ENV", "development"),
            database_url=os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL),
            keepalive_url=os.environ.get("KEEPALIVE_URL") or None,
            cors_origins=_split_origins(os.environ.get("CORS_ORIGINS")),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )
