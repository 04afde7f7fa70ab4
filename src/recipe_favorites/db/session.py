"""Database session management.

Provides engine and session factories keyed by database URL. SQLite URLs
get thread-safety settings for FastAPI concurrency; any other SQLAlchemy
URL (e.g. PostgreSQL) uses the driver's default pool.
"""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from recipe_favorites.config import DEFAULT_DATABASE_URL
from recipe_favorites.db.schema import Base

# Module-level engine cache for connection pooling
_engine_cache: dict[str, Engine] = {}

# Module-level session factory cache
_session_factory_cache: dict[str, sessionmaker] = {}


def get_engine(database_url: str | None = None) -> Engine:
    """Get SQLAlchemy engine for the database.

    Engines are cached by URL. Subsequent calls with the same URL
    return the cached engine.

    Args:
        database_url: SQLAlchemy URL. Defaults to a local SQLite file.

    Returns:
        SQLAlchemy engine instance (cached).
    """
    if database_url is None:
        database_url = DEFAULT_DATABASE_URL

    if database_url in _engine_cache:
        return _engine_cache[database_url]

    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        # File databases need their parent directory to exist
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

        # SQLite thread-safety config for FastAPI concurrency:
        # - check_same_thread=False: Allow multi-threaded access
        # - StaticPool: Single connection shared across threads
        engine = create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(database_url, echo=False, pool_pre_ping=True)

    _engine_cache[database_url] = engine
    return engine


def _get_session_factory(database_url: str | None = None) -> sessionmaker:
    """Get cached session factory for the database."""
    if database_url is None:
        database_url = DEFAULT_DATABASE_URL

    if database_url in _session_factory_cache:
        return _session_factory_cache[database_url]

    factory = sessionmaker(bind=get_engine(database_url))
    _session_factory_cache[database_url] = factory

    return factory


def get_session(database_url: str | None = None) -> Session:
    """Get a database session.

    Note: Caller is responsible for closing the session.
    """
    factory = _get_session_factory(database_url)
    return factory()


def init_db(database_url: str | None = None) -> None:
    """Initialize database schema.

    Call this once during application startup to create tables.
    """
    engine = get_engine(database_url)
    Base.metadata.create_all(engine)
