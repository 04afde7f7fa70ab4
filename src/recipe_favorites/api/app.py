"""FastAPI application factory.

API layer:
- Validates inputs, reads/writes DB through the repository
- Maps every failure to a `{"error": <message>}` payload in one place
- Owns the keepalive job's lifecycle (started in production only)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Generator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from recipe_favorites.api.cors import OriginPolicy, OriginPolicyMiddleware
from recipe_favorites.config import MOBILE_DEV_ORIGIN_PATTERN, Settings
from recipe_favorites.db.repo import DbSession
from recipe_favorites.db.session import get_session, init_db
from recipe_favorites.errors import FavoritesError, InvalidInput
from recipe_favorites.models.types import HealthResponse
from recipe_favorites.worker.keepalive import KeepaliveJob

logger = logging.getLogger(__name__)


def get_db_session(request: Request) -> Generator[DbSession, None, None]:
    """Dependency to get database session.

    Yields:
        Database session that is automatically closed after request.
    """
    session = get_session(request.app.state.settings.database_url)
    try:
        yield session
    finally:
        session.close()


def build_keepalive(settings: Settings) -> KeepaliveJob | None:
    """Create the keepalive job if this process should run one."""
    if not settings.is_production:
        return None
    if not settings.keepalive_url:
        logger.warning("APP_ENV is production but KEEPALIVE_URL is not set; keepalive disabled")
        return None
    return KeepaliveJob(settings.keepalive_url)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create tables, then run the keepalive job for the app's lifetime.

    Uvicorn runs the shutdown half on SIGTERM/SIGINT, so the job's timer
    is cancelled before the process exits.
    """
    settings: Settings = app.state.settings
    init_db(settings.database_url)

    keepalive = build_keepalive(settings)
    app.state.keepalive = keepalive
    if keepalive is not None:
        keepalive.start()
    try:
        yield
    finally:
        if keepalive is not None:
            keepalive.stop()


def _error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    """Install the handlers every failure path funnels through."""

    @app.exception_handler(FavoritesError)
    async def handle_favorites_error(request: Request, exc: FavoritesError) -> JSONResponse:
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        return JSONResponse(exc.payload(), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Only reachable for bodies that are not valid JSON
        logger.warning(f"{request.method} {request.url.path} -> 400: {exc.errors()}")
        return _error_response(InvalidInput.status_code, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
        return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    # Runs outside the CORS middleware, so it adds the headers itself
    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        policy: OriginPolicy = request.app.state.origin_policy
        headers = policy.response_headers(request.headers.get("origin"))
        return _error_response(500, "Internal server error", headers)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        settings: Service settings. Read from the environment if omitted.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = Settings.from_env()

    app = FastAPI(
        title="Recipe Favorites API",
        description="Saved recipes per user",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.keepalive = None

    policy = OriginPolicy(
        allowed_origins=settings.cors_origins,
        allowed_pattern=MOBILE_DEV_ORIGIN_PATTERN,
    )
    app.state.origin_policy = policy
    app.add_middleware(OriginPolicyMiddleware, policy=policy)

    register_error_handlers(app)

    # Include routes
    from recipe_favorites.api.routes import favorites

    app.include_router(favorites.router)

    # Health check endpoint
    @app.get("/health", response_model=HealthResponse)
    def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(success=True)

    return app


# Default app instance
app = create_app()
