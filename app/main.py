"""
HR Records Backend - Main Application Entry Point
"""
import logging
from typing import Optional
from urllib.parse import urlparse, urlunparse

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.router import api_router
from app.core.config import Settings, get_settings
from app.core.constants import DEFAULT_VERSION
from app.core.errors import (
    RecordServiceError,
    record_service_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler,
)
from app.core.logging import setup_logging
from app.db.session import Database

logger = logging.getLogger(__name__)


def _mask_database_url(url: str) -> str:
    """Mask password in DATABASE_URL for safe logging; show full path for sqlite."""
    try:
        parsed = urlparse(url)
        if parsed.scheme.startswith("sqlite"):
            return url  # Safe to log path
        if parsed.password:
            netloc = f"{parsed.username}:****@{parsed.hostname or ''}"
            if parsed.port:
                netloc += f":{parsed.port}"
            return urlunparse(parsed._replace(netloc=netloc))
    except ValueError:
        return "***"
    return url


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        settings: Explicit settings; read from the environment when omitted
        database: Store client to use; built from settings when omitted

    Returns:
        Configured FastAPI app with the store client on app.state.database
    """
    if settings is None:
        settings = get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="HR Records Backend",
        description="Employee register and daily attendance records",
        version=settings.VERSION or DEFAULT_VERSION,
    )
    app.state.settings = settings
    app.state.database = database or Database(settings)

    # Configure CORS - must be before other middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(RecordServiceError, record_service_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.on_event("startup")
    def startup_log_config() -> None:
        """Log DATABASE_URL at startup so it can be verified against Alembic."""
        logger.info("DATABASE_URL (app): %s", _mask_database_url(settings.DATABASE_URL))

    @app.on_event("startup")
    def create_sqlite_tables() -> None:
        """Create tables automatically on startup for SQLite; other stores use Alembic."""
        if settings.is_sqlite and settings.AUTO_CREATE_TABLES:
            app.state.database.create_all()

    return app


app = create_app()
