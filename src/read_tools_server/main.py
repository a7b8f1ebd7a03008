"""
Read Tools Server Application Entry Point

This module defines the FastAPI application instance, registers all routers,
configures exception handling, and provides a test-friendly application
factory.

Design Goals
------------
- Deterministic startup
- Centralized router registration
- Structured error responses for every domain failure
- Global exception safety net
- Test-friendly via create_app()
"""

from __future__ import annotations

import logging
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from .config import settings, DEVELOPMENT_NONCE_SECRET
from .core.errors import (
    ReadToolsError,
    read_tools_error_handler,
    unhandled_exception_handler,
    validation_error_handler,
)
from .db import create_all_tables, dispose_engine

from .api import (
    content_routes,
    settings_routes,
    readtime_routes,
    health_routes,
)


logger = logging.getLogger("readtools.app")


def configure_logging() -> None:
    """
    Apply the configured level to the `readtools` logger tree.
    """
    level = logging.DEBUG if settings.debug_logging else settings.log_level.upper()
    logging.getLogger("readtools").setLevel(level)


# ---------------------------------------------------------------------
# Application Factory (Test-Friendly)
# ---------------------------------------------------------------------

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    This factory pattern allows:
    - Clean test instantiation
    - Isolated app instances for integration tests
    - Controlled dependency overrides in pytest

    Returns
    -------
    FastAPI
        Fully configured FastAPI application.
    """
    configure_logging()

    app = FastAPI(
        title="read-tools-server",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # --------------------------------------------------------------
    # Exception Handling
    # --------------------------------------------------------------

    app.add_exception_handler(ReadToolsError, read_tools_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --------------------------------------------------------------
    # Router Registration
    # --------------------------------------------------------------

    app.include_router(health_routes.router)
    app.include_router(content_routes.router)
    app.include_router(settings_routes.router)
    app.include_router(readtime_routes.router)

    # --------------------------------------------------------------
    # Startup Validation Hook
    # --------------------------------------------------------------

    @app.on_event("startup")
    async def _startup() -> None:
        """
        Fail-fast configuration checks and schema creation.
        """
        logger.info("Starting read-tools-server")

        if settings.nonce_secret.get_secret_value() == DEVELOPMENT_NONCE_SECRET:
            logger.warning("NONCE_SECRET is the development default; set it in production")

        if settings.create_tables:
            await create_all_tables()

        logger.info(
            "Configuration validated (store=%s, rate limit=%d/%ds, cache ttl=%ds)",
            settings.store_backend,
            settings.rate_limit_max_requests,
            settings.rate_limit_window_seconds,
            settings.cache_ttl_seconds,
        )

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        logger.info("Shutting down read-tools-server")
        await dispose_engine()

    return app


# ---------------------------------------------------------------------
# Default Application Instance (for Uvicorn/Gunicorn)
# ---------------------------------------------------------------------

app = create_app()
