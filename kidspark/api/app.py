# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the KidSpark API.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from kidspark import __version__
from kidspark.api.middleware import RequestContextMiddleware
from kidspark.api.routes import health
from kidspark.api.v1 import router as api_router
from kidspark.core.config import Settings, get_settings
from kidspark.domains.auth import AdminPassword, SessionManager
from kidspark.infrastructure.database.connection import close_database, get_session, init_database
from kidspark.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events for the application.
    Initializes and cleans up:
    - Logging
    - Database connections (and the schema when auto_create is set)
    - Expired sessions left over from previous runs

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    setup_logging(settings)
    logger.info(
        "Starting KidSpark API",
        extra={"environment": settings.environment, "debug": settings.debug},
    )

    # =========================================================================
    # Startup
    # =========================================================================

    await init_database(settings)
    logger.info("Database connection initialized")

    try:
        async with get_session() as session:
            await SessionManager(session, settings.session).purge_expired()
    except Exception as e:
        logger.warning("Failed to purge expired sessions: %s", str(e))

    if not app.state.admin_password.is_configured:
        logger.warning("Administrator login is disabled")

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================

    await close_database()
    logger.info("Shutting down KidSpark API")


# =========================================================================
# Exception handlers
# =========================================================================


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as ``{"error": message}``."""
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


def _validation_error_body(errors: list[dict[str, Any]]) -> dict[str, Any]:
    # An absent body fails the same way as an unparseable one.
    for error in errors:
        if error["type"] == "json_invalid" or (
            error["type"] == "missing" and tuple(error["loc"]) == ("body",)
        ):
            return {"error": "Invalid JSON"}

    missing = [
        str(error["loc"][-1])
        for error in errors
        if error["type"] == "missing" and len(error["loc"]) > 1
    ]
    if missing:
        return {"error": f"{' and '.join(missing)} required", "missing": missing}

    first = errors[0]
    field = ".".join(str(part) for part in first["loc"] if part not in ("body", "path", "query"))
    return {"error": f"{field}: {first['msg']}" if field else first["msg"]}


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures as 400 errors."""
    return JSONResponse(status_code=400, content=_validation_error_body(list(exc.errors())))


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a new FastAPI instance with all
    middleware, routes, and configurations applied.

    Args:
        settings: Application settings. Defaults to get_settings().

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="KidSpark API",
        description="Children's learning platform: access control and progress sync",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # =========================================================================
    # State
    # =========================================================================
    app.state.settings = settings
    app.state.admin_password = AdminPassword.from_settings(settings.admin)

    # =========================================================================
    # Exception handlers
    # =========================================================================
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # =========================================================================
    # Middleware (order matters - last added is first executed)
    # =========================================================================
    app.add_middleware(RequestContextMiddleware)

    # CORS middleware (should be last to execute first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(api_router)

    return app
