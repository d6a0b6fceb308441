# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI application factory for the school portal."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from school_portal import __version__
from school_portal.api.middleware.auth import AuthMiddleware
from school_portal.api.middleware.rate_limit import limiter, rate_limit_exceeded_handler
from school_portal.api.middleware.request_context import RequestContextMiddleware
from school_portal.api.routes import router
from school_portal.core.config import get_settings
from school_portal.core.errors import AuthenticationError, PortalError, ServerError
from school_portal.infrastructure.database.connection import DatabaseError, close_database, init_database
from school_portal.utils.logging import setup_logging

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Service temporarily unavailable. Please retry."


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the database pool on startup and dispose of it on shutdown."""
    settings = get_settings()
    logger.info("Starting school portal API: environment=%s", settings.environment)

    await init_database(settings)
    logger.info("Database connection initialized")

    yield

    await close_database()
    logger.info("Shutting down school portal API")


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    """Map the portal error taxonomy onto HTTP statuses."""
    if isinstance(exc, ServerError):
        logger.exception("Server error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=exc.status_code, content={"detail": GENERIC_SERVER_ERROR})

    if exc.status_code >= 403:
        logger.info("Request rejected: status=%s, reason=%s", exc.status_code, exc.message)

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=ServerError.status_code, content={"detail": GENERIC_SERVER_ERROR})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="School Portal API",
        description="Multi-school directory, reviews and dashboards",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        redirect_slashes=False,
    )

    app.state.limiter = limiter

    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)

    # last added runs first
    app.add_middleware(AuthMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    app.include_router(router)

    return app
