# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoint."""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel, Field

from school_portal import __version__
from school_portal.api.dependencies import AppSettings
from school_portal.infrastructure.database.connection import check_database_connection

logger = logging.getLogger(__name__)

router = APIRouter()

_server_start_time = time.time()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str = Field(description="healthy, or degraded when the database is unreachable")
    timestamp: datetime
    version: str
    environment: str
    uptime_seconds: int
    database: bool = Field(description="Whether the database answered SELECT 1")


@router.get("/health", response_model=HealthResponse)
async def health(settings: AppSettings) -> HealthResponse:
    """Liveness plus a database round trip."""
    database_ok = await check_database_connection()
    if not database_ok:
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status="healthy" if database_ok else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        environment=settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
        database=database_ok,
    )
