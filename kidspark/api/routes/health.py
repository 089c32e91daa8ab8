# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints.

This module provides the liveness and database health endpoint.
"""

import logging
import time
from datetime import datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from kidspark import __version__
from kidspark.infrastructure.database.connection import check_database_connection
from kidspark.utils.datetime import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()


class ComponentHealth(BaseModel):
    """Individual component health status."""
    status: str = Field(description="Component status")
    latency_ms: float | None = Field(None, description="Response latency in ms")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(description="Current server timestamp")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    database: ComponentHealth


async def check_database() -> ComponentHealth:
    """Check the database connection."""
    start = time.time()
    healthy = await check_database_connection()
    latency = (time.time() - start) * 1000
    if not healthy:
        logger.error("Database health check failed")
        return ComponentHealth(status="unhealthy")
    return ComponentHealth(status="healthy", latency_ms=round(latency, 2))


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health(request: Request) -> HealthResponse:
    """Report service status and database reachability."""
    database = await check_database()
    return HealthResponse(
        status="healthy" if database.status == "healthy" else "degraded",
        timestamp=utc_now(),
        version=__version__,
        environment=request.app.state.settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
        database=database,
    )
