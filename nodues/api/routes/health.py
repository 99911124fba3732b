# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints.

This module provides health and readiness endpoints for the API.
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from nodues import __version__
from nodues.api.dependencies import get_database
from nodues.core.config import Settings, get_settings
from nodues.infrastructure.background import get_broker_manager, get_scheduler
from nodues.infrastructure.database import Database
from nodues.utils.datetime import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()


class ComponentHealth(BaseModel):
    """Individual component health status."""
    status: str = Field(description="Component status")
    latency_ms: float | None = Field(None, description="Response latency in ms")
    message: str | None = Field(None, description="Additional status message")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(description="Current server timestamp")
    version: str = Field(description="Service version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    database: ComponentHealth
    broker: dict[str, Any] = Field(default_factory=dict)
    scheduler: dict[str, Any] = Field(default_factory=dict)


class ReadinessResponse(BaseModel):
    """Readiness check response model."""
    ready: bool = Field(description="Whether the service is ready")
    checks: dict[str, Any] = Field(description="Individual check results")


async def check_database(database: Database | None) -> ComponentHealth:
    """Check the fee records database connection."""
    if database is None:
        return ComponentHealth(status="unhealthy", message="Database not initialized")

    start = time.time()
    if not await database.check_connection():
        return ComponentHealth(status="unhealthy", message="Connection failed")

    latency = (time.time() - start) * 1000
    return ComponentHealth(status="healthy", latency_ms=round(latency, 2))


@router.get("/health", response_model=HealthResponse)
async def health_check(
    database: Database | None = Depends(get_database),
    settings: Settings = Depends(get_settings),
) -> HealthResponse:
    """Check if the service is healthy with component details.

    Returns:
        HealthResponse with detailed status.
    """
    db_health = await check_database(database)
    broker_stats = await asyncio.to_thread(get_broker_manager().get_queue_stats)
    scheduler_stats = get_scheduler().get_stats()
    scheduler_stats.pop("tasks", None)

    if db_health.status == "healthy" and broker_stats.get("status") == "healthy":
        overall_status = "healthy"
    elif db_health.status == "unhealthy":
        overall_status = "unhealthy"
    else:
        overall_status = "degraded"

    return HealthResponse(
        status=overall_status,
        timestamp=utc_now(),
        version=__version__,
        environment=settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
        database=db_health,
        broker=broker_stats,
        scheduler=scheduler_stats,
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    database: Database | None = Depends(get_database),
) -> ReadinessResponse:
    """Check if the service is ready to accept change events."""
    db_health = await check_database(database)
    return ReadinessResponse(
        ready=db_health.status == "healthy",
        checks={"database": {"status": db_health.status, "latency_ms": db_health.latency_ms}},
    )
