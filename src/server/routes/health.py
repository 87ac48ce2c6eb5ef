"""Health and scheduler status endpoints."""

from __future__ import annotations

from fastapi import FastAPI

from ..dependencies import config, get_scheduler
from ..schemas import HealthResponse, SchedulerStatusResponse


def register_health_routes(app: FastAPI) -> None:
    """Register health check and scheduler status endpoints."""

    @app.get("/api/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/api/scheduler/status", response_model=SchedulerStatusResponse)
    async def scheduler_status() -> SchedulerStatusResponse:
        """Current state of the past due sweep."""
        status = get_scheduler().get_status()
        return SchedulerStatusResponse(enabled=config.sweep.enabled, **status)
