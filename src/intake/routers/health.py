"""Health check router for the Intake service."""
from __future__ import annotations

import time

from fastapi import APIRouter, Request

from src.shared.constants import INTAKE_SERVICE_NAME, VERSION
from src.shared.models.common import HealthStatus

router = APIRouter(tags=["health"])


@router.get("/api/health")
async def health(request: Request) -> HealthStatus:
    """Health check endpoint returning service status."""
    return HealthStatus(
        status="healthy",
        service_name=INTAKE_SERVICE_NAME,
        version=VERSION,
        uptime_seconds=time.time() - request.app.state.start_time,
    )
