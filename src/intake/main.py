"""Intake service FastAPI application."""
from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from src.shared.config import IntakeConfig
from src.shared.constants import INTAKE_SERVICE_NAME, INTERNAL_PORT, VERSION
from src.shared.errors import register_exception_handlers
from src.shared.logging import TraceIDMiddleware, setup_logging

config = IntakeConfig()
logger = setup_logging(INTAKE_SERVICE_NAME, config.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - record start time and config."""
    app.state.start_time = time.time()
    app.state.config = config

    logger.info(
        "Service started: name=%s version=%s port=%d reference_date=%s",
        INTAKE_SERVICE_NAME, VERSION, INTERNAL_PORT, config.reference_date,
    )
    yield

    logger.info("Service stopped: name=%s", INTAKE_SERVICE_NAME)


app = FastAPI(
    title="Intake Service",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(TraceIDMiddleware)
register_exception_handlers(app)

# Register all routers
from src.intake.routers.health import router as health_router
from src.intake.routers.intake import router as intake_router

app.include_router(health_router)
app.include_router(intake_router)
