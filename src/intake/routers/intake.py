"""Parse router for the Intake service."""
from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Callable

from fastapi import APIRouter, Request

from src.intake.services.parser import parse_project_description
from src.shared.config import IntakeConfig
from src.shared.errors import ValidationError
from src.shared.models.intake import IntakeParseRequest, ProjectIntakeRecord
from src.shared.utils import today_utc

logger = logging.getLogger("intake")

router = APIRouter(tags=["intake"])


def _clock(config: IntakeConfig) -> Callable[[], date]:
    """Return the parser clock, pinned when ``reference_date`` is configured."""
    pinned = config.reference_date
    if pinned is None:
        return today_utc
    return lambda: pinned


@router.post("/api/intake/parse")
async def parse_intake(request: Request, body: IntakeParseRequest) -> ProjectIntakeRecord:
    """Normalize a free-form project description into an intake record.

    The parser is CPU-bound and runs via asyncio.to_thread().
    """
    config: IntakeConfig = request.app.state.config
    if len(body.raw_text) > config.max_text_length:
        raise ValidationError(
            f"raw_text exceeds maximum length of {config.max_text_length} characters"
        )

    logger.debug("Parsing intake text: chars=%d existing_keys=%d",
                 len(body.raw_text), len(body.existing))
    return await asyncio.to_thread(
        parse_project_description,
        body.raw_text,
        body.existing,
        clock=_clock(config),
    )
