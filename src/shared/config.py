"""Shared configuration management using pydantic-settings."""
from __future__ import annotations

from datetime import date

from pydantic import Field
from pydantic_settings import BaseSettings


class SharedConfig(BaseSettings):
    """Base configuration shared across all services."""
    log_level: str = Field(default="info", validation_alias="LOG_LEVEL")

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


class IntakeConfig(SharedConfig):
    """Configuration for the Intake service."""
    max_text_length: int = Field(
        default=1_048_576, ge=1, validation_alias="INTAKE_MAX_TEXT_LENGTH"
    )
    # ISO date pinning the parser clock; None means "today" in UTC.
    reference_date: date | None = Field(
        default=None, validation_alias="INTAKE_REFERENCE_DATE"
    )
