"""Shared constants used across all services."""
from __future__ import annotations

# Application version
VERSION: str = "1.0.0"

# Port the service listens on inside its container
INTERNAL_PORT: int = 8000

# Service names
INTAKE_SERVICE_NAME: str = "intake"

# Parser defaults
DEFAULT_PROJECT_SPAN_DAYS: int = 30
DEFAULT_DUE_INTERVAL_DAYS: int = 14
MIN_DUE_INTERVAL_DAYS: int = 7
MISSING_DESCRIPTION: str = "Project description not provided."
