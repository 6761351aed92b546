"""Tests for shared constants values."""
from __future__ import annotations

from src.shared.constants import (
    DEFAULT_DUE_INTERVAL_DAYS,
    DEFAULT_PROJECT_SPAN_DAYS,
    INTAKE_SERVICE_NAME,
    INTERNAL_PORT,
    MIN_DUE_INTERVAL_DAYS,
    MISSING_DESCRIPTION,
    VERSION,
)


class TestPortConstants:
    def test_internal_port(self):
        assert INTERNAL_PORT == 8000


class TestServiceConstants:
    def test_service_name(self):
        assert INTAKE_SERVICE_NAME == "intake"

    def test_version_is_semver(self):
        parts = VERSION.split(".")
        assert len(parts) == 3
        assert all(p.isdigit() for p in parts)


class TestParserConstants:
    def test_span_and_intervals(self):
        assert DEFAULT_PROJECT_SPAN_DAYS == 30
        assert DEFAULT_DUE_INTERVAL_DAYS == 14
        assert MIN_DUE_INTERVAL_DAYS == 7
        assert MIN_DUE_INTERVAL_DAYS < DEFAULT_DUE_INTERVAL_DAYS

    def test_missing_description_non_empty(self):
        assert MISSING_DESCRIPTION.strip()
