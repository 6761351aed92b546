"""Integration tests for the Intake service routers.

Tests cover the health and parse endpoints using FastAPI TestClient against
a standalone app wired with an explicit ``IntakeConfig``.
"""
from __future__ import annotations

import time
from contextlib import asynccontextmanager
from datetime import date

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.intake.routers.intake import _clock
from src.shared.config import IntakeConfig
from src.shared.constants import INTAKE_SERVICE_NAME, VERSION
from src.shared.errors import register_exception_handlers
from src.shared.logging import TraceIDMiddleware
from src.shared.utils import today_utc


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def config(monkeypatch: pytest.MonkeyPatch) -> IntakeConfig:
    monkeypatch.delenv("INTAKE_MAX_TEXT_LENGTH", raising=False)
    monkeypatch.delenv("INTAKE_REFERENCE_DATE", raising=False)
    return IntakeConfig(max_text_length=2_000, reference_date=date(2025, 1, 15))


@pytest.fixture
def client(config: IntakeConfig):
    """Create a test client for a standalone Intake app.

    The lifespan pins ``app.state.config`` so the parse endpoint sees the
    fixture's length limit and reference date.
    """

    @asynccontextmanager
    async def lifespan(app):
        app.state.start_time = time.time()
        app.state.config = config
        yield

    test_app = FastAPI(
        title="Intake Service",
        version=VERSION,
        lifespan=lifespan,
    )
    test_app.add_middleware(TraceIDMiddleware)
    register_exception_handlers(test_app)

    from src.intake.routers.health import router as health_router
    from src.intake.routers.intake import router as intake_router

    test_app.include_router(health_router)
    test_app.include_router(intake_router)

    with TestClient(test_app) as c:
        yield c


# ---------------------------------------------------------------------------
# Health endpoint tests
# ---------------------------------------------------------------------------


class TestHealthEndpoint:
    """Tests for GET /api/health."""

    def test_health_returns_200(self, client: TestClient):
        response = client.get("/api/health")
        assert response.status_code == 200

    def test_health_payload(self, client: TestClient):
        data = client.get("/api/health").json()
        assert data["status"] == "healthy"
        assert data["service_name"] == INTAKE_SERVICE_NAME
        assert data["version"] == VERSION
        assert data["uptime_seconds"] >= 0

    def test_trace_id_header(self, client: TestClient):
        response = client.get("/api/health")
        assert len(response.headers["X-Trace-ID"]) == 36


# ---------------------------------------------------------------------------
# Parse endpoint tests
# ---------------------------------------------------------------------------


class TestParseEndpoint:
    """Tests for POST /api/intake/parse."""

    def test_parse_narrative(self, client: TestClient, regulatory_description: str):
        response = client.post("/api/intake/parse", json={"raw_text": regulatory_description})
        assert response.status_code == 200
        data = response.json()
        assert data["start_date"] == "2025-03-05"
        assert data["currency"] == "EUR"
        assert data["budget_currency"] == "EUR"
        assert data["budget_type"] == "Retainer"
        assert data["project_type"] == "strategy"
        assert any(d["type"] == "Brief" for d in data["deliverables"])

    def test_existing_record_forwarded(self, client: TestClient):
        response = client.post(
            "/api/intake/parse",
            json={"raw_text": "Budget: $25k.", "existing": {"name": "Caller", "currency": "GBP"}},
        )
        data = response.json()
        assert data["name"] == "Caller"
        assert data["currency"] == "GBP"
        assert data["budget_amount"] == 25000

    def test_empty_body_defaults(self, client: TestClient):
        response = client.post("/api/intake/parse", json={})
        assert response.status_code == 200
        data = response.json()
        assert data["deliverables"] == []
        assert data["status"] == "Planning"

    def test_text_too_long_returns_422(self, client: TestClient):
        response = client.post("/api/intake/parse", json={"raw_text": "x" * 2_001})
        assert response.status_code == 422
        assert "2000" in response.json()["detail"]

    def test_invalid_body_returns_422(self, client: TestClient):
        response = client.post("/api/intake/parse", json={"existing": ["not", "an", "object"]})
        assert response.status_code == 422

    def test_reference_date_used_for_due_dates(self, client: TestClient):
        data = client.post(
            "/api/intake/parse", json={"raw_text": "Build a dashboard."}
        ).json()
        assert data["deliverables"][0]["due_date"] == "2025-01-29"


class TestClock:
    def test_pinned(self):
        clock = _clock(IntakeConfig(reference_date=date(2024, 2, 29)))
        assert clock() == date(2024, 2, 29)

    def test_unpinned_uses_utc_today(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("INTAKE_REFERENCE_DATE", raising=False)
        assert _clock(IntakeConfig()) is today_utc


class TestApplication:
    """Smoke test of the real application object."""

    def test_main_app_serves_health(self):
        from src.intake.main import app

        with TestClient(app) as c:
            response = c.get("/api/health")
        assert response.status_code == 200
        assert response.json()["service_name"] == INTAKE_SERVICE_NAME
