"""Shared test fixtures for the intake test suite."""
from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Generator

import pytest

from src.intake.services.lexicons import DEFAULT_LEXICONS, IntakeLexicons

# Reference "today" used across parser tests so year inference is deterministic.
FIXED_TODAY = date(2025, 1, 15)


# ---------------------------------------------------------------------------
# Clock / lexicon fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def today() -> date:
    """The pinned reference date."""
    return FIXED_TODAY


@pytest.fixture
def fixed_clock() -> Callable[[], date]:
    """A parser clock that always returns 2025-01-15."""
    return lambda: FIXED_TODAY


@pytest.fixture
def lexicons() -> IntakeLexicons:
    return DEFAULT_LEXICONS


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@pytest.fixture
def intake_log(caplog: pytest.LogCaptureFixture) -> Generator[pytest.LogCaptureFixture, None, None]:
    """Capture records from the ``intake`` logger tree.

    ``setup_logging`` turns off propagation for the service logger, so the
    caplog handler is attached to it directly.
    """
    intake_logger = logging.getLogger("intake")
    intake_logger.addHandler(caplog.handler)
    previous_level = intake_logger.level
    intake_logger.setLevel(logging.DEBUG)
    try:
        yield caplog
    finally:
        intake_logger.removeHandler(caplog.handler)
        intake_logger.setLevel(previous_level)


# ---------------------------------------------------------------------------
# Narrative samples
# ---------------------------------------------------------------------------


@pytest.fixture
def finews_description() -> str:
    """Narrative with dates, a CHF budget, three deliverables and a dependency."""
    return " ".join([
        "The client Finews AG is launching a digital transformation strategy project "
        "with a focus on AI content generation and analytics automation.",
        "Project duration: November 1 – December 30, 2025.",
        "Budget: CHF 12,000, milestone-based.",
        "Objectives: Create a Content Strategy Dashboard using MongoDB and Next.js, "
        "Generate an AI-Powered Report Generator API integrated with Contentful, "
        "Deliver a Performance Summary Presentation (PPT) for stakeholders.",
        "The dashboard depends on the successful deployment of the API.",
    ])


@pytest.fixture
def regulatory_description() -> str:
    """Narrative relying on contextual hints for dates, budget and type."""
    return " ".join([
        "We are kicking off a regulatory strategy engagement for our wealth management unit.",
        "Kickoff on March 5 with completion by April 20.",
        "Budget EUR 3,500 on a retainer basis.",
        "Key action: prepare an onboarding brief for the new compliance team.",
    ])
