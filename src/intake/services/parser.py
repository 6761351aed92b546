"""Narrative project-intake parser.

Turns free-form project prose (optionally with pasted JSON fragments) plus a
partially filled ``existing`` record into a fully normalised
``ProjectIntakeRecord``.  Parsing is deterministic and regex/keyword based;
there is no NLP and no I/O.  The only ambient input is the clock, used to
pick a year for dates written without one and to anchor synthesised due
dates.

Pipeline::

    fragments -> normalise -> candidate (fragments + existing)
              -> dates, status, budget, owners, priority, project type
              -> deliverables -> ids -> dependencies -> tags

The parser never raises for malformed input: wrong types are coerced at the
boundary, bad fragments are dropped and unknown enum values fall back to the
heuristics.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import date, datetime
from typing import Any

from src.intake.services.dates import extract_project_dates
from src.intake.services.deliverables import extract_deliverables
from src.intake.services.dependencies import link_dependencies
from src.intake.services.fragments import extract_fragments, strip_fragments
from src.intake.services.identifiers import resolve_ids
from src.intake.services.inference import (
    infer_budget,
    infer_owners,
    infer_priority,
    infer_project_type,
    infer_status,
)
from src.intake.services.lexicons import DEFAULT_LEXICONS, IntakeLexicons
from src.intake.services.merge import build_candidate
from src.intake.services.normalizer import normalize, pick_best_string
from src.intake.services.tags import derive_tags
from src.shared.constants import MISSING_DESCRIPTION
from src.shared.models.intake import ProjectIntakeRecord, ProjectType
from src.shared.utils import today_utc

logger = logging.getLogger("intake.parser")

Clock = Callable[[], "date | datetime"]


# ---------------------------------------------------------------------------
# Boundary coercion
# ---------------------------------------------------------------------------


def _coerce_text(raw_text: Any) -> str:
    if raw_text is None or isinstance(raw_text, str):
        return raw_text or ""
    if isinstance(raw_text, (bytes, bytearray)):
        return bytes(raw_text).decode("utf-8", errors="replace")
    logger.warning("Ignoring raw_text of type %s", type(raw_text).__name__)
    return ""


def _coerce_existing(existing: Any) -> dict[str, Any]:
    if existing is None:
        return {}
    if isinstance(existing, Mapping):
        return dict(existing)
    logger.warning("Ignoring existing record of type %s", type(existing).__name__)
    return {}


def _today(clock: Clock | None) -> date:
    value = (clock or today_utc)()
    return value.date() if isinstance(value, datetime) else value


def _default_name(project_type: ProjectType) -> str:
    if project_type is ProjectType.OTHER:
        return "Project Intake"
    return f"{project_type.value.capitalize()} Project"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_project_description(
    raw_text: Any,
    existing: Any = None,
    *,
    clock: Clock | None = None,
    lexicons: IntakeLexicons = DEFAULT_LEXICONS,
) -> ProjectIntakeRecord:
    """Parse a narrative project description into a ``ProjectIntakeRecord``.

    Args:
        raw_text: The project prose.  ``bytes`` are decoded as UTF-8; any
            other non-string value is treated as empty.
        existing: Partially structured record whose fields take precedence
            over fragments and prose.  Non-mappings are treated as empty.
        clock: Zero-argument callable returning "today" as a ``date`` or
            ``datetime``.  Defaults to the current UTC date.
        lexicons: Keyword lexicons and regexes to classify with.

    Returns:
        A new, schema-valid ``ProjectIntakeRecord``.
    """
    text = _coerce_text(raw_text)
    existing_record = _coerce_existing(existing)
    today = _today(clock)

    fragments = extract_fragments(text)
    prose = strip_fragments(text) if fragments else text
    normalized = normalize(prose, lexicons)
    clean = normalized.clean
    candidate = build_candidate(existing_record, fragments)

    project_dates = extract_project_dates(clean, candidate, today)
    status = infer_status(candidate.get("status"), clean, lexicons)
    budget = infer_budget(candidate, clean, lexicons)
    client_owner, internal_owner = infer_owners(candidate, clean, lexicons)
    priority = infer_priority(candidate.get("priority"), clean, lexicons)
    project_type = infer_project_type(
        candidate.get("project_type", candidate.get("projectType")), clean, lexicons
    )

    deliverables = extract_deliverables(
        normalized.sentences,
        candidate,
        project_dates,
        text=clean,
        today=today,
        lexicons=lexicons,
    )
    deliverables, alias_map = resolve_ids(deliverables)
    link_dependencies(deliverables, alias_map, normalized.sentences, lexicons)
    tags = derive_tags(clean, deliverables, candidate, lexicons)

    name = pick_best_string(
        candidate.get("name"), candidate.get("projectName"), candidate.get("project_name"),
    ) or _default_name(project_type)
    description = pick_best_string(candidate.get("description"), clean) or MISSING_DESCRIPTION

    logger.info(
        "Parsed intake record %r: %d deliverables, %d fragments",
        name, len(deliverables), len(fragments),
        extra={"deliverable_count": len(deliverables), "fragment_count": len(fragments)},
    )

    return ProjectIntakeRecord(
        name=name,
        description=description,
        start_date=project_dates.start_date,
        end_date=project_dates.end_date,
        status=status,
        budget_amount=budget.budget_amount,
        currency=budget.currency,
        budget_type=budget.budget_type,
        client_owner=client_owner,
        internal_owner=internal_owner,
        priority=priority,
        project_type=project_type,
        tags=tags,
        deliverables=[d.to_model() for d in deliverables],
    )
