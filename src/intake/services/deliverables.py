"""Deliverable extraction.

Deliverables come from two places:

  1. Explicit entries on the candidate object (``existing`` + JSON fragments),
     normalised field by field.
  2. Verb-triggered clauses in the prose ("Create a risk dashboard using ...",
     "draft a compliance playbook for ..."), cut into titles by
     ``ClauseLexer``.

Prose deliverables that duplicate a known one (same slug or same title,
case-insensitively) are skipped.  Deliverables without a due date get one
synthesised by spacing them evenly across the project dates.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any

from src.intake.services.clause_lexer import Clause, ClauseLexer
from src.intake.services.dates import (
    ProjectDates,
    find_reference_year,
    parse_date_value,
    scan_date_tokens,
)
from src.intake.services.inference import sanitize_enum, sanitize_number
from src.intake.services.lexicons import DEFAULT_LEXICONS, IntakeLexicons
from src.intake.services.normalizer import pick_best_string, slugify
from src.shared.constants import DEFAULT_DUE_INTERVAL_DAYS, MIN_DUE_INTERVAL_DAYS
from src.shared.models.intake import (
    Deliverable,
    DeliverableFormat,
    DeliverableMetadata,
    DeliverableStatus,
    DeliverableType,
)

logger = logging.getLogger("intake.deliverables")


@dataclass
class DraftDeliverable:
    """Mutable working copy of a deliverable while the pipeline runs.

    ``source_id`` keeps the id exactly as the caller spelled it so the alias
    map can still resolve references to it after slugging.
    """

    id: str
    title: str
    type: DeliverableType = DeliverableType.OTHER
    description: str = ""
    status: DeliverableStatus = DeliverableStatus.PLANNED
    due_date: str = ""
    quality_score: float = 0.0
    dependencies: list[str] = field(default_factory=list)
    format: DeliverableFormat = DeliverableFormat.OTHER
    assigned_to: str = ""
    expected_output: str = ""
    source_id: str = ""

    def to_model(self) -> Deliverable:
        return Deliverable(
            id=self.id,
            title=self.title,
            type=self.type,
            description=self.description,
            status=self.status,
            due_date=self.due_date,
            quality_score=self.quality_score,
            dependencies=list(self.dependencies),
            metadata=DeliverableMetadata(
                format=self.format,
                assigned_to=self.assigned_to,
                expected_output=self.expected_output or self.description,
            ),
        )


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def classify_type(
    title: str, context: str, lexicons: IntakeLexicons = DEFAULT_LEXICONS
) -> DeliverableType:
    """Keyword-classify a deliverable from its title and surrounding clause."""
    hit = lexicons.deliverable_type.first(f"{title} {context}")
    return DeliverableType(hit) if hit else DeliverableType.OTHER


def classify_format(
    title: str, context: str, lexicons: IntakeLexicons = DEFAULT_LEXICONS
) -> DeliverableFormat:
    hit = lexicons.deliverable_format.first(f"{title} {context}")
    return DeliverableFormat(hit) if hit else DeliverableFormat.OTHER


# ---------------------------------------------------------------------------
# Explicit deliverables
# ---------------------------------------------------------------------------


def _dependency_list(raw: Any) -> list[str]:
    if isinstance(raw, str):
        raw = raw.split(",")
    if not isinstance(raw, list):
        return []
    return [dep for dep in (pick_best_string(item) for item in raw) if dep]


def _from_mapping(
    entry: Mapping[str, Any],
    index: int,
    reference_year: int,
    lexicons: IntakeLexicons,
) -> DraftDeliverable:
    metadata = entry.get("metadata")
    if not isinstance(metadata, Mapping):
        metadata = {}

    title = pick_best_string(entry.get("title"), entry.get("name"), f"Deliverable {index + 1}")
    description = pick_best_string(entry.get("description"), entry.get("brief"), title)
    source_id = pick_best_string(entry.get("id"))

    raw_due = entry.get("due_date") or entry.get("dueDate")
    due_date = parse_date_value(raw_due, reference_year)
    if raw_due and not due_date:
        logger.warning("Ignoring unparseable due_date %r on deliverable %r", raw_due, title)

    quality = sanitize_number(entry.get("quality_score", entry.get("qualityScore")))

    return DraftDeliverable(
        id=slugify(source_id or title, f"deliverable-{index + 1}"),
        title=title,
        type=(
            sanitize_enum(entry.get("type"), DeliverableType, "deliverable.type")
            or classify_type(title, description, lexicons)
        ),
        description=description,
        status=(
            sanitize_enum(entry.get("status"), DeliverableStatus, "deliverable.status")
            or DeliverableStatus.PLANNED
        ),
        due_date=due_date,
        quality_score=quality if quality is not None and quality > 0 else 0.0,
        dependencies=_dependency_list(entry.get("dependencies")),
        format=(
            sanitize_enum(metadata.get("format"), DeliverableFormat, "deliverable.metadata.format")
            or classify_format(title, description, lexicons)
        ),
        assigned_to=pick_best_string(
            metadata.get("assigned_to"), metadata.get("assignedTo"),
            entry.get("assigned_to"), entry.get("assignedTo"),
        ),
        expected_output=pick_best_string(
            metadata.get("expected_output"), metadata.get("expectedOutput"),
            description, title,
        ),
        source_id=source_id,
    )


def seed_deliverables(
    candidate: Mapping[str, Any],
    reference_year: int,
    lexicons: IntakeLexicons = DEFAULT_LEXICONS,
) -> list[DraftDeliverable]:
    """Normalise the candidate's explicit ``deliverables`` list."""
    raw = candidate.get("deliverables")
    if raw in (None, ""):
        return []
    if not isinstance(raw, list):
        logger.warning("Ignoring non-list deliverables value of type %s", type(raw).__name__)
        return []

    seeded: list[DraftDeliverable] = []
    for index, entry in enumerate(raw):
        if isinstance(entry, str) and entry.strip():
            entry = {"title": entry}
        if not isinstance(entry, Mapping):
            logger.warning("Skipping deliverable #%d of type %s", index + 1, type(entry).__name__)
            continue
        seeded.append(_from_mapping(entry, index, reference_year, lexicons))
    return seeded


# ---------------------------------------------------------------------------
# Prose deliverables
# ---------------------------------------------------------------------------


def _from_clause(
    clause: Clause,
    title: str,
    reference_year: int,
    lexicons: IntakeLexicons,
) -> DraftDeliverable:
    description = clause.text[:1].upper() + clause.text[1:]
    return DraftDeliverable(
        id=slugify(title),
        title=title,
        type=classify_type(title, clause.text, lexicons),
        description=description,
        due_date=parse_date_value(clause.text, reference_year),
        format=classify_format(title, clause.text, lexicons),
        expected_output=description,
    )


def _is_known(deliverables: list[DraftDeliverable], slug: str, title: str) -> bool:
    lowered = title.lower()
    return any(d.id == slug or d.title.lower() == lowered for d in deliverables)


def extract_deliverables(
    sentences: list[str],
    candidate: Mapping[str, Any],
    project_dates: ProjectDates,
    *,
    text: str = "",
    today: date,
    lexicons: IntakeLexicons = DEFAULT_LEXICONS,
) -> list[DraftDeliverable]:
    """Collect explicit and prose deliverables, then fill in missing due dates."""
    project_year = project_dates.reference_year or today.year
    deliverables = seed_deliverables(candidate, project_year, lexicons)

    clause_year = find_reference_year(scan_date_tokens(text), project_year)
    lexer = ClauseLexer(lexicons)
    for sentence in sentences:
        for clause in lexer.clauses(sentence):
            title = lexer.title(clause)
            if not title:
                continue
            if _is_known(deliverables, slugify(title), title):
                continue
            deliverables.append(_from_clause(clause, title, clause_year, lexicons))

    assign_due_dates(deliverables, project_dates, today)
    return deliverables


def assign_due_dates(
    deliverables: list[DraftDeliverable],
    project_dates: ProjectDates,
    today: date,
) -> None:
    """Space missing due dates evenly across the project, in place.

    The interval is ``span // (count + 1)`` days but never under a week; with
    no project dates it is a fixed two weeks from *today*.
    """
    if not deliverables:
        return

    span = project_dates.span()
    interval = DEFAULT_DUE_INTERVAL_DAYS
    base = today
    if span:
        start, end = span
        base = start
        days = max((end - start).days, 1)
        interval = max(days // (len(deliverables) + 1), MIN_DUE_INTERVAL_DAYS)
    elif project_dates.start_date:
        base = date.fromisoformat(project_dates.start_date)

    for index, deliverable in enumerate(deliverables):
        if deliverable.due_date:
            continue
        try:
            deliverable.due_date = (base + timedelta(days=interval * (index + 1))).isoformat()
        except OverflowError:
            logger.warning("Leaving due_date empty for %r: out of date range", deliverable.title)
