"""Dependency linking between deliverables.

Two sources feed ``Deliverable.dependencies``:

  * explicit references already on a deliverable, resolved through the alias
    map built by ``resolve_ids``;
  * prose such as "The dashboard depends on the successful deployment of the
    API.", where each side of the dependency phrase is fuzzily matched to a
    deliverable.

The fuzzy match is a scored heuristic: a deliverable whose slug appears whole
inside the fragment's slug wins outright (longest slug first), otherwise every
title token of three or more characters found at a word start in the fragment
adds ``min(len(token), 10)`` points.
"""
from __future__ import annotations

import logging
import re

from src.intake.services.deliverables import DraftDeliverable
from src.intake.services.lexicons import DEFAULT_LEXICONS, IntakeLexicons
from src.intake.services.normalizer import slugify

logger = logging.getLogger("intake.dependencies")

_TOKEN_SPLIT_RE = re.compile(r"[^a-z0-9]+")
_MIN_TOKEN_LENGTH = 3
_MAX_TOKEN_SCORE = 10
_CONTAINMENT_BONUS = 1_000


def _resolve_reference(reference: str, alias_map: dict[str, str]) -> str | None:
    for key in (reference, reference.lower(), slugify(reference, "")):
        if key and key in alias_map:
            return alias_map[key]
    return None


def _title_tokens(title: str) -> list[str]:
    return [t for t in _TOKEN_SPLIT_RE.split(title.lower()) if len(t) >= _MIN_TOKEN_LENGTH]


def score_fragment(fragment: str, deliverable: DraftDeliverable) -> int:
    """Score how strongly *fragment* refers to *deliverable* (0 = not at all)."""
    fragment_slug = f"-{slugify(fragment, '')}-"
    contained = [
        slug for slug in {deliverable.id, slugify(deliverable.title, "")}
        if slug and f"-{slug}-" in fragment_slug
    ]
    if contained:
        return _CONTAINMENT_BONUS + max(len(slug) for slug in contained)

    lowered = fragment.lower()
    score = 0
    for token in _title_tokens(deliverable.title):
        if re.search(r"\b" + re.escape(token), lowered):
            score += min(len(token), _MAX_TOKEN_SCORE)
    return score


def match_fragment(
    fragment: str, deliverables: list[DraftDeliverable]
) -> DraftDeliverable | None:
    """Return the best-scoring deliverable for *fragment*; ties go to the earlier one."""
    best: DraftDeliverable | None = None
    best_score = 0
    for deliverable in deliverables:
        score = score_fragment(fragment, deliverable)
        if score > best_score:
            best, best_score = deliverable, score
    return best


def _link_explicit(deliverables: list[DraftDeliverable], alias_map: dict[str, str]) -> None:
    for deliverable in deliverables:
        resolved: list[str] = []
        for reference in deliverable.dependencies:
            target = _resolve_reference(reference, alias_map)
            if target is None:
                logger.debug("Dropping unresolved dependency %r on %s", reference, deliverable.id)
                continue
            if target == deliverable.id or target in resolved:
                continue
            resolved.append(target)
        deliverable.dependencies = resolved


def _link_implicit(
    deliverables: list[DraftDeliverable],
    sentences: list[str],
    lexicons: IntakeLexicons,
) -> None:
    for sentence in sentences:
        phrase = lexicons.dependency_phrase.search(sentence)
        if not phrase:
            continue
        source = match_fragment(sentence[: phrase.start()], deliverables)
        target = match_fragment(sentence[phrase.end():], deliverables)
        if source is None or target is None or source is target:
            continue
        if target.id not in source.dependencies:
            logger.debug("Linked %s -> %s from %r", source.id, target.id, sentence)
            source.dependencies.append(target.id)


def link_dependencies(
    deliverables: list[DraftDeliverable],
    alias_map: dict[str, str],
    sentences: list[str],
    lexicons: IntakeLexicons = DEFAULT_LEXICONS,
) -> list[DraftDeliverable]:
    """Resolve explicit and prose dependencies in place and return the list."""
    _link_explicit(deliverables, alias_map)
    if len(deliverables) > 1:
        _link_implicit(deliverables, sentences, lexicons)
    return deliverables
