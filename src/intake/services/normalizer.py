"""Text normalisation helpers for the intake parser.

``normalize`` produces the canonical single-line text used by the field
classifiers together with a heuristic sentence view used by the deliverable
and dependency stages.  Sentence splitting breaks on every ``.``/``!``/``?``
followed by whitespace, so abbreviations such as "U.S." also split.
"""
from __future__ import annotations

import json
import re
import unicodedata
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from src.intake.services.lexicons import DEFAULT_LEXICONS, IntakeLexicons

_WHITESPACE_RE = re.compile(r"\s+")
_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+|\n|·|•")
_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


@dataclass
class NormalizedText:
    """Canonical text plus its sentence-tokenised view."""

    clean: str = ""
    sentences: list[str] = field(default_factory=list)


def normalize(text: str, lexicons: IntakeLexicons = DEFAULT_LEXICONS) -> NormalizedText:
    """Strip artefact markers, collapse whitespace and split into sentences."""
    if not text:
        return NormalizedText()
    stripped = strip_artifacts(text, lexicons)
    sentences = [
        sentence
        for sentence in (
            normalize_whitespace(part) for part in _SENTENCE_SPLIT_RE.split(stripped)
        )
        if sentence
    ]
    return NormalizedText(clean=normalize_whitespace(stripped), sentences=sentences)


def strip_artifacts(text: str, lexicons: IntakeLexicons = DEFAULT_LEXICONS) -> str:
    """Remove forwarded-mail headers and similar paste artefacts."""
    for marker in lexicons.artifact_markers:
        text = marker.sub(" ", text)
    return text


def normalize_whitespace(value: str | None) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return _WHITESPACE_RE.sub(" ", value).strip() if value else ""


def safe_string(value: Any) -> str:
    """Coerce any JSON-ish value to a string without raising."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return safe_string(value.value)
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


def pick_best_string(*values: Any) -> str:
    """Return the first value that is non-empty after normalisation."""
    for value in values:
        candidate = normalize_whitespace(safe_string(value))
        if candidate:
            return candidate
    return ""


def to_title_case(value: str) -> str:
    """Upper-case the first character of every space-separated word.

    The remainder of each word is preserved ("AI-Powered", "(PPT)").
    """
    return " ".join(
        segment[0].upper() + segment[1:] for segment in value.split(" ") if segment
    )


def slugify(value: str, fallback: str = "deliverable") -> str:
    """Lower-case, ASCII-fold and hyphenate *value*; *fallback* if nothing remains."""
    folded = (
        unicodedata.normalize("NFKD", normalize_whitespace(value))
        .encode("ascii", "ignore")
        .decode("ascii")
        .lower()
    )
    return _NON_SLUG_RE.sub("-", folded).strip("-") or fallback
