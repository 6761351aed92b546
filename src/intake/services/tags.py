"""Tag derivation for intake records."""
from __future__ import annotations

import re
import string
from collections.abc import Mapping
from typing import Any

from src.intake.services.deliverables import DraftDeliverable
from src.intake.services.lexicons import DEFAULT_LEXICONS, IntakeLexicons
from src.intake.services.normalizer import normalize_whitespace, safe_string
from src.shared.models.intake import DeliverableType

_MIN_TITLE_TOKEN_LENGTH = 4


def _candidate_tags(raw: Any) -> list[str]:
    if isinstance(raw, str):
        raw = raw.split(",")
    if not isinstance(raw, list):
        return []
    return [safe_string(item) for item in raw]


def derive_tags(
    text: str,
    deliverables: list[DraftDeliverable],
    candidate: Mapping[str, Any],
    lexicons: IntakeLexicons = DEFAULT_LEXICONS,
) -> list[str]:
    """Union of candidate tags, domain keywords, title tokens and deliverable types.

    Tags are lower-cased and de-duplicated; first occurrence fixes the order.
    """
    raw_tags: list[str] = _candidate_tags(candidate.get("tags"))

    for keyword in lexicons.tag_keywords:
        if text and re.search(r"\b" + re.escape(keyword) + r"\b", text, re.IGNORECASE):
            raw_tags.append(keyword)

    for deliverable in deliverables:
        for word in deliverable.title.split():
            token = word.strip(string.punctuation)
            if len(token) >= _MIN_TITLE_TOKEN_LENGTH:
                raw_tags.append(token)
        if deliverable.type is not DeliverableType.OTHER:
            raw_tags.append(deliverable.type.value)

    tags: list[str] = []
    for raw in raw_tags:
        tag = normalize_whitespace(raw).lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tags
