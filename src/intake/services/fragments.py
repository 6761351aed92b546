"""Embedded JSON fragment extraction.

Free-form project descriptions are often pasted together with JSON produced
by another tool.  Fragments are located with a brace-depth counter rather
than a regex because JSON objects nest; each top-level balanced span is then
handed to ``json.loads`` and silently dropped if it does not parse to an
object.
"""
from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger("intake.fragments")


def _balanced_end(text: str, start: int, track_strings: bool) -> int | None:
    """Offset just past the ``}`` closing the brace at *start*, or ``None``."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        char = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i + 1
        elif char == '"' and track_strings:
            in_string = True
    return None


def find_fragment_spans(text: str) -> list[tuple[int, int]]:
    """Return ``(start, end)`` offsets of every top-level balanced ``{...}`` span.

    Braces that appear inside a double-quoted string of an open span do not
    change the depth.  A span that never closes that way (prose such as
    ``{see "appendix}``) is re-read with plain brace counting, so a stray
    quote cannot hide the fragments after it.  Stray closing braces outside
    a span are ignored.
    """
    spans: list[tuple[int, int]] = []
    if not text:
        return spans

    cursor = 0
    while True:
        start = text.find("{", cursor)
        if start < 0:
            break
        end = _balanced_end(text, start, track_strings=True)
        if end is None:
            end = _balanced_end(text, start, track_strings=False)
        if end is None:
            cursor = start + 1
            continue
        spans.append((start, end))
        cursor = end

    return spans


def _parse_fragment(candidate: str) -> dict[str, Any] | None:
    try:
        parsed = json.loads(candidate)
    except (ValueError, RecursionError):
        logger.debug("Discarding malformed JSON fragment (%d chars)", len(candidate))
        return None
    if not isinstance(parsed, dict):
        return None
    return parsed


def extract_fragments(text: str) -> list[dict[str, Any]]:
    """Parse every embedded JSON object in *text*, in document order."""
    fragments: list[dict[str, Any]] = []
    for start, end in find_fragment_spans(text):
        parsed = _parse_fragment(text[start:end])
        if parsed is not None:
            fragments.append(parsed)
    return fragments


def strip_fragments(text: str) -> str:
    """Return *text* with every successfully parsed fragment blanked out.

    Unparseable brace spans stay in place; they are ordinary prose.
    """
    if not text:
        return ""
    pieces: list[str] = []
    cursor = 0
    for start, end in find_fragment_spans(text):
        if _parse_fragment(text[start:end]) is None:
            continue
        pieces.append(text[cursor:start])
        pieces.append(" ")
        cursor = end
    pieces.append(text[cursor:])
    return "".join(pieces)
