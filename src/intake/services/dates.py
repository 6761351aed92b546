"""Date token scanning and project date inference.

Three token shapes are recognised, each modelled as its own dataclass with
its own ``normalize`` so the scanner never re-tests a string against every
pattern:

  - ``IsoToken``        ``2025-11-01``, ``2025/11/1``, ``2025 11 01``
  - ``MonthNameToken``  ``November 1``, ``Dec. 30th, 2025``, ``sept 3 2024``
  - ``NumericToken``    ``11/01``, ``11/01/2025``, ``11-01-2025`` (month first)

The regexes only locate and tag tokens; turning a token into a calendar date
is left to ``dateutil``.  Tokens lacking a year borrow the first explicit
year found anywhere in the text, else the year of the injected clock.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Union

from dateutil import parser as dateutil_parser
from dateutil.relativedelta import relativedelta

from src.shared.constants import DEFAULT_PROJECT_SPAN_DAYS

logger = logging.getLogger("intake.dates")

_YEAR = r"(19\d{2}|20\d{2})"

_ISO_RE = re.compile(r"\b" + _YEAR + r"[-/ ](\d{1,2})[-/ ](\d{1,2})\b")
_MONTH_NAME_RE = re.compile(
    r"\b(jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?"
    r"|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
    r"\.?\s+(\d{1,2})(?:st|nd|rd|th)?\b(?:,?\s*" + _YEAR + r"\b)?",
    re.IGNORECASE,
)
_NUMERIC_RE = re.compile(
    r"\b(\d{1,2})/(\d{1,2})(?:/(\d{4}|\d{2}))?\b"
    r"|\b(\d{1,2})-(\d{1,2})-" + _YEAR + r"\b"
)
_ISO_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")


def _parse(text: str, default_year: int, **kwargs: Any) -> date | None:
    """Parse *text* with dateutil, filling a missing year from *default_year*."""
    try:
        return dateutil_parser.parse(
            text, default=datetime(default_year, 1, 1), **kwargs
        ).date()
    except (ValueError, OverflowError):
        return None


# ---------------------------------------------------------------------------
# Token variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IsoToken:
    """Year-first numeric date."""

    start: int
    end: int
    text: str
    year: int

    @property
    def has_year(self) -> bool:
        return True

    def normalize(self, reference_year: int) -> date | None:
        return _parse(self.text, self.year, yearfirst=True)


@dataclass(frozen=True)
class MonthNameToken:
    """Month name followed by a day and an optional year."""

    start: int
    end: int
    text: str
    year: int | None = None

    @property
    def has_year(self) -> bool:
        return self.year is not None

    def normalize(self, reference_year: int) -> date | None:
        return _parse(self.text, self.year or reference_year)


@dataclass(frozen=True)
class NumericToken:
    """``mm/dd[/yyyy]`` date; falls back to ``dd/mm`` when the month is out of range.

    Two-digit years are widened to 20xx at scan time, so only the month/day
    pair is handed to the parser.
    """

    start: int
    end: int
    first: int
    second: int
    year: int | None = None

    @property
    def has_year(self) -> bool:
        return self.year is not None

    def normalize(self, reference_year: int) -> date | None:
        month_day = f"{self.first}/{self.second}"
        year = self.year or reference_year
        return _parse(month_day, year) or _parse(month_day, year, dayfirst=True)


DateToken = Union[IsoToken, MonthNameToken, NumericToken]


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------


def _iso_tokens(text: str) -> list[DateToken]:
    return [
        IsoToken(m.start(), m.end(), m.group(0), int(m.group(1)))
        for m in _ISO_RE.finditer(text)
    ]


def _month_name_tokens(text: str) -> list[DateToken]:
    return [
        MonthNameToken(
            m.start(), m.end(), m.group(0),
            year=int(m.group(3)) if m.group(3) else None,
        )
        for m in _MONTH_NAME_RE.finditer(text)
    ]


def _numeric_tokens(text: str) -> list[DateToken]:
    tokens: list[DateToken] = []
    for m in _NUMERIC_RE.finditer(text):
        if m.group(1):
            first, second, raw_year = m.group(1), m.group(2), m.group(3)
        else:
            first, second, raw_year = m.group(4), m.group(5), m.group(6)
        year: int | None = None
        if raw_year:
            year = int(raw_year) + (2000 if len(raw_year) == 2 else 0)
        tokens.append(NumericToken(m.start(), m.end(), int(first), int(second), year))
    return tokens


def scan_date_tokens(text: str) -> list[DateToken]:
    """Return every date token in *text* in document order.

    When two shapes overlap the more specific one wins
    (ISO > month name > numeric), e.g. ``2025-03-05`` never also yields a
    numeric ``03-05``.
    """
    if not text:
        return []
    accepted: list[DateToken] = []
    for scanner in (_iso_tokens, _month_name_tokens, _numeric_tokens):
        for token in scanner(text):
            if any(token.start < other.end and other.start < token.end for other in accepted):
                continue
            accepted.append(token)
    accepted.sort(key=lambda token: token.start)
    return accepted


def find_reference_year(tokens: list[DateToken], fallback: int) -> int:
    """Year of the first token carrying an explicit year, else *fallback*."""
    for token in tokens:
        if token.has_year and token.year:
            return token.year
    return fallback


def parse_date_value(raw: Any, reference_year: int) -> str:
    """Normalise a caller-supplied or clause-level date to ``yyyy-MM-dd``.

    Accepts ``date``/``datetime`` objects, ISO strings (time part ignored) and
    any prose containing a recognisable date token.  Returns ``""`` when
    nothing usable is found.
    """
    if isinstance(raw, datetime):
        return raw.date().isoformat()
    if isinstance(raw, date):
        return raw.isoformat()
    if not isinstance(raw, str) or not raw.strip():
        return ""

    candidate = raw.strip()
    m = _ISO_PREFIX_RE.match(candidate)
    if m:
        try:
            return dateutil_parser.isoparse(m.group(0)).date().isoformat()
        except ValueError:
            return ""

    for token in scan_date_tokens(candidate):
        parsed = token.normalize(reference_year)
        if parsed:
            return parsed.isoformat()
    return ""


# ---------------------------------------------------------------------------
# Project dates
# ---------------------------------------------------------------------------


@dataclass
class ProjectDates:
    """Start / end of a project as ISO strings (``""`` when unknown)."""

    start_date: str = ""
    end_date: str = ""

    def span(self) -> tuple[date, date] | None:
        if not (self.start_date and self.end_date):
            return None
        return date.fromisoformat(self.start_date), date.fromisoformat(self.end_date)

    @property
    def reference_year(self) -> int | None:
        value = self.end_date or self.start_date
        return int(value[:4]) if value else None


def _shift_year(value: date, years: int) -> date:
    return value + relativedelta(years=years)


def _candidate_date(candidate: dict[str, Any], keys: tuple[str, ...], reference_year: int) -> str:
    for key in keys:
        raw = candidate.get(key)
        if raw in (None, ""):
            continue
        parsed = parse_date_value(raw, reference_year)
        if parsed:
            return parsed
        logger.warning("Ignoring unparseable %s value %r", keys[0], raw)
    return ""


def extract_project_dates(
    text: str,
    candidate: dict[str, Any],
    today: date,
) -> ProjectDates:
    """Infer project start and end dates.

    Explicit candidate values win.  Otherwise the first two distinct dates in
    the prose become start and end; a single known bound yields the other by
    a 30 day offset.
    """
    tokens = scan_date_tokens(text)
    reference_year = find_reference_year(tokens, today.year)

    dates = ProjectDates(
        start_date=_candidate_date(candidate, ("start_date", "startDate"), reference_year),
        end_date=_candidate_date(candidate, ("end_date", "endDate"), reference_year),
    )

    found: list[tuple[date, DateToken]] = []
    for token in tokens:
        parsed = token.normalize(reference_year)
        if parsed and all(parsed != seen for seen, _ in found):
            found.append((parsed, token))
        if len(found) == 2:
            break

    inferred_start = inferred_end = None
    if not dates.start_date and found:
        inferred_start = found[0]
    if not dates.end_date and len(found) > 1:
        inferred_end = found[1]

    if inferred_start and inferred_end and inferred_end[0] < inferred_start[0]:
        # "November 1 - January 15, 2026": the year-less bound crosses a year.
        if not inferred_start[1].has_year:
            inferred_start = (_shift_year(inferred_start[0], -1), inferred_start[1])
        elif not inferred_end[1].has_year:
            inferred_end = (_shift_year(inferred_end[0], 1), inferred_end[1])

    if inferred_start:
        dates.start_date = inferred_start[0].isoformat()
    if inferred_end:
        dates.end_date = inferred_end[0].isoformat()

    offset = timedelta(days=DEFAULT_PROJECT_SPAN_DAYS)
    try:
        if dates.start_date and not dates.end_date:
            dates.end_date = (date.fromisoformat(dates.start_date) + offset).isoformat()
        elif dates.end_date and not dates.start_date:
            dates.start_date = (date.fromisoformat(dates.end_date) - offset).isoformat()
    except OverflowError:
        logger.warning(
            "Cannot derive the missing project bound from %s/%s: out of date range",
            dates.start_date or "-", dates.end_date or "-",
        )

    return dates
