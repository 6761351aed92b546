"""Field inference engine.

Every classifier takes the value already present on the candidate object
(``existing`` merged with embedded JSON fragments) and the cleaned prose.  A
candidate value that sanitises to a member of the field's domain is returned
unchanged; otherwise a keyword/regex heuristic runs against the prose.  All
classifiers are total: they always return a value from the declared domain.
"""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from src.intake.services.lexicons import DEFAULT_LEXICONS, IntakeLexicons
from src.intake.services.normalizer import (
    normalize_whitespace,
    pick_best_string,
    safe_string,
)
from src.shared.models.intake import (
    BudgetType,
    Currency,
    Priority,
    ProjectStatus,
    ProjectType,
)

logger = logging.getLogger("intake.inference")

E = TypeVar("E", bound=Enum)

_ENUM_KEY_RE = re.compile(r"[\s_\-]+")
_ENUM_ALIASES: dict[str, str] = {
    "canceled": "cancelled",
    "onhold": "on hold",
    "inprogress": "in progress",
    "pendingreview": "pending review",
}

_AMOUNT_CHARS_RE = re.compile(r"[^0-9.,\-]")
_DECIMAL_TAIL_RE = re.compile(r"[.,](\d{1,2})$")
_MULTIPLIERS: dict[str, float] = {"k": 1_000, "thousand": 1_000, "million": 1_000_000}


# ---------------------------------------------------------------------------
# Sanitisers
# ---------------------------------------------------------------------------


def _enum_key(value: str) -> str:
    key = _ENUM_KEY_RE.sub(" ", value).strip().lower()
    return _ENUM_ALIASES.get(key.replace(" ", ""), key)


def sanitize_enum(value: Any, enum_cls: type[E], field_name: str) -> E | None:
    """Map *value* onto a member of *enum_cls*, case- and separator-insensitive.

    Returns ``None`` for absent values.  Present but unrecognised values are
    logged and also yield ``None`` so the caller can fall back.
    """
    if isinstance(value, enum_cls):
        return value
    text = normalize_whitespace(safe_string(value))
    if not text:
        return None
    key = _enum_key(text)
    for member in enum_cls:
        if _enum_key(member.value) == key:
            return member
    logger.warning("Unrecognized %s value %r; falling back", field_name, value)
    return None


def parse_amount(raw: str) -> float | None:
    """Parse ``"12,000"``, ``"1.234,50"``, ``"3500.00"`` and similar amounts.

    A trailing separator followed by one or two digits is the decimal mark;
    every other ``.``/``,`` is a thousands separator.
    """
    digits = _AMOUNT_CHARS_RE.sub("", raw or "")
    if not any(ch.isdigit() for ch in digits):
        return None
    fraction = ""
    tail = _DECIMAL_TAIL_RE.search(digits)
    if tail:
        fraction = tail.group(1)
        digits = digits[: tail.start()]
    integer_part = digits.replace(",", "").replace(".", "")
    try:
        value = float(f"{integer_part or '0'}.{fraction or '0'}")
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def sanitize_number(value: Any) -> float | None:
    """Return a finite float for numbers and numeric strings, else ``None``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        return parse_amount(value)
    return None


# ---------------------------------------------------------------------------
# Lexicon classifiers
# ---------------------------------------------------------------------------


def infer_status(
    candidate_value: Any,
    text: str,
    lexicons: IntakeLexicons = DEFAULT_LEXICONS,
) -> ProjectStatus:
    explicit = sanitize_enum(candidate_value, ProjectStatus, "status")
    if explicit:
        return explicit
    hit = lexicons.status.earliest(text) if text else None
    return ProjectStatus(hit) if hit else ProjectStatus.PLANNING


def infer_priority(
    candidate_value: Any,
    text: str,
    lexicons: IntakeLexicons = DEFAULT_LEXICONS,
) -> Priority:
    explicit = sanitize_enum(candidate_value, Priority, "priority")
    if explicit:
        return explicit
    hit = lexicons.priority.earliest(text) if text else None
    return Priority(hit) if hit else Priority.MEDIUM


def infer_project_type(
    candidate_value: Any,
    text: str,
    lexicons: IntakeLexicons = DEFAULT_LEXICONS,
) -> ProjectType:
    """Classify the engagement; lexicon categories are checked in precedence order."""
    explicit = sanitize_enum(candidate_value, ProjectType, "project_type")
    if explicit:
        return explicit
    hit = lexicons.project_type.first(text) if text else None
    return ProjectType(hit) if hit else ProjectType.OTHER


def infer_budget_type(
    candidate_value: Any,
    text: str,
    lexicons: IntakeLexicons = DEFAULT_LEXICONS,
) -> BudgetType:
    explicit = sanitize_enum(candidate_value, BudgetType, "budget_type")
    if explicit:
        return explicit
    hit = lexicons.budget_type.earliest(text) if text else None
    return BudgetType(hit) if hit else BudgetType.FIXED


def detect_currency(text: str, lexicons: IntakeLexicons = DEFAULT_LEXICONS) -> Currency | None:
    """Return the currency named or symbolised earliest in *text*."""
    if not text:
        return None
    best: tuple[int, str] | None = None
    for symbol, code in lexicons.currency_symbols.items():
        index = text.find(symbol)
        if index != -1 and (best is None or index < best[0]):
            best = (index, code)
    keyword_hit = lexicons.currency.locate(text)
    if keyword_hit and (best is None or keyword_hit[0] < best[0]):
        best = keyword_hit
    return Currency(best[1]) if best else None


# ---------------------------------------------------------------------------
# Budget
# ---------------------------------------------------------------------------


@dataclass
class BudgetDetails:
    """Budget amount, currency and billing model."""

    budget_amount: float = 0.0
    currency: Currency = Currency.USD
    budget_type: BudgetType = BudgetType.FIXED


def infer_budget(
    candidate: dict[str, Any],
    text: str,
    lexicons: IntakeLexicons = DEFAULT_LEXICONS,
) -> BudgetDetails:
    """Infer budget details; each of the three fields short-circuits on its own.

    A zero or negative candidate amount counts as "not provided".
    """
    match = lexicons.money.search(text) if text else None

    amount = sanitize_number(candidate.get("budget_amount", candidate.get("budgetAmount")))
    if amount is None or amount <= 0:
        amount = 0.0
        if match:
            parsed = parse_amount(match.group(2))
            if parsed is not None:
                multiplier = _MULTIPLIERS.get((match.group(3) or "").lower(), 1)
                amount = max(parsed * multiplier, 0.0)

    currency = sanitize_enum(
        pick_best_string(candidate.get("currency"), candidate.get("budget_currency")),
        Currency,
        "currency",
    )
    if currency is None and match and match.group(1):
        currency = detect_currency(match.group(1), lexicons)
    if currency is None:
        currency = detect_currency(text, lexicons) or Currency.USD

    return BudgetDetails(
        budget_amount=amount,
        currency=currency,
        budget_type=infer_budget_type(
            candidate.get("budget_type", candidate.get("budgetType")), text, lexicons
        ),
    )


# ---------------------------------------------------------------------------
# Owners
# ---------------------------------------------------------------------------


def infer_owners(
    candidate: dict[str, Any],
    text: str,
    lexicons: IntakeLexicons = DEFAULT_LEXICONS,
) -> tuple[str, str]:
    """Return ``(client_owner, internal_owner)``.

    Internal labels ("Project lead: ...") are matched first so the generic
    client labels ("owner:", "contact:") cannot claim the same name.
    """
    client = pick_best_string(candidate.get("client_owner"), candidate.get("clientOwner"))
    internal = pick_best_string(candidate.get("internal_owner"), candidate.get("internalOwner"))
    if not text or (client and internal):
        return client, internal

    internal_matches = list(lexicons.internal_owner.finditer(text))
    if not internal and internal_matches:
        internal = internal_matches[0].group(1)

    if not client:
        for m in lexicons.client_owner.finditer(text):
            overlaps = any(
                m.start() < other.end() and other.start() < m.end()
                for other in internal_matches
            )
            if not overlaps:
                client = m.group(1)
                break

    return client, internal
