"""Keyword lexicons and regexes used by the intake parser.

All data here is read-only.  ``DEFAULT_LEXICONS`` is built once at import time
and passed explicitly into every classifier so each one can be exercised in
isolation with a custom lexicon.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Keyword lexicon
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeywordLexicon:
    """Ordered mapping of category -> keyword regex fragments.

    Keywords are regex fragments matched case-insensitively on word
    boundaries, so ``"api"`` matches "the API" but not "capital".
    """

    categories: tuple[tuple[str, tuple[str, ...]], ...]
    _patterns: tuple[tuple[str, re.Pattern[str]], ...] = field(
        init=False, repr=False, compare=False,
    )

    def __post_init__(self) -> None:
        compiled = tuple(
            (
                category,
                re.compile(r"\b(?:" + "|".join(keywords) + r")\b", re.IGNORECASE),
            )
            for category, keywords in self.categories
        )
        object.__setattr__(self, "_patterns", compiled)

    def locate(self, text: str) -> tuple[int, str] | None:
        """Return ``(offset, category)`` of the keyword occurring first in *text*.

        Ties (same start offset) go to the category listed first.
        """
        best: tuple[int, int, str] | None = None
        for order, (category, pattern) in enumerate(self._patterns):
            m = pattern.search(text)
            if m and (best is None or (m.start(), order) < best[:2]):
                best = (m.start(), order, category)
        return (best[0], best[2]) if best else None

    def earliest(self, text: str) -> str | None:
        """Return the category of the keyword occurring first in *text*."""
        hit = self.locate(text)
        return hit[1] if hit else None

    def first(self, text: str) -> str | None:
        """Return the first category (in declaration order) with any hit."""
        for category, pattern in self._patterns:
            if pattern.search(text):
                return category
        return None


# ---------------------------------------------------------------------------
# Lexicon data
# ---------------------------------------------------------------------------

_STATUS = KeywordLexicon((
    ("Completed", ("completed", "finished", "done", "delivered")),
    ("In Progress", ("in progress", "in-progress", "ongoing", "underway", "under way")),
    ("Active", ("active", "launched", "live")),
    ("Cancelled", ("cancelled", "canceled", "scrapped")),
    ("On Hold", ("on hold", "on-hold", "paused", "suspended")),
    ("Planning", ("planning", "planned", "kick[- ]?off", "kicking off", "upcoming")),
))

_PRIORITY = KeywordLexicon((
    ("critical", (
        "critical", "urgent", "urgently", "time[- ]sensitive", "asap",
        "mission[- ]critical",
    )),
    ("high", ("high[- ]priority", "top priority")),
    ("medium", ("medium[- ]priority", "normal priority")),
    ("low", ("low[- ]priority",)),
))

# Declaration order is precedence: the first category with a hit wins.
_PROJECT_TYPE = KeywordLexicon((
    ("design", ("ui", "ux", "design", "branding", "prototypes?", "visual")),
    ("development", (
        "dashboards?", "build", "develop", "development", "apis?",
        "integrations?", "automation", "platform", "application", "app",
        "engineer", "engineering", "engine",
    )),
    ("analysis", ("analysis", "analytics", "study", "assessment")),
    ("strategy", (
        "strategy", "strategic", "roadmap", "planning", "transformation",
        "advisory",
    )),
    ("research", ("research", "investigate", "survey", "discovery")),
    ("consulting", ("consulting", "engagement")),
))

_BUDGET_TYPE = KeywordLexicon((
    ("Fixed", ("fixed", "fixed[- ]fee", "fixed[- ]price", "lump[- ]sum")),
    ("Hourly", ("hourly", "per hour", "time and materials", "t&m")),
    ("Retainer", ("retainers?",)),
    ("Milestone", ("milestones?", "milestone[- ]based")),
))

_DELIVERABLE_TYPE = KeywordLexicon((
    ("Dashboard", ("dashboards?",)),
    ("API", ("apis?", "integrations?", "endpoints?")),
    ("Presentation", ("presentations?", "decks?", "slides?", "slideware")),
    ("Storyline", ("storylines?",)),
    ("Brief", ("briefs?", "briefing")),
    ("Analysis", ("analysis", "analyses", "assessments?")),
    ("Report", ("reports?", "summary", "summaries")),
    ("Documentation", (
        "documentation", "specifications?", "specs?", "playbooks?",
        "manuals?", "guides?", "handbooks?",
    )),
    ("Analysis", ("roadmaps?", "plans?")),
))

_DELIVERABLE_FORMAT = KeywordLexicon((
    ("pptx", ("pptx?", "powerpoint", "decks?", "slides?")),
    ("pdf", ("pdfs?",)),
    ("docx", ("docx?", "word")),
    ("html", ("html", "web", "website", "webpage", "web page")),
    ("markdown", ("markdown", "md")),
    ("json", ("json",)),
))

_CURRENCY = KeywordLexicon((
    ("USD", ("usd", "us dollars?", "dollars?")),
    ("EUR", ("eur", "euros?")),
    ("GBP", ("gbp", "pounds?", "sterling")),
    ("CHF", ("chf", "swiss francs?", "francs?")),
    ("CAD", ("cad", "canadian dollars?")),
    ("AUD", ("aud", "australian dollars?")),
))

_CURRENCY_SYMBOLS: dict[str, str] = {"$": "USD", "€": "EUR", "£": "GBP"}

_MONEY_RE = re.compile(
    r"\b(?:budget|costs?|fees?|investment|spend(?:ing)?|price[ds]?)\b"
    r"\s*[:\-]?\s*(?:(?:is|of|at|about|around|approximately|:)\s*)*"
    r"([$€£]|CHF|USD|EUR|GBP|CAD|AUD)?\s*"
    r"([0-9]+(?:[.,][0-9]{3})*(?:[.,][0-9]{1,2})?)"
    r"(?:\s?(k|thousand|million)\b)?",
    re.IGNORECASE,
)

_NAME_RUN = r"([A-Z][A-Za-z\-']+(?:[ \t]+[A-Z][A-Za-z\-']+)*)"

_CLIENT_OWNER_RE = re.compile(
    r"\b(?i:client|stakeholder|contact|owner)\s*[:\-]\s*" + _NAME_RUN
)
_INTERNAL_OWNER_RE = re.compile(
    r"\b(?i:internal|project|engagement)\s+(?i:lead|owner|manager|contact)"
    r"\s*[:\-]\s*" + _NAME_RUN
)

_TRIGGER_VERBS: tuple[str, ...] = (
    "create", "build", "develop", "deliver", "produce", "prepare",
    "design", "launch", "implement", "generate", "draft", "compile",
)

_STOP_PHRASES: tuple[str, ...] = (
    "using", "with", "including", "leveraging", "featuring", "supported by",
    "integrating", "built on", "utilising", "utilizing", "powered by",
    "to", "for", "and", "that", "which", "by", "due", "before", "via",
    "on", "in",
)

_DEPENDENCY_RE = re.compile(
    r"depends?\s+on|dependent\s+on|after\s+(?:the\s+)?completion\s+of"
    r"|following\s+the|blocked\s+by",
    re.IGNORECASE,
)

_ARTIFACT_MARKERS: tuple[re.Pattern[str], ...] = (
    re.compile(r"-{2,}\s*Forwarded message\s*-{2,}", re.IGNORECASE),
    re.compile(r"-{2,}\s*Original Message\s*-{2,}", re.IGNORECASE),
    re.compile(r"Begin forwarded message\s*:?", re.IGNORECASE),
    re.compile(r"Forwarded message\s*:?", re.IGNORECASE),
)

_TAG_KEYWORDS: tuple[str, ...] = (
    "ai", "automation", "dashboard", "api", "strategy", "presentation",
    "report", "analytics", "content", "research",
)


# ---------------------------------------------------------------------------
# Bundle
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IntakeLexicons:
    """Every lexicon and regex the parser consults, bundled for injection."""

    status: KeywordLexicon = _STATUS
    priority: KeywordLexicon = _PRIORITY
    project_type: KeywordLexicon = _PROJECT_TYPE
    budget_type: KeywordLexicon = _BUDGET_TYPE
    deliverable_type: KeywordLexicon = _DELIVERABLE_TYPE
    deliverable_format: KeywordLexicon = _DELIVERABLE_FORMAT
    currency: KeywordLexicon = _CURRENCY
    currency_symbols: dict[str, str] = field(
        default_factory=lambda: dict(_CURRENCY_SYMBOLS)
    )
    money: re.Pattern[str] = _MONEY_RE
    client_owner: re.Pattern[str] = _CLIENT_OWNER_RE
    internal_owner: re.Pattern[str] = _INTERNAL_OWNER_RE
    trigger_verbs: tuple[str, ...] = _TRIGGER_VERBS
    stop_phrases: tuple[str, ...] = _STOP_PHRASES
    dependency_phrase: re.Pattern[str] = _DEPENDENCY_RE
    artifact_markers: tuple[re.Pattern[str], ...] = _ARTIFACT_MARKERS
    tag_keywords: tuple[str, ...] = _TAG_KEYWORDS


DEFAULT_LEXICONS = IntakeLexicons()
