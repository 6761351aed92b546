"""Clause-boundary lexer for deliverable extraction.

A sentence is tokenised into four token kinds:

  TRIGGER_VERB  "create", "build", "draft", ... followed by whitespace
  CONNECTIVE    ",", "and", or a "." inside a word ("Next.js")
  TERMINATOR    ";", "!", "?" or a "." ending a word
  STOP_PHRASE   "using", "with", "for", ... (only consulted inside a title)

Boundary precedence:
  1. A TRIGGER_VERB opens a clause unless it falls inside one that is
     still open.
  2. The clause ends at the first TERMINATOR after the verb, or
  3. at a CONNECTIVE immediately followed by another TRIGGER_VERB,
     whichever comes first.
  4. Inside the clause, the title is cut at the earliest STOP_PHRASE.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from src.intake.services.lexicons import DEFAULT_LEXICONS, IntakeLexicons
from src.intake.services.normalizer import normalize_whitespace, to_title_case

_ARTICLE_RE = re.compile(r"^(?:an?|the)\s+", re.IGNORECASE)
_LEADING_NOISE_RE = re.compile(r"^[\s,;:\-]+")
_TRAILING_NOISE_RE = re.compile(r"[\s.,;:\-]+$")
_QUOTES = "\"'“”‘’`"


class TokenKind(str, Enum):
    """Kinds of clause-boundary tokens."""
    TRIGGER_VERB = "TRIGGER_VERB"
    CONNECTIVE = "CONNECTIVE"
    STOP_PHRASE = "STOP_PHRASE"
    TERMINATOR = "TERMINATOR"


@dataclass(frozen=True)
class ClauseToken:
    kind: TokenKind
    start: int
    end: int
    text: str


@dataclass(frozen=True)
class Clause:
    """A verb-triggered clause.

    Attributes:
        verb: The lower-cased trigger verb.
        text: The clause including its verb ("Create a dashboard using X").
        body: The clause after the verb ("a dashboard using X").
    """

    verb: str
    text: str
    body: str


class ClauseLexer:
    """Tokenise sentences and cut them into deliverable clauses and titles."""

    def __init__(self, lexicons: IntakeLexicons = DEFAULT_LEXICONS) -> None:
        verbs = "|".join(re.escape(verb) for verb in lexicons.trigger_verbs)
        self._boundary_re = re.compile(
            r"(?P<trigger>\b(?:" + verbs + r")\b(?=\s))"
            r"|(?P<terminator>[;!?]|\.(?=\s|$))"
            r"|(?P<connective>,|\band\b|\.)",
            re.IGNORECASE,
        )
        stops = sorted(lexicons.stop_phrases, key=len, reverse=True)
        self._stop_re = re.compile(
            r"(?:(?<=\s)|^)(?:"
            + "|".join(r"\s+".join(map(re.escape, stop.split())) for stop in stops)
            + r")(?=\s|$)",
            re.IGNORECASE,
        )

    def tokenize(self, sentence: str) -> list[ClauseToken]:
        """Return the TRIGGER_VERB / CONNECTIVE / TERMINATOR tokens of *sentence*."""
        tokens: list[ClauseToken] = []
        for m in self._boundary_re.finditer(sentence):
            if m.group("trigger"):
                kind = TokenKind.TRIGGER_VERB
            elif m.group("terminator"):
                kind = TokenKind.TERMINATOR
            else:
                kind = TokenKind.CONNECTIVE
            tokens.append(ClauseToken(kind, m.start(), m.end(), m.group(0)))
        return tokens

    def stop_phrases(self, text: str) -> list[ClauseToken]:
        """Return the STOP_PHRASE tokens of *text*."""
        return [
            ClauseToken(TokenKind.STOP_PHRASE, m.start(), m.end(), m.group(0))
            for m in self._stop_re.finditer(text)
        ]

    def clauses(self, sentence: str) -> list[Clause]:
        """Split *sentence* into one clause per opening trigger verb, in order.

        A trigger verb inside a clause that is still open ("draft a launch
        plan") is part of that clause's title, not a new clause.
        """
        tokens = self.tokenize(sentence)
        result: list[Clause] = []
        open_until = -1
        for i, token in enumerate(tokens):
            if token.kind is not TokenKind.TRIGGER_VERB or token.start < open_until:
                continue
            end = self._clause_end(sentence, tokens, i)
            open_until = end
            result.append(Clause(
                verb=token.text.lower(),
                text=sentence[token.start:end].strip(),
                body=sentence[token.end:end],
            ))
        return result

    @staticmethod
    def _clause_end(sentence: str, tokens: list[ClauseToken], index: int) -> int:
        for j in range(index + 1, len(tokens)):
            token = tokens[j]
            if token.kind is TokenKind.TERMINATOR:
                return token.start
            if token.kind is TokenKind.CONNECTIVE and j + 1 < len(tokens):
                following = tokens[j + 1]
                if (
                    following.kind is TokenKind.TRIGGER_VERB
                    and not sentence[token.end:following.start].strip()
                ):
                    return token.start
        return len(sentence)

    def title(self, clause: Clause) -> str:
        """Derive a title-cased deliverable name from *clause*; ``""`` if none."""
        working = _LEADING_NOISE_RE.sub("", clause.body)
        working = _ARTICLE_RE.sub("", working)
        stops = self.stop_phrases(working)
        if stops:
            working = working[: stops[0].start]
        working = _TRAILING_NOISE_RE.sub("", normalize_whitespace(working))
        working = working.strip(_QUOTES).strip()
        return to_title_case(working)
