"""Tests for deliverable identifier resolution."""
from __future__ import annotations

from src.intake.services.deliverables import DraftDeliverable
from src.intake.services.identifiers import resolve_ids


def _draft(id: str = "", title: str = "", source_id: str = "") -> DraftDeliverable:
    return DraftDeliverable(id=id, title=title, source_id=source_id)


class TestResolveIds:
    """Tests for resolve_ids()."""

    def test_collisions_get_numeric_suffixes(self):
        drafts, _ = resolve_ids([_draft("report"), _draft("report"), _draft("report")])
        assert [d.id for d in drafts] == ["report", "report-1", "report-2"]

    def test_suffix_skips_taken_ids(self):
        drafts, _ = resolve_ids([_draft("report-1"), _draft("report"), _draft("report")])
        assert [d.id for d in drafts] == ["report-1", "report", "report-2"]

    def test_empty_id_uses_title(self):
        drafts, _ = resolve_ids([_draft(title="Risk Report")])
        assert drafts[0].id == "risk-report"

    def test_placeholder_when_nothing_sluggable(self):
        drafts, _ = resolve_ids([_draft(title="!!!"), _draft(title="???")])
        assert [d.id for d in drafts] == ["deliverable-1", "deliverable-2"]

    def test_ids_are_slugged(self):
        drafts, _ = resolve_ids([_draft("Risk_Report")])
        assert drafts[0].id == "risk-report"

    def test_returns_same_list(self):
        drafts = [_draft("a")]
        resolved, _ = resolve_ids(drafts)
        assert resolved is drafts


class TestAliasMap:
    """Tests for the alias map built by resolve_ids()."""

    def test_every_spelling_maps_to_id(self):
        _, alias_map = resolve_ids([
            _draft("risk-report", "Risk Report", source_id="Risk_Report"),
        ])
        for key in ("risk-report", "Risk_Report", "risk_report", "Risk Report", "risk report"):
            assert alias_map[key] == "risk-report"

    def test_resolved_ids_take_precedence(self):
        _, alias_map = resolve_ids([
            _draft("plan", "Roadmap"),
            _draft("roadmap", "Plan"),
        ])
        assert alias_map["roadmap"] == "roadmap"
        assert alias_map["plan"] == "plan"
        assert alias_map["Roadmap"] == "plan"

    def test_first_claimant_keeps_shared_title(self):
        drafts, alias_map = resolve_ids([_draft(title="Report"), _draft(title="Report")])
        assert [d.id for d in drafts] == ["report", "report-1"]
        assert alias_map["Report"] == "report"
        assert alias_map["report-1"] == "report-1"

    def test_empty(self):
        assert resolve_ids([]) == ([], {})
