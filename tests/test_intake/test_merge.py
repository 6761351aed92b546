"""Tests for the merge engine."""
from __future__ import annotations

from src.intake.services.merge import build_candidate, merge_objects


class TestMergeObjects:
    """Tests for merge_objects()."""

    def test_scalar_overwrites(self):
        assert merge_objects({"a": 1}, {"a": 2}) == {"a": 2}

    def test_none_never_overwrites(self):
        assert merge_objects({"a": 1}, {"a": None}) == {"a": 1}

    def test_none_does_not_add_key(self):
        assert merge_objects({}, {"a": None}) == {}

    def test_lists_concatenate(self):
        assert merge_objects({"tags": ["a"]}, {"tags": ["b", "c"]}) == {"tags": ["a", "b", "c"]}

    def test_list_over_scalar_replaces(self):
        assert merge_objects({"tags": "a"}, {"tags": ["b"]}) == {"tags": ["b"]}

    def test_mappings_recurse(self):
        base = {"meta": {"format": "pdf", "owner": "Ann"}}
        addition = {"meta": {"owner": "Bob", "extra": True}}
        assert merge_objects(base, addition) == {
            "meta": {"format": "pdf", "owner": "Bob", "extra": True},
        }

    def test_non_mapping_addition_returns_copy(self):
        base = {"a": 1}
        merged = merge_objects(base, ["not", "a", "mapping"])
        assert merged == base
        assert merged is not base

    def test_inputs_not_mutated(self):
        base = {"tags": ["a"], "meta": {"x": 1}}
        addition = {"tags": ["b"], "meta": {"y": 2}}
        merge_objects(base, addition)
        assert base == {"tags": ["a"], "meta": {"x": 1}}
        assert addition == {"tags": ["b"], "meta": {"y": 2}}


class TestBuildCandidate:
    """Tests for build_candidate()."""

    def test_fragments_fold_left_to_right(self):
        candidate = build_candidate({}, [{"name": "First"}, {"name": "Second"}])
        assert candidate["name"] == "Second"

    def test_existing_wins_over_fragments(self):
        candidate = build_candidate({"name": "Caller"}, [{"name": "Fragment"}])
        assert candidate["name"] == "Caller"

    def test_deliverable_lists_concatenate(self):
        candidate = build_candidate(
            {"deliverables": [{"title": "From caller"}]},
            [{"deliverables": [{"title": "From prose"}]}],
        )
        titles = [d["title"] for d in candidate["deliverables"]]
        assert titles == ["From prose", "From caller"]

    def test_empty_inputs(self):
        assert build_candidate({}, []) == {}
