"""Tests for pandoc_lists.io_utils: JSON export."""
from __future__ import annotations

from pathlib import Path

import orjson

from pandoc_lists.io_utils import (
    dumps_result,
    kind_to_dict,
    load_json,
    result_to_dict,
    save_json,
    summary_to_dict,
)
from pandoc_lists.pipeline import recompute
from pandoc_lists.types import (
    CustomLabelMarker,
    DefinitionItem,
    DefinitionTerm,
    ExampleMarker,
    FancyFamily,
    FancyMarker,
    HashMarker,
)

DOC = "(@a) first\n(@a) again\n{::P(#x)} claim\nSee (@a) and {::P(#x)}.\n\nc. three\nd. four"


class TestKindToDict:
    def test_tags(self) -> None:
        assert kind_to_dict(None) == {"type": "none"}
        assert kind_to_dict(HashMarker()) == {"type": "hash"}
        assert kind_to_dict(DefinitionTerm()) == {"type": "definition-term"}

    def test_fields(self) -> None:
        assert kind_to_dict(FancyMarker(FancyFamily.LOWER_ROMAN, "iv", ")")) == {
            "type": "fancy", "family": "lower-roman", "value": "iv", "delimiter": ")",
        }
        assert kind_to_dict(ExampleMarker(label=None)) == {"type": "example", "label": None}
        assert kind_to_dict(CustomLabelMarker("P(#a)")) == {"type": "custom-label", "raw_label": "P(#a)"}
        assert kind_to_dict(DefinitionItem("~")) == {"type": "definition-item", "delimiter": "~"}


class TestResultToDict:
    def test_top_level_keys(self) -> None:
        data = result_to_dict(recompute(DOC, revision=7))
        assert data["revision"] == 7
        assert data["config"] == {"strict_mode": False, "extended_labels": True}
        assert data["hash_count"] == 0
        assert data["placeholders"] == {"x": 1}

    def test_registries(self) -> None:
        data = result_to_dict(recompute(DOC))
        examples = data["registries"]["examples"]
        assert examples["resolved_to_number"] == {"a": 1}
        assert examples["duplicates"] == ["a"]
        assert examples["first_occurrence"] == {"a": {"line": 0, "content": "first"}}
        assert data["registries"]["custom_labels"]["raw_to_resolved"] == {"P(#x)": "P1"}

    def test_lines_and_runs(self) -> None:
        data = result_to_dict(recompute(DOC))
        assert data["lines"][1]["is_duplicate"] is True
        assert data["lines"][2]["display_marker"] == "(P1)"
        assert data["runs"] == [
            {"family": "lower-alpha", "delimiter": ".", "indent": "", "start": 3, "lines": [5, 6]},
        ]

    def test_replacements(self) -> None:
        reps = result_to_dict(recompute(DOC))["replacements"]
        assert [r["kind"] for r in reps] == ["duplicate-warning", "custom-label-ref"]
        assert reps[0]["first_occurrence"] == {"line": 0, "content": "first"}

    def test_json_round_trip(self) -> None:
        result = recompute(DOC)
        assert orjson.loads(dumps_result(result)) == result_to_dict(result)

    def test_pretty_sorted(self) -> None:
        raw = dumps_result(recompute(DOC), pretty=True)
        assert raw.startswith(b'{\n  "config"')


class TestSummary:
    def test_counts(self) -> None:
        summary = summary_to_dict(recompute(DOC))
        assert summary["marker_counts"] == {"example": 2, "custom-label": 1, "fancy": 2}
        assert summary["duplicates"] == ["a"]
        assert summary["custom_labels"] == {"P(#x)": "P1"}
        assert summary["replacement_count"] == 2


class TestFileHelpers:
    def test_save_and_load(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "out.json"
        save_json({"b": 1, "a": [1, 2]}, path)
        assert load_json(path) == {"a": [1, 2], "b": 1}
        assert path.read_bytes().startswith(b'{\n  "a"')
