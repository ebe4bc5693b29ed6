"""JSON export of recompute results and label registries.

Serialization is orjson with sorted keys, so two results for the same
document and config serialise to identical bytes.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson

from pandoc_lists.numbering import RegistrySnapshot
from pandoc_lists.pipeline import LineResult, RecomputeResult
from pandoc_lists.renumber import OrdinalRun
from pandoc_lists.types import (
    ContentRegion,
    CustomLabelMarker,
    DefinitionItem,
    ExampleMarker,
    FancyMarker,
    FirstOccurrence,
    MarkerKind,
    Replacement,
    Span,
    kind_name,
)


def load_json(path: Path) -> Any:
    return orjson.loads(path.read_bytes())


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(_dumps(obj, pretty=pretty))


def _dumps(obj: Any, *, pretty: bool) -> bytes:
    opts = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS if pretty else orjson.OPT_SORT_KEYS
    return orjson.dumps(obj, option=opts)


# ---------------------------------------------------------------------------
# Converters
# ---------------------------------------------------------------------------

def span_to_list(span: Span | None) -> list[int] | None:
    return None if span is None else [span.start, span.end]


def kind_to_dict(kind: MarkerKind | None) -> dict[str, Any]:
    """Tagged form: ``{"type": ..., <per-kind fields>}``."""
    out: dict[str, Any] = {"type": kind_name(kind)}
    match kind:
        case FancyMarker(family=family, value=value, delimiter=delimiter):
            out.update(family=str(family), value=value, delimiter=delimiter)
        case ExampleMarker(label=label):
            out["label"] = label
        case CustomLabelMarker(raw_label=raw):
            out["raw_label"] = raw
        case DefinitionItem(delimiter=delimiter):
            out["delimiter"] = delimiter
        case _:
            pass
    return out


def _first_to_dict(first: FirstOccurrence | None) -> dict[str, Any] | None:
    return None if first is None else {"line": first.line, "content": first.content}


def line_to_dict(line: LineResult) -> dict[str, Any]:
    return {
        "index": line.index,
        "kind": kind_to_dict(line.kind),
        "marker_span": span_to_list(line.marker_span),
        "invalid": line.invalid,
        "number": line.number,
        "resolved_label": line.resolved_label,
        "ordinal": line.ordinal,
        "display_marker": line.display_marker,
        "is_duplicate": line.is_duplicate,
        "first_occurrence": _first_to_dict(line.first_occurrence),
        "continuation_of": line.continuation_of,
    }


def region_to_dict(region: ContentRegion) -> dict[str, Any]:
    return {
        "line_index": region.line_index,
        "span": span_to_list(region.span),
        "parent_kind": kind_to_dict(region.parent_kind),
        "multiline": region.multiline,
        "line_indices": list(region.line_indices),
    }


def replacement_to_dict(rep: Replacement) -> dict[str, Any]:
    return {
        "span": span_to_list(rep.span),
        "kind": rep.kind,
        "display_text": rep.display_text,
        "source_label": rep.source_label,
        "number": rep.number,
        "content": rep.content,
        "first_occurrence": _first_to_dict(rep.first_occurrence),
    }


def run_to_dict(run: OrdinalRun) -> dict[str, Any]:
    return {
        "family": str(run.family),
        "delimiter": run.delimiter,
        "indent": run.indent,
        "start": run.start,
        "lines": list(run.line_indices),
    }


def registry_to_dict(snapshot: RegistrySnapshot) -> dict[str, Any]:
    return {
        "raw_to_resolved": dict(snapshot.raw_to_resolved),
        "resolved_to_content": dict(snapshot.resolved_to_content),
        "resolved_to_number": dict(snapshot.resolved_to_number),
        "first_occurrence": {
            label: _first_to_dict(first) for label, first in snapshot.first_occurrence.items()
        },
        "duplicates": sorted(snapshot.duplicates),
    }


def result_to_dict(result: RecomputeResult) -> dict[str, Any]:
    """Plain-data form of a full result, registries included."""
    return {
        "revision": result.revision,
        "config": {
            "strict_mode": result.config.strict_mode,
            "extended_labels": result.config.extended_labels,
        },
        "lines": [line_to_dict(line) for line in result.lines],
        "regions": [region_to_dict(region) for region in result.regions],
        "replacements": [replacement_to_dict(rep) for rep in result.replacements],
        "runs": [run_to_dict(run) for run in result.runs],
        "registries": {
            "examples": registry_to_dict(result.examples),
            "custom_labels": registry_to_dict(result.custom_labels),
        },
        "hash_count": result.hash_count,
        "placeholders": dict(result.placeholders),
    }


def summary_to_dict(result: RecomputeResult) -> dict[str, Any]:
    """Compact digest: counts plus the label tables."""
    counts: dict[str, int] = {}
    for line in result.lines:
        if line.kind is not None:
            name = kind_name(line.kind)
            counts[name] = counts.get(name, 0) + 1
    return {
        "revision": result.revision,
        "line_count": len(result.lines),
        "marker_counts": counts,
        "invalid_lines": sorted(result.invalid_lines),
        "replacement_count": len(result.replacements),
        "examples": dict(result.examples.resolved_to_number),
        "custom_labels": dict(result.custom_labels.raw_to_resolved),
        "duplicates": sorted(result.examples.duplicates | result.custom_labels.duplicates),
        "placeholders": dict(result.placeholders),
    }


def dumps_result(result: RecomputeResult, *, pretty: bool = False) -> bytes:
    return _dumps(result_to_dict(result), pretty=pretty)
