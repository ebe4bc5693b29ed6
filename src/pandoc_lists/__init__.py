"""Numbering and cross-reference resolution for Pandoc extended lists."""

from pandoc_lists.classifier import MarkerMatch, classify, match_marker
from pandoc_lists.display import DisplayLevel, display_level, placeholder_spans
from pandoc_lists.io_utils import dumps_result, result_to_dict, summary_to_dict
from pandoc_lists.numbering import LabelRegistry, NumberingEngine, RegistrySnapshot
from pandoc_lists.pipeline import (
    DocumentBuffer,
    DocumentStore,
    LineResult,
    RecomputePipeline,
    RecomputeResult,
    TextBuffer,
    recompute,
)
from pandoc_lists.references import ReferenceResolver, resolve
from pandoc_lists.regions import SplitResult, split_regions
from pandoc_lists.renumber import (
    LineEdit,
    NextMarker,
    OrdinalRun,
    find_ordinal_runs,
    next_marker,
    renumber_after_edit,
    renumber_run,
)
from pandoc_lists.types import (
    ContentRegion,
    CustomLabelMarker,
    DefinitionItem,
    DefinitionTerm,
    ExampleMarker,
    FancyFamily,
    FancyMarker,
    FirstOccurrence,
    HashMarker,
    Line,
    MarkerKind,
    NumberingConfig,
    PreconditionError,
    Replacement,
    Span,
)

__all__ = [
    "ContentRegion",
    "CustomLabelMarker",
    "DefinitionItem",
    "DefinitionTerm",
    "DisplayLevel",
    "DocumentBuffer",
    "DocumentStore",
    "ExampleMarker",
    "FancyFamily",
    "FancyMarker",
    "FirstOccurrence",
    "HashMarker",
    "LabelRegistry",
    "Line",
    "LineEdit",
    "LineResult",
    "MarkerKind",
    "MarkerMatch",
    "NextMarker",
    "NumberingConfig",
    "NumberingEngine",
    "OrdinalRun",
    "PreconditionError",
    "RecomputePipeline",
    "RecomputeResult",
    "ReferenceResolver",
    "RegistrySnapshot",
    "Replacement",
    "Span",
    "SplitResult",
    "TextBuffer",
    "classify",
    "display_level",
    "dumps_result",
    "find_ordinal_runs",
    "match_marker",
    "next_marker",
    "placeholder_spans",
    "recompute",
    "renumber_after_edit",
    "renumber_run",
    "resolve",
    "result_to_dict",
    "split_regions",
    "summary_to_dict",
]
