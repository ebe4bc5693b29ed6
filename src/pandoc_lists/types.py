"""Core types shared by every stage of the numbering pipeline.

All span coordinates are absolute character offsets into the full
document text (never line-relative). All dataclasses use slots=True.

Type hierarchy:
  Span             — Absolute [start, end) coordinate
  Line             — Immutable view of one document row
  MarkerKind       — Closed union of recognised list markers
  ContentRegion    — Reference-bearing text owned by one structural element
  FirstOccurrence  — Diagnostic payload for duplicate labels
  Replacement      — Resolved reference handed to renderers
  NumberingConfig  — Caller-supplied feature switches
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Literal, TypeAlias


class PreconditionError(ValueError):
    """Integration code handed the core inconsistent input."""


# ---------------------------------------------------------------------------
# Coordinates
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Span:
    """Absolute [start, end) span in the document text."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"start must be >= 0, got {self.start}")
        if self.end < self.start:
            raise ValueError(f"end must be >= start, got {self.end} < {self.start}")

    def __len__(self) -> int:
        return self.end - self.start

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end


@dataclass(frozen=True, slots=True)
class Line:
    """One text row. ``span`` excludes the trailing newline."""

    index: int
    text: str
    span: Span

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"index must be >= 0, got {self.index}")
        if len(self.span) != len(self.text):
            raise ValueError(
                f"line {self.index}: span length {len(self.span)} != text length {len(self.text)}",
            )

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


# ---------------------------------------------------------------------------
# MarkerKind: closed tagged union
# ---------------------------------------------------------------------------

class FancyFamily(StrEnum):
    UPPER_ALPHA = "upper-alpha"
    LOWER_ALPHA = "lower-alpha"
    UPPER_ROMAN = "upper-roman"
    LOWER_ROMAN = "lower-roman"


FancyDelimiter: TypeAlias = Literal[".", ")"]
DefinitionDelimiter: TypeAlias = Literal["~", ":"]


@dataclass(frozen=True, slots=True)
class HashMarker:
    """``#.`` auto-numbered item."""


@dataclass(frozen=True, slots=True)
class FancyMarker:
    """Letter or roman marker such as ``B.`` or ``iv)``."""

    family: FancyFamily
    value: str
    delimiter: FancyDelimiter


@dataclass(frozen=True, slots=True)
class ExampleMarker:
    """``(@label)`` example item; ``label`` is None for ``(@)``."""

    label: str | None


@dataclass(frozen=True, slots=True)
class CustomLabelMarker:
    """``{::template}`` item; the template may embed ``(#name)`` placeholders."""

    raw_label: str


@dataclass(frozen=True, slots=True)
class DefinitionTerm:
    """Line immediately introducing a definition item (needs lookahead)."""


@dataclass(frozen=True, slots=True)
class DefinitionItem:
    """``~`` or ``:`` definition line."""

    delimiter: DefinitionDelimiter


MarkerKind: TypeAlias = (
    HashMarker
    | FancyMarker
    | ExampleMarker
    | CustomLabelMarker
    | DefinitionTerm
    | DefinitionItem
)


def kind_name(kind: MarkerKind | None) -> str:
    """Stable tag used in serialized results."""
    match kind:
        case None:
            return "none"
        case HashMarker():
            return "hash"
        case FancyMarker():
            return "fancy"
        case ExampleMarker():
            return "example"
        case CustomLabelMarker():
            return "custom-label"
        case DefinitionTerm():
            return "definition-term"
        case DefinitionItem():
            return "definition-item"


# ---------------------------------------------------------------------------
# Regions, diagnostics, replacements
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ContentRegion:
    """Text after a marker (or a plain prose line) handed to reference resolution.

    ``line_indices`` lists every line merged into the region; ``line_index``
    is the owning (first) line.
    """

    line_index: int
    span: Span
    parent_kind: MarkerKind | None
    multiline: bool = False
    line_indices: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if self.line_indices and self.line_indices[0] != self.line_index:
            raise ValueError("line_indices must start with line_index")
        if self.multiline and len(self.line_indices) < 2:
            raise ValueError("multiline regions must cover at least two lines")


@dataclass(frozen=True, slots=True)
class FirstOccurrence:
    """Where a label was first declared."""

    line: int
    content: str


ReplacementKind: TypeAlias = Literal["example-ref", "custom-label-ref", "duplicate-warning"]


@dataclass(frozen=True, slots=True)
class Replacement:
    """A resolved reference token.

    ``duplicate-warning`` replacements still carry the first occurrence's
    number / label so renderers can display it next to the warning.
    """

    span: Span
    kind: ReplacementKind
    display_text: str
    source_label: str
    number: int | None = None
    content: str = ""
    first_occurrence: FirstOccurrence | None = None


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

_STRICT_KEYS = ("strict_mode", "strictMode", "strictPandocMode")
_EXTENDED_KEYS = ("extended_labels", "extendedLabels", "moreExtendedSyntax")


@dataclass(frozen=True, slots=True)
class NumberingConfig:
    """Feature switches supplied by the caller; the core never reads files."""

    strict_mode: bool = False
    extended_labels: bool = True

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> NumberingConfig:
        """Build from host settings, accepting snake, camel and legacy host keys."""
        strict = next((bool(data[k]) for k in _STRICT_KEYS if k in data), False)
        extended = next((bool(data[k]) for k in _EXTENDED_KEYS if k in data), True)
        return cls(strict_mode=strict, extended_labels=extended)
