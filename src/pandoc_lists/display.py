"""Cursor-dependent display hint for custom-label markers.

Pure rendering helper: the numbering pass never looks at the cursor, and
nothing here touches a :class:`~pandoc_lists.numbering.NumberingEngine`.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum

from pandoc_lists.classifier import MarkerMatch
from pandoc_lists.numbering import PLACEHOLDER_RE
from pandoc_lists.types import CustomLabelMarker, Line, Span


class DisplayLevel(StrEnum):
    FULL = "full"                    # raw marker source, e.g. {::P(#a)}
    SEMI_EXPANDED = "semi-expanded"  # brackets kept, placeholders numbered
    COLLAPSED = "collapsed"          # resolved label only, e.g. (P1)


def display_level(
    cursor: int | None,
    marker_span: Span,
    placeholder_spans: Sequence[Span],
    line_span: Span | None = None,
) -> DisplayLevel:
    """How much of a custom-label marker to show for a cursor position.

    ``cursor`` is None when the editor has no cursor in this document.
    """
    if cursor is not None and marker_span.contains(cursor):
        return DisplayLevel.FULL
    # inclusive end: a cursor resting at marker_span.end collapses the label
    in_marker = cursor is not None and marker_span.start <= cursor <= marker_span.end
    if placeholder_spans and not in_marker:
        on_line = cursor is not None and line_span is not None and line_span.start <= cursor <= line_span.end
        return DisplayLevel.SEMI_EXPANDED if on_line else DisplayLevel.COLLAPSED
    return DisplayLevel.COLLAPSED


def placeholder_spans(line: Line, match: MarkerMatch) -> list[Span]:
    """Absolute spans of the ``(#name)`` tokens in a custom-label marker."""
    if not isinstance(match.kind, CustomLabelMarker):
        return []
    base = line.span.start + match.marker_start
    return [Span(base + m.start(), base + m.end()) for m in PLACEHOLDER_RE.finditer(match.marker_text)]
