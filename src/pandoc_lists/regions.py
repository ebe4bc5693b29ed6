"""Structural split of classified lines into content regions.

Phase one of a pass classifies every line; this module is phase two. It
decides which lines are definition terms (lookahead), which lines continue
the item above them, and which character spans are handed to reference
resolution. Marker text never lands inside a region, so ``(@a)`` in the
marker position is a declaration and ``(@a)`` in body text is a reference.

Rules:
  - Marker lines own a region covering the text after the marker.
  - A non-marker line indented to the owning item's content column merges
    into that item's region (definition items: four spaces or a tab).
  - After a blank line, an indented paragraph forms its own region whose
    ``parent_kind`` is the owning item's kind.
  - Any other non-blank line is prose and owns a ``parent_kind=None`` region.
  - Definition terms, fenced code and strict-mode invalid lines own nothing.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from pandoc_lists.classifier import MarkerMatch, indent_width, is_indented_content
from pandoc_lists.types import (
    ContentRegion,
    DefinitionItem,
    DefinitionTerm,
    Line,
    MarkerKind,
    Span,
)


@dataclass(frozen=True, slots=True)
class SplitResult:
    """Per-line structure of one pass.

    ``kinds`` includes :class:`DefinitionTerm` entries, which the classifier
    cannot produce on its own. ``continuation_of`` maps a continuation line
    to the marker line that owns it.
    """

    kinds: tuple[MarkerKind | None, ...]
    marker_spans: tuple[Span | None, ...]
    regions: tuple[ContentRegion, ...]
    continuation_of: dict[int, int]

    def region_for_line(self, index: int) -> ContentRegion | None:
        for region in self.regions:
            if index in region.line_indices:
                return region
        return None


@dataclass(slots=True)
class _OpenRegion:
    """Region still accepting merged lines."""

    line_index: int
    start: int
    end: int
    parent_kind: MarkerKind | None
    line_indices: list[int] = field(default_factory=list[int])

    def close(self) -> ContentRegion:
        return ContentRegion(
            line_index=self.line_index,
            span=Span(self.start, self.end),
            parent_kind=self.parent_kind,
            multiline=len(self.line_indices) > 1,
            line_indices=tuple(self.line_indices),
        )


@dataclass(frozen=True, slots=True)
class _ListContext:
    """The item that indented lines below it may continue."""

    owner: int
    kind: MarkerKind
    content_column: int

    def accepts(self, text: str) -> bool:
        if isinstance(self.kind, DefinitionItem):
            return is_indented_content(text)
        return indent_width(text) >= self.content_column


def _content_column(text: str, match: MarkerMatch) -> int:
    return indent_width(text[: len(match.indent)]) + len(match.marker_text) + len(match.spacing)


def find_definition_terms(
    lines: Sequence[Line],
    matches: Sequence[MarkerMatch | None],
    excluded: frozenset[int] = frozenset(),
) -> frozenset[int]:
    """Unindented prose lines introducing a definition item.

    The item may follow directly or after exactly one blank line.
    """

    def is_item(j: int) -> bool:
        found = matches[j]
        return j not in excluded and found is not None and isinstance(found.kind, DefinitionItem)

    terms: set[int] = set()
    n = len(lines)
    for i, line in enumerate(lines):
        if i in excluded or matches[i] is not None or line.is_blank:
            continue
        if line.text[:1].isspace():
            continue
        if i + 1 < n and is_item(i + 1):
            terms.add(i)
        elif i + 2 < n and lines[i + 1].is_blank and is_item(i + 2):
            terms.add(i)
    return frozenset(terms)


def split_regions(
    lines: Sequence[Line],
    matches: Sequence[MarkerMatch | None],
    fenced: frozenset[int] = frozenset(),
    invalid: frozenset[int] = frozenset(),
) -> SplitResult:
    """Assign every line its structural role and build content regions.

    ``matches`` is the classifier output, one entry per line. Lines in
    ``fenced`` or ``invalid`` are treated as plain text with no region.
    """
    if len(matches) != len(lines):
        raise ValueError(f"expected {len(lines)} matches, got {len(matches)}")

    excluded = fenced | invalid
    terms = find_definition_terms(lines, matches, excluded)

    kinds: list[MarkerKind | None] = [None] * len(lines)
    marker_spans: list[Span | None] = [None] * len(lines)
    regions: list[ContentRegion] = []
    continuation_of: dict[int, int] = {}

    current: _OpenRegion | None = None
    context: _ListContext | None = None
    after_blank = False

    def flush() -> None:
        nonlocal current
        if current is not None:
            regions.append(current.close())
            current = None

    for line in lines:
        i = line.index
        text = line.text
        base = line.span.start

        if i in excluded:
            flush()
            context = None
            after_blank = False
            continue

        if line.is_blank:
            flush()
            after_blank = True
            continue

        if i in terms:
            flush()
            kinds[i] = DefinitionTerm()
            context = None
            after_blank = False
            continue

        found = matches[i]
        if found is not None:
            flush()
            kinds[i] = found.kind
            marker_spans[i] = Span(base + found.marker_start, base + found.marker_end)
            current = _OpenRegion(
                line_index=i,
                start=base + found.content_start,
                end=line.span.end,
                parent_kind=found.kind,
                line_indices=[i],
            )
            context = _ListContext(owner=i, kind=found.kind, content_column=_content_column(text, found))
            after_blank = False
            continue

        if context is not None and context.accepts(text):
            continuation_of[i] = context.owner
            if current is not None and not after_blank:
                current.end = line.span.end
                current.line_indices.append(i)
            else:
                flush()
                current = _OpenRegion(
                    line_index=i,
                    start=base,
                    end=line.span.end,
                    parent_kind=context.kind,
                    line_indices=[i],
                )
            after_blank = False
            continue

        # Plain prose: one region per line, and the list context ends
        flush()
        context = None
        after_blank = False
        regions.append(ContentRegion(line_index=i, span=line.span, parent_kind=None, line_indices=(i,)))

    flush()
    return SplitResult(
        kinds=tuple(kinds),
        marker_spans=tuple(marker_spans),
        regions=tuple(regions),
        continuation_of=continuation_of,
    )
