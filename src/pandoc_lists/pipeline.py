"""Whole-document recompute.

:func:`recompute` is the single entry point: one pure function from
(document, config) to a :class:`RecomputeResult`. Every call is a fresh,
full pass over every line (classify, split, number, resolve); nothing is
patched incrementally and nothing carries over from a previous pass.
Windowed renderers consume the result; they never feed partial input in.

:class:`RecomputePipeline` holds the latest published result for one open
document and serialises passes on it. :class:`DocumentStore` maps document
ids to pipelines so that switching documents swaps instances instead of
mutating shared state.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from dataclasses import dataclass, replace
from typing import Protocol, runtime_checkable

from pandoc_lists.classifier import MarkerMatch, match_marker
from pandoc_lists.code_regions import fenced_code_lines
from pandoc_lists.numbering import NumberingEngine, RegistrySnapshot
from pandoc_lists.references import ReferenceResolver
from pandoc_lists.regions import split_regions
from pandoc_lists.renumber import OrdinalRun, find_ordinal_runs, renumber_run
from pandoc_lists.types import (
    ContentRegion,
    CustomLabelMarker,
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
from pandoc_lists.validator import validate_list_blocks

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Document buffers
# ---------------------------------------------------------------------------

@runtime_checkable
class DocumentBuffer(Protocol):
    """Read-only, line-addressable view supplied by the host editor."""

    @property
    def line_count(self) -> int: ...

    def line_at(self, index: int) -> Line: ...

    def slice_string(self, start: int, end: int) -> str: ...


class TextBuffer:
    """:class:`DocumentBuffer` over an in-memory string, split on ``\\n``."""

    __slots__ = ("text", "_lines")

    def __init__(self, text: str) -> None:
        self.text = text
        lines: list[Line] = []
        pos = 0
        for i, row in enumerate(text.split("\n")):
            lines.append(Line(index=i, text=row, span=Span(pos, pos + len(row))))
            pos += len(row) + 1
        self._lines = tuple(lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def line_at(self, index: int) -> Line:
        return self._lines[index]

    def slice_string(self, start: int, end: int) -> str:
        return self.text[start:end]

    def __iter__(self) -> Iterator[Line]:
        return iter(self._lines)


def read_lines(buffer: DocumentBuffer) -> list[Line]:
    """Pull every line out of ``buffer``, rejecting inconsistent input.

    Raises :class:`PreconditionError` when a line's index does not match
    its position, when spans overlap or run backwards, or when a line's
    text differs from the buffer slice under its span.
    """
    lines: list[Line] = []
    prev_end = -1
    for i in range(buffer.line_count):
        line = buffer.line_at(i)
        if line.index != i:
            raise PreconditionError(f"line at position {i} reports index {line.index}")
        if line.span.start <= prev_end:
            raise PreconditionError(
                f"line {i} span {line.span.start}..{line.span.end} overlaps previous end {prev_end}",
            )
        if buffer.slice_string(line.span.start, line.span.end) != line.text:
            raise PreconditionError(f"line {i} text does not match buffer slice {line.span.start}..{line.span.end}")
        prev_end = line.span.end
        lines.append(line)
    return lines


# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class LineResult:
    """Everything a renderer needs to paint one line.

    ``number`` is set for hash and example markers, ``resolved_label`` for
    custom labels, ``ordinal`` for fancy markers. ``display_marker`` is the
    marker as it should read (``3.``, ``(2)``, ``(P1)``, ``C.``).
    """

    index: int
    kind: MarkerKind | None
    marker_span: Span | None = None
    invalid: bool = False
    number: int | None = None
    resolved_label: str | None = None
    ordinal: int | None = None
    display_marker: str | None = None
    is_duplicate: bool = False
    first_occurrence: FirstOccurrence | None = None
    continuation_of: int | None = None


@dataclass(frozen=True, slots=True)
class RecomputeResult:
    revision: int
    config: NumberingConfig
    lines: tuple[LineResult, ...]
    regions: tuple[ContentRegion, ...]
    replacements: tuple[Replacement, ...]
    runs: tuple[OrdinalRun, ...]
    examples: RegistrySnapshot
    custom_labels: RegistrySnapshot
    hash_count: int
    placeholders: dict[str, int]

    def line(self, index: int) -> LineResult:
        return self.lines[index]

    def replacements_in(self, span: Span) -> list[Replacement]:
        """Replacements fully inside ``span`` (e.g. a visible window)."""
        return [r for r in self.replacements if span.start <= r.span.start and r.span.end <= span.end]

    @property
    def invalid_lines(self) -> frozenset[int]:
        return frozenset(line.index for line in self.lines if line.invalid)


# ---------------------------------------------------------------------------
# Full pass
# ---------------------------------------------------------------------------

def _marker_content(line: Line, found: MarkerMatch) -> str:
    return line.text[found.content_start:].strip()


def recompute(
    document: str | DocumentBuffer,
    config: NumberingConfig | None = None,
    revision: int = 0,
) -> RecomputeResult:
    """Run one fresh pass over the whole document."""
    cfg = config or NumberingConfig()
    buffer = TextBuffer(document) if isinstance(document, str) else document
    lines = read_lines(buffer)
    texts = [line.text for line in lines]

    # Phase 1: classify and split
    fenced = fenced_code_lines(lines)
    matches: list[MarkerMatch | None] = [
        None if line.index in fenced else match_marker(line.text, cfg) for line in lines
    ]
    invalid = validate_list_blocks(texts, cfg, fenced)
    split = split_regions(lines, matches, fenced, invalid)

    ordinals: dict[int, tuple[FancyFamily, int | None, str]] = {}
    runs = tuple(find_ordinal_runs(lines, cfg))
    for run in runs:
        for item in renumber_run(run):
            ordinals[item.member.line_index] = (run.family, item.ordinal, item.marker)

    # Phase 2: number in strict document order
    engine = NumberingEngine()
    results: list[LineResult] = []
    for line in lines:
        i = line.index
        found = matches[i]
        kind = found.kind if i in invalid and found is not None else split.kinds[i]
        base = LineResult(
            index=i,
            kind=kind,
            marker_span=split.marker_spans[i],
            invalid=i in invalid,
            continuation_of=split.continuation_of.get(i),
        )
        if found is None or i in invalid:
            results.append(base)
            continue

        match kind:
            case HashMarker():
                n = engine.next_hash()
                results.append(replace(base, number=n, display_marker=f"{n}."))
            case ExampleMarker(label=label):
                reg = engine.register_example(label, _marker_content(line, found), i)
                first = engine.example_registry.first_occurrence.get(label) if reg.is_duplicate and label else None
                results.append(replace(
                    base,
                    number=reg.number,
                    display_marker=f"({reg.number})",
                    is_duplicate=reg.is_duplicate,
                    first_occurrence=first,
                ))
            case CustomLabelMarker(raw_label=raw):
                reg = engine.register_custom_label(raw, _marker_content(line, found), i)
                first = (
                    engine.custom_label_registry.first_occurrence.get(reg.resolved_label)
                    if reg.is_duplicate else None
                )
                results.append(replace(
                    base,
                    resolved_label=reg.resolved_label,
                    display_marker=f"({reg.resolved_label})",
                    is_duplicate=reg.is_duplicate,
                    first_occurrence=first,
                ))
            case FancyMarker():
                # run members take the run's family
                if i in ordinals:
                    family, ordinal, marker = ordinals[i]
                    results.append(replace(
                        base,
                        kind=replace(kind, family=family),
                        ordinal=ordinal,
                        display_marker=marker,
                    ))
                else:
                    results.append(replace(base, display_marker=found.marker_text))
            case _:
                results.append(base)

    # Phase 3: resolve references against the finished registries
    resolver = ReferenceResolver(engine, cfg)
    replacements: list[Replacement] = []
    for region in split.regions:
        text = buffer.slice_string(region.span.start, region.span.end)
        replacements.extend(resolver.resolve(text, region.span.start))
    replacements.sort(key=lambda r: r.span.start)

    logger.debug(
        "revision %d: %d lines, %d regions, %d replacements, %d invalid",
        revision, len(lines), len(split.regions), len(replacements), len(invalid),
    )
    return RecomputeResult(
        revision=revision,
        config=cfg,
        lines=tuple(results),
        regions=split.regions,
        replacements=tuple(replacements),
        runs=runs,
        examples=engine.example_registry.snapshot(),
        custom_labels=engine.custom_label_registry.snapshot(),
        hash_count=engine.hash_counter,
        placeholders=engine.placeholder_mappings(),
    )


# ---------------------------------------------------------------------------
# Per-document state
# ---------------------------------------------------------------------------

class RecomputePipeline:
    """Latest published result for one open document.

    Passes on the same pipeline are serialised by a lock. A finished pass
    is published only when its revision is not older than the published
    one, so a slow stale pass can never overwrite a newer result.
    """

    def __init__(self, document_id: str, config: NumberingConfig | None = None) -> None:
        self.document_id = document_id
        self._config = config or NumberingConfig()
        self._lock = threading.Lock()
        self._published: RecomputeResult | None = None

    @property
    def config(self) -> NumberingConfig:
        return self._config

    @property
    def result(self) -> RecomputeResult | None:
        return self._published

    def recompute(self, document: str | DocumentBuffer, revision: int) -> RecomputeResult:
        """Run a fresh pass and return the published (newest) result."""
        with self._lock:
            result = recompute(document, self._config, revision)
            published = self._published
            if published is not None and revision < published.revision:
                logger.debug(
                    "%s: dropping stale revision %d (published %d)",
                    self.document_id, revision, published.revision,
                )
                return published
            self._published = result
            return result

    def set_config(self, config: NumberingConfig) -> None:
        """Switch settings; the next pass starts from scratch."""
        with self._lock:
            self._config = config
            self._published = None

    def reset(self) -> None:
        with self._lock:
            self._published = None


class DocumentStore:
    """Pipelines keyed by document id."""

    def __init__(self, config: NumberingConfig | None = None) -> None:
        self.config = config or NumberingConfig()
        self._lock = threading.Lock()
        self._pipelines: dict[str, RecomputePipeline] = {}

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._pipelines

    def __len__(self) -> int:
        return len(self._pipelines)

    def get(self, document_id: str) -> RecomputePipeline:
        with self._lock:
            pipeline = self._pipelines.get(document_id)
            if pipeline is None:
                pipeline = RecomputePipeline(document_id, self.config)
                self._pipelines[document_id] = pipeline
            return pipeline

    def reset(self, document_id: str) -> None:
        """Drop a document's published result, e.g. after a reload."""
        with self._lock:
            pipeline = self._pipelines.get(document_id)
        if pipeline is not None:
            pipeline.reset()

    def close(self, document_id: str) -> None:
        with self._lock:
            self._pipelines.pop(document_id, None)

    def rename(self, old_id: str, new_id: str) -> RecomputePipeline:
        """Identity change: the renamed document starts with no state."""
        with self._lock:
            self._pipelines.pop(old_id, None)
            pipeline = RecomputePipeline(new_id, self.config)
            self._pipelines[new_id] = pipeline
            return pipeline
