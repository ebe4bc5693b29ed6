"""Ordinal runs for fancy (letter / roman) lists.

A run is a maximal block of fancy items at one indentation that share a
delimiter, a letter case and a family. Its first item fixes the start
(``D.`` starts at 4); every later item's ordinal is ``start + k``
regardless of what its marker currently says. Runs are always recomputed
from their first member, because inserting or deleting a line can change
where a run starts.

Single-letter markers are ambiguous: ``c.`` is the third letter and also
roman 100. A run's family is settled by its first member (multi-letter
roman numerals and ``i``/``I`` are roman, anything else is alphabetic),
and later ambiguous members follow the run.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from pandoc_lists.classifier import indent_width, match_marker
from pandoc_lists.code_regions import fenced_code_lines
from pandoc_lists.numerals import (
    ROMAN_MAX,
    format_ordinal,
    has_roman_chars,
    is_roman_family,
    is_roman_numeral,
    ordinal_for,
)
from pandoc_lists.types import (
    CustomLabelMarker,
    DefinitionItem,
    ExampleMarker,
    FancyDelimiter,
    FancyFamily,
    FancyMarker,
    HashMarker,
    Line,
    NumberingConfig,
    Span,
)
from pandoc_lists.validator import validate_list_blocks

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RunMember:
    """One fancy item as it currently appears in the text."""

    line_index: int
    indent: str
    value: str
    delimiter: FancyDelimiter
    spacing: str
    content: str


@dataclass(frozen=True, slots=True)
class OrdinalRun:
    family: FancyFamily
    delimiter: FancyDelimiter
    indent: str
    members: tuple[RunMember, ...]

    def __post_init__(self) -> None:
        if not self.members:
            raise ValueError("an ordinal run needs at least one member")

    @property
    def start(self) -> int:
        first = self.members[0].value
        return ordinal_for(self.family, first) or 1

    @property
    def line_indices(self) -> tuple[int, ...]:
        return tuple(m.line_index for m in self.members)

    def spans_line(self, index: int) -> bool:
        return self.members[0].line_index <= index <= self.members[-1].line_index


@dataclass(frozen=True, slots=True)
class RenumberedMember:
    member: RunMember
    ordinal: int | None
    value: str
    delimiter: FancyDelimiter

    @property
    def marker(self) -> str:
        return f"{self.value}{self.delimiter}"

    @property
    def changed(self) -> bool:
        return self.value != self.member.value

    def render(self) -> str:
        m = self.member
        return f"{m.indent}{self.marker}{m.spacing}{m.content}"


@dataclass(frozen=True, slots=True)
class LineEdit:
    """Whole-line replacement; ``span`` is the line's current span."""

    line_index: int
    span: Span
    old_text: str
    new_text: str


# ---------------------------------------------------------------------------
# Family resolution
# ---------------------------------------------------------------------------

def _family(value: str, roman: bool) -> FancyFamily:
    upper = value.isupper()
    if roman:
        return FancyFamily.UPPER_ROMAN if upper else FancyFamily.LOWER_ROMAN
    return FancyFamily.UPPER_ALPHA if upper else FancyFamily.LOWER_ALPHA


def run_family_for_first(value: str) -> FancyFamily:
    """Family a run takes from its first marker value."""
    if len(value) > 1:
        return _family(value, is_roman_numeral(value))
    return _family(value, value in ("i", "I"))


def _compatible(value: str, family: FancyFamily) -> bool:
    """Whether ``value`` can continue a run of ``family``."""
    if value.isupper() != (family in (FancyFamily.UPPER_ALPHA, FancyFamily.UPPER_ROMAN)):
        return False
    if len(value) == 1 and has_roman_chars(value):
        return True
    if is_roman_family(family):
        return is_roman_numeral(value)
    return not (len(value) > 1 and is_roman_numeral(value))


@dataclass(slots=True)
class _OpenRun:
    family: FancyFamily
    delimiter: FancyDelimiter
    indent: str
    width: int
    members: list[RunMember]

    def close(self) -> OrdinalRun:
        return OrdinalRun(
            family=self.family,
            delimiter=self.delimiter,
            indent=self.indent,
            members=tuple(self.members),
        )


# ---------------------------------------------------------------------------
# Run detection
# ---------------------------------------------------------------------------

def find_ordinal_runs(lines: Sequence[Line], config: NumberingConfig | None = None) -> list[OrdinalRun]:
    """Split the document into ordinal runs, in document order.

    Indented non-marker lines never break a run. Blank lines are skipped
    in lenient mode and end every open run in strict mode. Fenced code,
    unindented prose and strict-invalid lines end every open run.
    """
    cfg = config or NumberingConfig()
    fenced = fenced_code_lines(lines)
    invalid = validate_list_blocks([line.text for line in lines], cfg, fenced)

    runs: list[OrdinalRun] = []
    stack: list[_OpenRun] = []

    def close_from(width: int) -> None:
        while stack and stack[-1].width >= width:
            finished = stack.pop()
            runs.append(finished.close())

    for line in lines:
        text = line.text
        if line.index in fenced or line.index in invalid:
            close_from(0)
            continue
        if line.is_blank:
            if cfg.strict_mode:
                close_from(0)
            continue

        found = match_marker(text, cfg)
        width = indent_width(text)
        if found is None:
            if width == 0:
                close_from(0)
            continue

        kind = found.kind
        if not isinstance(kind, FancyMarker):
            close_from(width)
            continue

        member = RunMember(
            line_index=line.index,
            indent=found.indent,
            value=kind.value,
            delimiter=kind.delimiter,
            spacing=found.spacing,
            content=text[found.content_start:],
        )
        close_from(width + 1)
        top = stack[-1] if stack else None
        if (
            top is not None
            and top.width == width
            and top.delimiter == kind.delimiter
            and _compatible(kind.value, top.family)
        ):
            top.members.append(member)
            continue
        if top is not None and top.width == width:
            close_from(width)
        stack.append(_OpenRun(
            family=run_family_for_first(kind.value),
            delimiter=kind.delimiter,
            indent=found.indent,
            width=width,
            members=[member],
        ))

    close_from(0)
    runs.sort(key=lambda run: run.members[0].line_index)
    return runs


# ---------------------------------------------------------------------------
# Renumbering
# ---------------------------------------------------------------------------

def _representable(family: FancyFamily, n: int) -> bool:
    return not is_roman_family(family) or n <= ROMAN_MAX


def renumber_run(run: OrdinalRun) -> tuple[RenumberedMember, ...]:
    """Recompute every member's ordinal and marker from the run start.

    Roman members past the codec limit keep their literal marker and get
    no ordinal.
    """
    start = run.start
    items: list[RenumberedMember] = []
    for k, member in enumerate(run.members):
        n = start + k
        if _representable(run.family, n):
            items.append(RenumberedMember(
                member=member,
                ordinal=n,
                value=format_ordinal(run.family, n),
                delimiter=run.delimiter,
            ))
        else:
            items.append(RenumberedMember(
                member=member,
                ordinal=None,
                value=member.value,
                delimiter=member.delimiter,
            ))
    return tuple(items)


def _run_for_edit(runs: Sequence[OrdinalRun], edited_line: int) -> OrdinalRun | None:
    for run in runs:
        if run.spans_line(edited_line):
            return run
    for run in runs:
        first = run.members[0].line_index
        last = run.members[-1].line_index
        if first == edited_line + 1 or last == edited_line - 1:
            return run
    return None


def renumber_after_edit(
    lines: Sequence[Line],
    edited_line: int,
    config: NumberingConfig | None = None,
) -> list[LineEdit]:
    """Line replacements that bring the run around ``edited_line`` back in order.

    Only lines whose text actually changes are returned.
    """
    if not 0 <= edited_line < len(lines):
        raise ValueError(f"edited_line {edited_line} outside 0..{len(lines) - 1}")

    run = _run_for_edit(find_ordinal_runs(lines, config), edited_line)
    if run is None:
        return []

    edits: list[LineEdit] = []
    for item in renumber_run(run):
        if not item.changed:
            continue
        line = lines[item.member.line_index]
        edits.append(LineEdit(
            line_index=line.index,
            span=line.span,
            old_text=line.text,
            new_text=item.render(),
        ))
    logger.debug("renumbered run at line %d: %d edit(s)", run.members[0].line_index, len(edits))
    return edits


# ---------------------------------------------------------------------------
# Next marker
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class NextMarker:
    """Marker that continues a list on a new line after ``index``."""

    marker: str
    indent: str
    spacing: str

    @property
    def prefix(self) -> str:
        return f"{self.indent}{self.marker}{self.spacing}"


def _fancy_ordinal_at(
    lines: Sequence[Line],
    index: int,
    kind: FancyMarker,
    config: NumberingConfig,
) -> tuple[FancyFamily, int | None]:
    for run in find_ordinal_runs(lines, config):
        if index in run.line_indices:
            item = renumber_run(run)[run.line_indices.index(index)]
            return run.family, item.ordinal
    family = run_family_for_first(kind.value)
    return family, ordinal_for(family, kind.value)


def next_marker(
    lines: Sequence[Line],
    index: int,
    config: NumberingConfig | None = None,
) -> NextMarker | None:
    """Marker for a new item inserted right after line ``index``.

    Hash, example, definition and custom-label items repeat their bare
    marker (``#.``, ``(@)``, ``:``, ``{::}``). Fancy items advance one
    step in the family of the run they belong to, so ``i.`` after ``h.``
    continues with ``j.`` and ``iv.`` continues with ``v.``. Returns None
    when the line is not a list item or the next ordinal cannot be written.
    """
    if not 0 <= index < len(lines):
        raise ValueError(f"index {index} outside 0..{len(lines) - 1}")
    cfg = config or NumberingConfig()
    if index in fenced_code_lines(lines):
        return None
    found = match_marker(lines[index].text, cfg)
    if found is None:
        return None

    match found.kind:
        case HashMarker():
            marker = "#."
        case ExampleMarker():
            marker = "(@)"
        case CustomLabelMarker():
            marker = "{::}"
        case DefinitionItem(delimiter=delimiter):
            marker = delimiter
        case FancyMarker() as kind:
            family, n = _fancy_ordinal_at(lines, index, kind, cfg)
            if n is None or not _representable(family, n + 1):
                return None
            marker = f"{format_ordinal(family, n + 1)}{kind.delimiter}"
        case _:
            return None
    return NextMarker(marker=marker, indent=found.indent, spacing=found.spacing)
