"""Line-level marker classification.

Turns one raw line into a tagged :data:`MarkerKind` (or None). Classification
is deterministic, total and side-effect free: malformed candidates simply
fall through to None and are treated as prose.

Precedence:
  1. Decimal lists (``1.``, ``2)``) are never fancy.
  2. ``#.``            → HashMarker
  3. ``(@label)``      → ExampleMarker (``(@)`` is a valid, unlabeled marker)
  4. ``{::template}``  → CustomLabelMarker (only with extended labels enabled)
  5. ``~`` / ``:``     → DefinitionItem
  6. letters / roman   → FancyMarker; roman characters win over alpha, so
     ``i.``, ``I.``, ``iv.`` and ``C.`` are roman.

Definition terms need lookahead and are assigned by the region splitter.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pandoc_lists.numerals import has_roman_chars
from pandoc_lists.types import (
    CustomLabelMarker,
    DefinitionItem,
    ExampleMarker,
    FancyFamily,
    FancyMarker,
    HashMarker,
    MarkerKind,
    NumberingConfig,
)

# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

HASH_LIST_RE = re.compile(r"^(\s*)(#\.)(\s+)")
FANCY_LIST_RE = re.compile(r"^(\s*)(([A-Z]+|[a-z]+|[IVXLCDM]+|[ivxlcdm]+)([.)]))(\s+)")
NUMBERED_LIST_RE = re.compile(r"^(\s*)([0-9]+[.)])")
UNORDERED_LIST_RE = re.compile(r"^(\s*)[-*+]\s+")
EXAMPLE_LIST_RE = re.compile(r"^(\s*)(\(@([a-zA-Z0-9_-]*)\))(\s+)")
CUSTOM_LABEL_LIST_RE = re.compile(r"^(\s*)(\{::([^}]+)\})(\s+)")
DEFINITION_MARKER_RE = re.compile(r"^(\s*)([~:])(\s+)")
CAPITAL_LETTER_LIST_RE = re.compile(r"^(\s*)([A-Z])(\.)(\s+)")
INDENTED_CONTENT_RE = re.compile(r"^(    |\t)")

# Custom labels may not contain whitespace, pipes, angle brackets or controls
_INVALID_LABEL_CHAR_RE = re.compile(r"[\s|<>\x00-\x1f\x7f]")

# Prefix "{::" before the label text
CUSTOM_LABEL_PREFIX_LEN = 3

TAB_WIDTH = 4


@dataclass(frozen=True, slots=True)
class MarkerMatch:
    """Classified marker plus its line-relative columns.

    ``marker_start``/``marker_end`` bracket the marker token including its
    trailing whitespace; ``content_start`` is where body text begins.
    """

    kind: MarkerKind
    indent: str
    marker_start: int
    marker_end: int
    content_start: int
    marker_text: str
    spacing: str


def _fancy_family(value: str) -> FancyFamily:
    if has_roman_chars(value):
        return FancyFamily.UPPER_ROMAN if value.isupper() else FancyFamily.LOWER_ROMAN
    return FancyFamily.UPPER_ALPHA if value.isupper() else FancyFamily.LOWER_ALPHA


def is_valid_custom_label(label: str) -> bool:
    return bool(label) and not _INVALID_LABEL_CHAR_RE.search(label)


def _build(kind: MarkerKind, m: re.Match[str], marker_group: int, space_group: int) -> MarkerMatch:
    indent = m.group(1)
    marker = m.group(marker_group)
    spacing = m.group(space_group)
    start = len(indent)
    end = start + len(marker) + len(spacing)
    return MarkerMatch(
        kind=kind,
        indent=indent,
        marker_start=start,
        marker_end=end,
        content_start=end,
        marker_text=marker,
        spacing=spacing,
    )


def match_marker(text: str, config: NumberingConfig | None = None) -> MarkerMatch | None:
    """Classify ``text`` and report where its marker and content sit."""
    cfg = config or NumberingConfig()

    m = HASH_LIST_RE.match(text)
    if m:
        return _build(HashMarker(), m, 2, 3)

    m = EXAMPLE_LIST_RE.match(text)
    if m:
        label = m.group(3)
        return _build(ExampleMarker(label=label or None), m, 2, 4)

    m = CUSTOM_LABEL_LIST_RE.match(text)
    if m:
        if cfg.extended_labels and is_valid_custom_label(m.group(3)):
            return _build(CustomLabelMarker(raw_label=m.group(3)), m, 2, 4)
        return None

    m = DEFINITION_MARKER_RE.match(text)
    if m:
        delimiter = "~" if m.group(2) == "~" else ":"
        return _build(DefinitionItem(delimiter=delimiter), m, 2, 3)

    if NUMBERED_LIST_RE.match(text):
        return None

    m = FANCY_LIST_RE.match(text)
    if m:
        value = m.group(3)
        delimiter = "." if m.group(4) == "." else ")"
        kind = FancyMarker(family=_fancy_family(value), value=value, delimiter=delimiter)
        return _build(kind, m, 2, 5)

    return None


def classify(text: str, config: NumberingConfig | None = None) -> MarkerKind | None:
    """Return the marker kind of one line, or None for prose."""
    found = match_marker(text, config)
    return found.kind if found is not None else None


# ---------------------------------------------------------------------------
# Helpers shared by the splitter, validator and renumberer
# ---------------------------------------------------------------------------

def indent_width(text: str) -> int:
    """Leading whitespace width in columns (tab = 4)."""
    width = 0
    for ch in text:
        if ch == " ":
            width += 1
        elif ch == "\t":
            width += TAB_WIDTH
        else:
            break
    return width


def is_indented_content(text: str) -> bool:
    """Four spaces or a tab: definition paragraph indentation."""
    return bool(INDENTED_CONTENT_RE.match(text))


def is_list_item_line(text: str, config: NumberingConfig | None = None) -> bool:
    """Any list marker the strict-mode validator cares about."""
    if match_marker(text, config) is not None:
        return True
    return bool(UNORDERED_LIST_RE.match(text) or NUMBERED_LIST_RE.match(text))
