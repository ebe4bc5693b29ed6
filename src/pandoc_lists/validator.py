"""Strict-mode list block validation.

Pandoc only honours a list when the block is separated from surrounding
prose by blank lines, and an uppercase single-letter marker with a period
must be followed by at least two spaces (``A.  item``) so that initials
such as ``B. Russell wrote`` stay prose.

A list block is a maximal run of list-item lines plus their continuation
lines. Invalid blocks are reported line by line; the splitter then renders
those lines as plain text and the numbering engine skips them.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from pandoc_lists.classifier import (
    CAPITAL_LETTER_LIST_RE,
    DEFINITION_MARKER_RE,
    is_indented_content,
    is_list_item_line,
)
from pandoc_lists.types import NumberingConfig

_LEADING_WS_RE = re.compile(r"^(\s+)")

# Continuation lines need at least this many leading columns
_MIN_CONTINUATION_INDENT = 2


def is_list_continuation(text: str, prev_in_list: bool, config: NumberingConfig | None = None) -> bool:
    """Indented non-marker line following a list item or another continuation."""
    if not prev_in_list or is_list_item_line(text, config):
        return False
    m = _LEADING_WS_RE.match(text)
    if not m or not text.strip():
        return False
    indent = m.group(1)
    return len(indent) >= _MIN_CONTINUATION_INDENT or "\t" in indent


def _is_definition_term_before(texts: Sequence[str], i: int) -> bool:
    """Line i is a definition marker directly under a term line."""
    if i == 0:
        return False
    prev = texts[i - 1]
    return (
        bool(prev.strip())
        and not DEFINITION_MARKER_RE.match(prev)
        and not is_indented_content(prev)
        and bool(DEFINITION_MARKER_RE.match(texts[i]))
    )


def validate_list_blocks(
    texts: Sequence[str],
    config: NumberingConfig | None = None,
    skip: frozenset[int] = frozenset(),
) -> frozenset[int]:
    """Return 0-based indices of list lines that fail strict validation.

    Lines in ``skip`` (fenced code) are never list items themselves.
    """
    cfg = config or NumberingConfig()
    if not cfg.strict_mode:
        return frozenset()

    def is_item(j: int) -> bool:
        return j not in skip and is_list_item_line(texts[j], cfg)

    invalid: set[int] = set()
    block_start = -1
    in_block = False
    n = len(texts)

    for i in range(n):
        text = texts[i]
        current_is_item = is_item(i)
        continuation = i not in skip and is_list_continuation(text, in_block, cfg)

        if current_is_item and block_start == -1:
            block_start = i
            in_block = True
            if i > 0 and texts[i - 1].strip() and not _is_definition_term_before(texts, i):
                j = i
                while j < n and (is_item(j) or (j not in skip and is_list_continuation(texts[j], True, cfg))):
                    invalid.add(j)
                    j += 1
        elif not current_is_item and not continuation and block_start != -1:
            if text.strip():
                invalid.update(range(block_start, i))
            block_start = -1
            in_block = False

        if current_is_item:
            m = CAPITAL_LETTER_LIST_RE.match(text)
            if m and len(m.group(4)) < 2:
                j = i
                while j >= 0 and is_item(j):
                    invalid.add(j)
                    j -= 1
                j = i + 1
                while j < n and is_item(j):
                    invalid.add(j)
                    j += 1

    return frozenset(invalid)
