"""Code region detection.

Markers inside fenced code blocks are literal text, and references inside
inline code spans are never resolved. Detection is line-based: a fence is
three or more backticks or tildes, closed by a fence of the same character
that is at least as long. An unclosed fence runs to the end of the document.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from pandoc_lists.types import Line, Span

_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
_INLINE_CODE_RE = re.compile(r"(`+)(?!`)(.+?)(?<!`)\1(?!`)")


def fenced_code_lines(lines: Sequence[Line]) -> frozenset[int]:
    """Indices of lines that belong to fenced code blocks, fences included."""
    inside: set[int] = set()
    fence: str | None = None
    for line in lines:
        m = _FENCE_RE.match(line.text)
        if fence is None:
            if m:
                fence = m.group(1)
                inside.add(line.index)
            continue
        inside.add(line.index)
        if m and m.group(1)[0] == fence[0] and len(m.group(1)) >= len(fence):
            if not line.text[m.end():].strip():
                fence = None
    return frozenset(inside)


def inline_code_spans(text: str, offset: int = 0) -> list[Span]:
    """Spans of backtick code in ``text``, shifted by ``offset``."""
    return [
        Span(offset + m.start(), offset + m.end())
        for m in _INLINE_CODE_RE.finditer(text)
    ]


def overlaps_any(span: Span, spans: Sequence[Span]) -> bool:
    return any(span.start < other.end and other.start < span.end for other in spans)
