"""Reference resolution inside content regions.

Two token shapes are recognised in body text:

  ``(@label)``   example reference (labels of letters, digits, ``_``, ``-``)
  ``{::label}``  custom-label reference (extended labels only)

Known labels become ``example-ref`` / ``custom-label-ref`` replacements,
labels declared more than once become ``duplicate-warning`` replacements
carrying the first declaration, and unknown labels produce nothing so the
source text stays literal. Tokens inside inline code spans are ignored.

Resolution only reads from the :class:`NumberingEngine`; it runs after the
whole document has been numbered, so forward references resolve too.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from pandoc_lists.code_regions import inline_code_spans, overlaps_any
from pandoc_lists.numbering import NumberingEngine
from pandoc_lists.types import NumberingConfig, Replacement, Span

EXAMPLE_REF_RE = re.compile(r"\(@([a-zA-Z0-9_-]+)\)")
CUSTOM_LABEL_REF_RE = re.compile(r"\{::([^}]+)\}")


class ReferenceResolver:
    """Read-only view over one finished pass's registries."""

    def __init__(self, engine: NumberingEngine, config: NumberingConfig | None = None) -> None:
        self.engine = engine
        self.config = config or NumberingConfig()

    def resolve(self, text: str, offset: int = 0) -> list[Replacement]:
        """Replacements for every resolvable token in ``text``, in text order.

        ``offset`` is the absolute position of ``text[0]`` in the document.
        """
        code = inline_code_spans(text, offset)
        found = list(self._example_refs(text, offset, code))
        if self.config.extended_labels:
            found.extend(self._custom_label_refs(text, offset, code))
        found.sort(key=lambda r: r.span.start)
        return found

    def _example_refs(self, text: str, offset: int, code: list[Span]) -> Iterable[Replacement]:
        for m in EXAMPLE_REF_RE.finditer(text):
            span = Span(offset + m.start(), offset + m.end())
            if overlaps_any(span, code):
                continue
            label = m.group(1)
            hit = self.engine.lookup_example(label)
            if hit is None:
                continue
            yield Replacement(
                span=span,
                kind="duplicate-warning" if hit.is_duplicate else "example-ref",
                display_text=f"({hit.number})",
                source_label=label,
                number=hit.number,
                content=hit.content,
                first_occurrence=hit.first_occurrence if hit.is_duplicate else None,
            )

    def _custom_label_refs(self, text: str, offset: int, code: list[Span]) -> Iterable[Replacement]:
        for m in CUSTOM_LABEL_REF_RE.finditer(text):
            span = Span(offset + m.start(), offset + m.end())
            if overlaps_any(span, code):
                continue
            raw = m.group(1)
            resolved = self.engine.resolve_custom_reference(raw)
            if resolved is None:
                continue
            hit = self.engine.lookup_custom_label(resolved)
            is_duplicate = hit is not None and hit.is_duplicate
            yield Replacement(
                span=span,
                kind="duplicate-warning" if is_duplicate else "custom-label-ref",
                display_text=f"({resolved})",
                source_label=raw,
                content=hit.content if hit is not None else "",
                first_occurrence=hit.first_occurrence if hit is not None and is_duplicate else None,
            )


def resolve(text: str, engine: NumberingEngine, offset: int = 0, config: NumberingConfig | None = None) -> list[Replacement]:
    """Functional form of :meth:`ReferenceResolver.resolve`."""
    return ReferenceResolver(engine, config).resolve(text, offset)
