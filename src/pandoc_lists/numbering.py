"""Document-order numbering for hash, example and custom-label markers.

One :class:`NumberingEngine` is threaded through exactly one full-document
pass. Every ``register_*`` / ``next_hash`` call must arrive in strict
document order: numbers are derived from position, so the engine is never
reused across passes and never patched incrementally. An edit that inserts
``P(#c)`` between ``P(#a)`` and ``P(#b)`` renumbers ``(#b)`` from 2 to 3,
which only a fresh pass can get right.

Lookups (``lookup_*``, ``resolve_custom_reference``) are read-only and are
safe to call after the pass from reference resolution.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from pandoc_lists.types import FirstOccurrence

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"\(#([^)]+)\)")

# Left over after stripping placeholders from a "pure expression" reference,
# e.g. "(#a)+(#b)" or "P(#a),(#b)"
_PURE_EXPRESSION_RE = re.compile(r"^[A-Za-z]?[\s+\-*/,()'\d]*$")
_TRAILING_PRIMES_RE = re.compile(r"'+$")


# ---------------------------------------------------------------------------
# Registries
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RegistrySnapshot:
    """Immutable copy of a :class:`LabelRegistry` at the end of a pass."""

    raw_to_resolved: dict[str, str]
    resolved_to_content: dict[str, str]
    resolved_to_number: dict[str, int]
    first_occurrence: dict[str, FirstOccurrence]
    duplicates: frozenset[str]


@dataclass(slots=True)
class LabelRegistry:
    """Label bookkeeping for one marker family during one pass.

    A label is a duplicate iff its *resolved* form was already registered
    by an earlier line of the same pass.
    """

    raw_to_resolved: dict[str, str] = field(default_factory=dict[str, str])
    resolved_to_content: dict[str, str] = field(default_factory=dict[str, str])
    resolved_to_number: dict[str, int] = field(default_factory=dict[str, int])
    first_occurrence: dict[str, FirstOccurrence] = field(default_factory=dict[str, FirstOccurrence])
    duplicates: set[str] = field(default_factory=set[str])

    def __contains__(self, resolved: object) -> bool:
        return resolved in self.first_occurrence

    def register(
        self,
        raw: str,
        resolved: str,
        content: str,
        line: int,
        number: int | None = None,
    ) -> bool:
        """Record one declaration; return True if it duplicates an earlier one."""
        self.raw_to_resolved.setdefault(raw, resolved)
        if resolved in self.first_occurrence:
            self.duplicates.add(resolved)
            return True
        self.first_occurrence[resolved] = FirstOccurrence(line=line, content=content)
        self.resolved_to_content[resolved] = content
        if number is not None:
            self.resolved_to_number[resolved] = number
        return False

    def snapshot(self) -> RegistrySnapshot:
        return RegistrySnapshot(
            raw_to_resolved=dict(self.raw_to_resolved),
            resolved_to_content=dict(self.resolved_to_content),
            resolved_to_number=dict(self.resolved_to_number),
            first_occurrence=dict(self.first_occurrence),
            duplicates=frozenset(self.duplicates),
        )


# ---------------------------------------------------------------------------
# Lookup results
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ExampleLookup:
    number: int
    content: str
    is_duplicate: bool
    first_occurrence: FirstOccurrence


@dataclass(frozen=True, slots=True)
class CustomLabelLookup:
    resolved_label: str
    content: str
    is_duplicate: bool
    first_occurrence: FirstOccurrence | None


@dataclass(frozen=True, slots=True)
class ExampleRegistration:
    number: int
    is_duplicate: bool


@dataclass(frozen=True, slots=True)
class CustomLabelRegistration:
    resolved_label: str
    is_duplicate: bool


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class NumberingEngine:
    """Counters and registries for one full-document pass."""

    __slots__ = (
        "hash_counter",
        "example_counter",
        "placeholder_counter",
        "example_registry",
        "custom_label_registry",
        "placeholder_name_to_number",
    )

    def __init__(self) -> None:
        self.hash_counter = 0
        self.example_counter = 0
        self.placeholder_counter = 0
        self.example_registry = LabelRegistry()
        self.custom_label_registry = LabelRegistry()
        self.placeholder_name_to_number: dict[str, int] = {}

    # -- hash -------------------------------------------------------------

    def next_hash(self) -> int:
        self.hash_counter += 1
        return self.hash_counter

    # -- examples ---------------------------------------------------------

    def register_example(self, label: str | None, content: str, line: int) -> ExampleRegistration:
        """Number one example item.

        Unlabeled items always take the next number and are never
        referenceable. A repeated label keeps the first occurrence's number
        and does not advance the counter.
        """
        if not label:
            self.example_counter += 1
            return ExampleRegistration(number=self.example_counter, is_duplicate=False)

        registry = self.example_registry
        if label in registry:
            registry.register(label, label, content, line)
            logger.debug("duplicate example label %r on line %d", label, line)
            return ExampleRegistration(number=registry.resolved_to_number[label], is_duplicate=True)

        self.example_counter += 1
        registry.register(label, label, content, line, number=self.example_counter)
        return ExampleRegistration(number=self.example_counter, is_duplicate=False)

    def lookup_example(self, label: str) -> ExampleLookup | None:
        registry = self.example_registry
        first = registry.first_occurrence.get(label)
        if first is None:
            return None
        return ExampleLookup(
            number=registry.resolved_to_number[label],
            content=registry.resolved_to_content.get(label, ""),
            is_duplicate=label in registry.duplicates,
            first_occurrence=first,
        )

    # -- placeholders -----------------------------------------------------

    def resolve_placeholder(self, name: str) -> int:
        """Number of ``(#name)``, assigned on first appearance in this pass."""
        number = self.placeholder_name_to_number.get(name)
        if number is None:
            self.placeholder_counter += 1
            number = self.placeholder_counter
            self.placeholder_name_to_number[name] = number
        return number

    def placeholder_mappings(self) -> dict[str, int]:
        return dict(self.placeholder_name_to_number)

    def apply_placeholders(self, raw_template: str) -> str:
        """Substitute every placeholder, assigning numbers as needed."""
        return PLACEHOLDER_RE.sub(lambda m: str(self.resolve_placeholder(m.group(1))), raw_template)

    # -- custom labels ----------------------------------------------------

    def register_custom_label(self, raw_template: str, content: str, line: int) -> CustomLabelRegistration:
        resolved = self.apply_placeholders(raw_template)
        is_duplicate = self.custom_label_registry.register(raw_template, resolved, content, line)
        if is_duplicate:
            logger.debug("duplicate custom label %r on line %d", resolved, line)
        return CustomLabelRegistration(resolved_label=resolved, is_duplicate=is_duplicate)

    def lookup_custom_label(self, raw_or_resolved: str) -> CustomLabelLookup | None:
        """Look up a declared label by its raw template or its resolved form."""
        registry = self.custom_label_registry
        resolved = registry.raw_to_resolved.get(raw_or_resolved, raw_or_resolved)
        first = registry.first_occurrence.get(resolved)
        if first is None:
            return None
        return CustomLabelLookup(
            resolved_label=resolved,
            content=registry.resolved_to_content.get(resolved, ""),
            is_duplicate=resolved in registry.duplicates,
            first_occurrence=first,
        )

    def resolve_custom_reference(self, raw: str) -> str | None:
        """Resolved label a ``{::raw}`` reference points at, or None.

        Valid references are declared templates, declared resolved labels,
        pure placeholder expressions over known placeholders, and primed
        variants of declared labels (``P(#a)'`` when ``P(#a)'''`` exists).
        Never assigns new placeholder numbers.
        """
        registry = self.custom_label_registry
        if raw in registry.raw_to_resolved:
            return registry.raw_to_resolved[raw]
        if raw in registry:
            return raw

        names = PLACEHOLDER_RE.findall(raw)
        if any(name not in self.placeholder_name_to_number for name in names):
            return None
        resolved = PLACEHOLDER_RE.sub(
            lambda m: str(self.placeholder_name_to_number[m.group(1)]), raw,
        )

        if names and _PURE_EXPRESSION_RE.match(PLACEHOLDER_RE.sub("", raw)):
            return resolved
        base = _TRAILING_PRIMES_RE.sub("", resolved)
        if any(defined.startswith(base) for defined in registry.first_occurrence):
            return resolved
        return resolved if resolved in registry else None
