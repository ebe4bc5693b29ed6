"""Tests for pandoc_lists.numbering: counters, registries, placeholders."""
from __future__ import annotations

from pandoc_lists.numbering import LabelRegistry, NumberingEngine
from pandoc_lists.types import FirstOccurrence


class TestHash:
    def test_sequence(self) -> None:
        engine = NumberingEngine()
        assert [engine.next_hash() for _ in range(3)] == [1, 2, 3]

    def test_fresh_engine_restarts(self) -> None:
        NumberingEngine().next_hash()
        assert NumberingEngine().next_hash() == 1


class TestExamples:
    def test_unlabeled_take_next_number(self) -> None:
        engine = NumberingEngine()
        assert engine.register_example(None, "one", 0).number == 1
        assert engine.register_example(None, "two", 1).number == 2
        assert engine.example_registry.first_occurrence == {}

    def test_labels_in_first_appearance_order(self) -> None:
        engine = NumberingEngine()
        engine.register_example("b", "B", 0)
        engine.register_example(None, "anon", 1)
        engine.register_example("a", "A", 2)
        assert engine.lookup_example("b").number == 1  # type: ignore[union-attr]
        assert engine.lookup_example("a").number == 3  # type: ignore[union-attr]

    def test_duplicate_keeps_first_number(self) -> None:
        engine = NumberingEngine()
        engine.register_example("x", "A", 2)
        engine.register_example("y", "Y", 3)
        dup = engine.register_example("x", "B", 5)
        assert dup.is_duplicate
        assert dup.number == 1
        assert engine.register_example("z", "Z", 6).number == 3

    def test_duplicate_lookup(self) -> None:
        engine = NumberingEngine()
        engine.register_example("x", "A", 2)
        engine.register_example("x", "B", 5)
        hit = engine.lookup_example("x")
        assert hit is not None
        assert hit.is_duplicate
        assert hit.content == "A"
        assert hit.first_occurrence == FirstOccurrence(line=2, content="A")

    def test_unknown_label(self) -> None:
        assert NumberingEngine().lookup_example("missing") is None


class TestPlaceholders:
    def test_first_appearance_numbering(self) -> None:
        engine = NumberingEngine()
        assert engine.resolve_placeholder("a") == 1
        assert engine.resolve_placeholder("b") == 2
        assert engine.resolve_placeholder("a") == 1
        assert engine.placeholder_mappings() == {"a": 1, "b": 2}

    def test_register_custom_label(self) -> None:
        engine = NumberingEngine()
        assert engine.register_custom_label("P(#a)", "first", 0).resolved_label == "P1"
        assert engine.register_custom_label("P(#c)", "inserted", 1).resolved_label == "P2"
        assert engine.register_custom_label("P(#b)", "second", 2).resolved_label == "P3"

    def test_multiple_placeholders_in_one_label(self) -> None:
        engine = NumberingEngine()
        reg = engine.register_custom_label("(#first)-(#second)", "", 0)
        assert reg.resolved_label == "1-2"

    def test_literal_label(self) -> None:
        engine = NumberingEngine()
        reg = engine.register_custom_label("Lemma", "text", 4)
        assert reg.resolved_label == "Lemma"
        assert not reg.is_duplicate

    def test_shared_placeholder_resolves_to_same_label(self) -> None:
        engine = NumberingEngine()
        engine.register_custom_label("P(#a)", "one", 0)
        reg = engine.register_custom_label("P(#a)", "two", 3)
        assert reg.resolved_label == "P1"
        assert reg.is_duplicate
        hit = engine.lookup_custom_label("P1")
        assert hit is not None
        assert hit.first_occurrence == FirstOccurrence(line=0, content="one")


class TestCustomReferences:
    def _engine(self) -> NumberingEngine:
        engine = NumberingEngine()
        engine.register_custom_label("P(#a)", "first", 0)
        engine.register_custom_label("Q(#b)'''", "primed", 1)
        engine.register_custom_label("Lemma", "lemma", 2)
        return engine

    def test_raw_template(self) -> None:
        assert self._engine().resolve_custom_reference("P(#a)") == "P1"

    def test_resolved_label(self) -> None:
        assert self._engine().resolve_custom_reference("P1") == "P1"
        assert self._engine().resolve_custom_reference("Lemma") == "Lemma"

    def test_pure_expression(self) -> None:
        assert self._engine().resolve_custom_reference("(#a)+(#b)") == "1+2"

    def test_prime_variant(self) -> None:
        assert self._engine().resolve_custom_reference("Q(#b)'") == "Q2'"

    def test_unknown_placeholder(self) -> None:
        engine = self._engine()
        assert engine.resolve_custom_reference("P(#zzz)") is None
        assert engine.placeholder_mappings() == {"a": 1, "b": 2}

    def test_unknown_label(self) -> None:
        assert self._engine().resolve_custom_reference("Theorem") is None
        assert self._engine().resolve_custom_reference("Theorem(#a)") is None

    def test_single_letter_prefix_expression(self) -> None:
        assert self._engine().resolve_custom_reference("R(#a),(#b)") == "R1,2"

    def test_lookup_by_raw_or_resolved(self) -> None:
        engine = self._engine()
        by_raw = engine.lookup_custom_label("P(#a)")
        by_resolved = engine.lookup_custom_label("P1")
        assert by_raw == by_resolved
        assert by_raw is not None and by_raw.content == "first"


class TestRegistry:
    def test_snapshot_is_a_copy(self) -> None:
        registry = LabelRegistry()
        registry.register("x", "x", "A", 0, number=1)
        snap = registry.snapshot()
        registry.register("y", "y", "B", 1, number=2)
        registry.register("x", "x", "C", 2)
        assert set(snap.first_occurrence) == {"x"}
        assert snap.duplicates == frozenset()
        assert registry.duplicates == {"x"}

    def test_contains(self) -> None:
        registry = LabelRegistry()
        registry.register("P(#a)", "P1", "", 0)
        assert "P1" in registry
        assert "P(#a)" not in registry
