"""Tests for pandoc_lists.references: reference resolution in content."""
from __future__ import annotations

from pandoc_lists.numbering import NumberingEngine
from pandoc_lists.references import ReferenceResolver, resolve
from pandoc_lists.types import FirstOccurrence, NumberingConfig, Replacement, Span


def _engine() -> NumberingEngine:
    engine = NumberingEngine()
    engine.register_example("good", "A good example", 0)
    engine.register_example("bad", "First bad", 1)
    engine.register_example("bad", "Second bad", 2)
    engine.register_custom_label("P(#a)", "premise", 3)
    engine.register_custom_label("Lemma", "one", 4)
    engine.register_custom_label("Lemma", "two", 5)
    return engine


class TestExampleReferences:
    def test_resolved(self) -> None:
        reps = resolve("see (@good) here", _engine())
        assert reps == [
            Replacement(
                span=Span(4, 11),
                kind="example-ref",
                display_text="(1)",
                source_label="good",
                number=1,
                content="A good example",
            ),
        ]

    def test_offset(self) -> None:
        reps = resolve("(@good)", _engine(), offset=100)
        assert reps[0].span == Span(100, 107)

    def test_duplicate_warning(self) -> None:
        reps = resolve("(@bad)", _engine())
        assert len(reps) == 1
        assert reps[0].kind == "duplicate-warning"
        assert reps[0].number == 2
        assert reps[0].display_text == "(2)"
        assert reps[0].first_occurrence == FirstOccurrence(line=1, content="First bad")

    def test_unknown_left_alone(self) -> None:
        assert resolve("(@missing) and (@)", _engine()) == []

    def test_inline_code_ignored(self) -> None:
        assert resolve("`(@good)` and (@good)", _engine())[0].span == Span(14, 21)
        assert len(resolve("`(@good)`", _engine())) == 0


class TestCustomLabelReferences:
    def test_resolved(self) -> None:
        reps = resolve("by {::P(#a)}", _engine())
        assert reps == [
            Replacement(
                span=Span(3, 12),
                kind="custom-label-ref",
                display_text="(P1)",
                source_label="P(#a)",
                content="premise",
            ),
        ]

    def test_resolved_form(self) -> None:
        assert resolve("{::P1}", _engine())[0].display_text == "(P1)"

    def test_expression_without_declaration(self) -> None:
        reps = resolve("{::(#a)+1}", _engine())
        assert reps[0].display_text == "(1+1)"
        assert reps[0].content == ""

    def test_duplicate(self) -> None:
        reps = resolve("{::Lemma}", _engine())
        assert reps[0].kind == "duplicate-warning"
        assert reps[0].first_occurrence == FirstOccurrence(line=4, content="one")

    def test_unknown(self) -> None:
        assert resolve("{::Nope} {::P(#zz)}", _engine()) == []

    def test_disabled(self) -> None:
        config = NumberingConfig(extended_labels=False)
        assert resolve("{::P(#a)}", _engine(), config=config) == []


class TestOrdering:
    def test_mixed_tokens_in_text_order(self) -> None:
        reps = ReferenceResolver(_engine()).resolve("{::P1} then (@good)")
        assert [r.kind for r in reps] == ["custom-label-ref", "example-ref"]

    def test_read_only(self) -> None:
        engine = _engine()
        before = engine.placeholder_mappings()
        resolve("{::(#a)} {::Q(#new)}", engine)
        assert engine.placeholder_mappings() == before
