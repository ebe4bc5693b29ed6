"""Tests for pandoc_lists.validator: strict-mode list block validation."""
from __future__ import annotations

from pandoc_lists.types import NumberingConfig
from pandoc_lists.validator import is_list_continuation, validate_list_blocks

STRICT = NumberingConfig(strict_mode=True)


class TestBlankLineRules:
    def test_valid_block(self) -> None:
        texts = ["", "a. one", "b. two", "", "after"]
        assert validate_list_blocks(texts, STRICT) == frozenset()

    def test_block_at_document_start_is_valid(self) -> None:
        texts = ["a. one", "b. two", ""]
        assert validate_list_blocks(texts, STRICT) == frozenset()

    def test_missing_blank_before(self) -> None:
        texts = ["Intro text", "a. one", "b. two", "", "after"]
        assert validate_list_blocks(texts, STRICT) == frozenset({1, 2})

    def test_missing_blank_after(self) -> None:
        texts = ["a. one", "b. two", "after"]
        assert validate_list_blocks(texts, STRICT) == frozenset({0, 1})

    def test_continuation_lines_stay_in_block(self) -> None:
        texts = ["", "a. one", "   more of one", "b. two", ""]
        assert validate_list_blocks(texts, STRICT) == frozenset()

    def test_definition_under_term(self) -> None:
        texts = ["Term", ": definition", "", "after"]
        assert validate_list_blocks(texts, STRICT) == frozenset()

    def test_lenient_mode_reports_nothing(self) -> None:
        texts = ["Intro text", "a. one", "b. two"]
        assert validate_list_blocks(texts, NumberingConfig()) == frozenset()
        assert validate_list_blocks(texts) == frozenset()

    def test_fenced_lines_are_not_items(self) -> None:
        texts = ["```", "a. code", "```"]
        assert validate_list_blocks(texts, STRICT, skip=frozenset({0, 1, 2})) == frozenset()


class TestCapitalLetterSpacing:
    def test_single_space_invalidates_neighbours(self) -> None:
        texts = ["", "A. one", "B.  two", ""]
        assert validate_list_blocks(texts, STRICT) == frozenset({1, 2})

    def test_two_spaces_ok(self) -> None:
        texts = ["", "A.  one", "B.  two", ""]
        assert validate_list_blocks(texts, STRICT) == frozenset()

    def test_paren_delimiter_not_checked(self) -> None:
        texts = ["", "A) one", "B) two", ""]
        assert validate_list_blocks(texts, STRICT) == frozenset()


class TestContinuation:
    def test_indented_after_item(self) -> None:
        assert is_list_continuation("  more", True)
        assert is_list_continuation("\tmore", True)

    def test_needs_list_context(self) -> None:
        assert not is_list_continuation("  more", False)

    def test_shallow_or_marker_lines(self) -> None:
        assert not is_list_continuation(" x", True)
        assert not is_list_continuation("  b. next", True)
        assert not is_list_continuation("   ", True)
