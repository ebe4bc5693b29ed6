"""Tests for pandoc_lists.numerals: roman and alphabetic ordinals."""
from __future__ import annotations

import pytest

from pandoc_lists.numerals import (
    format_ordinal,
    has_roman_chars,
    int_to_roman,
    is_roman_numeral,
    letter_to_number,
    number_to_letter,
    ordinal_for,
    roman_to_int,
)
from pandoc_lists.types import FancyFamily


# ── roman_to_int / int_to_roman ──────────────────────────────────────


class TestRoman:
    def test_basic_values(self) -> None:
        assert roman_to_int("i") == 1
        assert roman_to_int("iv") == 4
        assert roman_to_int("ix") == 9
        assert roman_to_int("xiv") == 14
        assert roman_to_int("mcmxciv") == 1994

    def test_case_insensitive(self) -> None:
        assert roman_to_int("XIV") == 14
        assert roman_to_int("MMMCMXCIX") == 3999

    def test_not_roman(self) -> None:
        assert roman_to_int("") is None
        assert roman_to_int("abc") is None
        assert roman_to_int("x1") is None

    def test_int_to_roman_case(self) -> None:
        assert int_to_roman(4) == "iv"
        assert int_to_roman(4, upper=True) == "IV"
        assert int_to_roman(1994, upper=True) == "MCMXCIV"

    @pytest.mark.parametrize("n", [0, -1, 4000])
    def test_int_to_roman_out_of_range(self, n: int) -> None:
        with pytest.raises(ValueError):
            int_to_roman(n)

    @pytest.mark.parametrize("upper", [True, False])
    def test_roundtrip_full_range(self, upper: bool) -> None:
        for n in range(1, 4000):
            assert roman_to_int(int_to_roman(n, upper=upper)) == n

    def test_is_roman_numeral(self) -> None:
        assert is_roman_numeral("iv")
        assert is_roman_numeral("MCM")
        assert not is_roman_numeral("iiii")
        assert not is_roman_numeral("Iv")
        assert not is_roman_numeral("ab")

    def test_has_roman_chars(self) -> None:
        assert has_roman_chars("C")
        assert has_roman_chars("mdc")
        assert not has_roman_chars("Ci")
        assert not has_roman_chars("b")


# ── letter_to_number / number_to_letter ──────────────────────────────


class TestAlpha:
    def test_basic_values(self) -> None:
        assert letter_to_number("a") == 1
        assert letter_to_number("Z") == 26
        assert letter_to_number("aa") == 27
        assert letter_to_number("ab") == 28

    def test_invalid(self) -> None:
        assert letter_to_number("") is None
        assert letter_to_number("a1") is None
        assert letter_to_number("é") is None

    def test_number_to_letter(self) -> None:
        assert number_to_letter(1) == "a"
        assert number_to_letter(26, upper=True) == "Z"
        assert number_to_letter(27) == "aa"

    def test_number_to_letter_rejects_zero(self) -> None:
        with pytest.raises(ValueError):
            number_to_letter(0)

    @pytest.mark.parametrize("upper", [True, False])
    def test_roundtrip_single_letters(self, upper: bool) -> None:
        for n in range(1, 27):
            assert letter_to_number(number_to_letter(n, upper=upper)) == n


# ── family dispatch ──────────────────────────────────────────────────


class TestFamilies:
    def test_ordinal_for(self) -> None:
        assert ordinal_for(FancyFamily.UPPER_ALPHA, "D") == 4
        assert ordinal_for(FancyFamily.LOWER_ROMAN, "iv") == 4
        assert ordinal_for(FancyFamily.UPPER_ROMAN, "C") == 100

    def test_format_ordinal(self) -> None:
        assert format_ordinal(FancyFamily.UPPER_ALPHA, 3) == "C"
        assert format_ordinal(FancyFamily.LOWER_ALPHA, 28) == "ab"
        assert format_ordinal(FancyFamily.UPPER_ROMAN, 9) == "IX"
        assert format_ordinal(FancyFamily.LOWER_ROMAN, 3) == "iii"
