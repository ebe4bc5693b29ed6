"""Numeral utilities for fancy list markers.

Pure conversion functions between decimal ordinals and the two marker
alphabets Pandoc's fancy lists use:

  roman  — i, ii, iii, iv, ... (either case), 1..3999
  alpha  — a, b, ..., z, aa, ab, ... (bijective base-26, either case)

No state. The renumberer and the classifier both go through these helpers
so that ``iv.`` and ``D.`` mean the same thing everywhere.
"""

from __future__ import annotations

import re

from pandoc_lists.types import FancyFamily

# ---------------------------------------------------------------------------
# Roman numeral utilities
# ---------------------------------------------------------------------------

ROMAN_VALUES: dict[str, int] = {
    "i": 1, "v": 5, "x": 10, "l": 50, "c": 100, "d": 500, "m": 1000,
}

_ROMAN_TABLE: tuple[tuple[int, str], ...] = (
    (1000, "m"), (900, "cm"), (500, "d"), (400, "cd"),
    (100, "c"), (90, "xc"), (50, "l"), (40, "xl"),
    (10, "x"), (9, "ix"), (5, "v"), (4, "iv"), (1, "i"),
)

ROMAN_MAX = 3999

_VALID_ROMAN_RE = re.compile(
    r"^M{0,3}(CM|CD|D?C{0,3})(XC|XL|L?X{0,3})(IX|IV|V?I{0,3})$",
)
_ROMAN_CHARS_UPPER_RE = re.compile(r"^[IVXLCDM]+$")
_ROMAN_CHARS_LOWER_RE = re.compile(r"^[ivxlcdm]+$")


def roman_to_int(s: str) -> int | None:
    """Convert a roman numeral (either case) to int, or None if not roman."""
    label = s.strip().lower()
    if not label or any(ch not in ROMAN_VALUES for ch in label):
        return None
    total = 0
    for idx, ch in enumerate(label):
        value = ROMAN_VALUES[ch]
        nxt = ROMAN_VALUES[label[idx + 1]] if idx + 1 < len(label) else 0
        if value < nxt:
            total -= value
        else:
            total += value
    return total


def int_to_roman(n: int, upper: bool = False) -> str:
    """Convert int (1..3999) to a roman numeral in the requested case."""
    if not 1 <= n <= ROMAN_MAX:
        raise ValueError(f"roman numerals cover 1..{ROMAN_MAX}, got {n}")
    parts: list[str] = []
    remaining = n
    for value, sym in _ROMAN_TABLE:
        while remaining >= value:
            parts.append(sym)
            remaining -= value
    out = "".join(parts)
    return out.upper() if upper else out


def has_roman_chars(s: str) -> bool:
    """True if ``s`` is made only of roman characters of a single case."""
    return bool(_ROMAN_CHARS_UPPER_RE.match(s) or _ROMAN_CHARS_LOWER_RE.match(s))


def is_roman_numeral(s: str) -> bool:
    """True if ``s`` is a canonical roman numeral written in a single case."""
    if not has_roman_chars(s):
        return False
    return bool(_VALID_ROMAN_RE.match(s.upper()))


# ---------------------------------------------------------------------------
# Alphabetic ordinals
# ---------------------------------------------------------------------------

def letter_to_number(s: str) -> int | None:
    """Convert alpha label to ordinal: a=1, ..., z=26, aa=27, ab=28."""
    label = s.strip().lower()
    if not label or not label.isascii() or not label.isalpha():
        return None
    total = 0
    for ch in label:
        total = total * 26 + (ord(ch) - ord("a") + 1)
    return total


def number_to_letter(n: int, upper: bool = False) -> str:
    """Inverse of :func:`letter_to_number`."""
    if n < 1:
        raise ValueError(f"alphabetic ordinals start at 1, got {n}")
    chars: list[str] = []
    remaining = n
    while remaining > 0:
        remaining, rem = divmod(remaining - 1, 26)
        chars.append(chr(ord("a") + rem))
    out = "".join(reversed(chars))
    return out.upper() if upper else out


# ---------------------------------------------------------------------------
# Family dispatch
# ---------------------------------------------------------------------------

def is_upper_family(family: FancyFamily) -> bool:
    return family in (FancyFamily.UPPER_ALPHA, FancyFamily.UPPER_ROMAN)


def is_roman_family(family: FancyFamily) -> bool:
    return family in (FancyFamily.UPPER_ROMAN, FancyFamily.LOWER_ROMAN)


def ordinal_for(family: FancyFamily, value: str) -> int | None:
    """Compute the ordinal for a marker value read as the given family."""
    if is_roman_family(family):
        return roman_to_int(value)
    return letter_to_number(value)


def format_ordinal(family: FancyFamily, n: int) -> str:
    """Render ordinal ``n`` in the given family's alphabet and case."""
    upper = is_upper_family(family)
    if is_roman_family(family):
        return int_to_roman(n, upper=upper)
    return number_to_letter(n, upper=upper)
