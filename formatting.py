"""Display formatting helpers for number fields.

Values are shown with a fixed number of decimals and a single space between
groups of three integer digits (``1 200.50``). Editing happens on the
separator-free form (``1200.5``), so insertion and removal must be exact
inverses for anything produced here.
"""

from __future__ import annotations

import re
from typing import Optional

THOUSANDS_SEPARATOR = " "
DECIMAL_POINT = "."

_WHITESPACE_RE = re.compile(r"\s+")
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)")


def add_thousands_separators(number_text: str) -> str:
    """Group the integer part of ``number_text`` in clusters of three digits.

    Only the digits left of the decimal point are touched; a leading sign is
    kept in front of the first group.
    """

    integer_part, point, fraction = number_text.partition(DECIMAL_POINT)
    sign = ""
    if integer_part[:1] in ("-", "+"):
        sign, integer_part = integer_part[0], integer_part[1:]
    if not integer_part.isdigit():
        return number_text

    head = len(integer_part) % 3 or 3
    groups = [integer_part[:head]]
    groups.extend(integer_part[i:i + 3] for i in range(head, len(integer_part), 3))
    return sign + THOUSANDS_SEPARATOR.join(groups) + point + fraction


def remove_thousands_separators(text: str) -> str:
    """Strip every whitespace character used as a group separator."""

    return _WHITESPACE_RE.sub("", text)


def format_fixed(value: float, decimals: int) -> str:
    """Render ``value`` with exactly ``decimals`` fraction digits.

    A value that rounds to zero is rendered without a minus sign.
    """

    formatted = f"{value:.{decimals}f}"
    if formatted.startswith("-") and not formatted.strip("-0.").strip():
        formatted = formatted[1:]
    return formatted


def format_display(value: float, decimals: int) -> str:
    """Fixed decimals plus thousands separators, as shown in a settled field."""

    return add_thousands_separators(format_fixed(value, decimals))


def parse_number(text: str) -> Optional[float]:
    """Strictly parse a plain decimal number, returning ``None`` on failure.

    Only an optional sign, digits and a single decimal point are accepted, so
    ``inf``, ``nan``, exponents and leftover operators are rejected.
    """

    candidate = text.strip()
    if not _NUMBER_RE.fullmatch(candidate):
        return None
    return float(candidate)


def fraction_digits(text: str) -> int:
    """Number of digits typed after the decimal point."""

    _, point, fraction = text.partition(DECIMAL_POINT)
    if not point:
        return 0
    return sum(1 for ch in fraction if ch.isdigit())
