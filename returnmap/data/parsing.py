"""Text normalisation and locale-aware number parsing."""

from __future__ import annotations

import math
import re
import unicodedata

_WHITESPACE_RE = re.compile(r"\s+")
_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def normalize(text: object) -> str:
    """Canonical form used for every name and header comparison.

    Trims, lowercases, strips diacritics and U+FFFD replacement
    characters (left behind by files that are not UTF-8), and collapses
    runs of whitespace.
    """
    if text is None:
        return ""
    s = str(text).strip().lower()
    s = unicodedata.normalize("NFD", s)
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    s = s.replace("\ufffd", "")
    return _WHITESPACE_RE.sub(" ", s)


def parse_number(value: object) -> float | None:
    """Parse a pt-BR formatted number ("1.234,56") into a float.

    Args:
        value: Raw cell value. Strings use "." for thousands and ","
            for decimals. Numeric values pass through.

    Returns:
        Finite float, or None for empty, invalid or non-finite input.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        f = float(value)
        return f if math.isfinite(f) else None

    s = str(value).strip()
    if not s:
        return None
    s = s.replace(".", "").replace(",", ".")
    if not _DECIMAL_RE.match(s):
        return None
    f = float(s)
    return f if math.isfinite(f) else None


def is_finite(value: float | None) -> bool:
    """True for a real, finite number."""
    return value is not None and math.isfinite(value)
