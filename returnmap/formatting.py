"""pt-BR display formatting for card and tooltip values."""

from __future__ import annotations

from returnmap.data.parsing import is_finite

MISSING = "–"


def _pt_br(value: float, digits: int) -> str:
    # 1,234.5 -> 1.234,5
    s = f"{value:,.{digits}f}"
    return s.replace(",", "\x00").replace(".", ",").replace("\x00", ".")


def fmt_num(value: float | None, digits: int = 2) -> str:
    """Format a plain number, e.g. 1234.5 -> "1.234,50"."""
    if not is_finite(value):
        return MISSING
    return _pt_br(value, digits)  # type: ignore[arg-type]


def fmt_pct(value: float | None, digits: int = 1) -> str:
    """Format a decimal fraction as a percentage, e.g. 0.123 -> "12,3%"."""
    if not is_finite(value):
        return MISSING
    return f"{_pt_br(value * 100, digits)}%"  # type: ignore[operator]


def format_value(column_id: str, value: float | None) -> str:
    """Card text for a value: Sharpe as a number, everything else as %."""
    if column_id == "sharpe":
        return fmt_num(value, 2)
    return fmt_pct(value, 1)
