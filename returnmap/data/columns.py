"""Column extraction from raw metrics-table headers.

Classifies each header as a yearly return column, a multi-year total
return, or one of the three source metrics (annualised return,
volatility, max drawdown). Headers are matched on their normalised
form, so English ("Return - daily (2016)") and Portuguese
("Retorno - diária (2016)") exports are both recognised, including
exports whose accents were lost to a wrong encoding.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from returnmap.data.models import Column
from returnmap.data.parsing import normalize

logger = logging.getLogger(__name__)

PARTIAL_YEAR_MARKER = "*"

_RETURN_HEADER_RE = re.compile(r"^(retorno|return)\s*-\s*(di.?ria|daily)\s*\(")
_YEAR_RE = re.compile(r"\((\d{4})\)")
_RANGE_RE = re.compile(r"\((\d{2}/\d{2}/\d{4}).*?(\d{2}/\d{2}/\d{4})\)")
_ANY_YEAR_RE = re.compile(r"(\d{4})")

_ANNUALISED_WORDS = ("anualizado", "annualized", "annualised")
_RETURN_WORDS = ("retorno", "return")
_VOLATILITY_WORDS = ("volatilidade", "volatility")
_DRAWDOWN_WORDS = ("drawdown",)

# Sort key for return columns without a parseable year.
_NO_YEAR = 9999


def metric_columns() -> list[Column]:
    """The fixed metric columns, in display order."""
    return [
        Column(id="annualised_excess", label="Anual. (RF+)", kind="metric"),
        Column(id="annualised_total", label="Anual. Total", kind="metric"),
        Column(id="vol", label="Vol.", kind="metric"),
        Column(id="sharpe", label="Sharpe", kind="metric"),
        Column(id="max_dd", label="Máx DD", kind="metric"),
    ]


@dataclass
class ColumnSet:
    """Result of header classification.

    Attributes:
        return_columns: Yearly and partial-year return columns, by year.
        metric_columns: Fixed metric columns (always all five).
        annualised_source: Raw header of the annualised return, or None.
        vol_source: Raw header of the volatility, or None.
        max_dd_source: Raw header of the max drawdown, or None.
        total_return_source: Raw header of a return spanning several
            years. Not ranked; only used for the subtitle.
    """

    return_columns: list[Column] = field(default_factory=list)
    metric_columns: list[Column] = field(default_factory=metric_columns)
    annualised_source: str | None = None
    vol_source: str | None = None
    max_dd_source: str | None = None
    total_return_source: str | None = None

    @property
    def all_columns(self) -> list[Column]:
        return [*self.return_columns, *self.metric_columns]


def _year_sort_key(column: Column) -> int:
    m = _ANY_YEAR_RE.search(column.id)
    return int(m.group(1)) if m else _NO_YEAR


def _is_full_year(start: str, end: str) -> bool:
    """True when a dd/mm/yyyy range covers Jan 1 through Dec 31."""
    return start.startswith("01/01") and end.startswith("31/12")


def _contains_any(text: str, words: tuple[str, ...]) -> bool:
    return any(w in text for w in words)


def _classify_return_header(header: str, columns: ColumnSet) -> bool:
    """Record a return header. Returns False if it carries no period."""
    m_year = _YEAR_RE.search(header)
    if m_year:
        year = m_year.group(1)
        columns.return_columns.append(
            Column(id=year, label=year, kind="return", source=header)
        )
        return True

    m_range = _RANGE_RE.search(header)
    if m_range:
        start, end = m_range.group(1), m_range.group(2)
        start_year, end_year = start[-4:], end[-4:]
        if start_year == end_year:
            marker = "" if _is_full_year(start, end) else PARTIAL_YEAR_MARKER
            label = f"{end_year}{marker}"
            columns.return_columns.append(
                Column(id=label, label=label, kind="return", source=header)
            )
        else:
            columns.total_return_source = header
        return True

    return False


def extract_columns(headers: Iterable[object]) -> ColumnSet:
    """Classify raw metrics-table headers into typed columns.

    Never raises for unmatched input: an empty or unrecognised header
    list yields no return columns and metric columns with no source.

    Args:
        headers: Header strings in file order.

    Returns:
        ColumnSet with return columns sorted by year.
    """
    columns = ColumnSet()

    for h in headers:
        hs = str(h if h is not None else "").strip()
        hn = normalize(hs)

        if _RETURN_HEADER_RE.match(hn) and _classify_return_header(hs, columns):
            continue

        if (
            columns.annualised_source is None
            and _contains_any(hn, _ANNUALISED_WORDS)
            and _contains_any(hn, _RETURN_WORDS)
        ):
            columns.annualised_source = hs
            continue
        if columns.vol_source is None and _contains_any(hn, _VOLATILITY_WORDS):
            columns.vol_source = hs
            continue
        if columns.max_dd_source is None and _contains_any(hn, _DRAWDOWN_WORDS):
            columns.max_dd_source = hs
            continue

    columns.return_columns.sort(key=_year_sort_key)

    logger.info(
        "Extracted %d return columns (annualised=%s, vol=%s, max_dd=%s)",
        len(columns.return_columns),
        columns.annualised_source is not None,
        columns.vol_source is not None,
        columns.max_dd_source is not None,
    )
    return columns
