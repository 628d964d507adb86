"""Tests for returnmap.data.columns."""

from __future__ import annotations

from returnmap.data.columns import ColumnSet, extract_columns, metric_columns

PT_HEADERS = [
    "Nome",
    "Retorno - diária (2017)",
    "Retorno - diária (02/06/2015 - 31/12/2015)",
    "Retorno - diária (2016)",
    "Retorno - diária (01/01/2025 - 30/06/2025)",
    "Retorno - diária (02/06/2015 - 30/06/2025)",
    "Retorno anualizado (02/06/2015 até 30/06/2025)",
    "Volatilidade anualizada (02/06/2015 até 30/06/2025)",
    "Máximo drawdown (02/06/2015 até 30/06/2025)",
]

EN_HEADERS = [
    "Name",
    "Return - daily (2019)",
    "Return - daily (2018)",
    "Annualized return (01/01/2018 - 31/12/2019)",
    "Annualized volatility (01/01/2018 - 31/12/2019)",
    "Max drawdown (01/01/2018 - 31/12/2019)",
]


def _ids(columns: ColumnSet) -> list[str]:
    return [c.id for c in columns.return_columns]


class TestReturnColumns:
    """Yearly and partial-year return headers."""

    def test_sorted_by_year(self) -> None:
        cols = extract_columns(PT_HEADERS)
        assert _ids(cols) == ["2015*", "2016", "2017", "2025*"]

    def test_partial_year_marker(self) -> None:
        cols = extract_columns(["Retorno - diária (02/06/2015 - 31/12/2015)"])
        assert _ids(cols) == ["2015*"]

    def test_full_year_range_has_no_marker(self) -> None:
        cols = extract_columns(["Retorno - diária (01/01/2020 - 31/12/2020)"])
        assert _ids(cols) == ["2020"]

    def test_full_year_requires_both_ends(self) -> None:
        cols = extract_columns([
            "Retorno - diária (01/01/2021 - 30/12/2021)",
            "Retorno - diária (02/01/2022 - 31/12/2022)",
        ])
        assert _ids(cols) == ["2021*", "2022*"]

    def test_multi_year_range_is_total_return(self) -> None:
        cols = extract_columns(PT_HEADERS)
        assert cols.total_return_source == "Retorno - diária (02/06/2015 - 30/06/2025)"
        assert "2025" not in _ids(cols)

    def test_column_keeps_source_header(self) -> None:
        cols = extract_columns(["Retorno - diária (2016)"])
        col = cols.return_columns[0]
        assert col.source == "Retorno - diária (2016)"
        assert col.kind == "return"
        assert col.sort == "desc"

    def test_english_headers(self) -> None:
        cols = extract_columns(EN_HEADERS)
        assert _ids(cols) == ["2018", "2019"]

    def test_mangled_encoding(self) -> None:
        cols = extract_columns(["Retorno - di\ufffdria (2016)"])
        assert _ids(cols) == ["2016"]


class TestMetricSources:
    """Annualised return, volatility and drawdown headers."""

    def test_portuguese_sources(self) -> None:
        cols = extract_columns(PT_HEADERS)
        assert cols.annualised_source == "Retorno anualizado (02/06/2015 até 30/06/2025)"
        assert cols.vol_source == "Volatilidade anualizada (02/06/2015 até 30/06/2025)"
        assert cols.max_dd_source == "Máximo drawdown (02/06/2015 até 30/06/2025)"

    def test_english_sources(self) -> None:
        cols = extract_columns(EN_HEADERS)
        assert cols.annualised_source == "Annualized return (01/01/2018 - 31/12/2019)"
        assert cols.vol_source == "Annualized volatility (01/01/2018 - 31/12/2019)"
        assert cols.max_dd_source == "Max drawdown (01/01/2018 - 31/12/2019)"

    def test_first_match_wins(self) -> None:
        cols = extract_columns(["Volatilidade A", "Volatilidade B"])
        assert cols.vol_source == "Volatilidade A"

    def test_annualised_volatility_is_not_return(self) -> None:
        cols = extract_columns(["Volatilidade anualizada"])
        assert cols.annualised_source is None
        assert cols.vol_source == "Volatilidade anualizada"


class TestMetricColumns:
    def test_fixed_order(self) -> None:
        assert [c.id for c in metric_columns()] == [
            "annualised_excess", "annualised_total", "vol", "sharpe", "max_dd",
        ]

    def test_all_columns_appends_metrics(self) -> None:
        cols = extract_columns(PT_HEADERS)
        ids = [c.id for c in cols.all_columns]
        assert ids[:4] == ["2015*", "2016", "2017", "2025*"]
        assert ids[4:] == [c.id for c in metric_columns()]

    def test_fresh_instances(self) -> None:
        a = extract_columns([])
        b = extract_columns([])
        a.metric_columns[0].label = "changed"
        assert b.metric_columns[0].label != "changed"


class TestDegenerateInput:
    """Unrecognised headers never raise."""

    def test_empty(self) -> None:
        cols = extract_columns([])
        assert cols.return_columns == []
        assert cols.annualised_source is None
        assert len(cols.metric_columns) == 5

    def test_unrelated_headers(self) -> None:
        cols = extract_columns(["Nome", "Ticker", None, ""])
        assert cols.return_columns == []
        assert cols.vol_source is None

    def test_return_header_without_period(self) -> None:
        cols = extract_columns(["Retorno - diária (sem data)"])
        assert cols.return_columns == []
