"""Tests for CLI entry point (main.py)."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import pytest

from returnmap.config import METRICS_FILENAME, REGISTRY_FILENAME
from returnmap.main import _parse_args, main

METRICS_CSV = (
    "Nome;Retorno - diária (2016);Retorno - diária (2017);"
    "Retorno anualizado (01/01/2016 até 31/12/2017);"
    "Volatilidade anualizada (01/01/2016 até 31/12/2017);"
    "Máximo drawdown (01/01/2016 até 31/12/2017)\n"
    "CDI;0,14;0,10;0,12;0,01;0\n"
    "Índice Bovespa;0,39;0,27;0,32;0,22;-0,15\n"
)
REGISTRY_CSV = "quantum_name;asset;class\nÍndice Bovespa;Ibovespa;Ações\n"


def _write_data(root: Path) -> Path:
    geo = root / "data" / "br"
    geo.mkdir(parents=True)
    (geo / METRICS_FILENAME).write_text(METRICS_CSV, encoding="utf-8")
    (geo / REGISTRY_FILENAME).write_text(REGISTRY_CSV, encoding="utf-8")
    return root / "data"


class TestParseArgs:
    """Argument parsing and defaults."""

    def test_defaults(self) -> None:
        args = _parse_args(["render"])
        assert args.command == "render"
        assert args.data_dir == Path("data")
        assert args.geography == "br"
        assert args.mode == "stacked"
        assert args.highlight == "class"
        assert args.reference is None
        assert args.output == Path("output/return_map.html")
        assert args.png is None
        assert args.verbose is False

    def test_all_options(self) -> None:
        args = _parse_args([
            "render", "--data-dir", "d", "--geography", "ex", "--mode", "asset",
            "--highlight", "return", "--reference", "spy", "--output", "o.html",
            "--png", "o.png", "-v",
        ])
        assert args.geography == "ex"
        assert args.mode == "asset"
        assert args.highlight == "return"
        assert args.reference == "spy"
        assert args.png == Path("o.png")
        assert args.verbose is True

    def test_invalid_mode_rejected(self) -> None:
        with pytest.raises(SystemExit):
            _parse_args(["render", "--mode", "diagonal"])

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            _parse_args([])


class TestRender:
    """End-to-end render command."""

    def test_writes_html_and_png(self, tmp_path: Path) -> None:
        data_dir = _write_data(tmp_path)
        html = tmp_path / "out" / "map.html"
        png = tmp_path / "out" / "map.png"

        main([
            "render", "--data-dir", str(data_dir), "--mode", "zero",
            "--highlight", "return", "--output", str(html), "--png", str(png),
        ])

        assert html.exists()
        assert "Ibovespa" in html.read_text(encoding="utf-8")
        assert png.exists()

    def test_missing_data_exits(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc:
            main([
                "render", "--data-dir", str(tmp_path / "nowhere"),
                "--output", str(tmp_path / "map.html"),
            ])
        assert exc.value.code == 1
        assert not (tmp_path / "map.html").exists()
