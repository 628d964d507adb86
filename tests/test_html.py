"""Tests for returnmap.reports.html."""

from __future__ import annotations

from pathlib import Path

from returnmap.config import DisplayMode, HighlightMode, RenderInput
from returnmap.data.models import Asset, Column, Dataset
from returnmap.reports.html import build_context, render_html, write_html
from returnmap.runner import ReturnMap, build_return_map


def _make_return_map(
    display_mode: DisplayMode = DisplayMode.STACKED,
    highlight_mode: HighlightMode = HighlightMode.CLASS,
) -> ReturnMap:
    assets = [
        Asset(id="cdi", display="CDI", asset_class="Renda Fixa",
              values={"2016": 0.14, "annualised_total": 0.12}),
        Asset(id="acme", display="Acme <Fund> & Co", asset_class="Ações",
              asset_color="#16a34a", values={"2016": 0.39, "annualised_total": 0.2}),
    ]
    ds = Dataset(
        assets=assets,
        columns=[Column("2016", "2016", "return")],
        subtitle="Brasil • Período: 01/01/2016 até 31/12/2016 • RF: CDI",
        risk_free_name="CDI",
        risk_free_asset_id="cdi",
    )
    return build_return_map(
        ds, RenderInput(display_mode=display_mode, highlight_mode=highlight_mode),
    )


class TestBuildContext:
    """Values handed to the template."""

    def test_cards(self) -> None:
        ctx = build_context(_make_return_map())
        col = ctx["columns"][0]
        assert col["label"] == "2016"
        assert col["baseline"] is None
        tops = {c["asset_id"]: c["top"] for c in col["cards"]}
        assert tops == {"acme": 0.0, "cdi": 52.0}

    def test_card_text_and_tooltip(self) -> None:
        ctx = build_context(_make_return_map())
        card = next(c for c in ctx["columns"][0]["cards"] if c["asset_id"] == "acme")
        assert card["value"] == "39,0%"
        assert ("Anual. Total", "20,0%") in card["tooltip"]
        assert ("Anual. (CDI+)", "–") in card["tooltip"]

    def test_return_highlight_uses_gradient_legend(self) -> None:
        ctx = build_context(_make_return_map(highlight_mode=HighlightMode.RETURN))
        assert ctx["gradient_legend"] is True
        card = next(c for c in ctx["columns"][0]["cards"] if c["asset_id"] == "acme")
        assert card["color"] == "rgb(42,157,143)"

    def test_zero_mode_baseline(self) -> None:
        ctx = build_context(_make_return_map(display_mode=DisplayMode.ZERO))
        assert ctx["columns"][0]["baseline"] == 2 * 52.0 - 4.0


class TestRenderHtml:
    def test_contains_subtitle_and_cards(self) -> None:
        html = render_html(_make_return_map())
        assert "Período: 01/01/2016 até 31/12/2016" in html
        assert 'data-asset-id="cdi"' in html
        assert "translateY(52.0px)" in html

    def test_escapes_names(self) -> None:
        html = render_html(_make_return_map())
        assert "Acme &lt;Fund&gt; &amp; Co" in html
        assert "<Fund>" not in html

    def test_class_legend(self) -> None:
        html = render_html(_make_return_map())
        assert "Renda Fixa" in html
        assert "Ações" in html

    def test_return_legend(self) -> None:
        html = render_html(_make_return_map(highlight_mode=HighlightMode.RETURN))
        assert "Abaixo do CDI" in html
        assert "Acima do CDI" in html

    def test_zero_mode_baseline_drawn(self) -> None:
        html = render_html(_make_return_map(display_mode=DisplayMode.ZERO))
        assert 'class="baseline"' in html


class TestWriteHtml:
    def test_writes_file(self, tmp_path: Path) -> None:
        out = write_html(_make_return_map(), tmp_path / "out" / "map.html")
        assert out.exists()
        assert out.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")
