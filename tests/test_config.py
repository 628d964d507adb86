"""Tests for returnmap.config."""

from __future__ import annotations

import dataclasses

import pytest

from returnmap.config import (
    GEOGRAPHIES,
    METRIC_BAND_POLICY,
    DisplayMode,
    GeographyConfig,
    HighlightMode,
    LayoutConfig,
    RenderInput,
    get_geography,
)


class TestGeographies:
    def test_configured(self) -> None:
        assert set(GEOGRAPHIES) == {"br", "ex"}
        br = get_geography("br")
        assert (br.label, br.risk_free_name, br.currency) == ("Brasil", "CDI", "BRL")
        ex = get_geography("ex")
        assert (ex.label, ex.risk_free_name, ex.currency) == ("Exterior", "SOFR", "USD")

    def test_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unknown geography"):
            get_geography("jp")

    def test_requires_risk_free_name(self) -> None:
        with pytest.raises(ValueError, match="risk_free_name"):
            GeographyConfig(key="x", label="X", folder="x", risk_free_name=" ", currency="XXX")


class TestModes:
    """Tolerant parsing of display and highlight modes."""

    def test_display_mode_values(self) -> None:
        assert DisplayMode.parse("zero") is DisplayMode.ZERO
        assert DisplayMode.parse(" Asset ") is DisplayMode.ASSET
        assert DisplayMode.parse(DisplayMode.ZERO) is DisplayMode.ZERO

    def test_display_mode_fallback(self) -> None:
        assert DisplayMode.parse("diagonal") is DisplayMode.STACKED
        assert DisplayMode.parse(None) is DisplayMode.STACKED

    def test_highlight_mode_values(self) -> None:
        assert HighlightMode.parse("RETURN") is HighlightMode.RETURN
        assert HighlightMode.parse(HighlightMode.ASSET) is HighlightMode.ASSET

    def test_highlight_mode_fallback(self) -> None:
        assert HighlightMode.parse("rainbow") is HighlightMode.CLASS


class TestRenderInput:
    def test_defaults(self) -> None:
        ri = RenderInput()
        assert ri.geography == "br"
        assert ri.display_mode is DisplayMode.STACKED
        assert ri.highlight_mode is HighlightMode.CLASS
        assert ri.reference_asset_id is None

    def test_immutable(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            RenderInput().geography = "ex"  # type: ignore[misc]


class TestLayoutConfig:
    def test_default_pitch(self) -> None:
        assert LayoutConfig().pitch == 52.0

    def test_invalid_card_height(self) -> None:
        with pytest.raises(ValueError, match="card_height"):
            LayoutConfig(card_height=0)

    def test_invalid_gap(self) -> None:
        with pytest.raises(ValueError, match="gap"):
            LayoutConfig(gap=-1)


class TestBandPolicy:
    def test_vol_is_reversed(self) -> None:
        assert METRIC_BAND_POLICY["vol"].reverse
        assert not METRIC_BAND_POLICY["max_dd"].reverse
