"""Card colors.

Return highlighting uses a diverging red -> yellow -> green scale whose
yellow midpoint (the pivot) is the risk-free asset's value, or zero for
excess return and Sharpe. Volatility is reversed so that low values are
green. Most metric columns are banded: the distance from the pivot is
quantised in fixed steps before interpolation.

Class highlighting uses the registry's class color, or a color derived
deterministically from the class label.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import numpy as np

from returnmap.config import (
    CLASS_LIGHTNESS,
    CLASS_SATURATION,
    COLOR_HIGH,
    COLOR_LOW,
    COLOR_NEUTRAL,
    COLOR_PIVOT,
    METRIC_BAND_POLICY,
    NEUTRAL_HEX,
    RETURN_BAND_POLICY,
    RGB,
    UNCLASSIFIED_LABEL,
    ZERO_PIVOT_COLUMNS,
    HighlightMode,
)
from returnmap.data.models import Asset, Dataset
from returnmap.data.parsing import is_finite

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColorScale:
    """How one column's values map onto the diverging palette.

    Attributes:
        min: Smallest finite value in the column (NaN if none).
        max: Largest finite value in the column (NaN if none).
        pivot: Value drawn in the neutral yellow.
        reverse: True when lower values are better.
        band_step: Quantisation step. Banding needs step > 0 and cap > 0.
        band_cap: Distance from the pivot at which the color saturates.
    """

    min: float
    max: float
    pivot: float
    reverse: bool = False
    band_step: float = 0.0
    band_cap: float = 0.0

    @property
    def banded(self) -> bool:
        return (
            math.isfinite(self.band_step) and self.band_step > 0
            and math.isfinite(self.band_cap) and self.band_cap > 0
        )


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def mix(a: RGB, b: RGB, t: float) -> RGB:
    """Linear interpolation between two colors, t in [0, 1]."""
    return (
        _round_half_up(a[0] + (b[0] - a[0]) * t),
        _round_half_up(a[1] + (b[1] - a[1]) * t),
        _round_half_up(a[2] + (b[2] - a[2]) * t),
    )


def _quantize(diff: float, cap: float, step: float) -> float:
    """Distance from the pivot as whole steps, as a fraction of cap."""
    if cap <= 0:
        return 0.0
    d = _clamp(diff, 0.0, cap)
    q = math.floor(d / step) * step
    return _clamp(q / cap, 0.0, 1.0)


def value_to_color(value: float | None, scale: ColorScale | None) -> RGB:
    """Map a value to an RGB triple on the column's diverging scale.

    Args:
        value: Cell value. None or non-finite gives the neutral color.
        scale: Column scale. None or a non-finite min/max gives the
            neutral color.

    Returns:
        (r, g, b) with channels in 0..255.
    """
    if (
        not is_finite(value)
        or scale is None
        or not math.isfinite(scale.min)
        or not math.isfinite(scale.max)
    ):
        return COLOR_NEUTRAL

    v = float(value)  # type: ignore[arg-type]
    lo, hi, pivot = scale.min, scale.max, scale.pivot

    # Lower is better: mirror the axis.
    if scale.reverse:
        v, lo, hi = -v, -hi, -lo
        pivot = -pivot if math.isfinite(pivot) else pivot

    if not math.isfinite(pivot):
        pivot = (lo + hi) / 2
    pivot = _clamp(pivot, lo, hi)

    if hi == lo:
        return COLOR_PIVOT

    if scale.banded:
        cap_below = min(scale.band_cap, max(0.0, pivot - lo))
        cap_above = min(scale.band_cap, max(0.0, hi - pivot))
        if v <= pivot:
            t = _quantize(pivot - v, cap_below, scale.band_step)
            return mix(COLOR_PIVOT, COLOR_LOW, t)
        t = _quantize(v - pivot, cap_above, scale.band_step)
        return mix(COLOR_PIVOT, COLOR_HIGH, t)

    if v <= pivot:
        denom = pivot - lo
        t = 1.0 if denom == 0 else _clamp((v - lo) / denom, 0.0, 1.0)
        return mix(COLOR_LOW, COLOR_PIVOT, t)

    denom = hi - pivot
    t = 1.0 if denom == 0 else _clamp((v - pivot) / denom, 0.0, 1.0)
    return mix(COLOR_PIVOT, COLOR_HIGH, t)


def rgb_css(rgb: RGB) -> str:
    return f"rgb({rgb[0]},{rgb[1]},{rgb[2]})"


def compute_color_scales(dataset: Dataset) -> dict[str, ColorScale]:
    """Build the color scale of every column from the current data.

    Args:
        dataset: Prepared dataset.

    Returns:
        Column id -> ColorScale. Columns without finite values get a
        NaN scale, which always yields the neutral color.
    """
    rf_asset = (
        dataset.asset(dataset.risk_free_asset_id)
        if dataset.risk_free_asset_id else None
    )

    scales: dict[str, ColorScale] = {}
    for col in dataset.columns:
        values = np.array(
            [v if v is not None else np.nan for v in dataset.values_for(col.id)],
            dtype=float,
        )
        finite = values[np.isfinite(values)]
        if finite.size == 0:
            scales[col.id] = ColorScale(min=math.nan, max=math.nan, pivot=math.nan)
            logger.debug("Column %s has no finite values", col.id)
            continue

        lo = float(finite.min())
        hi = float(finite.max())

        pivot = rf_asset.values.get(col.id) if rf_asset else None
        if col.id in ZERO_PIVOT_COLUMNS:
            pivot = 0.0
        if not is_finite(pivot):
            pivot = (lo + hi) / 2

        policy = METRIC_BAND_POLICY.get(col.id)
        if policy is None:
            policy = RETURN_BAND_POLICY if col.kind == "return" else None

        scales[col.id] = ColorScale(
            min=lo,
            max=hi,
            pivot=float(pivot),  # type: ignore[arg-type]
            reverse=policy.reverse if policy else False,
            band_step=policy.step if policy else 0.0,
            band_cap=policy.cap if policy else 0.0,
        )

    return scales


# ---------------------------------------------------------------------------
# Class and asset colors
# ---------------------------------------------------------------------------


def _class_hue(label: str) -> int:
    # Polynomial hash over UTF-16 code units, kept in 32 bits.
    encoded = label.encode("utf-16-le")
    h = 0
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    return h % 360


def class_color(label: str | None) -> str:
    """Deterministic fallback color for a class label, as CSS hsl()."""
    hue = _class_hue(label or UNCLASSIFIED_LABEL)
    return f"hsl({hue} {CLASS_SATURATION}% {CLASS_LIGHTNESS}%)"


def class_color_map(assets: Sequence[Asset]) -> dict[str, str]:
    """Class label -> color, in first-seen order.

    An explicit class_color on any asset of the class wins (the last
    one seen); otherwise the hashed fallback is used.
    """
    colors: dict[str, str] = {}
    for a in assets:
        label = a.asset_class or UNCLASSIFIED_LABEL
        preferred = a.class_color.strip()
        if label not in colors:
            colors[label] = preferred or class_color(label)
        elif preferred:
            colors[label] = preferred
    return colors


def card_color(
    asset: Asset,
    column_id: str,
    highlight_mode: HighlightMode,
    class_colors: Mapping[str, str],
    scales: Mapping[str, ColorScale],
) -> str:
    """CSS background color of one card."""
    if highlight_mode is HighlightMode.CLASS:
        label = asset.asset_class or UNCLASSIFIED_LABEL
        return class_colors.get(label) or asset.class_color or NEUTRAL_HEX
    if highlight_mode is HighlightMode.ASSET:
        return asset.asset_color.strip() or NEUTRAL_HEX
    return rgb_css(value_to_color(asset.values.get(column_id), scales.get(column_id)))
