"""Static return map chart.

Draws one column per ranked metric and one card per asset, at the
pixel offsets computed by the layout engine.
"""

from __future__ import annotations

import colorsys
import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import to_rgb
from matplotlib.figure import Figure
from matplotlib.patches import FancyBboxPatch

from returnmap.analysis.color_scale import card_color
from returnmap.config import NEUTRAL_HEX
from returnmap.formatting import format_value

if TYPE_CHECKING:
    from returnmap.runner import ReturnMap

logger = logging.getLogger(__name__)

COLUMN_WIDTH = 132.0
COLUMN_GAP = 12.0
HEADER_HEIGHT = 36.0
DPI = 100

_RGB_RE = re.compile(r"^rgb\((\d+),\s*(\d+),\s*(\d+)\)$")
_HSL_RE = re.compile(r"^hsl\(([\d.]+)[ ,]+([\d.]+)%[ ,]+([\d.]+)%\)$")


def css_to_rgb(color: str) -> tuple[float, float, float]:
    """Convert a CSS color (hex, named, rgb() or hsl()) to matplotlib RGB."""
    s = color.strip().lower()
    m = _RGB_RE.match(s)
    if m:
        return (int(m.group(1)) / 255, int(m.group(2)) / 255, int(m.group(3)) / 255)
    m = _HSL_RE.match(s)
    if m:
        h, sat, light = (float(g) for g in m.groups())
        return colorsys.hls_to_rgb(h / 360, light / 100, sat / 100)
    try:
        return to_rgb(s)
    except ValueError:
        logger.debug("Unrecognised color %r, using grey", color)
        return to_rgb(NEUTRAL_HEX)


def _empty_figure(title: str) -> Figure:
    fig, ax = plt.subplots(figsize=(10, 4))
    ax.text(0.5, 0.5, "No assets to display", transform=ax.transAxes,
            ha="center", va="center", fontsize=14)
    ax.set_title(title)
    ax.axis("off")
    return fig


def return_map_figure(return_map: ReturnMap) -> Figure:
    """Draw the return map.

    Args:
        return_map: Output of build_return_map.

    Returns:
        Matplotlib Figure sized so one data unit is one pixel at 100 dpi.
    """
    dataset = return_map.dataset
    layout = return_map.layout
    cfg = return_map.layout_config
    highlight = return_map.render_input.highlight_mode
    title = dataset.subtitle or "Return Map"

    if not dataset.assets or not dataset.columns:
        return _empty_figure(title)

    n_cols = len(dataset.columns)
    total_w = n_cols * COLUMN_WIDTH + (n_cols - 1) * COLUMN_GAP
    total_h = HEADER_HEIGHT + max(layout.height, cfg.card_height)

    fig, ax = plt.subplots(figsize=(total_w / DPI, (total_h + 40) / DPI), dpi=DPI)
    ax.set_xlim(0, total_w)
    ax.set_ylim(total_h, 0)
    ax.axis("off")

    x_starts = np.arange(n_cols) * (COLUMN_WIDTH + COLUMN_GAP)
    for x0, col in zip(x_starts, dataset.columns, strict=True):
        ax.text(x0 + COLUMN_WIDTH / 2, HEADER_HEIGHT / 2, col.label,
                ha="center", va="center", fontsize=9, fontweight="bold")

        baseline = layout.baselines.get(col.id)
        if baseline is not None:
            y = HEADER_HEIGHT + baseline
            ax.plot([x0, x0 + COLUMN_WIDTH], [y, y], color="black",
                    linestyle="--", linewidth=0.8, zorder=1)

        positions = layout.positions.get(col.id, {})
        for asset in dataset.assets:
            top = positions.get(asset.id)
            if top is None:
                continue
            y = HEADER_HEIGHT + top
            color = card_color(
                asset, col.id, highlight, return_map.class_colors, return_map.scales,
            )
            ax.add_patch(FancyBboxPatch(
                (x0 + 2, y + 2), COLUMN_WIDTH - 4, cfg.card_height - 4,
                boxstyle="round,pad=0,rounding_size=6",
                facecolor=css_to_rgb(color), edgecolor="white",
                linewidth=0.5, zorder=2,
            ))
            ax.text(x0 + 8, y + cfg.card_height * 0.35, asset.display,
                    ha="left", va="center", fontsize=7, zorder=3, clip_on=True)
            ax.text(x0 + 8, y + cfg.card_height * 0.7,
                    format_value(col.id, asset.values.get(col.id)),
                    ha="left", va="center", fontsize=7, fontweight="bold",
                    zorder=3)

    ax.set_title(title, fontsize=11, loc="left")
    fig.tight_layout()
    return fig


def save_return_map_png(return_map: ReturnMap, path: Path) -> Path:
    """Render and write the chart as PNG."""
    # Use non-interactive backend for rendering
    matplotlib.use("Agg")

    fig = return_map_figure(return_map)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(path, dpi=DPI)
        logger.info("Chart written to %s", path)
        return path
    finally:
        plt.close(fig)
