"""Return map orchestrator.

Turns a prepared Dataset and the viewer's RenderInput into a ReturnMap:
everything a renderer needs to draw the cards without further numeric
work.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from returnmap.analysis.color_scale import (
    ColorScale,
    class_color_map,
    compute_color_scales,
    rgb_css,
)
from returnmap.analysis.layout import Layout, compute_layout
from returnmap.config import (
    COLOR_HIGH,
    COLOR_LOW,
    DisplayMode,
    HighlightMode,
    LayoutConfig,
    RenderInput,
    get_geography,
)
from returnmap.data import load_dataset
from returnmap.data.models import Dataset

logger = logging.getLogger(__name__)


@dataclass
class ReturnMap:
    """Complete render description.

    Attributes:
        dataset: Prepared dataset.
        layout: Card positions for the chosen display mode.
        scales: Column id -> color scale.
        class_colors: Class label -> color.
        render_input: Viewer choices, with the reference asset resolved.
        legend: (label, color) pairs for the chosen highlight mode.
        layout_config: Card geometry used for the layout.
    """

    dataset: Dataset
    layout: Layout
    scales: dict[str, ColorScale]
    class_colors: dict[str, str]
    render_input: RenderInput
    legend: list[tuple[str, str]] = field(default_factory=list)
    layout_config: LayoutConfig = field(default_factory=LayoutConfig)


def resolve_reference_asset(dataset: Dataset, requested: str | None) -> str | None:
    """Keep a requested reference asset if it exists, else use the first asset."""
    if requested and dataset.asset(requested) is not None:
        return requested
    if requested:
        logger.warning("Reference asset %r not in dataset", requested)
    return dataset.assets[0].id if dataset.assets else None


def build_legend(
    dataset: Dataset,
    highlight_mode: HighlightMode,
    class_colors: dict[str, str],
) -> list[tuple[str, str]]:
    """Legend entries for the highlight mode.

    Class mode lists every class; return mode shows the two ends of the
    scale relative to the risk-free asset; asset mode has no legend.
    """
    if highlight_mode is HighlightMode.RETURN:
        return [
            (f"Abaixo do {dataset.risk_free_name}", rgb_css(COLOR_LOW)),
            (f"Acima do {dataset.risk_free_name}", rgb_css(COLOR_HIGH)),
        ]
    if highlight_mode is HighlightMode.ASSET:
        return []
    return list(class_colors.items())


def build_return_map(
    dataset: Dataset,
    render_input: RenderInput,
    layout_config: LayoutConfig | None = None,
) -> ReturnMap:
    """Compute layout, color scales and legend for one render.

    Args:
        dataset: Prepared dataset.
        render_input: Viewer choices.
        layout_config: Card geometry. Defaults to LayoutConfig().

    Returns:
        ReturnMap for the renderers.
    """
    layout_config = layout_config or LayoutConfig()
    reference_id = resolve_reference_asset(dataset, render_input.reference_asset_id)
    resolved = RenderInput(
        geography=render_input.geography,
        display_mode=DisplayMode.parse(render_input.display_mode),
        highlight_mode=HighlightMode.parse(render_input.highlight_mode),
        reference_asset_id=reference_id,
    )

    layout = compute_layout(
        dataset, resolved.display_mode, reference_id, layout_config,
    )
    scales = compute_color_scales(dataset)
    class_colors = class_color_map(dataset.assets)
    legend = build_legend(dataset, resolved.highlight_mode, class_colors)

    logger.info(
        "Built return map: mode=%s, highlight=%s, reference=%s, height=%.0f",
        layout.mode.value,
        resolved.highlight_mode.value,
        reference_id,
        layout.height,
    )
    return ReturnMap(
        dataset=dataset,
        layout=layout,
        scales=scales,
        class_colors=class_colors,
        render_input=resolved,
        legend=legend,
        layout_config=layout_config,
    )


def load_return_map(data_dir: Path, render_input: RenderInput) -> ReturnMap:
    """Load a geography's files and build its return map.

    Raises:
        ValueError: If the geography is not configured.
        DatasetLoadError: If a source file is missing or unreadable.
    """
    geography = get_geography(render_input.geography)
    dataset = load_dataset(data_dir, geography)
    return build_return_map(dataset, render_input)
