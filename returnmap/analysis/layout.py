"""Vertical card layout for the three display modes.

Every mode works in integer row indices that are converted to pixels
with the row pitch (card height + gap) at the end:

- stacked: row = rank within the column.
- zero: non-negative values above a zero line, negative values below
  it, missing values after the negatives. The zero line sits at the
  same height in every column.
- asset: row = rank distance to a reference asset. The reference sits
  on a line at the same height in every column.

Output offsets are always shifted so the topmost row starts at 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from returnmap.analysis.ranking import rank_all
from returnmap.config import DisplayMode, LayoutConfig
from returnmap.data.models import Dataset
from returnmap.data.parsing import is_finite

logger = logging.getLogger(__name__)


@dataclass
class Layout:
    """Card placement for one render.

    Attributes:
        positions: Column id -> asset id -> top offset in pixels.
        baselines: Column id -> baseline y in pixels, None for no line.
        height: Total content height in pixels.
        mode: Display mode actually applied.
    """

    positions: dict[str, dict[str, float]] = field(default_factory=dict)
    baselines: dict[str, float | None] = field(default_factory=dict)
    height: float = 0.0
    mode: DisplayMode = DisplayMode.STACKED


def _stacked_column(ordered: list[str], pitch: float) -> dict[str, float]:
    return {asset_id: idx * pitch for idx, asset_id in enumerate(ordered)}


def _stacked(
    dataset: Dataset,
    ranks: dict[str, list[str]],
    config: LayoutConfig,
) -> Layout:
    layout = Layout(mode=DisplayMode.STACKED)
    for col in dataset.columns:
        layout.positions[col.id] = _stacked_column(ranks[col.id], config.pitch)
        layout.baselines[col.id] = None
    layout.height = max(0.0, len(dataset.assets) * config.pitch - config.gap)
    return layout


def _zero_rows(dataset: Dataset, column_id: str, ordered: list[str]) -> dict[str, int]:
    """Row index per asset for one column, relative to the zero line."""
    values = {a.id: a.values.get(column_id) for a in dataset.assets}

    positive = [i for i in ordered if is_finite(values[i]) and values[i] >= 0]  # type: ignore[operator]
    negative = [i for i in ordered if is_finite(values[i]) and values[i] < 0]  # type: ignore[operator]
    missing = [i for i in ordered if not is_finite(values[i])]

    # Already ranked descending, so both lists are best-first.
    rows: dict[str, int] = {}
    n_pos = len(positive)
    for idx, asset_id in enumerate(positive):
        rows[asset_id] = idx - n_pos
    for idx, asset_id in enumerate(negative):
        rows[asset_id] = idx + 1
    for idx, asset_id in enumerate(missing):
        rows[asset_id] = len(negative) + 1 + idx
    return rows


def _zero(
    dataset: Dataset,
    ranks: dict[str, list[str]],
    config: LayoutConfig,
) -> Layout:
    pitch = config.pitch
    row_maps = {c.id: _zero_rows(dataset, c.id, ranks[c.id]) for c in dataset.columns}

    all_rows = [r for rows in row_maps.values() for r in rows.values()]
    global_min = min(all_rows) if all_rows else 0
    global_max = max(all_rows) if all_rows else 0

    baseline = (0 - global_min) * pitch - config.gap / 2
    layout = Layout(
        height=(global_max - global_min + 1) * pitch - config.gap,
        mode=DisplayMode.ZERO,
    )
    for col in dataset.columns:
        rows = row_maps[col.id]
        layout.positions[col.id] = {
            a.id: (rows[a.id] - global_min) * pitch
            for a in dataset.assets
            if a.id in rows
        }
        layout.baselines[col.id] = baseline

    logger.debug("Zero layout: rows %d..%d", global_min, global_max)
    return layout


def _relative(
    dataset: Dataset,
    ranks: dict[str, list[str]],
    reference_id: str,
    config: LayoutConfig,
) -> Layout:
    pitch = config.pitch

    if all(a.id != reference_id for a in dataset.assets):
        logger.warning(
            "Reference asset %r not in dataset, using stacked layout", reference_id,
        )
        return _stacked(dataset, ranks, config)

    # Every column ranks every asset, so the reference has a rank everywhere.
    relative: dict[str, dict[str, int]] = {}
    global_min = 0
    global_max = 0
    for col in dataset.columns:
        ordered = ranks[col.id]
        ref_rank = ordered.index(reference_id)
        rel = {asset_id: idx - ref_rank for idx, asset_id in enumerate(ordered)}
        relative[col.id] = rel
        global_min = min(global_min, *rel.values())
        global_max = max(global_max, *rel.values())

    baseline = (0 - global_min) * pitch - config.gap / 2
    layout = Layout(
        height=(global_max - global_min + 1) * pitch - config.gap,
        mode=DisplayMode.ASSET,
    )
    for col in dataset.columns:
        layout.positions[col.id] = {
            asset_id: (r - global_min) * pitch
            for asset_id, r in relative[col.id].items()
        }
        layout.baselines[col.id] = baseline

    logger.debug(
        "Asset layout around %r: relative rows %d..%d",
        reference_id, global_min, global_max,
    )
    return layout


def compute_layout(
    dataset: Dataset,
    display_mode: DisplayMode | str,
    reference_asset_id: str | None = None,
    config: LayoutConfig | None = None,
) -> Layout:
    """Compute card positions for every column.

    Pure function of its inputs. Unknown modes fall back to stacked;
    asset mode without a reference falls back to stacked.

    Args:
        dataset: Prepared dataset.
        display_mode: "stacked", "zero" or "asset".
        reference_asset_id: Reference asset for asset mode.
        config: Card geometry. Defaults to LayoutConfig().

    Returns:
        Layout with pixel offsets, per-column baselines and height.
    """
    config = config or LayoutConfig()
    mode = DisplayMode.parse(display_mode)
    ranks = rank_all(dataset)

    if mode is DisplayMode.ZERO:
        return _zero(dataset, ranks, config)

    if mode is DisplayMode.ASSET:
        if not reference_asset_id:
            logger.info("Asset mode without a reference asset, using stacked layout")
            return _stacked(dataset, ranks, config)
        return _relative(dataset, ranks, reference_asset_id, config)

    return _stacked(dataset, ranks, config)
