"""Dataset preparation and derived metrics.

Merges metrics-table rows with the asset registry, parses every cell,
and derives annualised excess return over the risk-free asset and the
Sharpe ratio.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence

from returnmap.config import METRICS_NAME_FIELDS, GeographyConfig
from returnmap.data.columns import ColumnSet
from returnmap.data.models import Asset, Dataset
from returnmap.data.parsing import is_finite, normalize, parse_number
from returnmap.data.registry import Registry, RegistryEntry, default_entry

logger = logging.getLogger(__name__)

_PERIOD_RE = re.compile(r"\((.*?)\)")


def find_reference_asset(assets: Sequence[Asset], name: str) -> Asset | None:
    """Find an asset whose source or display name equals *name*.

    Comparison is on normalised names (case and accent insensitive).
    """
    key = normalize(name)
    for a in assets:
        if normalize(a.source_name) == key or normalize(a.display) == key:
            return a
    return None


def derive_metrics(assets: Sequence[Asset], risk_free_name: str) -> Asset | None:
    """Add annualised_excess and sharpe to every asset's values, in place.

    annualised_excess = annualised_total - risk-free annualised_total,
    defined only when both are finite. sharpe = annualised_excess / vol,
    defined only when both are finite and vol is non-zero. If the
    risk-free asset is not found, both are None for every asset.

    Args:
        assets: Assets with parsed annualised_total and vol.
        risk_free_name: Configured name of the risk-free asset.

    Returns:
        The risk-free asset, or None if not found.
    """
    rf_asset = find_reference_asset(assets, risk_free_name)
    rf_annualised = rf_asset.values.get("annualised_total") if rf_asset else None
    if rf_asset is None:
        logger.warning(
            "Risk-free asset %r not found, excess return and Sharpe unavailable",
            risk_free_name,
        )

    for a in assets:
        ann = a.values.get("annualised_total")
        vol = a.values.get("vol")

        excess: float | None = None
        if is_finite(ann) and is_finite(rf_annualised):
            excess = ann - rf_annualised  # type: ignore[operator]

        sharpe: float | None = None
        if is_finite(excess) and is_finite(vol) and vol != 0:
            sharpe = excess / vol  # type: ignore[operator]

        a.values["annualised_excess"] = excess
        a.values["sharpe"] = sharpe

    return rf_asset


def _row_name(row: Mapping[str, object]) -> str:
    for candidate in METRICS_NAME_FIELDS:
        if candidate in row and row[candidate] is not None:
            return str(row[candidate]).strip()
    return ""


def _unique_id(base: str, used: set[str]) -> str:
    """First of base, base-2, base-3, ... not already in *used*."""
    candidate = base
    n = 1
    while candidate in used:
        n += 1
        candidate = f"{base}-{n}"
    return candidate


def _build_asset(
    row: Mapping[str, object],
    entry: RegistryEntry,
    columns: ColumnSet,
    asset_id: str,
) -> Asset:
    def cell(source: str | None) -> float | None:
        return parse_number(row.get(source)) if source else None

    values: dict[str, float | None] = {}
    for c in columns.return_columns:
        values[c.id] = cell(c.source)
    values["annualised_total"] = cell(columns.annualised_source)
    values["vol"] = cell(columns.vol_source)
    values["max_dd"] = cell(columns.max_dd_source)

    return Asset(
        id=asset_id,
        display=entry.display,
        source_name=entry.source_name or _row_name(row),
        asset_class=entry.asset_class,
        asset_color=entry.asset_color,
        class_color=entry.class_color,
        values=values,
        raw={str(k): str(v) for k, v in row.items()},
    )


def period_text(columns: ColumnSet) -> str:
    """Period shown in the subtitle, e.g. "02/06/2015 até 31/12/2024".

    Taken from the parentheses of the annualised return header, or of
    the total period return header when the former has none.
    """
    for source in (columns.annualised_source, columns.total_return_source):
        if source:
            m = _PERIOD_RE.search(source)
            if m:
                return m.group(1)
    return ""


def build_subtitle(geography: GeographyConfig, period: str) -> str:
    if period:
        return f"{geography.label} • Período: {period} • RF: {geography.risk_free_name}"
    return f"{geography.label} • RF: {geography.risk_free_name}"


def prepare_dataset(
    metric_rows: Sequence[Mapping[str, object]],
    registry_rows: Sequence[Mapping[str, object]],
    geography: GeographyConfig,
    columns: ColumnSet,
) -> Dataset:
    """Merge metrics rows with the registry and derive metrics.

    Args:
        metric_rows: One record per asset, keyed by raw header.
        registry_rows: Raw registry records (any accepted header spelling).
        geography: Geography settings (label, risk-free name).
        columns: Output of extract_columns for the metrics header.

    Returns:
        Dataset whose assets carry a value (possibly None) for every
        column. Asset ids are unique; rows resolving to an id already
        taken get "-2", "-3", ... appended.
    """
    registry = Registry.from_records(registry_rows)

    assets: list[Asset] = []
    used_ids: set[str] = set()
    unmatched = 0
    for row in metric_rows:
        name = _row_name(row)
        entry = registry.match(name)
        if entry is None:
            unmatched += 1
            logger.debug("No registry entry for %r", name)
            entry = default_entry(name)

        # Layout and color maps are keyed by id; repeats get a suffix.
        asset_id = _unique_id(entry.id, used_ids)
        if asset_id != entry.id:
            logger.warning(
                "Row %r resolves to asset id %r already in use, using %r",
                name, entry.id, asset_id,
            )
        used_ids.add(asset_id)
        assets.append(_build_asset(row, entry, columns, asset_id))

    if unmatched:
        logger.warning(
            "%d of %d assets have no registry entry", unmatched, len(assets),
        )

    rf_asset = derive_metrics(assets, geography.risk_free_name)

    for c in columns.metric_columns:
        if c.id == "annualised_excess":
            c.label = f"Anual. ({geography.risk_free_name}+)"

    period = period_text(columns)
    dataset = Dataset(
        assets=assets,
        columns=columns.all_columns,
        subtitle=build_subtitle(geography, period),
        period_text=period,
        risk_free_name=geography.risk_free_name,
        risk_free_annualised=(
            rf_asset.values.get("annualised_total") if rf_asset else None
        ),
        risk_free_asset_id=rf_asset.id if rf_asset else None,
        total_return_source=columns.total_return_source,
    )

    logger.info(
        "Prepared dataset %s: %d assets, %d columns",
        geography.label, len(dataset.assets), len(dataset.columns),
    )
    return dataset
