"""Data models for the return map."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Asset:
    """One security in the metrics table.

    Attributes:
        id: Stable identity (explicit registry id or normalised name).
        display: Name shown on the card.
        source_name: Name as it appears in the metrics table.
        asset_class: Category label. Empty if unknown.
        asset_color: Explicit card color for asset highlight mode.
        class_color: Explicit color for the asset's class.
        values: Column id -> value. Every column id has an entry;
            missing data is None.
        raw: Original metrics-table row.
    """

    id: str
    display: str
    source_name: str = ""
    asset_class: str = ""
    asset_color: str = ""
    class_color: str = ""
    values: dict[str, float | None] = field(default_factory=dict)
    raw: dict[str, str] = field(default_factory=dict)


@dataclass
class Column:
    """One ranked column of the map.

    Attributes:
        id: Year ("2016"), partial year ("2015*") or metric id.
        label: Header text.
        kind: "return" or "metric".
        source: Raw metrics-table header, None for derived metrics.
        sort: Ranking direction. Always "desc".
    """

    id: str
    label: str
    kind: str
    source: str | None = None
    sort: str = "desc"


@dataclass
class Dataset:
    """Assets, ordered columns and risk-free context for one geography.

    Attributes:
        assets: Assets in metrics-table order.
        columns: Return columns by year, then the fixed metric columns.
        subtitle: Human-readable dataset description.
        period_text: Period of the annualised metrics, "" if unknown.
        risk_free_name: Configured risk-free asset name.
        risk_free_annualised: Annualised total of the risk-free asset.
        risk_free_asset_id: Id of the risk-free asset, None if not found.
        total_return_source: Header of the multi-year total return column.
    """

    assets: list[Asset]
    columns: list[Column]
    subtitle: str = ""
    period_text: str = ""
    risk_free_name: str = ""
    risk_free_annualised: float | None = None
    risk_free_asset_id: str | None = None
    total_return_source: str | None = None

    @property
    def column_ids(self) -> list[str]:
        return [c.id for c in self.columns]

    def asset(self, asset_id: str) -> Asset | None:
        for a in self.assets:
            if a.id == asset_id:
                return a
        return None

    def values_for(self, column_id: str) -> list[float | None]:
        """Values of one column in asset order."""
        return [a.values.get(column_id) for a in self.assets]
