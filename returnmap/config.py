"""Return map configuration.

Geographies, display/highlight modes, layout constants and the fixed
per-column color band policy. Nothing here is computed from data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Source files
# ---------------------------------------------------------------------------

METRICS_FILENAME = "CSV_Quantum.csv"
REGISTRY_FILENAME = "asset_registry.csv"
CSV_DELIMITER = ";"

# Header spellings accepted for the asset name column of the metrics table.
METRICS_NAME_FIELDS: tuple[str, ...] = ("Nome", "Name", "name", "Asset", "asset")

# ---------------------------------------------------------------------------
# Geographies
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GeographyConfig:
    """One selectable dataset.

    Attributes:
        key: Short identifier used on the command line ("br", "ex").
        label: Display label used in the subtitle.
        folder: Data folder, relative to the data root.
        risk_free_name: Name of the risk-free asset in the metrics table.
        currency: ISO currency code of the dataset.
    """

    key: str
    label: str
    folder: str
    risk_free_name: str
    currency: str

    def __post_init__(self) -> None:
        if not self.risk_free_name.strip():
            raise ValueError(
                f"Geography {self.key!r} needs a non-empty risk_free_name."
            )


GEOGRAPHIES: dict[str, GeographyConfig] = {
    "br": GeographyConfig(
        key="br",
        label="Brasil",
        folder="br",
        risk_free_name="CDI",
        currency="BRL",
    ),
    "ex": GeographyConfig(
        key="ex",
        label="Exterior",
        folder="ex",
        risk_free_name="SOFR",
        currency="USD",
    ),
}


def get_geography(key: str) -> GeographyConfig:
    """Look up a geography by key.

    Raises:
        ValueError: If the key is not configured.
    """
    try:
        return GEOGRAPHIES[key]
    except KeyError:
        raise ValueError(
            f"Unknown geography {key!r}. Expected one of {sorted(GEOGRAPHIES)}."
        ) from None


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------


class DisplayMode(Enum):
    """Vertical placement of cards within each column."""

    STACKED = "stacked"
    ZERO = "zero"
    ASSET = "asset"

    @classmethod
    def parse(cls, value: DisplayMode | str | None) -> DisplayMode:
        """Resolve a mode, falling back to STACKED for anything unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning("Unknown display mode %r, using stacked", value)
            return cls.STACKED


class HighlightMode(Enum):
    """What the card background color encodes."""

    CLASS = "class"
    ASSET = "asset"
    RETURN = "return"

    @classmethod
    def parse(cls, value: HighlightMode | str | None) -> HighlightMode:
        """Resolve a mode, falling back to CLASS for anything unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning("Unknown highlight mode %r, using class", value)
            return cls.CLASS


@dataclass(frozen=True)
class RenderInput:
    """Everything the viewer chooses for one render.

    Attributes:
        geography: Key into GEOGRAPHIES.
        display_mode: Card placement mode.
        highlight_mode: Card color mode.
        reference_asset_id: Asset used by asset mode. None lets the
            runner pick the first asset.
    """

    geography: str = "br"
    display_mode: DisplayMode = DisplayMode.STACKED
    highlight_mode: HighlightMode = HighlightMode.CLASS
    reference_asset_id: str | None = None


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LayoutConfig:
    """Card geometry in pixels.

    Attributes:
        card_height: Height of a single card.
        gap: Vertical gap between consecutive cards.
    """

    card_height: float = 44.0
    gap: float = 8.0

    def __post_init__(self) -> None:
        if self.card_height <= 0:
            raise ValueError(f"card_height must be positive, got {self.card_height}")
        if self.gap < 0:
            raise ValueError(f"gap must be non-negative, got {self.gap}")

    @property
    def pitch(self) -> float:
        """Distance between the tops of two consecutive rows."""
        return self.card_height + self.gap


# ---------------------------------------------------------------------------
# Color scale
# ---------------------------------------------------------------------------

RGB = tuple[int, int, int]

COLOR_LOW: RGB = (200, 29, 37)
COLOR_PIVOT: RGB = (241, 196, 83)
COLOR_HIGH: RGB = (42, 157, 143)
COLOR_NEUTRAL: RGB = (226, 232, 240)
NEUTRAL_HEX = "#e2e8f0"

UNCLASSIFIED_LABEL = "Sem classe"

# Class fallback colors: fixed saturation and lightness, hue from a hash.
CLASS_SATURATION = 55
CLASS_LIGHTNESS = 68


@dataclass(frozen=True)
class BandPolicy:
    """Per-column color band settings.

    Attributes:
        step: Quantisation step. 0 disables banding (continuous gradient).
        cap: Distance from the pivot at which the color saturates.
        reverse: True when lower values are better.
    """

    step: float
    cap: float
    reverse: bool = False


RETURN_BAND_POLICY = BandPolicy(step=0.0, cap=0.15)

METRIC_BAND_POLICY: dict[str, BandPolicy] = {
    "annualised_total": BandPolicy(step=0.02, cap=0.10),
    "annualised_excess": BandPolicy(step=0.0, cap=0.05),
    "sharpe": BandPolicy(step=0.10, cap=0.50),
    "vol": BandPolicy(step=0.02, cap=0.20, reverse=True),
    "max_dd": BandPolicy(step=0.05, cap=0.30),
}

# Columns whose pivot is zero rather than the risk-free asset's own value.
ZERO_PIVOT_COLUMNS: frozenset[str] = frozenset({"annualised_excess", "sharpe"})
