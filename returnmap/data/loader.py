"""CSV loading for one geography (metrics table + asset registry)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from returnmap.config import (
    CSV_DELIMITER,
    METRICS_FILENAME,
    REGISTRY_FILENAME,
    GeographyConfig,
)

logger = logging.getLogger(__name__)


class DatasetLoadError(RuntimeError):
    """A source file is missing or unreadable."""


@dataclass
class RawTables:
    """Both source tables as header lists plus string records.

    Attributes:
        metrics_header: Metrics-table headers in file order.
        metrics_rows: One record per asset, every cell a string.
        registry_rows: One record per registry row.
        folder: Folder the tables were read from.
    """

    metrics_header: list[str]
    metrics_rows: list[dict[str, str]]
    registry_rows: list[dict[str, str]]
    folder: Path


def read_table(path: Path) -> pd.DataFrame:
    """Read a semicolon-delimited table with every cell as a string.

    Bytes that are not valid UTF-8 become U+FFFD, which the name
    normaliser strips, so Latin-1 exports still match.

    Raises:
        DatasetLoadError: If the file is missing or cannot be parsed.
    """
    if not path.is_file():
        raise DatasetLoadError(f"File not found: {path}")

    try:
        df = pd.read_csv(
            path,
            sep=CSV_DELIMITER,
            dtype=str,
            keep_default_na=False,
            encoding="utf-8-sig",
            encoding_errors="replace",
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, OSError) as e:
        raise DatasetLoadError(f"Failed to read {path}: {e}") from e

    # Short rows leave NaN in the trailing cells.
    df = df.fillna("")
    if not df.empty:
        blank = df.apply(lambda col: col.str.strip().eq("")).all(axis=1)
        df = df.loc[~blank]

    logger.debug("Read %s: %d rows, %d columns", path.name, len(df), len(df.columns))
    return df


def load_tables(data_dir: Path, geography: GeographyConfig) -> RawTables:
    """Load the metrics and registry tables for a geography.

    Args:
        data_dir: Root data directory.
        geography: Geography whose folder is read.

    Returns:
        RawTables ready for column extraction and dataset preparation.

    Raises:
        DatasetLoadError: If either file is missing or unreadable.
    """
    folder = data_dir / geography.folder
    metrics = read_table(folder / METRICS_FILENAME)
    registry = read_table(folder / REGISTRY_FILENAME)

    logger.info(
        "Loaded %s: %d metric rows, %d registry rows",
        geography.label, len(metrics), len(registry),
    )
    return RawTables(
        metrics_header=[str(c) for c in metrics.columns],
        metrics_rows=metrics.to_dict(orient="records"),
        registry_rows=registry.to_dict(orient="records"),
        folder=folder,
    )
