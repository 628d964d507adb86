"""Data loading and preparation."""

from __future__ import annotations

import logging
from pathlib import Path

from returnmap.analysis.derived_metrics import prepare_dataset
from returnmap.config import GeographyConfig
from returnmap.data.columns import extract_columns
from returnmap.data.loader import DatasetLoadError, load_tables
from returnmap.data.models import Asset, Column, Dataset

logger = logging.getLogger(__name__)

__all__ = ["Asset", "Column", "Dataset", "DatasetLoadError", "load_dataset"]


def load_dataset(data_dir: Path, geography: GeographyConfig) -> Dataset:
    """Load and prepare the dataset for one geography.

    Loading sequence:
        1. Read the metrics table and asset registry.
        2. Classify metrics-table headers into columns.
        3. Merge with the registry and derive excess return and Sharpe.

    Args:
        data_dir: Root data directory.
        geography: Geography to load.

    Returns:
        Prepared Dataset.

    Raises:
        DatasetLoadError: If a source file is missing or unreadable.
    """
    tables = load_tables(data_dir, geography)
    columns = extract_columns(tables.metrics_header)
    return prepare_dataset(
        tables.metrics_rows, tables.registry_rows, geography, columns,
    )
