"""Per-column asset ranking.

Assets are ordered by value, highest first. Missing or non-finite
values sort after every finite value. The sort is stable: ties and
missing values keep their input order.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from returnmap.data.models import Asset, Dataset
from returnmap.data.parsing import is_finite

logger = logging.getLogger(__name__)


def _sort_key(value: float | None) -> tuple[int, float]:
    if is_finite(value):
        return (0, -value)  # type: ignore[operator]
    return (1, 0.0)


def rank_assets(assets: Sequence[Asset], column_id: str) -> list[str]:
    """Order asset ids by one column's value, descending, missing last.

    Args:
        assets: Assets in input order.
        column_id: Column to rank by.

    Returns:
        Asset ids, best first.
    """
    ordered = sorted(assets, key=lambda a: _sort_key(a.values.get(column_id)))
    return [a.id for a in ordered]


def rank_all(dataset: Dataset) -> dict[str, list[str]]:
    """Rank every column of a dataset."""
    ranks = {c.id: rank_assets(dataset.assets, c.id) for c in dataset.columns}
    logger.debug("Ranked %d assets across %d columns", len(dataset.assets), len(ranks))
    return ranks
