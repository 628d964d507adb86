"""Asset registry: display names, classes and colors.

Registry files come in several header spellings. Each canonical field
has an ordered list of accepted headers; the first one present in a
record wins. Records are resolved once, at load time, into
RegistryEntry objects.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from returnmap.config import NEUTRAL_HEX
from returnmap.data.parsing import normalize

logger = logging.getLogger(__name__)

TICKER_SEPARATOR = " - "

REGISTRY_FIELDS: dict[str, tuple[str, ...]] = {
    "id": ("id",),
    "source_name": (
        "quantum_name", "quantumName", "quantum", "quantum name", "source_name",
    ),
    "display": ("asset", "display", "name"),
    "asset_class": ("class", "asset_class", "assetClass"),
    "asset_color": ("asset_color", "color", "assetColor"),
    "class_color": ("class_color", "classColor"),
}


@dataclass(frozen=True)
class RegistryEntry:
    """Canonical registry record.

    Attributes:
        id: Asset identity.
        display: Name shown on cards.
        source_name: Name used in the metrics table. May be empty.
        asset_class: Category label. May be empty.
        asset_color: Explicit per-asset color. May be empty.
        class_color: Explicit color for the class. May be empty.
    """

    id: str
    display: str
    source_name: str = ""
    asset_class: str = ""
    asset_color: str = ""
    class_color: str = ""


def _field(record: Mapping[str, object], name: str) -> str:
    for candidate in REGISTRY_FIELDS[name]:
        if candidate in record and record[candidate] is not None:
            return str(record[candidate]).strip()
    return ""


def normalize_record(record: Mapping[str, object], index: int) -> RegistryEntry:
    """Resolve one raw registry row into a RegistryEntry.

    Args:
        record: Raw row keyed by header.
        index: Row position, used for a stable id when the row has no
            name at all.
    """
    source_name = _field(record, "source_name")
    display = _field(record, "display")
    asset_class = _field(record, "asset_class")

    explicit_id = _field(record, "id")
    if explicit_id:
        asset_id = explicit_id
    else:
        asset_id = normalize(source_name or display or asset_class) or f"asset-{index}"

    return RegistryEntry(
        id=asset_id,
        display=display or source_name,
        source_name=source_name,
        asset_class=asset_class,
        asset_color=_field(record, "asset_color"),
        class_color=_field(record, "class_color"),
    )


def default_entry(name: str) -> RegistryEntry:
    """Entry for a metrics row that has no registry match."""
    return RegistryEntry(
        id=normalize(name),
        display=name,
        source_name=name,
        asset_color=NEUTRAL_HEX,
    )


def ticker_guess(name: str) -> str:
    """Substring after the last " - ", or "" when there is none."""
    if TICKER_SEPARATOR not in name:
        return ""
    return name.rsplit(TICKER_SEPARATOR, 1)[1].strip()


class Registry:
    """Lookup of registry entries by normalised name."""

    def __init__(self, entries: Iterable[RegistryEntry]) -> None:
        self.entries = list(entries)
        self._by_source: dict[str, RegistryEntry] = {}
        self._by_display: dict[str, RegistryEntry] = {}
        for e in self.entries:
            if e.source_name:
                self._by_source[normalize(e.source_name)] = e
            if e.display:
                self._by_display[normalize(e.display)] = e

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, object]]) -> Registry:
        return cls(normalize_record(r, i) for i, r in enumerate(records))

    def __len__(self) -> int:
        return len(self.entries)

    def match(self, name: str) -> RegistryEntry | None:
        """Find the entry for a metrics-table name.

        Tries source name, then display name, then the ticker after the
        last " - " against display names.
        """
        key = normalize(name)
        entry = self._by_source.get(key) or self._by_display.get(key)
        if entry is not None:
            return entry

        ticker = ticker_guess(name)
        if ticker:
            return self._by_display.get(normalize(ticker))
        return None
