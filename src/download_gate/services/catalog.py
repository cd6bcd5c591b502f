"""Presentation helpers for catalog rows."""
from __future__ import annotations

from collections.abc import Iterable

from download_gate.schemas.catalog import CatalogBatch, CatalogEntry

_PREFERRED_ARCHITECTURE = "64-bit"


def _item_sort_key(entry: CatalogEntry) -> tuple[int, str]:
    return (0 if entry.architecture == _PREFERRED_ARCHITECTURE else 1, entry.file_name)


def group_by_version(entries: Iterable[CatalogEntry]) -> list[CatalogBatch]:
    """Group rows into per-version batches.

    Batches keep the catalog order of their first row; items within a batch
    list 64-bit builds first, then sort by file name.
    """
    grouped: dict[str, list[CatalogEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.version, []).append(entry)
    return [
        CatalogBatch(version=version, items=sorted(items, key=_item_sort_key))
        for version, items in grouped.items()
    ]
