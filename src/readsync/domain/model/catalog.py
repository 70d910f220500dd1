"""Catalog entries as seen by the import pipeline (read-only)."""

from __future__ import annotations

from dataclasses import dataclass, field

from .enums import DataSource

type CatalogEntryId = int | str


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    id: CatalogEntryId
    title: str
    alternative_titles: tuple[str, ...] = ()
    cover_image: str | None = None
    external_id: str | None = None
    data_source: DataSource | None = None
    is_adult: bool = False


@dataclass(frozen=True, slots=True)
class CatalogFilter:
    """Restricts the working set loaded for one reconciliation run."""

    data_source: DataSource | None = DataSource.MYANIMELIST
    include_adult: bool = False
    ids: frozenset[CatalogEntryId] | None = field(default=None)

    def accepts(self, entry: CatalogEntry) -> bool:
        if self.data_source is not None and entry.data_source is not self.data_source:
            return False
        if entry.is_adult and not self.include_adult:
            return False
        return self.ids is None or entry.id in self.ids
