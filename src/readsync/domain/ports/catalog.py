"""Port for reading the canonical catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from readsync.domain.model import CatalogEntry, CatalogFilter, DataSource


@runtime_checkable
class CatalogRepository(Protocol):
    """Read-only view of the catalog owned by the host application."""

    async def find_by_external_id(
        self,
        external_id: str,
        data_source: DataSource,
    ) -> CatalogEntry | None: ...

    async def load_all_for_matching(
        self,
        catalog_filter: CatalogFilter,
    ) -> Sequence[CatalogEntry]: ...
