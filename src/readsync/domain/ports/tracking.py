"""Port for the user's tracking records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from readsync.domain.model import CatalogEntryId, TrackingDraft, TrackingRecord, UserId


@runtime_checkable
class TrackingRepository(Protocol):
    """Tracking store; at most one record per (user, catalog entry)."""

    async def exists(self, user_id: UserId, catalog_entry_id: CatalogEntryId) -> bool: ...

    async def create(self, draft: TrackingDraft) -> TrackingRecord | None:
        """Create the record, or return ``None`` if it already exists."""
        ...
