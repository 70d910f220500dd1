"""Tracking records created when an import is confirmed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date, datetime

    from .catalog import CatalogEntryId
    from .enums import ReadingStatus

type UserId = str


@dataclass(frozen=True, slots=True, kw_only=True)
class TrackingDraft:
    """Values for a tracking record that does not exist yet."""

    user_id: UserId
    catalog_entry_id: CatalogEntryId
    status: ReadingStatus
    current_chapter: int | None = None
    current_volume: int | None = None
    rating: float | None = None
    rated_at: datetime | None = None
    start_date: date | None = None
    finish_date: date | None = None
    notes: str | None = None
    last_read_at: datetime | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class TrackingRecord:
    """Persisted tracking record, unique per (user, catalog entry)."""

    user_id: UserId
    catalog_entry_id: CatalogEntryId
    status: ReadingStatus
    current_chapter: int | None
    current_volume: int | None
    rating: float | None
    rated_at: datetime | None
    start_date: date | None
    finish_date: date | None
    notes: str | None
    last_read_at: datetime | None
    created_at: datetime
