"""Domain model for the library import pipeline."""

from __future__ import annotations

from .catalog import CatalogEntry, CatalogEntryId, CatalogFilter
from .enums import DataSource, ImportStage, MatchKind, ReadingStatus
from .imports import (
    ConfirmResult,
    FetchResult,
    ImportIssue,
    ImportProgress,
    PendingImportEntry,
    RawCandidate,
    TitleTranslation,
)
from .tracking import TrackingDraft, TrackingRecord, UserId

__all__ = [
    "CatalogEntry",
    "CatalogEntryId",
    "CatalogFilter",
    "ConfirmResult",
    "DataSource",
    "FetchResult",
    "ImportIssue",
    "ImportProgress",
    "ImportStage",
    "MatchKind",
    "PendingImportEntry",
    "RawCandidate",
    "ReadingStatus",
    "TitleTranslation",
    "TrackingDraft",
    "TrackingRecord",
    "UserId",
]
