"""SQLAlchemy adapter package for readsync."""

from __future__ import annotations

from .repositories import SqlAlchemyCatalogRepository, SqlAlchemyTrackingRepository, seed_catalog
from .session import StartupError, is_started, open_session, shutdown, startup
from .tables import catalog_entries_table, metadata, tracking_records_table

__all__ = [
    "SqlAlchemyCatalogRepository",
    "SqlAlchemyTrackingRepository",
    "StartupError",
    "catalog_entries_table",
    "is_started",
    "metadata",
    "open_session",
    "seed_catalog",
    "shutdown",
    "startup",
    "tracking_records_table",
]
