"""Catalog and tracking repositories backed by SQLAlchemy sessions.

The sessions are synchronous; the async methods exist to satisfy the domain
ports and run their statements inline.
"""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError

from readsync.domain.model import (
    CatalogEntry,
    DataSource,
    ReadingStatus,
    TrackingRecord,
)

from .tables import catalog_entries_table, tracking_records_table

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from sqlalchemy import Row
    from sqlalchemy.orm import Session

    from readsync.domain.model import (
        CatalogEntryId,
        CatalogFilter,
        TrackingDraft,
        UserId,
    )
    from readsync.domain.ports import CatalogRepository, TrackingRepository

log = getLogger(__name__)


def _entry_from_row(row: Row[Any]) -> CatalogEntry:
    return CatalogEntry(
        id=row.id,
        title=row.title,
        alternative_titles=tuple(row.alternative_titles or ()),
        cover_image=row.cover_image,
        external_id=row.external_id,
        data_source=DataSource(row.data_source) if row.data_source else None,
        is_adult=bool(row.is_adult),
    )


def _entry_values(entry: CatalogEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "title": entry.title,
        "alternative_titles": list(entry.alternative_titles),
        "cover_image": entry.cover_image,
        "external_id": entry.external_id,
        "data_source": entry.data_source.value if entry.data_source else None,
        "is_adult": entry.is_adult,
    }


class SqlAlchemyCatalogRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    async def find_by_external_id(
        self,
        external_id: str,
        data_source: DataSource,
    ) -> CatalogEntry | None:
        stmt = (
            select(catalog_entries_table)
            .where(catalog_entries_table.c.external_id == external_id)
            .where(catalog_entries_table.c.data_source == data_source.value)
            .order_by(catalog_entries_table.c.id)
            .limit(1)
        )
        row = self.session.execute(stmt).first()
        return _entry_from_row(row) if row is not None else None

    async def load_all_for_matching(self, catalog_filter: CatalogFilter) -> list[CatalogEntry]:
        table = catalog_entries_table
        stmt = select(table).order_by(table.c.id)
        if catalog_filter.data_source is not None:
            stmt = stmt.where(table.c.data_source == catalog_filter.data_source.value)
        if not catalog_filter.include_adult:
            stmt = stmt.where(table.c.is_adult.is_(False))
        if catalog_filter.ids is not None:
            stmt = stmt.where(table.c.id.in_([str(value) for value in catalog_filter.ids]))
        return [_entry_from_row(row) for row in self.session.execute(stmt)]


class SqlAlchemyTrackingRepository:
    def __init__(
        self,
        session: Session,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.session = session
        self._clock = clock or (lambda: datetime.now(UTC))

    async def exists(self, user_id: UserId, catalog_entry_id: CatalogEntryId) -> bool:
        table = tracking_records_table
        stmt = (
            select(table.c.user_id)
            .where(table.c.user_id == user_id)
            .where(table.c.catalog_entry_id == str(catalog_entry_id))
        )
        return self.session.execute(stmt).first() is not None

    async def create(self, draft: TrackingDraft) -> TrackingRecord | None:
        record = TrackingRecord(
            user_id=draft.user_id,
            catalog_entry_id=draft.catalog_entry_id,
            status=draft.status,
            current_chapter=draft.current_chapter,
            current_volume=draft.current_volume,
            rating=draft.rating,
            rated_at=draft.rated_at,
            start_date=draft.start_date,
            finish_date=draft.finish_date,
            notes=draft.notes,
            last_read_at=draft.last_read_at,
            created_at=self._clock(),
        )
        values = {
            "user_id": record.user_id,
            "catalog_entry_id": str(record.catalog_entry_id),
            "status": record.status.value,
            "current_chapter": record.current_chapter,
            "current_volume": record.current_volume,
            "rating": record.rating,
            "rated_at": record.rated_at,
            "start_date": record.start_date,
            "finish_date": record.finish_date,
            "notes": record.notes,
            "last_read_at": record.last_read_at,
            "created_at": record.created_at,
        }
        try:
            self.session.execute(insert(tracking_records_table).values(**values))
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            log.debug(
                "Tracking record for %s/%s already exists",
                draft.user_id,
                draft.catalog_entry_id,
            )
            return None
        return record

    async def get(self, user_id: UserId, catalog_entry_id: CatalogEntryId) -> TrackingRecord | None:
        table = tracking_records_table
        stmt = (
            select(table)
            .where(table.c.user_id == user_id)
            .where(table.c.catalog_entry_id == str(catalog_entry_id))
        )
        row = self.session.execute(stmt).first()
        if row is None:
            return None
        return TrackingRecord(
            user_id=row.user_id,
            catalog_entry_id=row.catalog_entry_id,
            status=ReadingStatus(row.status),
            current_chapter=row.current_chapter,
            current_volume=row.current_volume,
            rating=row.rating,
            rated_at=row.rated_at,
            start_date=row.start_date,
            finish_date=row.finish_date,
            notes=row.notes,
            last_read_at=row.last_read_at,
            created_at=row.created_at,
        )


def seed_catalog(session: Session, entries: Iterable[CatalogEntry]) -> int:
    """Insert ``entries``, replacing rows that share an id; returns the row count."""

    values = [_entry_values(entry) for entry in entries]
    if not values:
        return 0
    ids = [value["id"] for value in values]
    session.execute(delete(catalog_entries_table).where(catalog_entries_table.c.id.in_(ids)))
    session.execute(insert(catalog_entries_table), values)
    session.commit()
    log.info("Seeded %s catalog entries", len(values))
    return len(values)


if TYPE_CHECKING:

    def _catalog_check(session: Session) -> CatalogRepository:
        return SqlAlchemyCatalogRepository(session)

    def _tracking_check(session: Session) -> TrackingRepository:
        return SqlAlchemyTrackingRepository(session)
