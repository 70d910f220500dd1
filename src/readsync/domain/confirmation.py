"""Turn the entries a user selected from a fetch result into tracking records."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from readsync.domain.errors import CandidateError
from readsync.domain.model import ConfirmResult, TrackingDraft

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from readsync.domain.model import CatalogEntryId, PendingImportEntry, UserId
    from readsync.domain.ports import TrackingRepository

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def draft_from_entry(
    user_id: UserId,
    entry: PendingImportEntry,
    *,
    now: datetime,
) -> TrackingDraft:
    has_progress = bool(entry.current_chapter) or bool(entry.current_volume)
    return TrackingDraft(
        user_id=user_id,
        catalog_entry_id=entry.catalog_entry_id,
        status=entry.status,
        current_chapter=entry.current_chapter,
        current_volume=entry.current_volume,
        rating=entry.rating,
        rated_at=now if entry.rating is not None else None,
        start_date=entry.start_date,
        finish_date=entry.finish_date,
        notes=entry.notes,
        last_read_at=now if has_progress else None,
    )


async def confirm_import(
    user_id: UserId,
    entries: Iterable[PendingImportEntry],
    *,
    tracking: TrackingRepository,
    clock: Callable[[], datetime] = _utcnow,
) -> ConfirmResult:
    """Create a tracking record for every selected entry.

    Running the same confirmation twice creates nothing the second time: every
    entry is then counted as already tracked.
    """

    result = ConfirmResult()
    seen: set[CatalogEntryId] = set()

    for entry in entries:
        if entry.catalog_entry_id in seen:
            log.debug("Ignoring repeated selection of %s", entry.catalog_entry_id)
            continue
        seen.add(entry.catalog_entry_id)

        try:
            if await tracking.exists(user_id, entry.catalog_entry_id):
                result.already_tracked += 1
                continue
            record = await tracking.create(draft_from_entry(user_id, entry, now=clock()))
        except Exception as exc:  # noqa: BLE001 - one failed insert must not abort the batch
            error = CandidateError.from_exception(exc, source_title=entry.title)
            log.warning("Failed to import %r: %s", error.source_title, error)
            result.errors.append(f'Failed to import "{error.source_title}": {error}')
            continue

        if record is None:
            # created concurrently between the check and the insert
            result.already_tracked += 1
        else:
            result.imported += 1

    log.info(
        "Confirmed import for %s: imported=%s already_tracked=%s errors=%s",
        user_id,
        result.imported,
        result.already_tracked,
        len(result.errors),
    )
    return result
