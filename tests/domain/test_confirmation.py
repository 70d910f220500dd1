from __future__ import annotations

import asyncio
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from readsync.domain.confirmation import confirm_import, draft_from_entry
from readsync.domain.model import MatchKind, PendingImportEntry, ReadingStatus
from tests.helpers.catalog import FakeTrackingRepository

if TYPE_CHECKING:
    from readsync.domain.model import CatalogEntryId, ConfirmResult

USER = "user-1"
NOW = datetime(2024, 6, 1, 12, 30, tzinfo=UTC)


def _entry(
    entry_id: CatalogEntryId,
    title: str,
    *,
    status: ReadingStatus = ReadingStatus.READING,
    chapter: int | None = None,
    volume: int | None = None,
    rating: float | None = None,
) -> PendingImportEntry:
    return PendingImportEntry(
        catalog_entry_id=entry_id,
        title=title,
        source_title=title,
        status=status,
        match_kind=MatchKind.EXACT,
        current_chapter=chapter,
        current_volume=volume,
        rating=rating,
    )


def _confirm(
    entries: list[PendingImportEntry],
    tracking: FakeTrackingRepository,
) -> ConfirmResult:
    return asyncio.run(confirm_import(USER, entries, tracking=tracking, clock=lambda: NOW))


def test_confirm_creates_one_record_per_entry() -> None:
    tracking = FakeTrackingRepository()

    result = _confirm([_entry(1, "One Piece"), _entry(2, "Berserk")], tracking)

    assert result.imported == 2
    assert result.already_tracked == 0
    assert result.errors == []
    assert sorted(draft.catalog_entry_id for draft in tracking.created) == [1, 2]


def test_confirming_twice_is_idempotent() -> None:
    tracking = FakeTrackingRepository()
    entries = [_entry(1, "One Piece"), _entry(2, "Berserk")]

    first = _confirm(entries, tracking)
    second = _confirm(entries, tracking)

    assert first.imported == 2
    assert second.imported == 0
    assert second.already_tracked == 2
    assert len(tracking.records) == 2


def test_existing_records_are_counted_not_duplicated() -> None:
    tracking = FakeTrackingRepository()
    tracking.seed(USER, [1])

    result = _confirm([_entry(1, "One Piece"), _entry(2, "Berserk")], tracking)

    assert result.imported == 1
    assert result.already_tracked == 1
    assert [draft.catalog_entry_id for draft in tracking.created] == [2]


def test_concurrent_insert_counts_as_already_tracked() -> None:
    tracking = FakeTrackingRepository(racing={1})

    result = _confirm([_entry(1, "One Piece")], tracking)

    assert result.imported == 0
    assert result.already_tracked == 1
    assert result.errors == []


def test_failed_insert_is_reported_and_batch_continues() -> None:
    tracking = FakeTrackingRepository(failing={1: RuntimeError("disk full")})

    result = _confirm([_entry(1, "One Piece"), _entry(2, "Berserk")], tracking)

    assert result.imported == 1
    assert result.errors == ['Failed to import "One Piece": disk full']


def test_failed_insert_without_message_names_the_error_type() -> None:
    tracking = FakeTrackingRepository(failing={2: KeyError()})

    result = _confirm([_entry(2, "Berserk")], tracking)

    assert result.imported == 0
    assert result.errors == ['Failed to import "Berserk": KeyError']


def test_repeated_selection_is_collapsed() -> None:
    tracking = FakeTrackingRepository()

    result = _confirm([_entry(1, "One Piece"), _entry(1, "One Piece")], tracking)

    assert result.imported == 1
    assert result.already_tracked == 0
    assert len(tracking.created) == 1


def test_draft_stamps_rating_and_reading_times() -> None:
    entry = PendingImportEntry(
        catalog_entry_id=7,
        title="Monster",
        source_title="Monster",
        status=ReadingStatus.COMPLETED,
        match_kind=MatchKind.EXTERNAL_ID,
        current_chapter=162,
        current_volume=18,
        rating=4.5,
        start_date=date(2020, 3, 1),
        finish_date=date(2020, 5, 12),
        notes="reread in 2023",
    )

    draft = draft_from_entry(USER, entry, now=NOW)

    assert draft.user_id == USER
    assert draft.status is ReadingStatus.COMPLETED
    assert draft.rating == 4.5
    assert draft.rated_at == NOW
    assert draft.last_read_at == NOW
    assert draft.start_date == date(2020, 3, 1)
    assert draft.finish_date == date(2020, 5, 12)
    assert draft.notes == "reread in 2023"


def test_draft_without_rating_or_progress_leaves_times_empty() -> None:
    entry = _entry(3, "Vagabond", status=ReadingStatus.PLAN_TO_READ)

    draft = draft_from_entry(USER, entry, now=NOW)

    assert draft.rated_at is None
    assert draft.last_read_at is None


def test_volume_only_progress_sets_last_read_at() -> None:
    draft = draft_from_entry(USER, _entry(4, "Monster", volume=3), now=NOW)

    assert draft.current_chapter is None
    assert draft.current_volume == 3
    assert draft.last_read_at == NOW
