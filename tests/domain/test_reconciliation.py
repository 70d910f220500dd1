from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

import pytest

from readsync.domain.model import (
    CatalogFilter,
    DataSource,
    ImportStage,
    MatchKind,
    ReadingStatus,
)
from readsync.domain.reconciliation import LibraryReconciler, rescale_score
from tests.helpers.catalog import (
    FakeCatalogRepository,
    FakeTrackingRepository,
    make_candidate,
    make_entry,
)
from tests.helpers.resolution import FakeResolver, make_translation

if TYPE_CHECKING:
    from readsync.domain.model import (
        CatalogEntryId,
        FetchResult,
        ImportProgress,
        RawCandidate,
        UserId,
    )
    from readsync.domain.ports import ProgressListener

USER = "user-1"


def _catalog() -> FakeCatalogRepository:
    return FakeCatalogRepository(
        entries=[
            make_entry(1, "One Piece", external_id="13"),
            make_entry(2, "Bleach: Brave Souls"),
            make_entry(3, "Bleach", external_id="12"),
            make_entry(4, "Sen to Chihiro no Kamikakushi", "Spirited Away"),
            make_entry(5, "Berserk", external_id="2"),
            make_entry(6, "Futari Ecchi", external_id="17", is_adult=True),
        ]
    )


def _stage_recorder(stages: list[ImportStage] | None) -> ProgressListener | None:
    if stages is None:
        return None

    def record(snapshot: ImportProgress) -> None:
        stages.append(snapshot.stage)

    return record


def _reconcile(
    candidates: list[RawCandidate],
    *,
    catalog: FakeCatalogRepository | None = None,
    tracking: FakeTrackingRepository | None = None,
    resolver: FakeResolver | None = None,
    data_source: DataSource | None = DataSource.MYANIMELIST,
    progress: list[ImportStage] | None = None,
) -> FetchResult:
    reconciler = LibraryReconciler(
        catalog=catalog or _catalog(),
        tracking=tracking or FakeTrackingRepository(),
        resolver=resolver,
        progress=_stage_recorder(progress),
    )
    return asyncio.run(reconciler.reconcile(USER, candidates, data_source=data_source))


def _titles(result: FetchResult) -> dict[str, list[str]]:
    return {
        "pending": [entry.source_title for entry in result.pending_entries],
        "not_found": [issue.source_title for issue in result.not_found],
        "skipped": [issue.source_title for issue in result.skipped],
        "already_exists": [issue.source_title for issue in result.already_exists],
        "errors": [issue.source_title for issue in result.errors],
    }


def test_exact_title_match_never_invokes_resolver() -> None:
    resolver = FakeResolver()

    result = _reconcile([make_candidate("One Piece")], resolver=resolver)

    assert [entry.catalog_entry_id for entry in result.pending_entries] == [1]
    assert result.pending_entries[0].match_kind is MatchKind.EXACT
    assert result.pending_entries[0].resolved_by_ai is False
    assert resolver.batches == []


def test_exact_equal_entry_wins_over_containing_entry() -> None:
    result = _reconcile([make_candidate("Bleach")], data_source=None)

    assert [entry.catalog_entry_id for entry in result.pending_entries] == [3]


def test_ai_translation_matches_catalog_primary_title() -> None:
    resolver = FakeResolver(
        translations={
            "Le Voyage de Chihiro": make_translation(
                "Le Voyage de Chihiro", romaji="Sen to Chihiro no Kamikakushi"
            )
        }
    )

    result = _reconcile(
        [make_candidate("Le Voyage de Chihiro", status=ReadingStatus.PLAN_TO_READ)],
        resolver=resolver,
        data_source=None,
    )

    assert result.not_found == []
    (entry,) = result.pending_entries
    assert entry.catalog_entry_id == 4
    assert entry.title == "Sen to Chihiro no Kamikakushi"
    assert entry.source_title == "Le Voyage de Chihiro"
    assert entry.match_kind is MatchKind.EXACT
    assert entry.resolved_by_ai is True
    assert resolver.batches == [["Le Voyage de Chihiro"]]


def test_variants_are_tried_in_priority_order() -> None:
    resolver = FakeResolver(
        translations={
            "Le Voyage": make_translation(
                "Le Voyage", romaji="Nonexistent Romaji", english="Spirited Away"
            )
        }
    )

    result = _reconcile([make_candidate("Le Voyage")], resolver=resolver)

    (entry,) = result.pending_entries
    assert entry.catalog_entry_id == 4
    assert entry.match_kind is MatchKind.EXACT_ALTERNATIVE


def test_exhausted_resolution_lands_in_not_found_and_batch_continues() -> None:
    resolver = FakeResolver(
        translations={
            "Le Voyage de Chihiro": make_translation(
                "Le Voyage de Chihiro", romaji="Sen to Chihiro no Kamikakushi"
            )
        }
    )

    result = _reconcile(
        [make_candidate("Introuvable"), make_candidate("Le Voyage de Chihiro")],
        resolver=resolver,
    )

    assert _titles(result)["not_found"] == ["Introuvable"]
    assert _titles(result)["pending"] == ["Le Voyage de Chihiro"]


def test_sensitive_translation_is_skipped() -> None:
    resolver = FakeResolver(
        translations={"Titre": make_translation("Titre", romaji="Berserk", flagged_sensitive=True)}
    )

    result = _reconcile([make_candidate("Titre")], resolver=resolver)

    assert result.pending_entries == []
    assert [str(issue) for issue in result.skipped] == ["Titre (flagged sensitive)"]


def test_failing_resolver_degrades_to_not_found() -> None:
    resolver = FakeResolver(error=RuntimeError("AI provider down"))

    result = _reconcile(
        [make_candidate("One Piece"), make_candidate("Inconnu")],
        resolver=resolver,
    )

    assert _titles(result)["pending"] == ["One Piece"]
    assert _titles(result)["not_found"] == ["Inconnu"]
    assert result.errors == []


def test_external_id_reaches_entries_outside_the_working_set() -> None:
    catalog = _catalog()

    result = _reconcile([make_candidate("Futari H", external_id="17")], catalog=catalog)

    (entry,) = result.pending_entries
    assert entry.catalog_entry_id == 6
    assert entry.match_kind is MatchKind.EXTERNAL_ID
    assert catalog.external_lookups == [("17", DataSource.MYANIMELIST)]
    assert catalog.filters == [CatalogFilter()]


def test_external_id_in_working_set_skips_repository_lookup() -> None:
    catalog = _catalog()

    result = _reconcile([make_candidate("Wan Pisu", external_id="13")], catalog=catalog)

    assert [entry.catalog_entry_id for entry in result.pending_entries] == [1]
    assert catalog.external_lookups == []


def test_pending_entry_carries_rescaled_progress() -> None:
    result = _reconcile(
        [
            make_candidate(
                "Berserk",
                external_id="2",
                chapters_read=364,
                volumes_read=0,
                score=7,
                notes="rereading",
            )
        ]
    )

    (entry,) = result.pending_entries
    assert entry.current_chapter == 364
    assert entry.current_volume is None
    assert entry.rating == 3.5
    assert entry.notes == "rereading"
    assert entry.cover_image == "https://covers.example/5.jpg"
    assert entry.external_id == "2"


@dataclass
class _ExplodingTracking(FakeTrackingRepository):
    explode_for: CatalogEntryId | None = None

    async def exists(self, user_id: UserId, catalog_entry_id: CatalogEntryId) -> bool:
        if catalog_entry_id == self.explode_for:
            raise RuntimeError("tracking store unavailable")
        return await super().exists(user_id, catalog_entry_id)


def test_every_candidate_lands_in_exactly_one_bucket_in_source_order() -> None:
    tracking = _ExplodingTracking(explode_for=5)
    tracking.seed(USER, [3])
    resolver = FakeResolver(
        translations={
            "Le Voyage de Chihiro": make_translation(
                "Le Voyage de Chihiro", romaji="Sen to Chihiro no Kamikakushi"
            ),
            "Hentai Titre": make_translation("Hentai Titre", flagged_sensitive=True),
        }
    )
    candidates = [
        make_candidate("Le Voyage de Chihiro"),
        make_candidate("Unknown Status", status=None, raw_status="5"),
        make_candidate("One Piece"),
        make_candidate("Bleach"),
        make_candidate("Hentai Titre"),
        make_candidate("ONE PIECE"),
        make_candidate("Berserk"),
        make_candidate("Introuvable"),
    ]

    result = _reconcile(candidates, tracking=tracking, resolver=resolver)

    assert _titles(result) == {
        "pending": ["Le Voyage de Chihiro", "One Piece"],
        "not_found": ["Introuvable"],
        "skipped": ["Unknown Status", "Hentai Titre"],
        "already_exists": ["Bleach", "ONE PIECE"],
        "errors": ["Berserk"],
    }
    assert result.total == len(candidates)
    assert str(result.skipped[0]) == "Unknown Status (unknown status: 5)"
    assert "duplicate" in result.already_exists[1].reason
    assert result.errors[0].reason == "tracking store unavailable"


def test_progress_reports_stage_transitions() -> None:
    stages: list[ImportStage] = []
    resolver = FakeResolver()

    _reconcile(
        [make_candidate("One Piece"), make_candidate("Inconnu")],
        resolver=resolver,
        progress=stages,
    )

    assert stages[0] is ImportStage.MATCHING
    assert ImportStage.RESOLVING in stages
    assert stages[-1] is ImportStage.COMPLETED


def test_no_resolver_means_no_resolving_stage() -> None:
    stages: list[ImportStage] = []

    result = _reconcile([make_candidate("Inconnu")], progress=stages)

    assert stages == [ImportStage.MATCHING, ImportStage.COMPLETED]
    assert _titles(result)["not_found"] == ["Inconnu"]


@pytest.mark.parametrize(
    ("score", "scale", "expected"),
    [
        (None, 10, None),
        (0, 10, None),
        (10, 10, 5.0),
        (7, 10, 3.5),
        (3, 10, 1.5),
        (1, 10, 0.5),
        (73, 100, 3.5),
        (1, 100, 0.5),
        (12, 10, 5.0),
        (25, 100, 1.5),
        (1, 4, 1.5),
    ],
)
def test_rescale_score(score: float | None, scale: int, expected: float | None) -> None:
    assert rescale_score(score, scale) == expected
