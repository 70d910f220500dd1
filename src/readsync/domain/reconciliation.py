"""Two-pass reconciliation of external library rows against the catalog.

Pass one matches every candidate directly (external id, exact title, fuzzy
title). Candidates left over are resolved in a single AI batch and matched again
with the rewritten titles. Each candidate ends in exactly one bucket of the
returned ``FetchResult``; nothing that goes wrong for one candidate aborts the
run.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from readsync.domain.errors import CandidateError
from readsync.domain.matching import CatalogMatcher, MatchResult, MatchThresholds
from readsync.domain.model import (
    CatalogFilter,
    FetchResult,
    ImportIssue,
    ImportProgress,
    ImportStage,
    MatchKind,
    PendingImportEntry,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from readsync.domain.model import (
        CatalogEntryId,
        DataSource,
        RawCandidate,
        TitleTranslation,
        UserId,
    )
    from readsync.domain.ports import (
        CatalogRepository,
        ProgressListener,
        TitleResolver,
        TrackingRepository,
    )

log = getLogger(__name__)

INTERNAL_RATING_SCALE = 5


class _Bucket(StrEnum):
    PENDING = "pending"
    NOT_FOUND = "not_found"
    SKIPPED = "skipped"
    ALREADY_EXISTS = "already_exists"
    ERRORED = "errored"


@dataclass(slots=True)
class _Run:
    """Per-run bookkeeping; outcomes are keyed by source position."""

    user_id: UserId
    data_source: DataSource | None
    matcher: CatalogMatcher
    progress: ImportProgress
    claimed: set[CatalogEntryId] = field(default_factory=set)
    outcomes: dict[int, tuple[_Bucket, PendingImportEntry | ImportIssue]] = field(
        default_factory=dict
    )

    def record(
        self,
        position: int,
        bucket: _Bucket,
        outcome: PendingImportEntry | ImportIssue,
    ) -> None:
        if position in self.outcomes:
            raise RuntimeError(f"Candidate at position {position} was classified twice")
        self.outcomes[position] = (bucket, outcome)

    def issue(self, position: int, bucket: _Bucket, candidate: RawCandidate, reason: str) -> None:
        self.record(position, bucket, ImportIssue(candidate.source_title, reason))

    def result(self) -> FetchResult:
        result = FetchResult()
        for _position, (bucket, outcome) in sorted(self.outcomes.items()):
            if isinstance(outcome, PendingImportEntry):
                result.pending_entries.append(outcome)
                continue
            match bucket:
                case _Bucket.NOT_FOUND:
                    result.not_found.append(outcome)
                case _Bucket.SKIPPED:
                    result.skipped.append(outcome)
                case _Bucket.ALREADY_EXISTS:
                    result.already_exists.append(outcome)
                case _:
                    result.errors.append(outcome)
        return result


@dataclass(slots=True)
class LibraryReconciler:
    catalog: CatalogRepository
    tracking: TrackingRepository
    resolver: TitleResolver | None = None
    thresholds: MatchThresholds = field(default_factory=MatchThresholds)
    progress: ProgressListener | None = None

    async def reconcile(
        self,
        user_id: UserId,
        candidates: Iterable[RawCandidate],
        *,
        data_source: DataSource | None,
        catalog_filter: CatalogFilter | None = None,
    ) -> FetchResult:
        """Classify ``candidates`` for ``user_id`` into a reviewable fetch result."""

        rows = list(candidates)
        progress = ImportProgress(stage=ImportStage.MATCHING, total_candidates=len(rows))
        self._report(progress)

        working_set = await self.catalog.load_all_for_matching(
            catalog_filter or CatalogFilter()
        )
        matcher = CatalogMatcher(working_set, thresholds=self.thresholds)
        log.debug("Loaded %s catalog entries for matching", len(matcher))

        run = _Run(user_id=user_id, data_source=data_source, matcher=matcher, progress=progress)
        unresolved: list[tuple[int, RawCandidate]] = []

        for position, candidate in enumerate(rows):
            if candidate.status is None:
                run.issue(
                    position,
                    _Bucket.SKIPPED,
                    candidate,
                    f"unknown status: {candidate.raw_status}",
                )
                continue
            try:
                match = await self._direct_match(run, candidate)
                if match is None:
                    log.debug("[pass 1] no match for %r", candidate.source_title)
                    unresolved.append((position, candidate))
                    continue
                progress.matched_direct += 1
                await self._accept(run, position, candidate, match, resolved_by_ai=False)
            except Exception as exc:  # noqa: BLE001 - one bad row must not abort the run
                self._record_error(run, position, candidate, exc)

        log.debug(
            "[pass 1] %s matched directly, %s left for resolution",
            progress.matched_direct,
            len(unresolved),
        )
        if unresolved:
            await self._resolve_unmatched(run, unresolved)

        result = run.result()
        progress.stage = ImportStage.COMPLETED
        progress.current_title = None
        self._report(progress)
        log.info(
            "Reconciled %s candidates: pending=%s not_found=%s skipped=%s "
            "already_exists=%s errors=%s",
            len(rows),
            len(result.pending_entries),
            result.not_found_count,
            result.skipped_count,
            result.already_exists_count,
            result.error_count,
        )
        return result

    async def _direct_match(self, run: _Run, candidate: RawCandidate) -> MatchResult | None:
        match = run.matcher.match(
            candidate.source_title,
            external_id=candidate.external_id,
            data_source=run.data_source,
        )
        if match is not None and match.kind is MatchKind.EXTERNAL_ID:
            return match

        # Entries outside the working set (e.g. adult titles) are still reachable by id.
        if candidate.external_id and run.data_source is not None:
            entry = await self.catalog.find_by_external_id(
                candidate.external_id, run.data_source
            )
            if entry is not None:
                return MatchResult(entry, MatchKind.EXTERNAL_ID, 1.0, entry.title)
        return match

    async def _resolve_unmatched(
        self,
        run: _Run,
        unresolved: list[tuple[int, RawCandidate]],
    ) -> None:
        if self.resolver is None:
            for position, candidate in unresolved:
                run.issue(position, _Bucket.NOT_FOUND, candidate, "no catalog match")
            return

        progress = run.progress
        progress.stage = ImportStage.RESOLVING
        progress.total_to_resolve = len(unresolved)
        self._report(progress)

        translations: Mapping[str, TitleTranslation]
        try:
            translations = await self.resolver.resolve_batch(
                [candidate.source_title for _position, candidate in unresolved]
            )
        except Exception as exc:  # noqa: BLE001 - degrade to "not found" for the batch
            log.error("AI resolution failed for the whole batch: %s", exc)
            translations = {}

        for position, candidate in unresolved:
            progress.resolved_count += 1
            progress.current_title = candidate.source_title
            self._report(progress)
            try:
                await self._accept_translation(
                    run, position, candidate, translations.get(candidate.source_title)
                )
            except Exception as exc:  # noqa: BLE001 - one bad row must not abort the run
                self._record_error(run, position, candidate, exc)

    async def _accept_translation(
        self,
        run: _Run,
        position: int,
        candidate: RawCandidate,
        translation: TitleTranslation | None,
    ) -> None:
        if translation is None:
            log.warning("[pass 2] no translation for %r", candidate.source_title)
            run.issue(position, _Bucket.NOT_FOUND, candidate, "no catalog match, unresolved")
            return

        if translation.flagged_sensitive:
            log.debug("[pass 2] %r flagged sensitive, skipping", candidate.source_title)
            run.issue(position, _Bucket.SKIPPED, candidate, "flagged sensitive")
            return

        for variant in translation.variants:
            match = run.matcher.match(variant)
            if match is not None:
                log.debug(
                    "[pass 2] %r matched via %r -> %r",
                    candidate.source_title,
                    variant,
                    match.entry.title,
                )
                await self._accept(run, position, candidate, match, resolved_by_ai=True)
                return

        tried = ", ".join(translation.variants) or "none"
        run.issue(position, _Bucket.NOT_FOUND, candidate, f"no catalog match (tried: {tried})")

    async def _accept(
        self,
        run: _Run,
        position: int,
        candidate: RawCandidate,
        match: MatchResult,
        *,
        resolved_by_ai: bool,
    ) -> None:
        entry = match.entry
        if entry.id in run.claimed:
            run.issue(
                position,
                _Bucket.ALREADY_EXISTS,
                candidate,
                f"duplicate of {entry.title!r} in this import",
            )
            return
        run.claimed.add(entry.id)

        if await self.tracking.exists(run.user_id, entry.id):
            run.issue(
                position, _Bucket.ALREADY_EXISTS, candidate, f"already tracked as {entry.title!r}"
            )
            return

        run.record(
            position,
            _Bucket.PENDING,
            build_pending_entry(candidate, match, resolved_by_ai=resolved_by_ai),
        )

    def _record_error(
        self,
        run: _Run,
        position: int,
        candidate: RawCandidate,
        exc: Exception,
    ) -> None:
        error = CandidateError.from_exception(exc, source_title=candidate.source_title)
        log.warning("Failed to reconcile %r: %s", error.source_title, error)
        if position not in run.outcomes:
            run.issue(position, _Bucket.ERRORED, candidate, str(error))

    def _report(self, progress: ImportProgress) -> None:
        if self.progress is not None:
            self.progress(progress)


def build_pending_entry(
    candidate: RawCandidate,
    match: MatchResult,
    *,
    resolved_by_ai: bool = False,
) -> PendingImportEntry:
    if candidate.status is None:
        raise ValueError(f"Candidate {candidate.source_title!r} has no mapped status")
    entry = match.entry
    return PendingImportEntry(
        catalog_entry_id=entry.id,
        title=entry.title,
        source_title=candidate.source_title,
        status=candidate.status,
        match_kind=match.kind,
        external_id=entry.external_id,
        cover_image=entry.cover_image,
        current_chapter=_positive_or_none(candidate.chapters_read),
        current_volume=_positive_or_none(candidate.volumes_read),
        rating=rescale_score(candidate.score, candidate.score_scale),
        start_date=candidate.start_date,
        finish_date=candidate.finish_date,
        notes=candidate.notes or None,
        resolved_by_ai=resolved_by_ai,
    )


def rescale_score(
    score: float | None,
    scale: int,
    *,
    target: int = INTERNAL_RATING_SCALE,
) -> float | None:
    """Map a source score onto the internal scale in half steps; ``0`` means unrated."""

    if score is None or score <= 0 or scale <= 0:
        return None
    value = min(score, scale) / scale * target
    # halves round up
    return max(0.5, math.floor(value * 2 + 0.5) / 2)


def _positive_or_none(value: int | None) -> int | None:
    return value if value is not None and value > 0 else None
