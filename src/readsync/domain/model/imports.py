"""Value objects flowing through a fetch/confirm import run."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date  # noqa: TC003

from .catalog import CatalogEntryId  # noqa: TC001
from .enums import ImportStage, MatchKind, ReadingStatus  # noqa: TC001

# Runtime imports above are required: pydantic resolves these annotations when
# a fetch result is serialized for client-side review.


@dataclass(frozen=True, slots=True, kw_only=True)
class RawCandidate:
    """One library row from an external source, before matching."""

    source_title: str
    status: ReadingStatus | None
    raw_status: str | None = None
    external_id: str | None = None
    source_id: str | None = None
    chapters_read: int | None = None
    volumes_read: int | None = None
    score: float | None = None
    score_scale: int = 10
    start_date: date | None = None
    finish_date: date | None = None
    notes: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class PendingImportEntry:
    """A reconciled candidate awaiting the user's confirmation."""

    catalog_entry_id: CatalogEntryId
    title: str
    source_title: str
    status: ReadingStatus
    match_kind: MatchKind
    external_id: str | None = None
    cover_image: str | None = None
    current_chapter: int | None = None
    current_volume: int | None = None
    rating: float | None = None
    start_date: date | None = None
    finish_date: date | None = None
    notes: str | None = None
    resolved_by_ai: bool = False


@dataclass(frozen=True, slots=True)
class ImportIssue:
    source_title: str
    reason: str

    def __str__(self) -> str:
        return f"{self.source_title} ({self.reason})"


@dataclass(slots=True)
class FetchResult:
    """Outcome of one reconciliation run.

    Every candidate handed to the reconciler ends up in exactly one of the five
    buckets below.
    """

    pending_entries: list[PendingImportEntry] = field(default_factory=list[PendingImportEntry])
    not_found: list[ImportIssue] = field(default_factory=list[ImportIssue])
    skipped: list[ImportIssue] = field(default_factory=list[ImportIssue])
    already_exists: list[ImportIssue] = field(default_factory=list[ImportIssue])
    errors: list[ImportIssue] = field(default_factory=list[ImportIssue])

    @property
    def not_found_count(self) -> int:
        return len(self.not_found)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def already_exists_count(self) -> int:
        return len(self.already_exists)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def total(self) -> int:
        return (
            len(self.pending_entries)
            + len(self.not_found)
            + len(self.skipped)
            + len(self.already_exists)
            + len(self.errors)
        )


@dataclass(slots=True)
class ConfirmResult:
    imported: int = 0
    already_tracked: int = 0
    errors: list[str] = field(default_factory=list[str])


@dataclass(frozen=True, slots=True, kw_only=True)
class TitleTranslation:
    """Rewritten titles proposed by the AI fallback for one source title."""

    source_title: str
    romaji: str | None = None
    english: str | None = None
    native: str | None = None
    flagged_sensitive: bool = False

    @property
    def variants(self) -> tuple[str, ...]:
        """Non-empty rewritten titles, romaji first, then English, then native."""

        ordered = (self.romaji, self.english, self.native)
        return tuple(title.strip() for title in ordered if title and title.strip())


@dataclass(slots=True)
class ImportProgress:
    """Snapshot of a running import, reported to an optional listener."""

    stage: ImportStage = ImportStage.PENDING
    total_candidates: int = 0
    matched_direct: int = 0
    total_to_resolve: int = 0
    resolved_count: int = 0
    current_title: str | None = None
