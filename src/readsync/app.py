"""Application orchestration entry points."""

from __future__ import annotations

from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from readsync.adapters.gemini import GeminiTextClient
from readsync.adapters.mangacollec import MangacollecSource
from readsync.adapters.myanimelist import MalApiSource, MalXmlExportSource
from readsync.config import (
    MissingConfigurationError,
    get_gemini_config,
    get_mal_api_config,
    get_resolution_config,
)
from readsync.domain.confirmation import confirm_import
from readsync.domain.errors import SourceError
from readsync.domain.model import ImportProgress, ImportStage
from readsync.domain.reconciliation import LibraryReconciler
from readsync.domain.resolution import AiTitleResolver

if TYPE_CHECKING:
    from collections.abc import Iterable

    from readsync.config import MalApiConfig
    from readsync.domain.model import (
        CatalogFilter,
        ConfirmResult,
        FetchResult,
        PendingImportEntry,
        UserId,
    )
    from readsync.domain.ports import (
        CandidateSource,
        CatalogRepository,
        ProgressListener,
        TitleResolver,
        TrackingRepository,
    )

log = getLogger(__name__)


class SourceKind(StrEnum):
    MAL_XML = "mal-xml"
    MAL_USER = "mal-user"
    MANGACOLLEC = "mangacollec"


# MyAnimeList rows carry ids and canonical titles; only localized collections need AI help
AI_FALLBACK_BY_DEFAULT = frozenset({SourceKind.MANGACOLLEC})


def build_mal_xml_source() -> MalXmlExportSource:
    return MalXmlExportSource()


def build_mal_api_source(config: MalApiConfig | None = None) -> MalApiSource:
    return MalApiSource(config=config or get_mal_api_config())


def build_mangacollec_source() -> MangacollecSource:
    return MangacollecSource()


def build_source(kind: SourceKind) -> CandidateSource:
    match kind:
        case SourceKind.MAL_XML:
            return build_mal_xml_source()
        case SourceKind.MAL_USER:
            return build_mal_api_source()
        case SourceKind.MANGACOLLEC:
            return build_mangacollec_source()


def build_gemini_resolver() -> AiTitleResolver | None:
    """Return the Gemini-backed resolver, or ``None`` when no API key is configured."""

    try:
        gemini_config = get_gemini_config()
    except MissingConfigurationError:
        log.warning("GEMINI_API_KEY not configured, skipping AI title resolution")
        return None
    return AiTitleResolver(
        client=GeminiTextClient(config=gemini_config),
        config=get_resolution_config(),
    )


async def fetch_import(
    source: CandidateSource,
    identifier: str,
    *,
    user_id: UserId,
    catalog: CatalogRepository,
    tracking: TrackingRepository,
    resolver: TitleResolver | None = None,
    progress: ProgressListener | None = None,
    catalog_filter: CatalogFilter | None = None,
) -> FetchResult:
    """Fetch one library from ``source`` and reconcile it for review.

    ``SourceError`` propagates: nothing could be fetched, so there is nothing to
    review.
    """

    log.info("Starting %s import for user %s", source.label, user_id)
    if progress is not None:
        progress(ImportProgress(stage=ImportStage.FETCHING))
    try:
        candidates = await source.fetch(identifier)
    except SourceError as exc:
        log.error("%s import failed: %s", source.label, exc)
        if progress is not None:
            progress(ImportProgress(stage=ImportStage.FAILED))
        raise
    log.info("Fetched %s candidates from %s", len(candidates), source.label)

    reconciler = LibraryReconciler(
        catalog=catalog,
        tracking=tracking,
        resolver=resolver,
        progress=progress,
    )
    return await reconciler.reconcile(
        user_id,
        candidates,
        data_source=source.data_source,
        catalog_filter=catalog_filter,
    )


async def confirm_pending(
    user_id: UserId,
    entries: Iterable[PendingImportEntry],
    *,
    tracking: TrackingRepository,
    selected_ids: Iterable[str] | None = None,
) -> ConfirmResult:
    """Confirm ``entries``, optionally narrowed to the catalog ids the user kept."""

    chosen = list(entries)
    if selected_ids is not None:
        wanted = {str(value) for value in selected_ids}
        chosen = [entry for entry in chosen if str(entry.catalog_entry_id) in wanted]
        log.debug("Selected %s of the pending entries", len(chosen))
    return await confirm_import(user_id, chosen, tracking=tracking)
