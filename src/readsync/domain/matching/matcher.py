"""Layered matching of candidate titles against the in-memory catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

from readsync.domain.model import CatalogEntry, DataSource, MatchKind

from .normalize import normalize_title
from .scoring import DEFAULT_SCORING_RULES, ScoringRules, score_normalized

if TYPE_CHECKING:
    from collections.abc import Iterable

log = getLogger(__name__)

PRIMARY_TITLE_THRESHOLD: Final[float] = 0.95
ALTERNATIVE_TITLE_THRESHOLD: Final[float] = 0.90


@dataclass(frozen=True, slots=True)
class MatchThresholds:
    """Minimum fuzzy scores; primary titles are trusted more than alternates."""

    primary: float = PRIMARY_TITLE_THRESHOLD
    alternative: float = ALTERNATIVE_TITLE_THRESHOLD
    scoring: ScoringRules = field(default=DEFAULT_SCORING_RULES)


@dataclass(frozen=True, slots=True)
class MatchResult:
    entry: CatalogEntry
    kind: MatchKind
    score: float
    matched_title: str


@dataclass(frozen=True, slots=True)
class _IndexedEntry:
    entry: CatalogEntry
    title_key: str
    alternatives: tuple[tuple[str, str], ...]


class CatalogMatcher:
    """Match titles against a catalog working set loaded once per run.

    Strategy, first success wins: external id lookup, exact title (each entry's
    primary title and then its alternative titles, walking the catalog in load
    order), best fuzzy primary title, best fuzzy alternative title. Fuzzy ties
    keep the entry seen first, so results are stable for a given load order.
    Below threshold the matcher returns ``None`` rather than guess.
    """

    def __init__(
        self,
        entries: Iterable[CatalogEntry],
        *,
        thresholds: MatchThresholds | None = None,
    ) -> None:
        self._thresholds = thresholds or MatchThresholds()
        indexed: list[_IndexedEntry] = []
        self._by_external_id: dict[tuple[DataSource | None, str], CatalogEntry] = {}
        # first exact hit per normalized title, in catalog order
        self._by_exact_title: dict[str, MatchResult] = {}

        for entry in entries:
            title_key = normalize_title(entry.title)
            alternatives = tuple(
                (alternative, key)
                for alternative in entry.alternative_titles
                if (key := normalize_title(alternative))
            )
            indexed.append(_IndexedEntry(entry, title_key, alternatives))

            if entry.external_id:
                self._by_external_id.setdefault(
                    (entry.data_source, entry.external_id.strip()), entry
                )
            if title_key:
                self._by_exact_title.setdefault(
                    title_key, MatchResult(entry, MatchKind.EXACT, 1.0, entry.title)
                )
            for alternative, key in alternatives:
                self._by_exact_title.setdefault(
                    key, MatchResult(entry, MatchKind.EXACT_ALTERNATIVE, 1.0, alternative)
                )

        self._entries = tuple(indexed)

    def __len__(self) -> int:
        return len(self._entries)

    def match(
        self,
        title: str,
        *,
        external_id: str | None = None,
        data_source: DataSource | None = None,
    ) -> MatchResult | None:
        if external_id and data_source is not None:
            entry = self._by_external_id.get((data_source, external_id.strip()))
            if entry is not None:
                log.debug("%r external-id match %s -> %r", title, external_id, entry.title)
                return MatchResult(entry, MatchKind.EXTERNAL_ID, 1.0, entry.title)

        key = normalize_title(title)
        if not key:
            return None

        exact = self._by_exact_title.get(key)
        if exact is not None:
            log.debug("%r %s match -> %r", title, exact.kind, exact.entry.title)
            return exact

        fuzzy = self._match_fuzzy(key)
        if fuzzy is not None:
            log.debug(
                "%r %s match score=%.3f on %r -> %r",
                title,
                fuzzy.kind,
                fuzzy.score,
                fuzzy.matched_title,
                fuzzy.entry.title,
            )
        return fuzzy

    def _match_fuzzy(self, key: str) -> MatchResult | None:
        rules = self._thresholds.scoring

        best: MatchResult | None = None
        for indexed in self._entries:
            score = score_normalized(key, indexed.title_key, rules=rules)
            if score >= self._thresholds.primary and (best is None or score > best.score):
                best = MatchResult(indexed.entry, MatchKind.FUZZY, score, indexed.entry.title)
        if best is not None:
            return best

        for indexed in self._entries:
            for alternative, alternative_key in indexed.alternatives:
                score = score_normalized(key, alternative_key, rules=rules)
                if score >= self._thresholds.alternative and (
                    best is None or score > best.score
                ):
                    best = MatchResult(
                        indexed.entry, MatchKind.FUZZY_ALTERNATIVE, score, alternative
                    )
        return best
