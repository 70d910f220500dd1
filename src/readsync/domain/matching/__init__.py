"""Title normalization, scoring and catalog matching."""

from __future__ import annotations

from .matcher import (
    ALTERNATIVE_TITLE_THRESHOLD,
    PRIMARY_TITLE_THRESHOLD,
    CatalogMatcher,
    MatchResult,
    MatchThresholds,
)
from .normalize import normalize_title, titles_equal
from .scoring import DEFAULT_SCORING_RULES, STOP_WORDS, ScoringRules, score_titles

__all__ = [
    "ALTERNATIVE_TITLE_THRESHOLD",
    "DEFAULT_SCORING_RULES",
    "PRIMARY_TITLE_THRESHOLD",
    "STOP_WORDS",
    "CatalogMatcher",
    "MatchResult",
    "MatchThresholds",
    "ScoringRules",
    "normalize_title",
    "score_titles",
    "titles_equal",
]
