"""Similarity scoring between two titles.

The rules are evaluated in order and the first one that fires wins:

1. equal keys score ``1.0``;
2. containment of the shorter key in the longer one scores ``SUBSTRING_SCORE``
   if the shorter key is long enough and the lengths are close enough;
3. otherwise the share of common meaningful tokens, provided at least
   ``MIN_SHARED_TOKENS`` tokens are shared, else ``0.0``.

The numeric constants were tuned by hand on real imports and have no derivation
beyond that; they are exposed as :class:`ScoringRules` so they can be
calibrated against a labelled set of matches.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .normalize import normalize_title

SUBSTRING_MIN_LENGTH: Final[int] = 8
SUBSTRING_MIN_RATIO: Final[float] = 0.75
SUBSTRING_SCORE: Final[float] = 0.9
MIN_SHARED_TOKENS: Final[int] = 2
STOP_WORD_MAX_LENGTH: Final[int] = 2

STOP_WORDS: Final[frozenset[str]] = frozenset(
    {
        # French
        "le", "la", "les", "de", "du", "des", "un", "une", "et", "en", "au", "aux",
        # English
        "the", "a", "an", "of", "and", "in", "to", "on", "at", "is", "my", "no",
        # Japanese romaji particles
        "wa", "ga", "wo", "ni", "he", "mo", "ka", "na",
    }
)  # fmt: skip


@dataclass(frozen=True, slots=True)
class ScoringRules:
    substring_min_length: int = SUBSTRING_MIN_LENGTH
    substring_min_ratio: float = SUBSTRING_MIN_RATIO
    substring_score: float = SUBSTRING_SCORE
    min_shared_tokens: int = MIN_SHARED_TOKENS
    stop_word_max_length: int = STOP_WORD_MAX_LENGTH
    stop_words: frozenset[str] = STOP_WORDS


DEFAULT_SCORING_RULES: Final[ScoringRules] = ScoringRules()


def score_titles(left: str, right: str, *, rules: ScoringRules = DEFAULT_SCORING_RULES) -> float:
    """Return a similarity in ``[0, 1]`` between two raw titles."""

    return score_normalized(normalize_title(left), normalize_title(right), rules=rules)


def score_normalized(
    left: str,
    right: str,
    *,
    rules: ScoringRules = DEFAULT_SCORING_RULES,
) -> float:
    """Score two keys already produced by :func:`normalize_title`."""

    if not left or not right:
        return 0.0
    if left == right:
        return 1.0

    shorter, longer = (left, right) if len(left) <= len(right) else (right, left)
    if (
        shorter in longer
        and len(shorter) >= rules.substring_min_length
        and len(shorter) / len(longer) >= rules.substring_min_ratio
    ):
        return rules.substring_score

    left_tokens = meaningful_tokens(left, rules=rules)
    right_tokens = meaningful_tokens(right, rules=rules)
    if not left_tokens or not right_tokens:
        return 0.0

    shared = len(left_tokens & right_tokens)
    if shared < rules.min_shared_tokens:
        return 0.0
    return shared / max(len(left_tokens), len(right_tokens))


def meaningful_tokens(key: str, *, rules: ScoringRules = DEFAULT_SCORING_RULES) -> frozenset[str]:
    """Tokens of ``key`` minus short stop words."""

    return frozenset(
        token
        for token in key.split(" ")
        if token
        and not (len(token) <= rules.stop_word_max_length and token in rules.stop_words)
    )
