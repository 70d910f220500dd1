from __future__ import annotations

import pytest

from readsync.domain.matching.scoring import (
    SUBSTRING_SCORE,
    ScoringRules,
    meaningful_tokens,
    score_titles,
)

PAIRS = [
    ("Bleach", "Bleach: Brave Souls"),
    ("Fullmetal Alchemist", "Fullmetal Alchemist 2003"),
    ("Kaguya-sama: Love is War", "Love is War, Kaguya-sama"),
    ("Naruto", "Naruto Shippuden"),
    ("Le Voyage de Chihiro", "Sen to Chihiro no Kamikakushi"),
    ("", "One Piece"),
]


def test_equal_keys_score_one() -> None:
    assert score_titles("ONE PIECE", "one piece") == 1.0


def test_long_enough_containment_scores_substring() -> None:
    assert score_titles("Fullmetal Alchemist", "Fullmetal Alchemist 2003") == SUBSTRING_SCORE


def test_short_containment_falls_back_to_tokens() -> None:
    # "bleach" is too short for containment and shares a single token
    assert score_titles("Bleach", "Bleach: Brave Souls") == 0.0


def test_token_overlap_ignores_order_and_stop_words() -> None:
    assert score_titles("Kaguya-sama: Love is War", "Love is War, Kaguya-sama") == 1.0


def test_single_shared_token_is_not_enough() -> None:
    assert score_titles("Naruto", "Naruto Shippuden") == 0.0


def test_token_ratio_uses_the_larger_token_set() -> None:
    score = score_titles("Spy Family Code White", "Spy Family")
    assert score == pytest.approx(2 / 4)


def test_empty_titles_score_zero() -> None:
    assert score_titles("", "") == 0.0
    assert score_titles("???", "One Piece") == 0.0


@pytest.mark.parametrize(("left", "right"), PAIRS)
def test_score_is_symmetric(left: str, right: str) -> None:
    assert score_titles(left, right) == score_titles(right, left)


@pytest.mark.parametrize(("left", "right"), PAIRS)
def test_score_is_bounded(left: str, right: str) -> None:
    assert 0.0 <= score_titles(left, right) <= 1.0


def test_meaningful_tokens_drop_short_stop_words_only() -> None:
    assert meaningful_tokens("sen to chihiro no kamikakushi") == frozenset(
        {"sen", "chihiro", "kamikakushi"}
    )
    # stop words longer than the cutoff are kept
    assert "the" in meaningful_tokens("the end")


def test_rules_can_be_tuned() -> None:
    lenient = ScoringRules(min_shared_tokens=1)
    assert score_titles("Naruto", "Naruto Shippuden", rules=lenient) == pytest.approx(1 / 2)
