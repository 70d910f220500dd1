from __future__ import annotations

import pytest

from readsync.domain.matching import normalize_title, titles_equal


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("One Piece", "one piece"),
        ("Pokémon Adventures", "pokemon adventures"),
        ("Tom & Jerry", "tom and jerry"),
        ("L'Attaque des Titans", "l attaque des titans"),
        ("Ao no Exorcist – Tome 3", "ao no exorcist"),
        ("Vol. 2 Berserk", "berserk"),
        ("Berserk volume 41", "berserk"),
        ("Tomodachi 3", "tomodachi 3"),
        ("  Dr.   STONE!! ", "dr stone"),
        ("進撃の巨人", "進撃の巨人"),
    ],
)
def test_normalize_title(title: str, expected: str) -> None:
    assert normalize_title(title) == expected


def test_normalize_keeps_kana_voicing_marks() -> None:
    assert normalize_title("ヴァイオレット") == "ヴァイオレット"
    assert normalize_title("ハイキュー") != normalize_title("ハイギュー")


@pytest.mark.parametrize(
    "title",
    [
        "Vol vol 1 2 Test",
        "Tome 1 - Naruto",
        "Ｆｕｌｌｍｅｔａｌ　Ａｌｃｈｅｍｉｓｔ",
        "Café & Crème t 4",
        "___",
        "Ｔｏｍｅ 1",
    ],
)
def test_normalize_is_idempotent(title: str) -> None:
    once = normalize_title(title)
    assert normalize_title(once) == once


def test_punctuation_only_titles_normalize_to_empty() -> None:
    assert normalize_title("!!! ???") == ""
    assert normalize_title("") == ""


def test_titles_equal_never_matches_empty_keys() -> None:
    assert titles_equal("Naruto", "NARUTO")
    assert titles_equal("Le Voyage de Chihiro", "le voyage de chihiro - tome 1")
    assert not titles_equal("...", "!!!")
