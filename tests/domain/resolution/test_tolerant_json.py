from __future__ import annotations

import pytest

from readsync.domain.resolution import decode_tolerant_json

EXPECTED = {"french": "Le Voyage de Chihiro", "romaji": "Sen to Chihiro no Kamikakushi"}
RAW = '{"french": "Le Voyage de Chihiro", "romaji": "Sen to Chihiro no Kamikakushi"}'


@pytest.mark.parametrize(
    "reply",
    [
        RAW,
        f"  {RAW}\n",
        f"```json\n{RAW}\n```",
        f"```\n{RAW}\n```",
        f"Here is the entry you asked for:\n```json\n{RAW}\n```\nHope this helps!",
        f"Sure! The answer is {RAW} based on MyAnimeList.",
    ],
)
def test_decodes_object_replies(reply: str) -> None:
    assert decode_tolerant_json(reply) == EXPECTED


def test_decodes_array_reply() -> None:
    assert decode_tolerant_json(f"[{RAW}]") == [EXPECTED]


def test_falls_back_to_bracket_slice() -> None:
    reply = 'Results: [1, 2, 3] (from {search'
    assert decode_tolerant_json(reply) == [1, 2, 3]


@pytest.mark.parametrize(
    "reply",
    [
        "",
        "   ",
        "I could not find this manga on MyAnimeList.",
        "{not json at all}",
        "```json\n{broken\n```",
    ],
)
def test_undecodable_replies_yield_empty_object(reply: str) -> None:
    assert decode_tolerant_json(reply) == {}
