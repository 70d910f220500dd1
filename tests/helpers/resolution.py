"""Scripted generative client and resolver fakes."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from readsync.domain.model import TitleTranslation

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

# a reply is either a text to return or an exception to raise
type ScriptedReply = str | BaseException


def translation_reply(
    title: str,
    *,
    romaji: str | None = None,
    english: str | None = None,
    japanese: str | None = None,
    nsfw: bool = False,
) -> str:
    return json.dumps(
        {
            "french": title,
            "english": english,
            "japanese": japanese,
            "romaji": romaji,
            "nsfw": nsfw,
        }
    )


def _title_from_prompt(prompt: str) -> str:
    start = prompt.index('"') + 1
    return prompt[start : prompt.index('"', start)]


@dataclass
class FakeTextClient:
    """Replies per title, consumed in order; the last reply repeats."""

    replies: dict[str, list[ScriptedReply]] = field(default_factory=dict[str, list[ScriptedReply]])
    delay: float = 0.0
    calls: list[str] = field(default_factory=list[str])
    grounded: list[bool] = field(default_factory=list[bool])
    in_flight: int = 0
    max_in_flight: int = 0

    async def generate(self, prompt: str, *, search_grounding: bool = False) -> str:
        title = _title_from_prompt(prompt)
        self.calls.append(title)
        self.grounded.append(search_grounding)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            else:
                await asyncio.sleep(0)
            script = self.replies.get(title) or ["{}"]
            reply = script.pop(0) if len(script) > 1 else script[0]
        finally:
            self.in_flight -= 1
        if isinstance(reply, BaseException):
            raise reply
        return reply


@dataclass
class RecordedSleep:
    delays: list[float] = field(default_factory=list[float])

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@dataclass
class FakeResolver:
    translations: Mapping[str, TitleTranslation] = field(
        default_factory=dict[str, TitleTranslation]
    )
    error: Exception | None = None
    batches: list[list[str]] = field(default_factory=list[list[str]])

    async def resolve_batch(self, titles: Sequence[str]) -> dict[str, TitleTranslation]:
        self.batches.append(list(titles))
        if self.error is not None:
            raise self.error
        return {title: self.translations[title] for title in titles if title in self.translations}


def make_translation(
    title: str,
    *,
    romaji: str | None = None,
    english: str | None = None,
    native: str | None = None,
    flagged_sensitive: bool = False,
) -> TitleTranslation:
    return TitleTranslation(
        source_title=title,
        romaji=romaji,
        english=english,
        native=native,
        flagged_sensitive=flagged_sensitive,
    )
