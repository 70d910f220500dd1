"""AI fallback resolving titles the catalog matcher could not place.

Titles are processed in windows of ``concurrency`` simultaneous calls with a
fixed pause between windows. Each title gets a bounded number of attempts with
exponential backoff; every call is time-boxed. A title whose attempts are all
spent is simply missing from the returned mapping.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from readsync.config.resolution import ResolutionConfig
from readsync.domain.errors import ResolutionError

from .prompt import build_title_prompt
from .schema import parse_translation
from .tolerant_json import ReplyDecoder, decode_tolerant_json

if TYPE_CHECKING:
    from collections.abc import Sequence

    from readsync.domain.model import TitleTranslation
    from readsync.domain.ports import GenerativeTextClient, TitleResolver

log = getLogger(__name__)

type Sleep = Callable[[float], Awaitable[None]]


@dataclass(slots=True)
class AiTitleResolver:
    client: GenerativeTextClient
    config: ResolutionConfig = field(default_factory=ResolutionConfig)
    decoder: ReplyDecoder = decode_tolerant_json
    prompt_builder: Callable[[str], str] = build_title_prompt
    sleep: Sleep = asyncio.sleep

    async def resolve_batch(self, titles: Sequence[str]) -> dict[str, TitleTranslation]:
        # Duplicates are resolved once; the mapping doubles as the batch cache.
        unique = list(dict.fromkeys(title for title in titles if title.strip()))
        translations: dict[str, TitleTranslation] = {}
        width = self.config.concurrency

        for start in range(0, len(unique), width):
            window = unique[start : start + width]
            results = await asyncio.gather(
                *(self._resolve_with_retry(title) for title in window),
                return_exceptions=True,
            )
            for title, result in zip(window, results, strict=True):
                if isinstance(result, BaseException):
                    if not isinstance(result, Exception):
                        raise result
                    log.error("Unexpected failure resolving %r: %r", title, result)
                    continue
                if result is not None:
                    translations[title] = result

            if start + width < len(unique):
                await self.sleep(self.config.chunk_delay_seconds)

        log.info("AI resolution returned %s/%s translations", len(translations), len(unique))
        return translations

    async def _resolve_with_retry(self, title: str) -> TitleTranslation | None:
        attempts = self.config.max_attempts
        for attempt in range(1, attempts + 1):
            try:
                return await self._resolve_once(title)
            except ResolutionError as exc:
                if not exc.retryable or attempt == attempts:
                    log.error(
                        "All %s resolution attempts failed for %r: %s", attempt, title, exc
                    )
                    return None
                delay = self.config.retry_base_delay_seconds * 2 ** (attempt - 1)
                log.warning(
                    "Resolution attempt %s/%s for %r failed (%s), retrying in %.1fs",
                    attempt,
                    attempts,
                    title,
                    exc,
                    delay,
                )
                await self.sleep(delay)
        return None

    async def _resolve_once(self, title: str) -> TitleTranslation:
        prompt = self.prompt_builder(title)
        timeout = self.config.call_timeout_seconds
        try:
            async with asyncio.timeout(timeout):
                reply = await self.client.generate(prompt, search_grounding=True)
        except TimeoutError as exc:
            raise ResolutionError(f"timeout after {timeout:g}s", title=title) from exc
        except Exception as exc:  # noqa: BLE001 - provider SDKs raise heterogeneous errors
            raise ResolutionError(f"{type(exc).__name__}: {exc}", title=title) from exc

        translation = parse_translation(self.decoder(reply), title=title)
        log.debug(
            "%r -> romaji=%r english=%r native=%r sensitive=%s",
            title,
            translation.romaji,
            translation.english,
            translation.native,
            translation.flagged_sensitive,
        )
        return translation


if TYPE_CHECKING:

    def _resolver_check(client: GenerativeTextClient) -> TitleResolver:
        return AiTitleResolver(client=client)
