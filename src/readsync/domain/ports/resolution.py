"""Ports for AI-assisted title resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from readsync.domain.model import ImportProgress, TitleTranslation


@runtime_checkable
class GenerativeTextClient(Protocol):
    """Free-form text generation; replies carry no structural guarantee."""

    async def generate(self, prompt: str, *, search_grounding: bool = False) -> str: ...


@runtime_checkable
class TitleResolver(Protocol):
    async def resolve_batch(self, titles: Sequence[str]) -> Mapping[str, TitleTranslation]: ...


class ProgressListener(Protocol):
    def __call__(self, progress: ImportProgress) -> None: ...
