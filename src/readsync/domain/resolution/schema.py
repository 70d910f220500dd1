"""Pydantic model for the translation reply of the generative service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import cast

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from readsync.domain.errors import ResolutionError
from readsync.domain.model import TitleTranslation

_PLACEHOLDERS = frozenset({"", "null", "none", "unknown", "n/a", "...", "…"})


def _placeholder_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return None if stripped.casefold() in _PLACEHOLDERS else stripped
    return value


class TranslationReply(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    source_title: str | None = Field(
        default=None,
        validation_alias=AliasChoices("source_title", "french", "title", "original"),
    )
    romaji: str | None = None
    english: str | None = None
    native: str | None = Field(
        default=None,
        validation_alias=AliasChoices("native", "japanese"),
    )
    flagged_sensitive: bool = Field(
        default=False,
        validation_alias=AliasChoices("flagged_sensitive", "nsfw", "adult"),
    )

    _normalize_titles = field_validator(
        "source_title", "romaji", "english", "native", mode="before"
    )(_placeholder_to_none)

    @field_validator("flagged_sensitive", mode="before")
    @classmethod
    def _null_is_false(cls, value: object) -> object:
        return False if value is None else value


def parse_translation(payload: object, *, title: str) -> TitleTranslation:
    """Validate a decoded reply for ``title``; raise ``ResolutionError`` if unusable."""

    if isinstance(payload, Sequence) and not isinstance(payload, str):
        items = cast(Sequence[object], payload)
        payload = items[0] if items else {}

    if not isinstance(payload, Mapping) or not payload:
        raise ResolutionError("reply carried no translation object", title=title)

    try:
        reply = TranslationReply.model_validate(payload)
    except ValidationError as exc:
        raise ResolutionError(f"invalid translation reply: {exc}", title=title) from exc

    return TitleTranslation(
        source_title=title,
        romaji=reply.romaji,
        english=reply.english,
        native=reply.native,
        flagged_sensitive=reply.flagged_sensitive,
    )
