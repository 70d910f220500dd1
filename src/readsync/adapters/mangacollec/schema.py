"""Pydantic models for the ``window.DATA_STORE`` blob of a Mangacollec page."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _null_to_empty(value: object) -> object:
    return {} if value is None else value


class MangacollecBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Series(MangacollecBaseModel):
    id: str
    title: str | None = None
    adult_content: bool = False

    _normalize_title = field_validator("title", mode="before")(_blank_to_none)

    @field_validator("adult_content", mode="before")
    @classmethod
    def _null_is_false(cls, value: object) -> object:
        return False if value is None else value


class Edition(MangacollecBaseModel):
    id: str
    series_id: str
    title: str | None = None
    publisher_id: str | None = None
    volumes_count: int | None = None

    _normalize_title = field_validator("title", mode="before")(_blank_to_none)


class SeriesTable(MangacollecBaseModel):
    data: dict[str, Series] = Field(default_factory=dict[str, Series])

    _null_data = field_validator("data", mode="before")(_null_to_empty)


class EditionTable(MangacollecBaseModel):
    data: dict[str, Edition] = Field(default_factory=dict[str, Edition])

    _null_data = field_validator("data", mode="before")(_null_to_empty)


class DataStore(MangacollecBaseModel):
    series: SeriesTable = Field(default_factory=SeriesTable)
    editions: EditionTable = Field(default_factory=EditionTable)
    # per-username nested lists of follow entries; the nesting depth is not stable
    public_collection: dict[str, object] = Field(
        default_factory=dict[str, object], alias="publicCollection"
    )

    _null_tables = field_validator("series", "editions", "public_collection", mode="before")(
        _null_to_empty
    )
