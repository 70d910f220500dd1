"""Pydantic models for MyAnimeList XML export rows and API v2 payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _lenient_int(value: object) -> object:
    # the export writes empty tags and the occasional "-" for unset counters
    if value is None:
        return 0
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped or not stripped.lstrip("-").isdigit():
            return 0
        return int(stripped)
    return value


class MalBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class MalXmlEntry(MalBaseModel):
    """One ``<manga>`` row of an XML export."""

    title: str = Field(alias="manga_title")
    manga_id: str | None = Field(default=None, alias="manga_mangadb_id")
    status: str | None = Field(default=None, alias="my_status")
    read_chapters: int = Field(default=0, alias="my_read_chapters")
    read_volumes: int = Field(default=0, alias="my_read_volumes")
    score: int = Field(default=0, alias="my_score")
    start_date: str | None = Field(default=None, alias="my_start_date")
    finish_date: str | None = Field(default=None, alias="my_finish_date")
    comments: str | None = Field(default=None, alias="my_comments")

    _normalize_text = field_validator(
        "manga_id", "status", "start_date", "finish_date", "comments", mode="before"
    )(_blank_to_none)
    _normalize_counters = field_validator(
        "read_chapters", "read_volumes", "score", mode="before"
    )(_lenient_int)

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("manga_id")
    @classmethod
    def _drop_zero_id(cls, value: str | None) -> str | None:
        return None if value in {None, "0"} else value


class MalXmlUserInfo(MalBaseModel):
    user_name: str | None = None
    user_export_type: int | None = None

    _normalize_name = field_validator("user_name", mode="before")(_blank_to_none)

    @field_validator("user_export_type", mode="before")
    @classmethod
    def _parse_export_type(cls, value: object) -> object:
        value = _blank_to_none(value)
        if isinstance(value, str) and not value.isdigit():
            return None
        return value


class MangaNode(MalBaseModel):
    id: int
    title: str


class ListStatus(MalBaseModel):
    status: str | None = None
    score: int = 0
    num_chapters_read: int = 0
    num_volumes_read: int = 0
    start_date: str | None = None
    finish_date: str | None = None
    comments: str | None = None

    _normalize_text = field_validator(
        "status", "start_date", "finish_date", "comments", mode="before"
    )(_blank_to_none)
    _normalize_counters = field_validator(
        "score", "num_chapters_read", "num_volumes_read", mode="before"
    )(_lenient_int)


class MangaListItem(MalBaseModel):
    node: MangaNode
    list_status: ListStatus = Field(default_factory=ListStatus)


class Paging(MalBaseModel):
    next: str | None = None
    previous: str | None = None


class MangaListPage(MalBaseModel):
    data: list[MangaListItem]
    paging: Paging = Field(default_factory=Paging)


class ErrorResponse(MalBaseModel):
    error: str
    message: str | None = None
