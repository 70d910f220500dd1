"""JSON round-tripping of fetch results and catalog seed files.

A fetch result is handed to the user for review and comes back (possibly
trimmed) for confirmation, so no server-side job state is needed between the
two phases.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, TypedDict

from pydantic import ConfigDict, TypeAdapter, ValidationError, with_config

from readsync.domain.errors import SourceError, SourceErrorKind
from readsync.domain.model import CatalogEntry, DataSource, FetchResult, PendingImportEntry

if TYPE_CHECKING:
    from collections.abc import Sequence

_FETCH_RESULT = TypeAdapter(FetchResult)
_PENDING_ENTRIES = TypeAdapter(list[PendingImportEntry])


@with_config(ConfigDict(extra="ignore"))
class CatalogRecord(TypedDict, total=False):
    id: int | str
    title: str
    alternative_titles: list[str]
    cover_image: str | None
    external_id: str | int | None
    data_source: DataSource | None
    is_adult: bool


_CATALOG_RECORDS = TypeAdapter(list[CatalogRecord])


def dump_fetch_result(result: FetchResult, *, indent: int | None = 2) -> str:
    return _FETCH_RESULT.dump_json(result, indent=indent).decode("utf-8")


def load_fetch_result(document: str | bytes) -> FetchResult:
    return _FETCH_RESULT.validate_json(document)


def load_pending_entries(document: str | bytes) -> list[PendingImportEntry]:
    """Read pending entries from a dumped fetch result or from a bare list of entries."""

    try:
        payload = json.loads(document)
        if isinstance(payload, dict):
            return _FETCH_RESULT.validate_python(payload).pending_entries
        return _PENDING_ENTRIES.validate_python(payload)
    except json.JSONDecodeError as exc:
        raise SourceError(SourceErrorKind.PARSE_FAILURE, f"Invalid JSON: {exc}") from exc
    except ValidationError as exc:
        raise SourceError(
            SourceErrorKind.PARSE_FAILURE,
            f"Not a fetch result or a list of pending entries: {exc.error_count()} errors",
        ) from exc


def load_catalog_entries(document: str | bytes) -> list[CatalogEntry]:
    try:
        records = _CATALOG_RECORDS.validate_json(document)
    except ValidationError as exc:
        raise SourceError(
            SourceErrorKind.PARSE_FAILURE, f"Invalid catalog file: {exc.error_count()} errors"
        ) from exc
    entries: list[CatalogEntry] = []
    for position, record in enumerate(records):
        if "id" not in record or not record.get("title"):
            raise SourceError(
                SourceErrorKind.PARSE_FAILURE,
                f"Catalog record {position} needs an id and a title",
            )
        external_id = record.get("external_id")
        entries.append(
            CatalogEntry(
                id=record["id"],
                title=record["title"],
                alternative_titles=tuple(record.get("alternative_titles", ())),
                cover_image=record.get("cover_image"),
                external_id=str(external_id) if external_id is not None else None,
                data_source=record.get("data_source", DataSource.MYANIMELIST),
                is_adult=record.get("is_adult", False),
            )
        )
    return entries


def dump_pending_entries(entries: Sequence[PendingImportEntry], *, indent: int | None = 2) -> str:
    return _PENDING_ENTRIES.dump_json(list(entries), indent=indent).decode("utf-8")
