"""MyAnimeList XML export reader."""

from __future__ import annotations

import gzip
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from readsync.domain.errors import SourceError, SourceErrorKind
from readsync.domain.model import DataSource

from .schema import MalXmlEntry, MalXmlUserInfo
from .translator import candidate_from_xml

if TYPE_CHECKING:
    from pathlib import Path

    from readsync.domain.model import RawCandidate
    from readsync.domain.ports import CandidateSource

log = getLogger(__name__)

MANGA_EXPORT_TYPE = 2
_GZIP_MAGIC = b"\x1f\x8b"


def _element_fields(element: ET.Element) -> dict[str, str]:
    return {child.tag: (child.text or "").strip() for child in element}


def parse_export(document: str) -> list[MalXmlEntry]:
    """Validate an export document and return its manga rows.

    Rows without a usable title are dropped with a warning.
    """

    try:
        root = ET.fromstring(document)  # noqa: S314
    except ET.ParseError as exc:
        raise SourceError(
            SourceErrorKind.PARSE_FAILURE, f"Failed to parse XML: {exc}"
        ) from exc

    if root.tag != "myanimelist":
        raise SourceError(
            SourceErrorKind.PARSE_FAILURE,
            f"Unexpected root element <{root.tag}>, expected <myanimelist>",
        )

    info_element = root.find("myinfo")
    if info_element is not None:
        info = MalXmlUserInfo.model_validate(_element_fields(info_element))
        if info.user_export_type is not None and info.user_export_type != MANGA_EXPORT_TYPE:
            raise SourceError(
                SourceErrorKind.WRONG_EXPORT_TYPE,
                "This appears to be an anime list, not a manga list. "
                "Please export your manga list from MyAnimeList.",
            )

    entries: list[MalXmlEntry] = []
    for position, element in enumerate(root.iter("manga")):
        try:
            entry = MalXmlEntry.model_validate(_element_fields(element))
        except ValidationError as exc:
            log.warning("Dropping malformed export row %s: %s", position, exc.errors()[0]["msg"])
            continue
        if not entry.title:
            log.warning("Dropping export row %s without a title", position)
            continue
        entries.append(entry)

    if not entries:
        raise SourceError(SourceErrorKind.NO_ENTRIES, "No manga entries found in the export file.")
    return entries


def read_export_file(path: Path) -> str:
    """Return the text of an export file; MyAnimeList ships them gzipped."""

    raw = path.read_bytes()
    if raw.startswith(_GZIP_MAGIC):
        try:
            raw = gzip.decompress(raw)
        except (OSError, EOFError) as exc:
            raise SourceError(
                SourceErrorKind.PARSE_FAILURE, f"Corrupt gzip export {path.name}: {exc}"
            ) from exc
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise SourceError(
            SourceErrorKind.PARSE_FAILURE, f"Export {path.name} is not UTF-8 text"
        ) from exc


@dataclass(slots=True)
class MalXmlExportSource:
    """Candidate source over an XML export document passed as the identifier."""

    label: str = "MyAnimeList export"
    data_source: DataSource | None = DataSource.MYANIMELIST

    async def fetch(self, identifier: str) -> list[RawCandidate]:
        entries = parse_export(identifier)
        log.info("Parsed %s manga rows from the export", len(entries))
        return [candidate_from_xml(entry) for entry in entries]


if TYPE_CHECKING:
    _source_check: CandidateSource = MalXmlExportSource()
