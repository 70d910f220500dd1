"""Translate MyAnimeList rows into import candidates."""

from __future__ import annotations

import re
from datetime import date
from logging import getLogger
from typing import TYPE_CHECKING

from readsync.domain.model import RawCandidate, ReadingStatus

if TYPE_CHECKING:
    from .schema import MalXmlEntry, MangaListItem

log = getLogger(__name__)

MAL_SCORE_SCALE = 10

XML_STATUS_CODES: dict[int, ReadingStatus] = {
    1: ReadingStatus.READING,
    2: ReadingStatus.COMPLETED,
    3: ReadingStatus.ON_HOLD,
    4: ReadingStatus.DROPPED,
    6: ReadingStatus.PLAN_TO_READ,
}

# newer exports spell the status out instead of using the numeric code
XML_STATUS_LABELS: dict[str, ReadingStatus] = {
    "reading": ReadingStatus.READING,
    "completed": ReadingStatus.COMPLETED,
    "on-hold": ReadingStatus.ON_HOLD,
    "dropped": ReadingStatus.DROPPED,
    "plan to read": ReadingStatus.PLAN_TO_READ,
}

API_STATUSES: dict[str, ReadingStatus] = {
    "reading": ReadingStatus.READING,
    "completed": ReadingStatus.COMPLETED,
    "on_hold": ReadingStatus.ON_HOLD,
    "dropped": ReadingStatus.DROPPED,
    "plan_to_read": ReadingStatus.PLAN_TO_READ,
}

_DATE_PATTERN = re.compile(r"^(\d{4})(?:-(\d{1,2})(?:-(\d{1,2}))?)?$")


def parse_mal_date(value: str | None) -> date | None:
    """Parse ``YYYY-MM-DD`` and its partial forms.

    Unknown components (``00``) and partial dates resolve to the first day of the
    known period. A zero year, or anything unparseable, yields ``None``.
    """

    if not value:
        return None
    found = _DATE_PATTERN.match(value.strip())
    if found is None:
        return None
    year = int(found.group(1))
    if year == 0:
        return None
    month = int(found.group(2) or 1) or 1
    day = int(found.group(3) or 1) or 1
    try:
        return date(year, month, day)
    except ValueError:
        return None


def xml_status(raw: str | None) -> ReadingStatus | None:
    if raw is None:
        return None
    if raw.isdigit():
        return XML_STATUS_CODES.get(int(raw))
    return XML_STATUS_LABELS.get(raw.casefold())


def candidate_from_xml(entry: MalXmlEntry) -> RawCandidate:
    return RawCandidate(
        source_title=entry.title,
        status=xml_status(entry.status),
        raw_status=entry.status,
        external_id=entry.manga_id,
        source_id=entry.manga_id,
        chapters_read=entry.read_chapters or None,
        volumes_read=entry.read_volumes or None,
        score=entry.score or None,
        score_scale=MAL_SCORE_SCALE,
        start_date=parse_mal_date(entry.start_date),
        finish_date=parse_mal_date(entry.finish_date),
        notes=entry.comments,
    )


def candidate_from_api(item: MangaListItem) -> RawCandidate:
    list_status = item.list_status
    external_id = str(item.node.id)
    status = API_STATUSES.get(list_status.status) if list_status.status else None
    if status is None:
        log.debug("Unmapped MyAnimeList status %r for %s", list_status.status, item.node.title)
    return RawCandidate(
        source_title=item.node.title,
        status=status,
        raw_status=list_status.status,
        external_id=external_id,
        source_id=external_id,
        chapters_read=list_status.num_chapters_read or None,
        volumes_read=list_status.num_volumes_read or None,
        score=list_status.score or None,
        score_scale=MAL_SCORE_SCALE,
        start_date=parse_mal_date(list_status.start_date),
        finish_date=parse_mal_date(list_status.finish_date),
        notes=list_status.comments,
    )
