"""Scraper for public Mangacollec collections."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, cast
from urllib.parse import quote, unquote

import httpx
from bs4 import BeautifulSoup
from pydantic import ValidationError

from readsync.adapters.http_resilience import ResilientClient
from readsync.config.mangacollec import (
    MANGACOLLEC_BASE_URL,
    MANGACOLLEC_DATA_STORE_MARKER,
    MangacollecConfig,
    get_mangacollec_config,
)
from readsync.domain.errors import SourceError, SourceErrorKind
from readsync.domain.model import DataSource, RawCandidate, ReadingStatus

from .schema import DataStore

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from readsync.config.http_resilience import ResilienceConfig
    from readsync.domain.ports import CandidateSource

log = getLogger(__name__)

MIN_USERNAME_LENGTH = 2
DATA_STORE_ASSIGNMENT = re.compile(r"window\.DATA_STORE\s*=\s*(?=\{)")
_PROFILE_URL_PATTERN = re.compile(r"mangacollec\.com/user/([^/?#\s]+)", re.IGNORECASE)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def extract_username(identifier: str) -> str:
    """Accept a bare username or any profile URL and return the username."""

    value = identifier.strip()
    found = _PROFILE_URL_PATTERN.search(value)
    if found is not None:
        value = unquote(found.group(1))
    if len(value) < MIN_USERNAME_LENGTH or "/" in value or any(c.isspace() for c in value):
        raise SourceError(
            SourceErrorKind.INVALID_IDENTIFIER,
            f"{identifier!r} is not a valid Mangacollec username",
        )
    return value


def extract_data_store(html: str) -> DataStore:
    soup = BeautifulSoup(html, "html.parser")
    script = next(
        (
            str(tag.string)
            for tag in soup.find_all("script")
            if tag.string and MANGACOLLEC_DATA_STORE_MARKER in tag.string
        ),
        None,
    )
    found = DATA_STORE_ASSIGNMENT.search(script) if script is not None else None
    if script is None or found is None:
        raise SourceError(SourceErrorKind.PARSE_FAILURE, "DATA_STORE not found in Mangacollec page")
    try:
        # decode only the object literal; statements after it are ignored
        payload, _ = json.JSONDecoder().raw_decode(script, found.end())
        return DataStore.model_validate(payload)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise SourceError(
            SourceErrorKind.PARSE_FAILURE, f"Invalid DATA_STORE payload: {exc}"
        ) from exc


def _walk_follow_entries(node: object) -> Iterator[Mapping[str, object]]:
    if isinstance(node, Mapping):
        yield cast(Mapping[str, object], node)
    elif isinstance(node, list):
        for child in cast(list[object], node):
            yield from _walk_follow_entries(child)


def owned_edition_ids(store: DataStore, username: str) -> set[str] | None:
    """Edition ids listed in ``publicCollection[username]``; ``None`` when unavailable."""

    collection = store.public_collection.get(username)
    if not isinstance(collection, list) or not collection:
        return None
    owned = {
        str(entry["edition_id"])
        for entry in _walk_follow_entries(collection)
        if entry.get("edition_id") is not None
    }
    return owned or None


def build_candidates(store: DataStore, username: str) -> list[RawCandidate]:
    """One plan-to-read candidate per owned series, in edition order, adult series excluded."""

    series_table = store.series.data
    editions = list(store.editions.data.values())
    log.debug("DATA_STORE holds %s series and %s editions", len(series_table), len(editions))

    owned = owned_edition_ids(store, username)
    if owned is None:
        log.warning(
            "publicCollection not found for %s, falling back to every edition on the page",
            username,
        )
    else:
        log.debug("publicCollection lists %s owned editions for %s", len(owned), username)
        editions = [edition for edition in editions if edition.id in owned]

    candidates: dict[str, RawCandidate] = {}
    skipped_adult = 0
    for edition in editions:
        series = series_table.get(edition.series_id)
        if series is None or series.title is None or series.id in candidates:
            continue
        if series.adult_content:
            skipped_adult += 1
            continue
        candidates[series.id] = RawCandidate(
            source_title=series.title,
            status=ReadingStatus.PLAN_TO_READ,
            raw_status="collection",
            source_id=series.id,
            notes=f"Imported from Mangacollec ({series.title})",
        )
    if skipped_adult:
        log.debug("Skipped %s adult editions", skipped_adult)
    return list(candidates.values())


@dataclass(slots=True)
class MangacollecSource:
    """Candidate source over a public Mangacollec collection page."""

    config: MangacollecConfig = field(default_factory=get_mangacollec_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    label: str = "Mangacollec"
    data_source: DataSource | None = None

    async def fetch(self, identifier: str) -> list[RawCandidate]:
        username = extract_username(identifier)
        html = await self._fetch_collection_page(username)
        candidates = build_candidates(extract_data_store(html), username)
        if not candidates:
            raise SourceError(
                SourceErrorKind.NO_ENTRIES, "No series found in this Mangacollec collection."
            )
        log.info("Found %s series in the collection of %s", len(candidates), username)
        return candidates

    async def _fetch_collection_page(self, username: str) -> str:
        base_url = self.config.resilience.base_url or MANGACOLLEC_BASE_URL
        url = f"{base_url}/user/{quote(username, safe='')}/collection"
        try:
            async with self.client_factory(self.config.resilience) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            log.error("Mangacollec request failed: %s", exc)
            raise SourceError(
                SourceErrorKind.PROVIDER_ERROR, f"Mangacollec is unreachable: {exc}"
            ) from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            raise SourceError(
                SourceErrorKind.USER_NOT_FOUND,
                f"Mangacollec user {username} does not exist",
                status_code=response.status_code,
            )
        if response.is_error:
            raise SourceError(
                SourceErrorKind.PROVIDER_ERROR,
                "Mangacollec rejected the request",
                status_code=response.status_code,
            )
        return response.text


if TYPE_CHECKING:
    _source_check: CandidateSource = MangacollecSource()
