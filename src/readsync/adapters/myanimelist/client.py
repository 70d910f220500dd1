"""HTTP client for the MyAnimeList API v2 manga lists."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from readsync.adapters.http_resilience import ResilientClient
from readsync.config.myanimelist import MAL_API_BASE_URL, MalApiConfig, get_mal_api_config
from readsync.domain.errors import SourceError, SourceErrorKind
from readsync.domain.model import DataSource

from .schema import ErrorResponse, MangaListPage
from .translator import candidate_from_api

if TYPE_CHECKING:
    from collections.abc import Callable

    from readsync.config.http_resilience import ResilienceConfig
    from readsync.domain.model import RawCandidate
    from readsync.domain.ports import CandidateSource

log = getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]{2,16}$")
LIST_FIELDS = "list_status"
_PRIVATE_ERRORS = frozenset({"not_permitted", "forbidden"})


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def validate_username(identifier: str) -> str:
    username = identifier.strip()
    if not USERNAME_PATTERN.fullmatch(username):
        raise SourceError(
            SourceErrorKind.INVALID_IDENTIFIER,
            f"{identifier!r} is not a valid MyAnimeList username",
        )
    return username


def _error_code(response: httpx.Response) -> str | None:
    try:
        return ErrorResponse.model_validate(response.json()).error
    except ValueError:
        return None


@dataclass(slots=True)
class MalApiSource:
    """Candidate source reading a public manga list by username."""

    config: MalApiConfig = field(default_factory=get_mal_api_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    label: str = "MyAnimeList"
    data_source: DataSource | None = DataSource.MYANIMELIST

    async def fetch(self, identifier: str) -> list[RawCandidate]:
        username = validate_username(identifier)
        base_url = self.config.resilience.base_url or MAL_API_BASE_URL
        url: str | None = f"{base_url}/users/{username}/mangalist"
        params: httpx.QueryParams | None = httpx.QueryParams(
            {"fields": LIST_FIELDS, "limit": self.config.page_size, "nsfw": "true"}
        )

        candidates: list[RawCandidate] = []
        page_number = 0
        async with self.client_factory(self.config.resilience) as client:
            while url is not None:
                page_number += 1
                page = await self._request_page(client, url, params=params, username=username)
                log.debug("Fetched page %s with %s entries", page_number, len(page.data))
                candidates.extend(candidate_from_api(item) for item in page.data)
                # the next link already carries the query string
                url, params = page.paging.next, None

        if not candidates:
            raise SourceError(
                SourceErrorKind.NO_ENTRIES, f"The manga list of {username} is empty"
            )
        log.info("Fetched %s list entries for %s", len(candidates), username)
        return candidates

    async def _request_page(
        self,
        client: ResilientClient,
        url: str,
        *,
        params: httpx.QueryParams | None,
        username: str,
    ) -> MangaListPage:
        try:
            response = await client.get(
                url,
                params=params,
                headers={"X-MAL-CLIENT-ID": self.config.client_id},
            )
        except httpx.HTTPError as exc:
            log.error("MyAnimeList request failed: %s", exc)
            raise SourceError(
                SourceErrorKind.PROVIDER_ERROR, f"MyAnimeList is unreachable: {exc}"
            ) from exc

        status = response.status_code
        if status == httpx.codes.NOT_FOUND:
            raise SourceError(
                SourceErrorKind.USER_NOT_FOUND,
                f"MyAnimeList user {username} does not exist",
                status_code=status,
            )
        if response.is_error:
            if status == httpx.codes.FORBIDDEN or _error_code(response) in _PRIVATE_ERRORS:
                raise SourceError(
                    SourceErrorKind.LIST_PRIVATE,
                    f"The manga list of {username} is private",
                    status_code=status,
                )
            log.error("MyAnimeList answered %s for %s", status, url)
            raise SourceError(
                SourceErrorKind.PROVIDER_ERROR,
                "MyAnimeList rejected the request",
                status_code=status,
            )

        try:
            return MangaListPage.model_validate(response.json())
        except ValueError as exc:
            raise SourceError(
                SourceErrorKind.PARSE_FAILURE, "Unexpected MyAnimeList response payload"
            ) from exc


if TYPE_CHECKING:
    _source_check: CandidateSource = MalApiSource()
