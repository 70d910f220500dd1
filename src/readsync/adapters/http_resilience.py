"""Shared httpx client for the import sources.

Every source talks to its provider through a :class:`ResilientClient` built
from a :class:`~readsync.config.http_resilience.ResilienceConfig`: transient
failures are retried by ``httpx-retries``, requests are spaced by an
``aiolimiter`` limiter, and pages may be cached by ``hishel``.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, TypedDict

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage, FilterPolicy
from hishel import Response as HishelCacheResponse
from hishel._policies import BaseFilter
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from readsync.config.storage import get_http_cache_path

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._types import HeaderTypes, QueryParamTypes, TimeoutTypes

    from readsync.config.http_resilience import (
        CacheConfig,
        ResilienceConfig,
        RetryPolicy,
        ShouldCacheHook,
    )

log = getLogger(__name__)


class AsyncClientOptions(TypedDict, total=False):
    base_url: str
    timeout: TimeoutTypes
    headers: HeaderTypes
    transport: httpx.AsyncBaseTransport
    follow_redirects: bool


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=tuple(policy.allowed_methods),
        status_forcelist=tuple(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
        backoff_jitter=policy.backoff_jitter,
    )


class ResilientClient:
    """Read-only client of one provider; use it as an async context manager."""

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        self._limiter = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit
            else None
        )
        self._client = _build_http_client(config)

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(
        self,
        url: str,
        *,
        params: QueryParamTypes | None = None,
        headers: HeaderTypes | None = None,
    ) -> httpx.Response:
        if self._limiter is None:
            response = await self._client.get(url, params=params, headers=headers)
        else:
            async with self._limiter:
                response = await self._client.get(url, params=params, headers=headers)
        log.debug(
            "[%s] GET %s -> %s", self.config.name, response.request.url, response.status_code
        )
        return response


def _build_http_client(config: ResilienceConfig) -> httpx.AsyncClient:
    options: AsyncClientOptions = {
        "timeout": config.timeout_seconds,
        "transport": RetryTransport(retry=build_retry(config.retry)),
        "follow_redirects": True,
    }
    if config.base_url is not None:
        options["base_url"] = config.base_url
    if config.default_headers:
        options["headers"] = dict(config.default_headers)

    if config.cache is None:
        return httpx.AsyncClient(**options)
    storage, policy = _build_cache_components(config.cache)
    return AsyncCacheClient(**options, storage=storage, policy=policy)


class _ShouldCacheResponseFilter(BaseFilter[HishelCacheResponse]):
    """Hishel response filter that delegates to a predicate over the decoded body."""

    def __init__(self, predicate: ShouldCacheHook) -> None:
        self._predicate = predicate

    def needs_body(self) -> bool:
        return True

    def apply(self, item: HishelCacheResponse, body: bytes | None) -> bool:  # noqa: ARG002
        if body is None:
            return True
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError:
            return False
        return bool(self._predicate(text))


def _build_cache_components(
    cache: CacheConfig,
) -> tuple[AsyncSqliteStorage, FilterPolicy | None]:
    database_path = str(get_http_cache_path()) if cache.persistent else ":memory:"
    storage = AsyncSqliteStorage(database_path=database_path, default_ttl=cache.ttl_seconds)
    policy = (
        FilterPolicy(response_filters=[_ShouldCacheResponseFilter(cache.should_cache)])
        if cache.should_cache is not None
        else None
    )
    return storage, policy
