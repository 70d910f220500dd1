"""Mangacollec scraping configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_flag, optional_env_float
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

MANGACOLLEC_BASE_URL = "https://www.mangacollec.com"
MANGACOLLEC_TIMEOUT_SECONDS = 20.0
MANGACOLLEC_CACHE_TTL_SECONDS = 300.0
MANGACOLLEC_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
MANGACOLLEC_DATA_STORE_MARKER = "window.DATA_STORE"


def _has_data_store(body: str) -> bool:
    # only profile pages carrying the store payload are cached
    return MANGACOLLEC_DATA_STORE_MARKER in body


@dataclass(frozen=True, slots=True)
class MangacollecConfig:
    resilience: ResilienceConfig


def get_mangacollec_config() -> MangacollecConfig:
    resilience = ResilienceConfig(
        name="mangacollec",
        base_url=MANGACOLLEC_BASE_URL,
        timeout_seconds=MANGACOLLEC_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
        retry=RetryPolicy(total=2),
        cache=CacheConfig(
            ttl_seconds=optional_env_float(
                "MANGACOLLEC_CACHE_TTL_SECONDS", MANGACOLLEC_CACHE_TTL_SECONDS
            ),
            persistent=optional_env_flag("MANGACOLLEC_PERSISTENT_CACHE", default=False),
            should_cache=_has_data_store,
        ),
        default_headers={
            "User-Agent": MANGACOLLEC_USER_AGENT,
            "Accept": "text/html,application/xhtml+xml",
        },
    )
    return MangacollecConfig(resilience=resilience)
