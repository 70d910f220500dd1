"""MyAnimeList API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_float, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

MAL_API_BASE_URL = "https://api.myanimelist.net/v2"
MAL_TIMEOUT_SECONDS = 15.0
MAL_PAGE_SIZE = 100
# The public API tolerates roughly one request per second per client id
MAL_MIN_REQUEST_INTERVAL_SECONDS = 1.0


@dataclass(frozen=True, slots=True)
class MalApiConfig:
    """Holds MyAnimeList API configuration values."""

    client_id: str
    resilience: ResilienceConfig
    page_size: int = MAL_PAGE_SIZE


def mal_resilience_config(
    *,
    min_interval_seconds: float = MAL_MIN_REQUEST_INTERVAL_SECONDS,
) -> ResilienceConfig:
    return ResilienceConfig(
        name="myanimelist",
        base_url=MAL_API_BASE_URL,
        timeout_seconds=MAL_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=1, per_seconds=min_interval_seconds),
        retry=RetryPolicy(total=3),
        cache=None,
    )


def get_mal_api_config(*, resilience: ResilienceConfig | None = None) -> MalApiConfig:
    values = require_env_vars(("MAL_CLIENT_ID",))
    interval = optional_env_float(
        "MAL_MIN_REQUEST_INTERVAL_SECONDS", MAL_MIN_REQUEST_INTERVAL_SECONDS
    )
    return MalApiConfig(
        client_id=values["MAL_CLIENT_ID"],
        resilience=resilience or mal_resilience_config(min_interval_seconds=interval),
    )
