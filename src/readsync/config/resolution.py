"""Settings for the AI-assisted title resolution fallback."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_float, optional_env_int

DEFAULT_AI_CONCURRENCY = 2
DEFAULT_AI_MAX_ATTEMPTS = 3
DEFAULT_AI_RETRY_BASE_DELAY_SECONDS = 2.0
DEFAULT_AI_CHUNK_DELAY_SECONDS = 1.5
DEFAULT_AI_CALL_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class ResolutionConfig:
    concurrency: int = DEFAULT_AI_CONCURRENCY
    max_attempts: int = DEFAULT_AI_MAX_ATTEMPTS
    retry_base_delay_seconds: float = DEFAULT_AI_RETRY_BASE_DELAY_SECONDS
    chunk_delay_seconds: float = DEFAULT_AI_CHUNK_DELAY_SECONDS
    call_timeout_seconds: float = DEFAULT_AI_CALL_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ValueError("AI resolution concurrency must be at least 1")
        if self.max_attempts < 1:
            raise ValueError("AI resolution needs at least one attempt")


def get_resolution_config() -> ResolutionConfig:
    return ResolutionConfig(
        concurrency=optional_env_int("READSYNC_AI_CONCURRENCY", DEFAULT_AI_CONCURRENCY),
        max_attempts=optional_env_int("READSYNC_AI_MAX_ATTEMPTS", DEFAULT_AI_MAX_ATTEMPTS),
        call_timeout_seconds=optional_env_float(
            "READSYNC_AI_TIMEOUT_SECONDS", DEFAULT_AI_CALL_TIMEOUT_SECONDS
        ),
    )
