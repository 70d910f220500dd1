"""Application configuration helpers."""

from __future__ import annotations

from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .gemini import GeminiConfig, get_gemini_config
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .mangacollec import MangacollecConfig, get_mangacollec_config
from .myanimelist import MalApiConfig, get_mal_api_config, mal_resilience_config
from .resolution import ResolutionConfig, get_resolution_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "GeminiConfig",
    "MalApiConfig",
    "MangacollecConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "ResolutionConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_gemini_config",
    "get_mal_api_config",
    "get_mangacollec_config",
    "get_resolution_config",
    "get_storage_config",
    "mal_resilience_config",
    "require_env_var",
    "require_env_vars",
]
