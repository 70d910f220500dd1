"""Public interface for the Mangacollec adapter."""

from __future__ import annotations

from .client import (
    MangacollecSource,
    build_candidates,
    extract_data_store,
    extract_username,
    owned_edition_ids,
)
from .schema import DataStore

__all__ = [
    "DataStore",
    "MangacollecSource",
    "build_candidates",
    "extract_data_store",
    "extract_username",
    "owned_edition_ids",
]
