"""Domain ports implemented by adapters."""

from __future__ import annotations

from .catalog import CatalogRepository
from .fetching import CandidateSource
from .resolution import GenerativeTextClient, ProgressListener, TitleResolver
from .tracking import TrackingRepository

__all__ = [
    "CandidateSource",
    "CatalogRepository",
    "GenerativeTextClient",
    "ProgressListener",
    "TitleResolver",
    "TrackingRepository",
]
