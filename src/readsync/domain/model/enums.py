"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class DataSource(StrEnum):
    MYANIMELIST = "myanimelist"
    MANGACOLLEC = "mangacollec"
    MANUAL = "manual"


class ReadingStatus(StrEnum):
    READING = "reading"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"
    DROPPED = "dropped"
    PLAN_TO_READ = "plan_to_read"


class MatchKind(StrEnum):
    """How a candidate title was tied to a catalog entry."""

    EXTERNAL_ID = "external_id"
    EXACT = "exact"
    EXACT_ALTERNATIVE = "exact_alternative"
    FUZZY = "fuzzy"
    FUZZY_ALTERNATIVE = "fuzzy_alternative"


class ImportStage(StrEnum):
    PENDING = "pending"
    FETCHING = "fetching"
    MATCHING = "matching"
    RESOLVING = "resolving"
    COMPLETED = "completed"
    FAILED = "failed"
