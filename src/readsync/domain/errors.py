"""Error taxonomy of the import pipeline.

``SourceError`` aborts a whole fetch. ``CandidateError`` and ``ResolutionError``
are isolated per entry and end up as detail in the fetch or confirm result.
"""

from __future__ import annotations

from enum import StrEnum


class SourceErrorKind(StrEnum):
    PARSE_FAILURE = "parse_failure"
    WRONG_EXPORT_TYPE = "wrong_export_type"
    NO_ENTRIES = "no_entries"
    USER_NOT_FOUND = "user_not_found"
    LIST_PRIVATE = "list_private"
    PROVIDER_ERROR = "provider_error"
    INVALID_IDENTIFIER = "invalid_identifier"


class ImportPipelineError(RuntimeError):
    """Base class for import pipeline failures."""


class SourceError(ImportPipelineError):
    """Raised by a source adapter when the whole fetch has to be abandoned."""

    def __init__(
        self,
        kind: SourceErrorKind,
        message: str,
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code

    def __str__(self) -> str:
        base = super().__str__()
        if self.status_code is not None:
            return f"{base} (HTTP {self.status_code})"
        return base


class CandidateError(ImportPipelineError):
    """Raised for a failure that only concerns one library entry."""

    def __init__(self, message: str, *, source_title: str) -> None:
        super().__init__(message)
        self.source_title = source_title

    @classmethod
    def from_exception(cls, exc: Exception, *, source_title: str) -> CandidateError:
        """Wrap an unexpected per-entry failure, keeping it as ``__cause__``."""

        if isinstance(exc, CandidateError):
            return exc
        error = cls(str(exc) or type(exc).__name__, source_title=source_title)
        error.__cause__ = exc
        return error


class ResolutionError(ImportPipelineError):
    """Raised when an AI resolution attempt fails; always recoverable."""

    def __init__(self, message: str, *, title: str, retryable: bool = True) -> None:
        super().__init__(message)
        self.title = title
        self.retryable = retryable
