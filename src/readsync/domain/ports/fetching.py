"""Ports for fetching library entries from external sources."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from readsync.domain.model import DataSource, RawCandidate


@runtime_checkable
class CandidateSource(Protocol):
    """Fetch one user's library from an external source.

    ``identifier`` is source specific: an export document, a username or a
    profile reference. Implementations raise ``SourceError`` when nothing can be
    imported at all.
    """

    label: str
    data_source: DataSource | None

    async def fetch(self, identifier: str) -> list[RawCandidate]: ...


__all__ = ["CandidateSource"]
