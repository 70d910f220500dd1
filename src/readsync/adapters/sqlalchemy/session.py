"""Engine lifecycle of the SQLAlchemy adapter.

The CLI starts the adapter once per command; tests restart it around an
in-memory engine with ``force=True``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from readsync.config.storage import get_database_config

from .tables import metadata

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised on sessions requested before startup or on a second startup."""


@dataclass(slots=True)
class _EngineState:
    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None

    def bind(self, engine: Engine) -> None:
        self.engine = engine
        self.sessions = sessionmaker(bind=engine, expire_on_commit=False)

    def release(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.sessions = None


_STATE = _EngineState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> Engine:
    """Bind the adapter to ``engine`` (or a new one) and create missing tables.

    Without an engine or URI the database configured for the data directory is
    used.
    """

    if _STATE.engine is not None:
        if not force:
            raise StartupError("database adapter is already started; pass force=True to rebind")
        if engine is not _STATE.engine:
            _STATE.release()

    bound = engine or create_engine(database_uri or get_database_config().uri)
    metadata.create_all(bound)
    _STATE.bind(bound)
    return bound


def is_started() -> bool:
    return _STATE.engine is not None


def open_session() -> Session:
    if _STATE.sessions is None:
        raise StartupError("database adapter is not started; call startup() first")
    return _STATE.sessions()


def shutdown() -> None:
    _STATE.release()
