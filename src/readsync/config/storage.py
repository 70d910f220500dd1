"""Locations of the tracker database and the persistent HTTP cache."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "readsync"
DEFAULT_DB_FILENAME: Final[str] = "readsync.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Data directory shared by the SQLite database and the HTTP cache.

    The directory is created on first use of either file path.
    """

    data_dir: Path

    @property
    def resolved_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def file_path(self, filename: str) -> Path:
        directory = self.resolved_dir
        directory.mkdir(parents=True, exist_ok=True)
        return directory / filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.file_path(DEFAULT_DB_FILENAME)}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = os.getenv("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = os.getenv("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    override = os.getenv("READSYNC_DATA_DIR")
    data_dir = Path(override) if override else _platform_data_home() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise a SQLite file in the data directory."""

    uri = os.getenv("DATABASE_URI")
    if uri:
        return DatabaseConfig(uri=uri)
    return DatabaseConfig(uri=(storage or get_storage_config()).database_uri())


def get_http_cache_path() -> Path:
    return get_storage_config().file_path(HTTP_CACHE_FILENAME)
