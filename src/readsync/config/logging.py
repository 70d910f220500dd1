"""Logging setup for the command line entry point."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger for import runs.

    ``force`` replaces handlers installed earlier, which tests rely on.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    # httpx logs every request at INFO; keep CLI output focused on the import
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
