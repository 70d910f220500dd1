# ruff: noqa: T201

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from readsync import __version__
from readsync.adapters.myanimelist import read_export_file
from readsync.adapters.serialization import (
    dump_fetch_result,
    load_catalog_entries,
    load_pending_entries,
)
from readsync.adapters.sqlalchemy import (
    SqlAlchemyCatalogRepository,
    SqlAlchemyTrackingRepository,
    open_session,
    seed_catalog,
    shutdown,
    startup,
)
from readsync.app import (
    AI_FALLBACK_BY_DEFAULT,
    SourceKind,
    build_gemini_resolver,
    build_source,
    confirm_pending,
    fetch_import,
)
from readsync.config import ConfigurationError, configure_logging
from readsync.domain.errors import SourceError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from readsync.domain.model import ConfirmResult, FetchResult, ImportProgress

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="readsync", description="Import reading lists into the tracker"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy database URI (defaults to DATABASE_URI or the data directory)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch = subparsers.add_parser("fetch", help="Fetch and reconcile a library for review")
    fetch.add_argument("source", choices=[kind.value for kind in SourceKind])
    fetch.add_argument(
        "identifier",
        type=str,
        help="Export file path (mal-xml), username (mal-user) or profile (mangacollec)",
    )
    fetch.add_argument("--user-id", type=str, required=True, help="Importing user id")
    fetch.add_argument(
        "--output",
        type=Path,
        help="Write the fetch result JSON to this file instead of stdout",
    )
    ai = fetch.add_mutually_exclusive_group()
    ai.add_argument(
        "--no-ai",
        dest="use_ai",
        action="store_false",
        default=None,
        help="Never call the AI fallback for unmatched titles",
    )
    ai.add_argument(
        "--ai",
        dest="use_ai",
        action="store_true",
        help="Use the AI fallback even for MyAnimeList sources",
    )

    confirm = subparsers.add_parser("confirm", help="Create tracking records from a review file")
    confirm.add_argument("pending", type=Path, help="Fetch result JSON or list of entries")
    confirm.add_argument("--user-id", type=str, required=True, help="Importing user id")
    confirm.add_argument(
        "--select",
        nargs="+",
        metavar="ID",
        help="Only confirm these catalog entry ids",
    )

    catalog = subparsers.add_parser("catalog", help="Catalog maintenance")
    catalog_sub = catalog.add_subparsers(dest="catalog_command", required=True)
    catalog_load = catalog_sub.add_parser("load", help="Load catalog entries from JSON")
    catalog_load.add_argument("path", type=Path)

    return parser.parse_args(list(argv))


def _log_progress(progress: ImportProgress) -> None:
    if progress.current_title is not None:
        log.debug(
            "[%s] %s/%s %s",
            progress.stage,
            progress.resolved_count,
            progress.total_to_resolve,
            progress.current_title,
        )
        return
    log.info(
        "Import stage %s (candidates=%s, matched directly=%s, to resolve=%s)",
        progress.stage,
        progress.total_candidates,
        progress.matched_direct,
        progress.total_to_resolve,
    )


def _report_fetch(result: FetchResult) -> None:
    log.info(
        "Review ready: pending=%s not_found=%s skipped=%s already_exists=%s errors=%s",
        len(result.pending_entries),
        result.not_found_count,
        result.skipped_count,
        result.already_exists_count,
        result.error_count,
    )
    for issue in result.errors:
        log.warning("Error: %s", issue)


def _report_confirm(result: ConfirmResult) -> None:
    log.info(
        "Import confirmed: imported=%s already_tracked=%s errors=%s",
        result.imported,
        result.already_tracked,
        len(result.errors),
    )
    for message in result.errors:
        log.warning(message)


def _run_fetch(args: argparse.Namespace) -> None:
    kind = SourceKind(args.source)
    identifier = args.identifier
    if kind is SourceKind.MAL_XML:
        identifier = read_export_file(Path(identifier))

    use_ai = args.use_ai if args.use_ai is not None else kind in AI_FALLBACK_BY_DEFAULT
    resolver = build_gemini_resolver() if use_ai else None
    source = build_source(kind)

    with open_session() as session:
        result = asyncio.run(
            fetch_import(
                source,
                identifier,
                user_id=args.user_id,
                catalog=SqlAlchemyCatalogRepository(session),
                tracking=SqlAlchemyTrackingRepository(session),
                resolver=resolver,
                progress=_log_progress,
            )
        )

    _report_fetch(result)
    document = dump_fetch_result(result)
    if args.output is not None:
        args.output.write_text(document, encoding="utf-8")
        log.info("Wrote fetch result to %s", args.output)
    else:
        print(document)


def _run_confirm(args: argparse.Namespace) -> None:
    entries = load_pending_entries(args.pending.read_text(encoding="utf-8"))
    with open_session() as session:
        result = asyncio.run(
            confirm_pending(
                args.user_id,
                entries,
                tracking=SqlAlchemyTrackingRepository(session),
                selected_ids=args.select,
            )
        )
    _report_confirm(result)


def _run_catalog_load(args: argparse.Namespace) -> None:
    entries = load_catalog_entries(args.path.read_bytes())
    with open_session() as session:
        count = seed_catalog(session, entries)
    log.info("Loaded %s catalog entries from %s", count, args.path)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        startup(database_uri=parsed_args.database_uri, force=True)
    except Exception:
        log.exception("Could not open the database")
        sys.exit(1)

    try:
        if parsed_args.command == "fetch":
            _run_fetch(parsed_args)
        elif parsed_args.command == "confirm":
            _run_confirm(parsed_args)
        elif parsed_args.command == "catalog" and parsed_args.catalog_command == "load":
            _run_catalog_load(parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (SourceError, ConfigurationError, OSError) as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during import")
        sys.exit(1)
    finally:
        shutdown()


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
