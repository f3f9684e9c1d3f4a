"""Command-line interface for Inbox Sweeper.

This module provides the main entry point for the CLI application.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import structlog

from inbox_sweeper import __version__
from inbox_sweeper.config import Settings, get_settings
from inbox_sweeper.exceptions import InboxSweeperError
from inbox_sweeper.gmail import GmailMailStore
from inbox_sweeper.rules import load_keyword_groups
from inbox_sweeper.storage import FileSystemStorage
from inbox_sweeper.sweep import CleanupRunner, RunTracker
from inbox_sweeper.timeutils import resolve_timezone

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="inbox-sweeper", description="Inbox Sweeper")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Classify inbox threads and log every decision")
    run_parser.add_argument(
        "--trash",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Move threads decided for deletion to the bin (default: settings trash_enabled)",
    )
    run_parser.add_argument(
        "--keywords",
        type=Path,
        default=None,
        help="JSON file with subject keyword groups (default: settings keywords_file)",
    )
    run_parser.add_argument(
        "--storage",
        type=Path,
        default=None,
        help="Directory holding the log folders (default: settings storage_dir)",
    )
    run_parser.add_argument(
        "--page-size",
        type=int,
        default=None,
        help="Threads per search page (default: settings page_size)",
    )

    overview_parser = subparsers.add_parser("overview", help="List past runs and their status")
    overview_parser.add_argument(
        "--storage",
        type=Path,
        default=None,
        help="Directory holding the log folders (default: settings storage_dir)",
    )

    return parser


def _effective_settings(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {}
    if getattr(args, "storage", None) is not None:
        overrides["storage_dir"] = args.storage
    if getattr(args, "trash", None) is not None:
        overrides["trash_enabled"] = args.trash
    if getattr(args, "page_size", None) is not None:
        overrides["page_size"] = args.page_size
    if getattr(args, "keywords", None) is not None:
        overrides["keywords_file"] = args.keywords
    return settings.model_copy(update=overrides)


def _keyword_groups(settings: Settings) -> list[list[str]]:
    groups = [list(g) for g in settings.keyword_groups]
    if settings.keywords_file is not None:
        groups.extend(load_keyword_groups(settings.keywords_file))
    return groups


def _cmd_run(settings: Settings) -> int:
    keyword_groups = _keyword_groups(settings)
    mail_store = GmailMailStore.from_settings(settings)
    storage = FileSystemStorage(settings.storage_dir)

    runner = CleanupRunner(settings, mail_store, storage, keyword_groups)
    result = runner.run()

    processed = sum(b.processed for b in result.batches)
    deleted = sum(b.deleted for b in result.batches)
    failed = sum(b.failed for b in result.batches)
    mode = "moved to bin" if settings.trash_enabled else "marked for deletion (record only)"
    print(f"Run {result.log_name}: {processed} threads processed, {deleted} {mode}, {failed} failed")
    for b in result.batches:
        print(f"- {b.rule_name}: {b.processed} processed, {b.deleted} delete, {b.skipped} skip, {b.failed} failed")
    return 0


def _cmd_overview(settings: Settings) -> int:
    tracker = RunTracker(
        FileSystemStorage(settings.storage_dir),
        tz=resolve_timezone(settings.timezone),
        root_folder_name=settings.root_folder_name,
        debug_folder_name=settings.debug_folder_name,
    )
    runs = tracker.list_runs()
    if not runs:
        print("No runs recorded yet.")
        return 0

    for r in runs:
        print(f"{r.run_timestamp}\t{r.status}\t{r.log_file_name}\t{r.link}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the Inbox Sweeper CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]

    settings = get_settings()

    # Configure logging
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper(), logging.INFO)
        ),
    )

    logger.info("inbox_sweeper_started", version=__version__, debug=settings.debug)

    parser = _build_parser()
    parsed = parser.parse_args(args)
    effective = _effective_settings(settings, parsed)

    try:
        if parsed.command == "run":
            return _cmd_run(effective)
        if parsed.command == "overview":
            return _cmd_overview(effective)
    except InboxSweeperError as exc:
        logger.error("command_failed", command=parsed.command, error=str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    logger.error("unknown_command", command=parsed.command)
    return 2


if __name__ == "__main__":
    sys.exit(main())
