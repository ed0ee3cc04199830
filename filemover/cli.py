"""CLI with subcommands: run, history, categories."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from .core.config import (
    DEFAULT_CATEGORIES,
    DuplicateExtensionPolicy,
    MoverSettings,
    build_settings,
    load_settings,
)
from .core.errors import FileMoverError
from .logging.rich_logger import QuietRunReporter, RichRunReporter, configure_logging


EXIT_OK = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 2
EXIT_INTERRUPTED = 130


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="filemover",
        description="Sort the files of a folder into category folders by extension.",
    )

    # Global options
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ============ RUN command ============
    run_parser = subparsers.add_parser(
        "run",
        help="Move files from the source folder into category folders",
    )
    _add_config_argument(run_parser)
    run_parser.add_argument(
        "-s", "--source",
        type=Path,
        default=None,
        help="Source folder (overrides config)",
    )
    run_parser.add_argument(
        "-d", "--dest",
        type=Path,
        default=None,
        help="Destination root folder (overrides config)",
    )
    _add_db_argument(run_parser)
    run_parser.add_argument(
        "--on-duplicate-extension",
        dest="duplicate_extensions",
        type=str,
        choices=[p.value for p in DuplicateExtensionPolicy],
        default=None,
        help="What to do when two categories list the same extension (default: last-wins)",
    )
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be done without moving",
    )

    # ============ HISTORY command ============
    history_parser = subparsers.add_parser(
        "history",
        help="Show recently recorded moves",
    )
    _add_config_argument(history_parser)
    _add_db_argument(history_parser)
    history_parser.add_argument(
        "-n", "--limit",
        type=int,
        default=20,
        help="Number of rows to show (default: 20)",
    )

    # ============ CATEGORIES command ============
    categories_parser = subparsers.add_parser(
        "categories",
        help="Show which extensions go to which category folder",
    )
    _add_config_argument(categories_parser)

    return parser


def _add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="JSON settings file",
    )


def _add_db_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Move history database (default: DEST/file_move_history.sqlite)",
    )


def build_settings_from_args(args: argparse.Namespace) -> MoverSettings:
    """Merge the config file (if any) with command-line overrides."""
    overrides = {
        "source_folder": getattr(args, "source", None),
        "destination_folder": getattr(args, "dest", None),
        "history_db": getattr(args, "db", None),
        "duplicate_extensions": getattr(args, "duplicate_extensions", None),
    }

    if args.config:
        return load_settings(args.config).with_overrides(**overrides)

    return build_settings({k: v for k, v in overrides.items() if v is not None})


# ============ Command Handlers ============

def cmd_run(args: argparse.Namespace, reporter) -> int:
    """Handle the run command."""
    from .services.runner import run_mover

    settings = build_settings_from_args(args)

    reporter.print_header("filemover run" + (" (dry run)" if args.dry_run else ""))
    reporter.print_config({
        "Source Folder": settings.source_folder,
        "Destination Folder": settings.destination_folder,
        "History Database": settings.resolve_history_db(),
        "Categories": ", ".join(settings.categories),
        "Dry Run": args.dry_run,
    })

    result = run_mover(settings, reporter, dry_run=args.dry_run)
    reporter.print_summary(result.summary, settings.destination_folder)

    return EXIT_PARTIAL if result.summary.has_failures else EXIT_OK


def cmd_history(args: argparse.Namespace, reporter) -> int:
    """Handle the history command."""
    from .persistence.database import SQLiteMoveHistory

    if args.db:
        db_path = args.db.expanduser().resolve()
    elif args.config:
        db_path = load_settings(args.config).resolve_history_db()
    else:
        reporter.error("Specify --db or --config to locate the move history.")
        return EXIT_FATAL

    if not db_path.exists():
        reporter.error(f"Database not found: {db_path}")
        reporter.info("Run 'filemover run' first to record moves.")
        return EXIT_FATAL

    with SQLiteMoveHistory(db_path) as history:
        rows = history.recent(args.limit)
        total = history.count()

    reporter.print_history(rows)
    reporter.info(f"Showing {len(rows)} of {total} recorded moves")
    return EXIT_OK


def cmd_categories(args: argparse.Namespace, reporter) -> int:
    """Handle the categories command."""
    from .services.classifier import build_category_mapping

    if args.config:
        settings = load_settings(args.config)
        categories, policy = settings.categories, settings.duplicate_extensions
    else:
        categories, policy = DEFAULT_CATEGORIES, DuplicateExtensionPolicy.LAST_WINS

    reporter.print_categories(build_category_mapping(categories, policy))
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    verbose = getattr(args, "verbose", False)
    configure_logging(verbose=verbose)

    # Create reporter
    if getattr(args, "quiet", False):
        reporter = QuietRunReporter()
    else:
        reporter = RichRunReporter(verbose=verbose)

    # No command specified - show help
    if not args.command:
        parser.print_help()
        return EXIT_OK

    # Dispatch to command handler
    try:
        if args.command == "run":
            return cmd_run(args, reporter)
        elif args.command == "history":
            return cmd_history(args, reporter)
        elif args.command == "categories":
            return cmd_categories(args, reporter)
        else:
            reporter.error(f"Unknown command: {args.command}")
            return EXIT_FATAL

    except KeyboardInterrupt:
        # Clean exit on Ctrl+C - no stack trace
        return EXIT_INTERRUPTED
    except FileMoverError as e:
        reporter.error(str(e))
        if verbose:
            import traceback
            traceback.print_exc()
        return EXIT_FATAL


if __name__ == "__main__":
    sys.exit(main())
