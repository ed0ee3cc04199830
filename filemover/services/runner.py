"""Run orchestration: classify, provision, move, record, summarize."""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from pathlib import Path
from typing import Optional

from ..core.config import MoverSettings
from ..core.errors import HistoryWriteError
from ..core.models import HistoryReport, MoveAction, MoveOutcome, RunSummary
from ..core.protocols import MoveHistoryStore, RunReporter
from ..persistence.database import SQLiteMoveHistory
from .classifier import build_category_mapping
from .mover import CollisionSafeMover, list_source_files
from .provisioner import DestinationProvisioner
from .summary import summarize


logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Everything a finished run produced."""
    summary: RunSummary
    outcomes: list[MoveOutcome] = field(default_factory=list)
    history: HistoryReport = field(default_factory=HistoryReport)
    created_folders: list[Path] = field(default_factory=list)
    dry_run: bool = False


def record_history(
    outcomes: list[MoveOutcome],
    open_store: Callable[[], MoveHistoryStore],
) -> HistoryReport:
    """Write a history row for every successful move.

    If the store cannot even be opened, every record counts as failed; the
    files themselves stay where they were moved.
    """
    records = [o.record for o in outcomes if o.is_success and o.record is not None]
    if not records:
        return HistoryReport()

    try:
        store = open_store()
    except HistoryWriteError as e:
        logger.error(str(e))
        return HistoryReport(failed=[(record, str(e)) for record in records])

    try:
        return store.record_all(records)
    finally:
        store.close()


def run_mover(
    settings: MoverSettings,
    reporter: RunReporter,
    dry_run: bool = False,
    clock: Callable[[], datetime] = datetime.now,
    open_store: Optional[Callable[[], MoveHistoryStore]] = None,
) -> RunResult:
    """Sort the source folder into category folders and record the moves.

    Args:
        settings: Validated settings.
        reporter: Console output.
        dry_run: Plan only; nothing is created, moved or recorded.
        clock: Timestamp source for renames and records.
        open_store: Factory for the history store (default: SQLite at
            settings.resolve_history_db()).

    Returns:
        The run result with its summary.

    Raises:
        ConfigurationError: Malformed categories.
        SourceMissingError: Source folder does not exist.
        ProvisioningError: A category folder could not be created.
    """
    history_db = settings.resolve_history_db()
    store_factory = open_store or partial(SQLiteMoveHistory, history_db)

    mapping = build_category_mapping(settings.categories, settings.duplicate_extensions)
    reporter.debug(f"{len(mapping)} extensions across {len(mapping.categories)} categories")

    # Listing first: a missing source must abort before any folder is created
    files = list_source_files(settings.source_folder, exclude=[history_db])
    reporter.info(f"Found {len(files)} files in {settings.source_folder}")

    provisioner = DestinationProvisioner(settings.destination_folder, dry_run=dry_run)
    created = provisioner.provision(mapping.categories)
    for folder in created:
        reporter.info(f"{'Would create' if dry_run else 'Created'} folder: {folder}")

    mover = CollisionSafeMover(
        settings.destination_folder,
        mapping,
        clock=clock,
        dry_run=dry_run,
    )

    outcomes: list[MoveOutcome] = []
    reporter.start_phase("Moving files", len(files))
    try:
        for outcome in mover.move_all(files):
            outcomes.append(outcome)
            _report_outcome(reporter, outcome)
            reporter.advance_phase()
    except BaseException:
        # Files already moved still get their history rows
        if not dry_run:
            record_history(outcomes, store_factory)
        raise
    finally:
        reporter.end_phase()

    history = HistoryReport()
    if not dry_run:
        history = record_history(outcomes, store_factory)

    return RunResult(
        summary=summarize(outcomes, history),
        outcomes=outcomes,
        history=history,
        created_folders=created,
        dry_run=dry_run,
    )


def _report_outcome(reporter: RunReporter, outcome: MoveOutcome) -> None:
    """Per-file status line."""
    name = outcome.file_name
    match outcome.action:
        case MoveAction.MOVED:
            reporter.success(f"Moved {name} to {outcome.task.category}")
        case MoveAction.RENAMED:
            assert outcome.destination is not None
            reporter.success(
                f"Moved and renamed {name} to {outcome.task.category}/{outcome.destination.name}"
            )
        case MoveAction.PLANNED:
            reporter.info(f"Would move {name} to {outcome.destination}")
        case MoveAction.SKIPPED:
            reporter.info(f"Skipping {name}: {outcome.reason}")
        case MoveAction.ERROR:
            reporter.error(f"Error moving file {name}: {outcome.reason}")
