"""End-of-run aggregation."""
from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from ..core.models import HistoryReport, MoveOutcome, RunSummary


def summarize(
    outcomes: Iterable[MoveOutcome],
    history: Optional[HistoryReport] = None,
) -> RunSummary:
    """Tally outcomes per category, plus skips, errors and history failures."""
    summary = RunSummary()
    for outcome in outcomes:
        summary.record(outcome)
    if history is not None:
        summary.history_errors = [
            (record.file_name, reason) for record, reason in history.failed
        ]
    return summary
