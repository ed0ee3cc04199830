"""Protocol definitions (interfaces) for dependency injection."""
from __future__ import annotations

from abc import abstractmethod
from collections.abc import Iterable
from pathlib import Path
from typing import Optional, Protocol

from .models import HistoryReport, MoveRecord, RunSummary


class MoveHistoryStore(Protocol):
    """Interface for the durable move history."""

    @abstractmethod
    def insert(self, record: MoveRecord) -> None:
        """Append one record. Raises HistoryWriteError on failure."""
        ...

    @abstractmethod
    def record_all(self, records: Iterable[MoveRecord]) -> HistoryReport:
        """Append every record independently, continuing past failures."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the connection."""
        ...


class RunReporter(Protocol):
    """Interface for console output during a run."""

    @abstractmethod
    def start_phase(self, name: str, total: int) -> None:
        """Start a progress phase."""
        ...

    @abstractmethod
    def advance_phase(self, amount: int = 1) -> None:
        """Advance current phase."""
        ...

    @abstractmethod
    def end_phase(self) -> None:
        """End current phase."""
        ...

    @abstractmethod
    def info(self, message: str) -> None:
        ...

    @abstractmethod
    def success(self, message: str) -> None:
        ...

    @abstractmethod
    def warning(self, message: str) -> None:
        ...

    @abstractmethod
    def error(self, message: str) -> None:
        ...

    @abstractmethod
    def debug(self, message: str) -> None:
        ...

    @abstractmethod
    def print_summary(self, summary: RunSummary, destination_root: Optional[Path] = None) -> None:
        """Print the end-of-run report."""
        ...
