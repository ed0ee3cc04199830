"""Domain models - immutable data classes."""
from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Optional


class MoveAction(Enum):
    """What happened to a file."""
    MOVED = "moved"
    RENAMED = "renamed"    # Moved under a timestamped name
    PLANNED = "planned"    # Dry run
    SKIPPED = "skipped"
    ERROR = "error"


UNMAPPED_EXTENSION = "unmapped extension"


class CategoryMapping(Mapping[str, str]):
    """Read-only extension -> category lookup.

    Keys are stored lower-cased with their leading dot, so ``.PDF`` and
    ``.pdf`` resolve to the same category.
    """

    __slots__ = ("_map", "_categories")

    def __init__(self, mapping: Mapping[str, str], categories: Optional[tuple[str, ...]] = None):
        normalized = {ext.lower(): category for ext, category in mapping.items()}
        self._map = MappingProxyType(normalized)
        if categories is None:
            categories = tuple(dict.fromkeys(normalized.values()))
        self._categories = categories

    @property
    def categories(self) -> tuple[str, ...]:
        """Distinct category names in configuration order."""
        return self._categories

    def lookup(self, extension: str) -> Optional[str]:
        if not extension:
            return None
        return self._map.get(extension.lower())

    def __getitem__(self, extension: str) -> str:
        return self._map[extension.lower()]

    def __contains__(self, extension: object) -> bool:
        return isinstance(extension, str) and extension.lower() in self._map

    def __iter__(self) -> Iterator[str]:
        return iter(self._map)

    def __len__(self) -> int:
        return len(self._map)

    def __repr__(self) -> str:
        return f"CategoryMapping({dict(self._map)!r})"


@dataclass(slots=True)
class FileTask:
    """A single source file on its way through the mover."""
    path: Path
    category: Optional[str] = None

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def extension(self) -> str:
        return self.path.suffix


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """Audit entry for one completed move."""
    file_name: str
    category: str
    source_path: Path
    destination_path: Path
    created_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True, slots=True)
class MoveOutcome:
    """Result of processing a single file."""
    task: FileTask
    action: MoveAction
    destination: Optional[Path] = None
    record: Optional[MoveRecord] = None
    reason: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.action in (MoveAction.MOVED, MoveAction.RENAMED)

    @property
    def file_name(self) -> str:
        return self.task.name


@dataclass(slots=True)
class RunSummary:
    """Mutable tallies for one run. Printed, never persisted."""
    moved: dict[str, int] = field(default_factory=dict)
    renamed: int = 0
    planned: dict[str, int] = field(default_factory=dict)
    skipped: list[tuple[str, str]] = field(default_factory=list)
    errors: list[tuple[str, str]] = field(default_factory=list)
    history_errors: list[tuple[str, str]] = field(default_factory=list)

    @property
    def total_moved(self) -> int:
        return sum(self.moved.values())

    @property
    def has_failures(self) -> bool:
        return bool(self.errors) or bool(self.history_errors)

    def record(self, outcome: MoveOutcome) -> None:
        """Record a processing outcome."""
        category = outcome.task.category or ""
        match outcome.action:
            case MoveAction.MOVED:
                self.moved[category] = self.moved.get(category, 0) + 1
            case MoveAction.RENAMED:
                self.moved[category] = self.moved.get(category, 0) + 1
                self.renamed += 1
            case MoveAction.PLANNED:
                self.planned[category] = self.planned.get(category, 0) + 1
            case MoveAction.SKIPPED:
                self.skipped.append((outcome.file_name, outcome.reason or ""))
            case MoveAction.ERROR:
                self.errors.append((outcome.file_name, outcome.reason or ""))


@dataclass(slots=True)
class HistoryReport:
    """What happened when a batch of records was written to history."""
    written: int = 0
    failed: list[tuple[MoveRecord, str]] = field(default_factory=list)

    @property
    def failed_count(self) -> int:
        return len(self.failed)
