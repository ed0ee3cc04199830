"""Collision-safe file mover."""
from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable, Iterable, Iterator
from datetime import datetime
from pathlib import Path

from ..core.errors import FileMoverError, MoveError, SourceMissingError
from ..core.models import (
    UNMAPPED_EXTENSION,
    CategoryMapping,
    FileTask,
    MoveAction,
    MoveOutcome,
    MoveRecord,
)


logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
MAX_COUNTER = 1000


def timestamped_name(name: str, when: datetime, counter: int = 0) -> str:
    """Insert ``_YYYYMMDDHHMMSS`` (and an optional counter) before the extension.

    >>> timestamped_name("report.pdf", datetime(2024, 1, 15, 9, 30, 5))
    'report_20240115093005.pdf'
    """
    path = Path(name)
    base = f"{path.stem}_{when.strftime(TIMESTAMP_FORMAT)}"
    if counter > 0:
        base = f"{base}_{counter}"
    return f"{base}{path.suffix}"


def list_source_files(source_dir: Path, exclude: Iterable[Path] = ()) -> list[Path]:
    """List regular files directly inside source_dir, sorted by name.

    Symlinks and sub-directories are ignored.

    Raises:
        SourceMissingError: If source_dir does not exist.
    """
    if not source_dir.is_dir():
        raise SourceMissingError(source_dir)

    excluded = {p.resolve() for p in exclude}

    try:
        entries = list(source_dir.iterdir())
    except OSError as e:
        raise FileMoverError(f"Cannot read source folder {source_dir}: {e}") from e

    files = [
        entry for entry in entries
        if not entry.is_symlink()
        and entry.is_file()
        and entry.resolve() not in excluded
    ]
    return sorted(files, key=lambda p: p.name)


def _copy_exclusive(source: Path, target: Path) -> None:
    """Copy source to a target that must not exist yet."""
    with open(source, "rb") as src:
        # "x" fails if the name was taken since the collision check
        dst = open(target, "xb")
        try:
            with dst:
                shutil.copyfileobj(src, dst)
            shutil.copystat(source, target)
        except OSError:
            target.unlink(missing_ok=True)
            raise


def transfer_file(source: Path, target: Path) -> None:
    """Move source to target without ever overwriting target.

    On one volume a hard link is made under the new name and the old name
    removed. Where hard links are not possible (another device, a file
    system without links) the content is copied into a new exclusive
    file. Either way a failure leaves no second copy behind.

    Raises:
        FileExistsError: If target appeared concurrently.
        OSError: On any other I/O or permission problem.
    """
    try:
        os.link(source, target)
    except FileExistsError:
        raise
    except OSError:
        _copy_exclusive(source, target)

    try:
        source.unlink()
    except OSError:
        target.unlink(missing_ok=True)
        raise


class CollisionSafeMover:
    """Moves classified files into their category folder.

    Collisions are checked against the live file system right before each
    move, so two same-named files in one run never end up on the same name.
    """

    def __init__(
        self,
        destination_root: Path,
        mapping: CategoryMapping,
        clock: Callable[[], datetime] = datetime.now,
        dry_run: bool = False,
    ):
        """Initialize mover.

        Args:
            destination_root: Root holding the category folders.
            mapping: Extension -> category lookup.
            clock: Source of timestamps for renames and records.
            dry_run: If True, compute destinations without moving.
        """
        self._destination_root = destination_root
        self._mapping = mapping
        self._clock = clock
        self._dry_run = dry_run

    def classify(self, path: Path) -> FileTask:
        task = FileTask(path=path)
        task.category = self._mapping.lookup(task.extension)
        return task

    def resolve_destination(self, folder: Path, name: str) -> tuple[Path, bool]:
        """Pick a free destination path in folder.

        Returns:
            (path, renamed) where renamed tells whether a timestamped name
            was needed.
        """
        naive = folder / name
        if not naive.exists():
            return naive, False

        now = self._clock()
        for counter in range(MAX_COUNTER):
            candidate = folder / timestamped_name(name, now, counter)
            if not candidate.exists():
                return candidate, True

        raise MoveError(name, f"no free name left in {folder}")

    def move_one(self, task: FileTask) -> MoveOutcome:
        """Move a single file. Per-file failures become ERROR outcomes."""
        if task.category is None:
            task.category = self._mapping.lookup(task.extension)

        if task.category is None:
            logger.debug(
                "No folder mapping found for file extension %s, skipping %s",
                task.extension or "(none)", task.name,
            )
            return MoveOutcome(task=task, action=MoveAction.SKIPPED, reason=UNMAPPED_EXTENSION)

        folder = self._destination_root / task.category
        target = None
        try:
            target, renamed = self.resolve_destination(folder, task.name)

            if self._dry_run:
                logger.debug("Would move %s to %s", task.name, target)
                return MoveOutcome(task=task, action=MoveAction.PLANNED, destination=target)

            transfer_file(task.path, target)
        except FileExistsError:
            reason = f"destination {target} appeared during the move"
            logger.debug("Error moving file %s: %s", task.name, reason)
            return MoveOutcome(task=task, action=MoveAction.ERROR, destination=target, reason=reason)
        except MoveError as e:
            logger.debug(str(e))
            return MoveOutcome(task=task, action=MoveAction.ERROR, destination=target, reason=e.reason)
        except OSError as e:
            error = MoveError(task.name, str(e))
            logger.debug(str(error))
            return MoveOutcome(task=task, action=MoveAction.ERROR, destination=target, reason=error.reason)

        record = MoveRecord(
            file_name=task.name,
            category=task.category,
            source_path=task.path.parent,
            destination_path=target,
            created_at=self._clock(),
        )

        if renamed:
            logger.debug("Moved and renamed %s to %s", task.name, target)
            action = MoveAction.RENAMED
        else:
            logger.debug("Moved %s to %s", task.name, folder)
            action = MoveAction.MOVED

        return MoveOutcome(task=task, action=action, destination=target, record=record)

    def move_all(self, paths: Iterable[Path]) -> Iterator[MoveOutcome]:
        """Classify and move each path in order."""
        for path in paths:
            yield self.move_one(self.classify(path))
