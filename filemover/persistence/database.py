"""SQLite-based move history."""
from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from ..core.errors import HistoryWriteError
from ..core.models import HistoryReport, MoveRecord


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryRow:
    """A row read back from the FileMoveHistory table."""
    id: int
    create_date: datetime
    file_name: str
    file_type: str
    source_path: str
    destination_path: str


class SQLiteMoveHistory:
    """Append-only move history on SQLite.

    Every insert is committed on its own, so one failing record never takes
    earlier or later ones with it.
    """

    def __init__(self, db_path: Union[Path, str]):
        """Open (and create if needed) the history database.

        Args:
            db_path: Path to SQLite database file, or ``":memory:"``.

        Raises:
            HistoryWriteError: If the database cannot be opened.
        """
        self._db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None
        self._init_database()

    @property
    def db_path(self) -> Union[Path, str]:
        return self._db_path

    def _init_database(self) -> None:
        """Create the table if it doesn't exist."""
        try:
            self._conn = sqlite3.connect(str(self._db_path))
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS FileMoveHistory (
                    Id INTEGER PRIMARY KEY AUTOINCREMENT,
                    CreateDate TEXT NOT NULL,
                    FileName TEXT NOT NULL,
                    FileType TEXT NOT NULL,
                    SourcePath TEXT NOT NULL,
                    DestinationPath TEXT NOT NULL
                )
            """)
            self._conn.commit()
        except sqlite3.Error as e:
            self.close()
            raise HistoryWriteError(f"Cannot open move history {self._db_path}: {e}") from e

    def insert(self, record: MoveRecord) -> None:
        """Append one record.

        Raises:
            HistoryWriteError: If the row could not be written.
        """
        if self._conn is None:
            raise HistoryWriteError("Move history is closed")

        try:
            with self._conn:
                self._conn.execute(
                    """
                    INSERT INTO FileMoveHistory
                        (CreateDate, FileName, FileType, SourcePath, DestinationPath)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        record.created_at.isoformat(sep=" ", timespec="seconds"),
                        record.file_name,
                        record.category,
                        str(record.source_path),
                        str(record.destination_path),
                    ),
                )
        except sqlite3.Error as e:
            raise HistoryWriteError(
                f"Cannot record move of {record.file_name}: {e}"
            ) from e

    def record_all(self, records: Iterable[MoveRecord]) -> HistoryReport:
        """Insert each record independently, logging and counting failures."""
        report = HistoryReport()
        for record in records:
            try:
                self.insert(record)
            except HistoryWriteError as e:
                logger.error(str(e))
                report.failed.append((record, str(e)))
            else:
                report.written += 1
        return report

    def recent(self, limit: int = 20) -> list[HistoryRow]:
        """Most recent rows first."""
        assert self._conn is not None
        cursor = self._conn.execute(
            "SELECT * FROM FileMoveHistory ORDER BY Id DESC LIMIT ?",
            (limit,),
        )
        return [self._row_to_history(row) for row in cursor.fetchall()]

    def count(self) -> int:
        assert self._conn is not None
        return self._conn.execute("SELECT COUNT(*) FROM FileMoveHistory").fetchone()[0]

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def _row_to_history(self, row: sqlite3.Row) -> HistoryRow:
        return HistoryRow(
            id=row["Id"],
            create_date=datetime.fromisoformat(row["CreateDate"]),
            file_name=row["FileName"],
            file_type=row["FileType"],
            source_path=row["SourcePath"],
            destination_path=row["DestinationPath"],
        )

    def __enter__(self) -> "SQLiteMoveHistory":
        return self

    def __exit__(self, *args) -> None:
        self.close()
