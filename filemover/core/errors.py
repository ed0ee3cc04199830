"""Exception hierarchy for a mover run.

Fatal errors (configuration, provisioning, missing source) abort the run
before anything is moved. MoveError and HistoryWriteError are per-item and
only ever end up in the run summary.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class FileMoverError(Exception):
    """Base error for the project."""


class ConfigurationError(FileMoverError):
    """Malformed category/extension configuration or settings file."""

    def __init__(self, message: str, category: Optional[str] = None):
        super().__init__(message)
        self.category = category


class ProvisioningError(FileMoverError):
    """A category directory could not be created."""

    def __init__(self, category: str, path: Path, cause: BaseException):
        super().__init__(f"Cannot create folder for {category!r} at {path}: {cause}")
        self.category = category
        self.path = path
        self.cause = cause


class SourceMissingError(FileMoverError):
    """The source directory does not exist."""

    def __init__(self, path: Path):
        super().__init__(f"Source folder {path} does not exist.")
        self.path = path


class MoveError(FileMoverError):
    """Moving a single file failed."""

    def __init__(self, file_name: str, reason: str):
        super().__init__(f"Error moving file {file_name}: {reason}")
        self.file_name = file_name
        self.reason = reason


class HistoryWriteError(FileMoverError):
    """Persisting a move record failed."""
