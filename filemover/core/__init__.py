"""Core domain models, settings, errors and protocols."""
from .protocols import MoveHistoryStore, RunReporter
from .models import (
    CategoryMapping,
    FileTask,
    HistoryReport,
    MoveAction,
    MoveOutcome,
    MoveRecord,
    RunSummary,
)
from .config import DuplicateExtensionPolicy, MoverSettings, load_settings
from .errors import (
    FileMoverError,
    ConfigurationError,
    ProvisioningError,
    SourceMissingError,
    MoveError,
    HistoryWriteError,
)

__all__ = [
    # Protocols
    "MoveHistoryStore",
    "RunReporter",
    # Models
    "CategoryMapping",
    "FileTask",
    "HistoryReport",
    "MoveAction",
    "MoveOutcome",
    "MoveRecord",
    "RunSummary",
    # Config
    "DuplicateExtensionPolicy",
    "MoverSettings",
    "load_settings",
    # Errors
    "FileMoverError",
    "ConfigurationError",
    "ProvisioningError",
    "SourceMissingError",
    "MoveError",
    "HistoryWriteError",
]
