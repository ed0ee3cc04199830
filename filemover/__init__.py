"""Sort a folder's files into category folders by extension.

Every move is recorded in an append-only SQLite history.
"""

__version__ = "1.0.0"

# Core exports
from .core.config import MoverSettings, DuplicateExtensionPolicy, load_settings
from .core.models import (
    CategoryMapping,
    FileTask,
    MoveAction,
    MoveOutcome,
    MoveRecord,
    RunSummary,
)
from .core.errors import (
    FileMoverError,
    ConfigurationError,
    ProvisioningError,
    SourceMissingError,
    MoveError,
    HistoryWriteError,
)

# Service exports
from .services.classifier import build_category_mapping
from .services.provisioner import DestinationProvisioner
from .services.mover import CollisionSafeMover
from .services.summary import summarize
from .services.runner import RunResult, run_mover

# Persistence exports
from .persistence.database import SQLiteMoveHistory

# Logging exports
from .logging.rich_logger import RichRunReporter, QuietRunReporter

__all__ = [
    # Core
    "MoverSettings",
    "DuplicateExtensionPolicy",
    "load_settings",
    "CategoryMapping",
    "FileTask",
    "MoveAction",
    "MoveOutcome",
    "MoveRecord",
    "RunSummary",
    "FileMoverError",
    "ConfigurationError",
    "ProvisioningError",
    "SourceMissingError",
    "MoveError",
    "HistoryWriteError",
    # Services
    "build_category_mapping",
    "DestinationProvisioner",
    "CollisionSafeMover",
    "summarize",
    "RunResult",
    "run_mover",
    # Persistence
    "SQLiteMoveHistory",
    # Logging
    "RichRunReporter",
    "QuietRunReporter",
]
