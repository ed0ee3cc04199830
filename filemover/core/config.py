"""Settings model for a mover run."""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigurationError


class DuplicateExtensionPolicy(str, Enum):
    """What to do when two categories claim the same extension."""
    LAST_WINS = "last-wins"    # Later category overrides, with a warning
    ERROR = "error"            # Refuse the configuration


DEFAULT_HISTORY_DB_NAME = "file_move_history.sqlite"

DEFAULT_CATEGORIES: dict[str, str] = {
    "Documents": ".doc,.docx,.odt,.rtf",
    "Pdf Files": ".pdf",
    "Excel Files": ".xls,.xlsx,.xlsm,.ods",
    "Csv Files": ".csv",
    "Txt Files": ".txt",
    "Images": ".jpg,.jpeg,.png,.gif,.bmp,.tif,.tiff,.webp",
}


class MoverSettings(BaseModel):
    """Configuration for a mover run.

    All options can also be supplied via CLI flags. CLI flags override
    config file values.
    """
    source_folder: Path = Field(
        ...,
        description="Folder whose files are sorted (not recursed into)"
    )
    destination_folder: Path = Field(
        ...,
        description="Root folder that receives one sub-folder per category"
    )
    history_db: Optional[Path] = Field(
        default=None,
        description="SQLite move history (default: destination_folder/file_move_history.sqlite)"
    )
    categories: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_CATEGORIES),
        description="Category name -> comma-separated extensions, e.g. '.doc,.docx'"
    )
    duplicate_extensions: DuplicateExtensionPolicy = Field(
        default=DuplicateExtensionPolicy.LAST_WINS,
        description="Policy when an extension is listed under several categories"
    )

    @field_validator("source_folder", "destination_folder")
    @classmethod
    def expand_folder(cls, value: Path) -> Path:
        return value.expanduser().resolve()

    @field_validator("history_db")
    @classmethod
    def expand_history_db(cls, value: Optional[Path]) -> Optional[Path]:
        if value is None:
            return None
        return value.expanduser().resolve()

    def resolve_history_db(self) -> Path:
        if self.history_db:
            return self.history_db
        return self.destination_folder / DEFAULT_HISTORY_DB_NAME

    def with_overrides(self, **kwargs) -> "MoverSettings":
        """Create new settings with the non-None values overridden."""
        current = self.model_dump()
        current.update({k: v for k, v in kwargs.items() if v is not None})
        return build_settings(current)


def build_settings(data: dict) -> MoverSettings:
    """Validate raw settings, reporting problems as ConfigurationError."""
    try:
        return MoverSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e


def load_settings(path: Path) -> MoverSettings:
    """Load settings from a JSON file."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e

    try:
        return MoverSettings.model_validate_json(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}") from e
