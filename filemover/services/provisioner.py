"""Destination folder provisioning."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from ..core.errors import ProvisioningError


logger = logging.getLogger(__name__)


class DestinationProvisioner:
    """Creates one sub-folder per category under the destination root."""

    def __init__(self, destination_root: Path, dry_run: bool = False):
        """Initialize provisioner.

        Args:
            destination_root: Folder that receives the category folders.
            dry_run: If True, only report what would be created.
        """
        self._destination_root = destination_root
        self._dry_run = dry_run

    @property
    def destination_root(self) -> Path:
        return self._destination_root

    def folder_for(self, category: str) -> Path:
        return self._destination_root / category

    def provision(self, categories: Iterable[str]) -> list[Path]:
        """Ensure every category folder exists.

        Args:
            categories: Category names; duplicates are ignored.

        Returns:
            Folders that were created (or would be, in dry run).

        Raises:
            ProvisioningError: On the first folder that cannot be created.
        """
        created: list[Path] = []

        for category in dict.fromkeys(categories):
            folder = self.folder_for(category)
            if folder.is_dir():
                continue

            if self._dry_run:
                logger.debug("Would create folder: %s", folder)
                created.append(folder)
                continue

            try:
                folder.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ProvisioningError(category, folder, e) from e

            logger.debug("Created folder: %s", folder)
            created.append(folder)

        return created
