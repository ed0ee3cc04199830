"""Build the extension -> category lookup from configuration."""
from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from ..core.config import DuplicateExtensionPolicy
from ..core.errors import ConfigurationError
from ..core.models import CategoryMapping


logger = logging.getLogger(__name__)

# One leading dot, then no further dots, whitespace or path separators.
# Files are looked up by their last suffix only, so ".tar.gz" never matches.
EXTENSION_PATTERN = re.compile(r"^\.[^\s./\\]+$")

# A category folder must sit directly under the destination root
FOLDER_NAME_SEPARATORS = ("/", "\\")
RESERVED_FOLDER_NAMES = {".", ".."}


def check_category_name(category: str) -> None:
    """Reject names that are not a single folder name.

    Raises:
        ConfigurationError: If the name is empty, ``.``/``..`` or holds a
            path separator.
    """
    if not category or not category.strip():
        raise ConfigurationError("Category name must not be empty", category=category)
    if category.strip() in RESERVED_FOLDER_NAMES or any(
        sep in category for sep in FOLDER_NAME_SEPARATORS
    ):
        raise ConfigurationError(
            f"Category {category!r} is not a plain folder name",
            category=category,
        )


def parse_extensions(category: str, extensions: str) -> list[str]:
    """Split a comma-separated extension list into normalized extensions.

    Args:
        category: Category the list belongs to (used in error messages).
        extensions: Raw list such as ``".doc, .DOCX"``.

    Returns:
        Lower-cased extensions with their leading dot.

    Raises:
        ConfigurationError: If the list is empty or holds a malformed entry.
    """
    if extensions is None or not str(extensions).strip():
        raise ConfigurationError(
            f"Category {category!r} has no extensions configured",
            category=category,
        )

    parsed: list[str] = []
    for raw in str(extensions).split(","):
        ext = raw.strip()
        if not ext:
            # Trailing comma
            continue
        if not EXTENSION_PATTERN.match(ext):
            raise ConfigurationError(
                f"Category {category!r} has malformed extension {ext!r} "
                f"(expected a single extension with one leading dot, e.g. '.pdf')",
                category=category,
            )
        parsed.append(ext.lower())

    if not parsed:
        raise ConfigurationError(
            f"Category {category!r} has no extensions configured",
            category=category,
        )
    return parsed


def build_category_mapping(
    categories: Mapping[str, str],
    duplicate_policy: DuplicateExtensionPolicy = DuplicateExtensionPolicy.LAST_WINS,
) -> CategoryMapping:
    """Flatten category -> extensions configuration into a CategoryMapping.

    Args:
        categories: Ordered category name -> comma-separated extensions.
        duplicate_policy: How to treat an extension claimed twice.

    Returns:
        The immutable lookup.

    Raises:
        ConfigurationError: On an empty or malformed category, or a duplicate
            extension under the ERROR policy.
    """
    if not categories:
        raise ConfigurationError("No categories configured")

    mapping: dict[str, str] = {}
    for category, extensions in categories.items():
        check_category_name(category)

        for ext in parse_extensions(category, extensions):
            previous = mapping.get(ext)
            if previous is not None and previous != category:
                if duplicate_policy == DuplicateExtensionPolicy.ERROR:
                    raise ConfigurationError(
                        f"Category {category!r} repeats extension {ext!r} "
                        f"already assigned to {previous!r}",
                        category=category,
                    )
                logger.warning(
                    "Extension %s listed under %r and %r; using %r",
                    ext, previous, category, category,
                )
            mapping[ext] = category

    # A category that lost all its extensions to later ones gets no folder
    owned = set(mapping.values())
    return CategoryMapping(mapping, categories=tuple(c for c in categories if c in owned))
