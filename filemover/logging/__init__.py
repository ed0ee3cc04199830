"""Logging package with Rich-based run reporting."""

from .rich_logger import RichRunReporter, QuietRunReporter, configure_logging

__all__ = ["RichRunReporter", "QuietRunReporter", "configure_logging"]
