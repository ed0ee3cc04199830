"""Persistence layer."""
from .database import SQLiteMoveHistory, HistoryRow

__all__ = ["SQLiteMoveHistory", "HistoryRow"]
