"""Gorn package initialization."""

from __future__ import annotations

from .cache import CacheState, CacheStore, PathCache, PathIndex, scan_directory
from .errors import (
    GornError,
    LaunchError,
    MenuUnavailableError,
    SelectionCancelled,
    UnresolvedExecutableError,
)
from .history import HistoryList

__all__ = [
    "__version__",
    "CacheState",
    "CacheStore",
    "GornError",
    "HistoryList",
    "LaunchError",
    "MenuUnavailableError",
    "PathCache",
    "PathIndex",
    "SelectionCancelled",
    "UnresolvedExecutableError",
    "get_version",
    "scan_directory",
]

__version__ = "0.3.0"


def get_version() -> str:
    """Return the current package version."""
    return __version__
