"""Exceptions raised by the brain index."""

from __future__ import annotations

from pathlib import Path


class BrainIndexError(Exception):
    """Base class for brain index errors."""


class DirectoryNotFound(BrainIndexError):
    """A category directory does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Directory not found: {path}")
        self.path = path


class FileParseError(BrainIndexError):
    """A corpus file could not be parsed as JSON."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Could not parse {path}: {reason}")
        self.path = path
        self.reason = reason


class EmptyQuery(BrainIndexError, ValueError):
    """The caller supplied a missing or blank query."""

    def __init__(self) -> None:
        super().__init__("Empty query")


class UnknownCategory(BrainIndexError, ValueError):
    def __init__(self, category: str) -> None:
        super().__init__(f"Unknown category: {category}")
        self.category = category


class IndexNotReady(BrainIndexError):
    """Raised internally when a query arrives before the first rebuild."""
