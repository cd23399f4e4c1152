"""Utility helpers for working with corpus files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, List

from brainindex.config import ELIGIBLE_EXTENSIONS
from brainindex.errors import DirectoryNotFound

LOGGER = logging.getLogger(__name__)


def is_eligible(path: Path, extensions: Iterable[str] = ELIGIBLE_EXTENSIONS) -> bool:
    return path.suffix.lower() in tuple(extensions)


def iter_eligible_files(
    directory: Path, extensions: Iterable[str] = ELIGIBLE_EXTENSIONS
) -> Iterator[Path]:
    """Yield corpus files directly inside ``directory``, raising if it is missing."""
    directory = Path(directory)
    if not directory.is_dir():
        raise DirectoryNotFound(directory)

    extensions = tuple(ext.lower() for ext in extensions)
    for child in directory.iterdir():
        if child.is_file() and is_eligible(child, extensions):
            yield child


def list_eligible_files(
    directory: Path, extensions: Iterable[str] = ELIGIBLE_EXTENSIONS
) -> List[Path]:
    """List corpus files in a category directory, sorted by name.

    A missing or unreadable directory yields an empty list.
    """
    try:
        return sorted(iter_eligible_files(directory, extensions), key=lambda child: child.name)
    except DirectoryNotFound as exc:
        LOGGER.warning("%s", exc)
    except OSError as exc:
        LOGGER.warning("Error scanning %s: %s", directory, exc)
    return []
