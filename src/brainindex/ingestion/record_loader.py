"""Corpus file loading.

Every eligible file is decoded as JSON text, whatever its extension:
``.cbor`` and ``.bin`` files are listed by the scanner but no binary
decoder exists, so they only index when they happen to hold JSON.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List

from brainindex.errors import FileParseError
from brainindex.models import Record

LOGGER = logging.getLogger(__name__)


def read_text(path: Path) -> str:
    return Path(path).read_bytes().decode("utf-8", errors="replace")


def records_from_value(data: Any) -> List[Record]:
    """Turn a decoded JSON value into records.

    A top-level array yields one record per object element; scalars and
    nested arrays are not records.
    """
    items = data if isinstance(data, list) else [data]
    return [Record(item) for item in items if isinstance(item, dict)]


def parse_text(text: str, path: Path) -> List[Record]:
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise FileParseError(path, str(exc)) from exc
    return records_from_value(data)


def parse_file(path: Path) -> List[Record]:
    """Parse a corpus file into records, raising FileParseError on bad JSON."""
    try:
        text = read_text(path)
    except OSError as exc:
        raise FileParseError(path, str(exc)) from exc
    return parse_text(text, path)


def read_with_fallback(path: Path) -> List[Record]:
    """Parse a corpus file, wrapping unparsable content as one raw record."""
    try:
        text = read_text(path)
    except OSError as exc:
        LOGGER.warning("Error reading brain file %s: %s", path, exc)
        return []

    try:
        return parse_text(text, path)
    except FileParseError:
        LOGGER.debug("Treating %s as raw text", path)
        return [Record({"raw": text, "path": str(path)})]
