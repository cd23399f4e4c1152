"""Core brain index data models."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List

CATEGORIES = ("apis", "docs", "concepts")


def to_json_text(value: Any) -> str:
    """Serialize a nested value to compact JSON."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def scalar_text(value: Any) -> str:
    """Render a scalar the way it reads in the source JSON."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return to_json_text(value)
    return str(value)


class Record(Mapping[str, Any]):
    """Schema-light view over one JSON object from a corpus file.

    Field presence follows JSON truthiness: ``None``, ``""``, ``0`` and
    ``false`` count as absent, empty arrays and objects count as present.
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, Any] | None = None) -> None:
        self._fields: Dict[str, Any] = dict(fields or {})

    def __getitem__(self, key: str) -> Any:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"Record({self._fields!r})"

    def has(self, name: str) -> bool:
        value = self._fields.get(name)
        if value is None or value is False:
            return False
        if isinstance(value, str):
            return value != ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return value != 0
        return True

    def get_field(self, name: str) -> Any | None:
        """Return the field value, or ``None`` when the field is absent."""
        if not self.has(name):
            return None
        return self._fields[name]

    def get_text(self, name: str) -> str | None:
        """Return the field as a string, joining arrays with spaces."""
        value = self.get_field(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(scalar_text(item) for item in value)
        return scalar_text(value)

    def identifier(self) -> Any | None:
        for name in ("id", "name", "title"):
            value = self.get_field(name)
            if value is not None:
                return value
        return None

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._fields)

    def annotated(self, source: Path) -> Dict[str, Any]:
        """Copy of the record tagged with the file it came from."""
        return {**self._fields, "_source": str(source)}


@dataclass(slots=True)
class SourceFile:
    """Metadata describing one indexed corpus file."""

    file: str
    path: Path
    category: str
    size: int
    records: int
    indexed_at: str
    records_indexed: List[Any] = field(default_factory=list)


@dataclass(slots=True)
class CategorySnapshot:
    """Posting lists and file metadata for one category."""

    keywords: Dict[str, List[str]] = field(default_factory=dict)
    files: Dict[str, SourceFile] = field(default_factory=dict)

    def add_posting(self, keyword: str, file_name: str) -> None:
        postings = self.keywords.setdefault(keyword, [])
        if file_name not in postings:
            postings.append(file_name)

    @property
    def total_records(self) -> int:
        return sum(entry.records for entry in self.files.values())


@dataclass(slots=True)
class IndexSnapshot:
    """Complete index state as published by a rebuild."""

    categories: Dict[str, CategorySnapshot] = field(
        default_factory=lambda: {category: CategorySnapshot() for category in CATEGORIES}
    )
    ready: bool = False
    rebuilt_at: str | None = None

    @property
    def unique_keywords(self) -> int:
        return sum(len(snapshot.keywords) for snapshot in self.categories.values())
