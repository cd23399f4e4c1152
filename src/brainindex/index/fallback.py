"""Linear full-text search that bypasses the index."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping

from brainindex.errors import EmptyQuery, UnknownCategory
from brainindex.ingestion.record_loader import read_with_fallback
from brainindex.models import CATEGORIES, Record
from brainindex.utils.files import list_eligible_files

LOGGER = logging.getLogger(__name__)

SEARCH_FIELDS: Dict[str, tuple[str, ...]] = {
    "apis": ("name", "description", "group", "tags", "path", "endpoint"),
    "docs": ("title", "summary", "body", "category", "keywords", "content"),
    "concepts": ("name", "definition", "domain", "examples", "description"),
}

DEFAULT_LIMIT = 20


def record_matches(record: Record, query: str, fields: tuple[str, ...]) -> bool:
    needle = query.lower()
    for name in fields:
        text = record.get_text(name)
        if text is not None and needle in text.lower():
            return True
    return False


class FallbackScanner:
    """Substring scan over every record of every corpus file."""

    def __init__(self, category_dirs: Mapping[str, Path], *, default_limit: int = DEFAULT_LIMIT) -> None:
        self.category_dirs = dict(category_dirs)
        self.default_limit = default_limit

    def search_category(self, category: str, query: str, limit: int | None = None) -> List[Dict[str, Any]]:
        """Return the first ``limit`` matching records in listing order.

        Scanning stops at the limit; later files are never opened.
        """
        if category not in CATEGORIES:
            raise UnknownCategory(category)
        limit = limit or self.default_limit
        directory = self.category_dirs.get(category)
        if directory is None:
            return []

        files = list_eligible_files(directory)
        if not files:
            LOGGER.info("No brain files found for %s in %s", category, directory)
            return []

        fields = SEARCH_FIELDS[category]
        results: List[Dict[str, Any]] = []
        for path in files:
            try:
                for record in read_with_fallback(path):
                    if not record_matches(record, query, fields):
                        continue
                    results.append(record.annotated(path))
                    if len(results) >= limit:
                        return results
            except Exception as exc:
                LOGGER.warning("Error processing brain file %s: %s", path, exc)
        return results

    def search_all(self, query: str, limits: Mapping[str, int] | None = None) -> Dict[str, List[Dict[str, Any]]]:
        if not query or not query.strip():
            raise EmptyQuery()
        limits = limits or {}
        return {category: self.search_category(category, query, limits.get(category)) for category in CATEGORIES}
