"""Inverted index build pipeline."""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping

from brainindex.errors import FileParseError
from brainindex.index.storage import IndexStore
from brainindex.ingestion.record_loader import parse_file
from brainindex.models import CATEGORIES, CategorySnapshot, IndexSnapshot, SourceFile
from brainindex.utils.files import list_eligible_files
from brainindex.utils.text import extract_keywords, extract_text

LOGGER = logging.getLogger(__name__)


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(slots=True)
class RebuildStats:
    indexed_files: int = 0
    total_files: int = 0
    unique_keywords: int = 0
    elapsed_ms: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


class Indexer:
    """Builds category snapshots from the corpus and publishes them."""

    def __init__(
        self,
        category_dirs: Mapping[str, Path],
        store: IndexStore,
        *,
        keyword_limit: int = 20,
    ) -> None:
        self.category_dirs = dict(category_dirs)
        self.store = store
        self.keyword_limit = keyword_limit

    def index_file(self, path: Path, category: str, snapshot: CategorySnapshot) -> bool:
        """Add one file to a category snapshot. Returns False when skipped."""
        try:
            records = parse_file(path)
        except FileParseError as exc:
            LOGGER.warning("Could not parse %s, skipping (%s)", path, exc.reason)
            return False

        entry = SourceFile(
            file=path.name,
            path=path,
            category=category,
            size=path.stat().st_size,
            records=len(records),
            indexed_at=_utcnow(),
        )
        snapshot.files[entry.file] = entry

        for record in records:
            for keyword in extract_keywords(extract_text(record), self.keyword_limit):
                snapshot.add_posting(keyword, entry.file)

            record_id = record.identifier()
            if record_id is not None:
                entry.records_indexed.append(record_id)

        LOGGER.debug("Indexed %s (%d records)", path, len(records))
        return True

    def build(self) -> tuple[IndexSnapshot, RebuildStats]:
        """Build a complete snapshot without touching the published one."""
        start = time.monotonic()
        snapshot = IndexSnapshot()
        stats = RebuildStats()

        for category in CATEGORIES:
            directory = self.category_dirs.get(category)
            if directory is None:
                continue
            files = list_eligible_files(directory)
            stats.total_files += len(files)

            for path in files:
                try:
                    indexed = self.index_file(path, category, snapshot.categories[category])
                except Exception as exc:
                    LOGGER.error("Error indexing %s: %s", path, exc)
                    indexed = False
                if indexed:
                    stats.indexed_files += 1

        snapshot.ready = True
        snapshot.rebuilt_at = _utcnow()
        stats.unique_keywords = snapshot.unique_keywords
        stats.elapsed_ms = int((time.monotonic() - start) * 1000)
        return snapshot, stats

    def rebuild(self) -> RebuildStats:
        """Rebuild the index from scratch and publish it."""
        LOGGER.info("Starting index rebuild...")
        snapshot, stats = self.build()
        self.store.publish(snapshot)
        LOGGER.info(
            "Rebuild complete: %d/%d files, %d unique keywords in %dms",
            stats.indexed_files,
            stats.total_files,
            stats.unique_keywords,
            stats.elapsed_ms,
        )
        return stats
