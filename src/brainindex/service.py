"""Brain index service: the object the CLI and web app talk to."""

from __future__ import annotations

import logging
import threading
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping

from brainindex.config import AppConfig
from brainindex.errors import IndexNotReady
from brainindex.index.fallback import FallbackScanner
from brainindex.index.freshness import FreshnessChecker
from brainindex.index.indexer import Indexer, RebuildStats
from brainindex.index.search import KeywordHit, Searcher
from brainindex.index.storage import IndexStore
from brainindex.models import CATEGORIES, IndexSnapshot
from brainindex.utils.files import list_eligible_files

LOGGER = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class BrainIndexService:
    """Wires the scanner, indexer, searchers and freshness check together.

    Each instance owns its own index; nothing is shared between instances.
    """

    def __init__(self, config: AppConfig | None = None, *, base_dir: Path | None = None) -> None:
        self.config = config or AppConfig()
        self.root = self.config.resolve_root(base_dir)
        self.category_dirs = self.config.category_dirs(base_dir)
        self.store = IndexStore()
        self.indexer = Indexer(self.category_dirs, self.store, keyword_limit=self.config.keyword_limit)
        self.searcher = Searcher(self.store, query_keyword_limit=self.config.query_keyword_limit)
        self.fallback = FallbackScanner(self.category_dirs, default_limit=self.config.fallback_limit)
        self.freshness = FreshnessChecker(self.category_dirs)
        self._rebuild_lock = threading.Lock()

    @property
    def ready(self) -> bool:
        return self.store.ready

    def rebuild(self) -> RebuildStats:
        with self._rebuild_lock:
            return self.indexer.rebuild()

    def initialize(self) -> RebuildStats:
        """Build the index at startup."""
        return self.rebuild()

    def _ensure_ready(self) -> IndexSnapshot:
        try:
            return self.store.current(require_ready=True)
        except IndexNotReady:
            LOGGER.warning("Index not ready, rebuilding...")
            with self._rebuild_lock:
                if not self.store.ready:
                    self.indexer.rebuild()
            return self.store.current()

    def get_stats(self) -> Dict[str, Any]:
        if not self.store.ready:
            LOGGER.warning("Index not ready")
            return {"ready": False, "message": "Index not initialized"}
        stats = self.store.get_stats()
        stats["updated_at"] = _timestamp()
        return stats

    def search_keyword(self, keyword: str, category: str | None = None) -> List[KeywordHit]:
        self._ensure_ready()
        return self.searcher.search_keyword(keyword, category)

    def find_similar(self, keyword: str, category: str = "apis", limit: int = 5) -> List[str]:
        self._ensure_ready()
        return self.searcher.find_similar(keyword, category, limit)

    def search_indexed(self, query: str, category: str | None = None) -> Dict[str, Any]:
        """Indexed search; a query with no usable keywords returns ``keywords=[]``."""
        self._ensure_ready()
        outcome = self.searcher.search_by_free_text(query, category)
        response: Dict[str, Any] = {
            "results": [asdict(result) for result in outcome.results],
            "query": query,
            "keywords": outcome.keywords,
            "category": category,
        }
        if outcome.keywords:
            response["category"] = category or "all"
            response["timestamp"] = _timestamp()
        return response

    def search_full(self, query: str, limits: Mapping[str, int] | None = None) -> Dict[str, List[Dict[str, Any]]]:
        return self.fallback.search_all(query, limits)

    def check_freshness(self, max_age_ms: int | None = None) -> Dict[str, Any]:
        if not self.store.ready:
            return {"fresh": False, "message": "Index not initialized"}
        if max_age_ms is None:
            max_age_ms = self.config.max_age_ms
        return self.freshness.check(max_age_ms).to_dict()

    def corpus_stats(self) -> Dict[str, Dict[str, Any]]:
        stats: Dict[str, Dict[str, Any]] = {}
        for category in CATEGORIES:
            directory = self.category_dirs[category]
            stats[category] = {
                "files": len(list_eligible_files(directory)),
                "directory": str(directory),
                "exists": directory.exists(),
            }
        return stats
