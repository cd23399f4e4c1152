"""In-memory holder for the published index snapshot."""

from __future__ import annotations

import threading
from typing import Any, Dict

from brainindex.errors import IndexNotReady, UnknownCategory
from brainindex.models import CATEGORIES, CategorySnapshot, IndexSnapshot


class IndexStore:
    """Owns the current IndexSnapshot and swaps it atomically.

    Published snapshots are never mutated; a rebuild fills a fresh one and
    hands it to ``publish``.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot = IndexSnapshot()

    @property
    def ready(self) -> bool:
        return self.current().ready

    @property
    def rebuilt_at(self) -> str | None:
        return self.current().rebuilt_at

    def current(self, *, require_ready: bool = False) -> IndexSnapshot:
        with self._lock:
            snapshot = self._snapshot
        if require_ready and not snapshot.ready:
            raise IndexNotReady("Index not initialized")
        return snapshot

    def publish(self, snapshot: IndexSnapshot) -> None:
        with self._lock:
            self._snapshot = snapshot

    def category(self, name: str) -> CategorySnapshot:
        snapshot = self.current()
        try:
            return snapshot.categories[name]
        except KeyError:
            raise UnknownCategory(name) from None

    def get_stats(self) -> Dict[str, Any]:
        snapshot = self.current()
        categories: Dict[str, Any] = {}
        for name in CATEGORIES:
            data = snapshot.categories[name]
            categories[name] = {
                "files": len(data.files),
                "keywords": len(data.keywords),
                "total_records": data.total_records,
                "file_list": list(data.files),
            }
        return {
            "ready": snapshot.ready,
            "rebuilt_at": snapshot.rebuilt_at,
            "categories": categories,
        }
