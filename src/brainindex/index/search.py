"""Keyword search over the inverted index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from brainindex.errors import UnknownCategory
from brainindex.index.storage import IndexStore
from brainindex.models import CATEGORIES
from brainindex.utils.text import extract_keywords


@dataclass(slots=True)
class SearchResult:
    category: str
    file: str
    matches: int
    relevance: float


@dataclass(slots=True)
class KeywordHit:
    category: str
    keyword: str
    files: int
    file_names: List[str]


@dataclass(slots=True)
class QueryResult:
    """Ranked results for a query plus the keywords that were looked up."""

    keywords: List[str]
    results: List[SearchResult] = field(default_factory=list)


def resolve_categories(category: str | None) -> Tuple[str, ...]:
    if category is None:
        return CATEGORIES
    if category not in CATEGORIES:
        raise UnknownCategory(category)
    return (category,)


class Searcher:
    """High-level API to query the index store."""

    def __init__(self, store: IndexStore, *, query_keyword_limit: int = 10) -> None:
        self.store = store
        self.query_keyword_limit = query_keyword_limit

    def search_keyword(self, keyword: str, category: str | None = None) -> List[KeywordHit]:
        categories = resolve_categories(category)
        snapshot = self.store.current()
        if not snapshot.ready:
            return []

        keyword = keyword.lower()
        hits: List[KeywordHit] = []
        for name in categories:
            files = list(snapshot.categories[name].keywords.get(keyword, []))
            hits.append(KeywordHit(category=name, keyword=keyword, files=len(files), file_names=files))
        return hits

    def search_multiple(self, keywords: Sequence[str], category: str | None = None) -> QueryResult:
        """Rank files by how many of ``keywords`` they contain.

        Ties keep the order in which each (category, file) pair was first
        seen, so the same query always yields the same ordering.
        """
        categories = resolve_categories(category)
        snapshot = self.store.current()
        if not snapshot.ready or not keywords:
            return QueryResult(keywords=list(keywords))

        counts: Dict[Tuple[str, str], int] = {}
        for keyword in keywords:
            keyword = keyword.lower()
            for name in categories:
                for file_name in snapshot.categories[name].keywords.get(keyword, []):
                    key = (name, file_name)
                    counts[key] = counts.get(key, 0) + 1

        total = len(keywords)
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        results = [
            SearchResult(
                category=name,
                file=file_name,
                matches=count,
                relevance=count / total * 100,
            )
            for (name, file_name), count in ranked
        ]
        return QueryResult(keywords=list(keywords), results=results)

    def search_by_free_text(self, query: str, category: str | None = None) -> QueryResult:
        """Extract keywords from free text and run a multi-keyword search.

        A query with no usable keywords returns an empty keyword list and
        no results.
        """
        keywords = extract_keywords(query, self.query_keyword_limit)
        if not keywords:
            resolve_categories(category)
            return QueryResult(keywords=[])
        return self.search_multiple(keywords, category)

    def find_similar(self, keyword: str, category: str = "apis", limit: int = 5) -> List[str]:
        """First ``limit`` files posted under ``keyword``."""
        snapshot = self.store.current()
        if not snapshot.ready:
            return []
        resolve_categories(category)
        return list(snapshot.categories[category].keywords.get(keyword.lower(), [])[:limit])
