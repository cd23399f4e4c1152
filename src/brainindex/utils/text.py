"""Keyword extraction helpers shared by the indexer and the query planner."""

from __future__ import annotations

import re
from typing import Any, List

from brainindex.models import Record, scalar_text, to_json_text

STOPWORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "is", "are", "was", "were",
        "be", "been", "being", "have", "has", "had", "do", "does", "did",
        "will", "would", "could", "should", "may", "might", "must", "can",
        "in", "on", "at", "to", "for", "of", "with", "by", "from", "up",
        "about", "into", "through", "during", "before", "after", "above",
        "below", "between", "under", "along", "following", "behind",
        "beyond", "plus", "this", "that", "these", "those", "i", "you",
        "he", "she", "it", "we", "they", "what", "which", "who", "when",
        "where", "why", "how", "all", "each", "every", "both", "few",
        "more", "most", "some", "such", "no", "nor", "not", "only",
        "own", "same", "so", "than", "too", "very", "s", "t",
    }
)

# Order matters: keyword truncation keeps the earliest tokens.
TEXT_FIELDS = (
    "name",
    "title",
    "description",
    "summary",
    "body",
    "content",
    "definition",
    "examples",
    "tags",
    "keywords",
    "group",
    "domain",
    "category",
    "path",
    "endpoint",
)

_TOKEN_RE = re.compile(r"\w+", re.ASCII)


def _field_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return " ".join(scalar_text(item) for item in value)
    if isinstance(value, dict):
        return to_json_text(value)
    return None


def extract_text(record: Record) -> str:
    """Concatenate the searchable fields of a record.

    Numbers and booleans are not text and are ignored here, even on
    fields such as ``name``.
    """
    texts: List[str] = []
    for name in TEXT_FIELDS:
        text = _field_text(record.get_field(name))
        if text is not None:
            texts.append(text)
    return " ".join(texts)


def extract_keywords(text: Any, limit: int = 20) -> List[str]:
    """Return the first ``limit`` non-stopword tokens longer than two chars.

    Tokens are kept in order of appearance, duplicates included; this is a
    prefix of the text, not a frequency ranking.
    """
    if not text or not isinstance(text, str):
        return []

    keywords: List[str] = []
    for token in _TOKEN_RE.findall(text.lower()):
        if len(token) <= 2 or token in STOPWORDS:
            continue
        if len(keywords) >= limit:
            break
        keywords.append(token)
    return keywords
