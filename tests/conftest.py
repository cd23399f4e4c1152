"""Shared fixtures for brain index tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from brainindex.config import AppConfig
from brainindex.service import BrainIndexService


@pytest.fixture
def corpus_root(tmp_path: Path) -> Path:
    """Empty corpus with all three category directories."""
    root = tmp_path / "brain"
    for category in ("apis", "docs", "concepts"):
        (root / category).mkdir(parents=True)
    return root


@pytest.fixture
def write_record(corpus_root: Path) -> Callable[[str, str, Any], Path]:
    """Write a JSON value into ``<root>/<category>/<name>``."""

    def _write(category: str, name: str, data: Any) -> Path:
        path = corpus_root / category / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def service(corpus_root: Path) -> BrainIndexService:
    return BrainIndexService(AppConfig(root=corpus_root))
