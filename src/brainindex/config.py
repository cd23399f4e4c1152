"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from brainindex.models import CATEGORIES

ROOT_ENV_VAR = "BRAIN_DIR"
ELIGIBLE_EXTENSIONS = (".json", ".cbor", ".bin")


def _get_default_root() -> Path:
    """Get the corpus root, honouring the ``BRAIN_DIR`` override."""
    env_root = os.environ.get(ROOT_ENV_VAR)
    if env_root:
        return Path(env_root)
    return Path("data/brain")


@dataclass(slots=True)
class AppConfig:
    root: Path | None = None
    keyword_limit: int = 20
    query_keyword_limit: int = 10
    fallback_limit: int = 20
    max_age_ms: int = 3_600_000

    def __post_init__(self) -> None:
        if self.root is None:
            self.root = _get_default_root()

    def resolve_root(self, base_dir: Path | None = None) -> Path:
        if self.root is None:
            self.root = _get_default_root()
        if Path(self.root).is_absolute() or base_dir is None:
            return Path(self.root)
        return base_dir / self.root

    def category_dirs(self, base_dir: Path | None = None) -> dict[str, Path]:
        root = self.resolve_root(base_dir)
        return {category: root / category for category in CATEGORIES}
