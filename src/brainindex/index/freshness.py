"""Corpus staleness check based on category directory mtimes."""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Mapping

DEFAULT_MAX_AGE_MS = 3_600_000


@dataclass(slots=True)
class CategoryAge:
    dir_modified_ms: int | None = None
    is_fresh: bool | None = None
    error: str | None = None


@dataclass(slots=True)
class FreshnessReport:
    fresh: bool
    max_age_ms: int
    ages: Dict[str, CategoryAge] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        ages = {
            name: {key: value for key, value in asdict(age).items() if value is not None}
            for name, age in self.ages.items()
        }
        return {"fresh": self.fresh, "max_age_ms": self.max_age_ms, "ages": ages}


class FreshnessChecker:
    """Compares each category directory's mtime against a maximum age.

    Missing directories are left out of the report instead of counting as
    stale. The checker only reports; deciding to rebuild is up to the caller.
    """

    def __init__(self, category_dirs: Mapping[str, Path], *, clock: Callable[[], float] = time.time) -> None:
        self.category_dirs = dict(category_dirs)
        self.clock = clock

    def check(self, max_age_ms: int = DEFAULT_MAX_AGE_MS) -> FreshnessReport:
        now_ms = self.clock() * 1000
        ages: Dict[str, CategoryAge] = {}
        for name, directory in self.category_dirs.items():
            if not Path(directory).exists():
                continue
            try:
                age = now_ms - Path(directory).stat().st_mtime * 1000
            except OSError as exc:
                ages[name] = CategoryAge(error=str(exc))
                continue
            ages[name] = CategoryAge(dir_modified_ms=int(age), is_fresh=age < max_age_ms)

        fresh = all(age.is_fresh is not False for age in ages.values())
        return FreshnessReport(fresh=fresh, max_age_ms=max_age_ms, ages=ages)
