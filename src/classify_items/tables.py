"""Loaders for the versioned keyword tables shipped in classify_items/data."""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from classify_items.models import FintechCategory, KnownCompany
from common.config import load_yaml

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"


@dataclass(frozen=True)
class KeywordSet:
    category: FintechCategory
    keywords: tuple[str, ...]
    patterns: tuple[re.Pattern, ...]


@dataclass(frozen=True)
class LanguagePatterns:
    non_english: tuple[re.Pattern, ...]
    english: tuple[re.Pattern, ...]


def _require_version(data: dict, path: Path) -> int:
    version = data.get("version")
    if not isinstance(version, int):
        raise ValueError(f"Keyword table {path} has no integer 'version'")
    return version


@lru_cache(maxsize=None)
def load_fintech_keywords(path: Path = DATA_DIR / "fintech_keywords.yaml") -> tuple[KeywordSet, ...]:
    data = load_yaml(path)
    version = _require_version(data, path)

    keyword_sets = []
    for name, entry in data.get("categories", {}).items():
        keyword_sets.append(
            KeywordSet(
                category=FintechCategory(name),
                keywords=tuple(str(k).lower() for k in entry.get("keywords", [])),
                patterns=tuple(re.compile(p, re.IGNORECASE) for p in entry.get("patterns", [])),
            )
        )

    logger.debug("Loaded fintech keyword table v%d (%d categories)", version, len(keyword_sets))
    return tuple(keyword_sets)


@lru_cache(maxsize=None)
def load_company_roster(path: Path = DATA_DIR / "companies.yaml") -> tuple[KnownCompany, ...]:
    data = load_yaml(path)
    _require_version(data, path)
    return tuple(
        KnownCompany(name=entry["name"], aliases=tuple(str(a).lower() for a in entry["aliases"]))
        for entry in data.get("companies", [])
    )


@lru_cache(maxsize=None)
def load_language_patterns(path: Path = DATA_DIR / "language_patterns.yaml") -> LanguagePatterns:
    data = load_yaml(path)
    _require_version(data, path)
    return LanguagePatterns(
        non_english=tuple(re.compile(p, re.IGNORECASE) for p in data["non_english"].values()),
        english=tuple(re.compile(p, re.IGNORECASE) for p in data["english"].values()),
    )
