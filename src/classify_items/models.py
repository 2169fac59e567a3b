"""Data models for classify_items pipeline stage."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class FintechCategory(str, Enum):
    FUNDING = "funding"
    BANKING = "banking"
    PAYMENTS = "payments"
    CRYPTO = "crypto"
    LENDING = "lending"
    REGULATORY = "regulatory"
    MARKETS = "markets"
    WEALTHTECH = "wealthtech"
    INSURTECH = "insurtech"
    REGTECH = "regtech"


@dataclass
class Company:
    """A tracked company as owned by the user-management system."""
    id: str
    name: str
    variations: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class KnownCompany:
    """Roster entry used for mention extraction."""
    name: str
    aliases: tuple[str, ...]


@dataclass(frozen=True)
class FintechDetection:
    is_fintech: bool
    categories: list[FintechCategory]
    relevance_score: int
    matched_keywords: list[str]


@dataclass(frozen=True)
class RelevanceScore:
    score: int
    matched_company: Optional[str]
