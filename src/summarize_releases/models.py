"""Data models for summarize_releases pipeline stage."""

from dataclasses import dataclass, field
from enum import Enum


class HighlightType(str, Enum):
    FINANCIAL = "financial"
    OPPORTUNITY = "opportunity"
    RISK = "risk"
    STRATEGIC = "strategic"


@dataclass(frozen=True)
class Highlight:
    """A span of the release content; `start`/`end` index into that content."""
    type: HighlightType
    text: str
    start: int
    end: int


@dataclass
class Summary:
    summary: str
    key_points: list[str] = field(default_factory=list)
    highlights: list[Highlight] = field(default_factory=list)
    input_tokens: int = 0
    output_tokens: int = 0
