"""Keyword/pattern tagging of finance and fintech content."""

from typing import Optional

from classify_items.models import FintechCategory, FintechDetection
from classify_items.tables import load_fintech_keywords

CATEGORY_WEIGHT = 10
MATCH_WEIGHT = 5
MAX_MATCH_BONUS = 50
MAX_SCORE = 100


def detect_fintech_content(title: str, content: str) -> FintechDetection:
    """Tag `title + content` with fintech categories and a 0-100 relevance score.

    Each keyword contained in the text counts once; each regex pattern counts
    once per match. A category is present when it has at least one hit.
    """
    full_text = f"{title} {content}".lower()
    categories: list[FintechCategory] = []
    matched_keywords: dict[str, None] = {}
    match_count = 0

    for keyword_set in load_fintech_keywords():
        category_matches = 0

        for keyword in keyword_set.keywords:
            if keyword in full_text:
                category_matches += 1
                matched_keywords[keyword] = None

        for pattern in keyword_set.patterns:
            for match in pattern.finditer(full_text):
                category_matches += 1
                matched_keywords[match.group(0)] = None

        if category_matches > 0:
            categories.append(keyword_set.category)
            match_count += category_matches

    category_bonus = len(categories) * CATEGORY_WEIGHT
    match_bonus = min(match_count * MATCH_WEIGHT, MAX_MATCH_BONUS)

    return FintechDetection(
        is_fintech=bool(categories),
        categories=categories,
        relevance_score=min(category_bonus + match_bonus, MAX_SCORE),
        matched_keywords=list(matched_keywords),
    )


def is_fintech_content(title: str, content: str) -> bool:
    return detect_fintech_content(title, content).is_fintech


def get_primary_fintech_category(title: str, content: str) -> Optional[FintechCategory]:
    """First matching category in table order, or None."""
    categories = detect_fintech_content(title, content).categories
    return categories[0] if categories else None
