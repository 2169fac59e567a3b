"""Company mention extraction, relevance scoring and result ordering."""

from __future__ import annotations

import re
from functools import cmp_to_key
from typing import Any, Iterable, Optional, Sequence

from classify_items.models import KnownCompany, RelevanceScore
from classify_items.tables import load_company_roster
from common.datetime import parse_published_date
from fetch_feeds.models import AUTHORITATIVE_KINDS, FeedKind

AUTHORITATIVE_SCORE = 200
TITLE_NAME_SCORE = 100
DESCRIPTION_NAME_SCORE = 50
TITLE_VARIATION_SCORE = 80
DESCRIPTION_VARIATION_SCORE = 40
REPEAT_MENTION_SCORE = 10


def extract_company_mentions(text: str, roster: Optional[Sequence[KnownCompany]] = None) -> list[str]:
    """Names of roster companies mentioned in `text`, in roster order, each once."""
    if roster is None:
        roster = load_company_roster()

    lower_text = text.lower()
    mentions: list[str] = []
    for company in roster:
        if company.name in mentions:
            continue
        if any(alias in lower_text for alias in company.aliases):
            mentions.append(company.name)
    return mentions


def _count_occurrences(needle: str, haystack: str) -> int:
    return len(re.findall(re.escape(needle), haystack))


def calculate_relevance_score(item: Any, companies: Iterable[Any]) -> RelevanceScore:
    """Score an item against tracked companies.

    `item` needs title, description, feed_kind and source_name; each company
    needs name and variations. Items from an issuer's own IR or filings feed
    score 200 for that issuer without any text match. Otherwise the company
    with the highest positive score wins and ties keep the earlier company.
    """
    companies = list(companies)
    title = item.title.lower()
    description = item.description.lower()

    if FeedKind(item.feed_kind) in AUTHORITATIVE_KINDS:
        source_name = item.source_name.lower()
        for company in companies:
            if company.name.lower() == source_name:
                return RelevanceScore(score=AUTHORITATIVE_SCORE, matched_company=company.name)

    max_score = 0
    matched_company = None

    for company in companies:
        name = company.name.lower()
        company_score = 0

        if name in title:
            company_score += TITLE_NAME_SCORE
        if name in description:
            company_score += DESCRIPTION_NAME_SCORE

        for variation in company.variations:
            variation = variation.lower()
            if variation in title:
                company_score += TITLE_VARIATION_SCORE
            if variation in description:
                company_score += DESCRIPTION_VARIATION_SCORE

        # A single mention adds nothing; no mention subtracts one step.
        mentions = _count_occurrences(name, title) + _count_occurrences(name, description)
        company_score += (mentions - 1) * REPEAT_MENTION_SCORE

        if company_score > max_score:
            max_score = company_score
            matched_company = company.name

    return RelevanceScore(score=max_score, matched_company=matched_company)


def _compare_items(a: Any, b: Any) -> int:
    score_a = a.relevance_score or 0
    score_b = b.relevance_score or 0
    if score_a != score_b:
        return score_b - score_a

    date_a = parse_published_date(a.published_at)
    date_b = parse_published_date(b.published_at)
    if date_a is None or date_b is None:
        return 0
    if date_a == date_b:
        return 0
    return -1 if date_a > date_b else 1


def sort_by_relevance_and_date(items: Iterable[Any]) -> list:
    """Highest relevance first, then newest first. Unparsable dates compare equal."""
    return sorted(items, key=cmp_to_key(_compare_items))
