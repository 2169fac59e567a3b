"""Helper functions for fetch_feeds CLI."""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import httpx

from common.cli_helpers import add_common_args
from common.config import CompanyConfig, FeedConfig, get_config
from fetch_feeds.fetch_feeds import fetch_releases
from fetch_feeds.models import AggregatedFeeds, FeedDescriptor
from fetch_feeds.sources import feeds_from_config
from fetch_feeds.validate import validate_feed_entry

logger = logging.getLogger(__name__)


def select_companies(configured: Sequence[CompanyConfig], names: list[str]) -> list[CompanyConfig]:
    '''Pick the configured companies named on the command line (all when none are named).'''

    if not names:
        return list(configured)

    by_name = {company.name.lower(): company for company in configured}
    selected = []
    for name in names:
        company = by_name.get(name.lower())
        if company is None:
            logger.warning("Unknown company: %s", name)
            continue
        selected.append(company)

    if not selected:
        valid = ", ".join(sorted(company.name for company in configured))
        raise ValueError(f"No valid companies provided. Valid companies: {valid}")
    return selected


def usable_feeds(entries: Sequence[FeedConfig]) -> list[FeedDescriptor]:
    '''Descriptors for the configured feed entries that pass validation. Invalid ones are logged and dropped.'''

    usable = []
    for entry in entries:
        errors = validate_feed_entry(entry.url, entry.display_name or entry.source_name, entry.kind)
        if errors:
            logger.warning("Skipping configured feed %s: %s", entry.url, "; ".join(errors))
            continue
        usable.append(entry)
    return feeds_from_config(usable)


async def fetch_configured_releases(
    company_names: list[str],
    client: Optional[httpx.AsyncClient] = None,
) -> AggregatedFeeds:
    '''Fetch releases for the named companies with the feeds and HTTP settings of the loaded config.'''

    config = get_config()
    companies = select_companies(config.companies, company_names)
    return await fetch_releases(
        companies,
        feeds=usable_feeds(config.feeds.feeds) or None,
        client=client,
        timeout=config.feeds.request_timeout,
        user_agent=config.feeds.user_agent,
    )


def parse_fetch_feeds_args() -> argparse.Namespace:
    '''Parse CLI arguments for fetch_feeds.'''

    parser = argparse.ArgumentParser(description="Fetch, score and rank press releases from RSS feeds.")
    parser.add_argument(
        "--companies",
        default=None,
        help="Comma-separated company names from the config (default: all).",
    )
    parser.add_argument("--top", type=int, default=10, help="Number of top items to log.")
    parser.add_argument(
        "--test-url",
        action="append",
        default=[],
        help="Check a candidate feed URL and report what it serves instead of fetching releases. Repeatable.",
    )
    add_common_args(parser)
    return parser.parse_args()
