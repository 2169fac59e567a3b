"""Helper functions for poll_releases CLI."""

from __future__ import annotations

import argparse
from typing import Sequence

from classify_items.models import Company
from common.cli_helpers import add_common_args
from common.config import CompanyConfig, get_config
from fetch_feeds.helpers import usable_feeds
from poll_releases.poll_releases import PollJob, make_feed_fetcher
from poll_releases.ports import ContentStore, PollLogStore


def to_companies(configured: Sequence[CompanyConfig]) -> list[Company]:
    '''Convert config entries to the Company records the poll job works on.'''

    return [Company(id=entry.id, name=entry.name, variations=list(entry.variations)) for entry in configured]


def build_poll_job(store: ContentStore, log_store: PollLogStore) -> PollJob:
    '''Poll job fetching the configured feeds with the configured pacing.'''

    config = get_config()
    return PollJob(
        store,
        log_store,
        make_feed_fetcher(
            feeds=usable_feeds(config.feeds.feeds) or None,
            timeout=config.feeds.request_timeout,
            user_agent=config.feeds.user_agent,
        ),
        company_delay=config.poll.company_delay_seconds,
        summary_chars=config.poll.summary_chars,
    )


def parse_poll_releases_args() -> argparse.Namespace:
    '''Parse CLI arguments for poll_releases.'''

    parser = argparse.ArgumentParser(description="Poll RSS feeds for tracked companies and store new releases.")
    parser.add_argument("--user-id", default="local", help="Owner of the stored releases and poll logs.")
    parser.add_argument("--company-id", default=None, help="Poll only this company id.")
    parser.add_argument("--cleanup", action="store_true", help="Delete releases past the retention window.")
    add_common_args(parser)
    return parser.parse_args()
