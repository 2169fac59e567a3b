"""CLI for fetching and ranking press releases."""

from __future__ import annotations

import asyncio
import json
import logging
import sys

from dotenv import load_dotenv

from common.cli_helpers import parse_company_names, save_records, setup_logging
from common.config import load_config, set_config
from common.serialization import serialize_dataclass
from fetch_feeds.helpers import fetch_configured_releases, parse_fetch_feeds_args
from fetch_feeds.models import FeedCheckResult
from fetch_feeds.validate import check_feed

load_dotenv()

logger = logging.getLogger(__name__)


async def _check_feeds(urls: list[str]) -> list[FeedCheckResult]:
    return [await check_feed(url) for url in urls]


def main() -> None:
    args = parse_fetch_feeds_args()
    setup_logging(args.verbose)

    set_config(load_config(args.config))

    if args.test_url:
        checks = asyncio.run(_check_feeds(args.test_url))
        for check in checks:
            print(json.dumps(serialize_dataclass(check), ensure_ascii=False))
        if not all(check.valid for check in checks):
            sys.exit(1)
        return

    aggregated = asyncio.run(fetch_configured_releases(parse_company_names(args.companies)))

    failed = [result for result in aggregated.feed_results if not result.success]
    logger.info(
        "%d relevant items from %d unique items (%d duplicates removed, %d feeds failed)",
        aggregated.filtered_items,
        aggregated.total_items,
        aggregated.metrics.duplicates_removed,
        len(failed),
    )
    for index, item in enumerate(aggregated.items[: args.top], start=1):
        logger.info(
            "%d. %s [%s] (score: %d): %.60s",
            index, item.matched_company, item.feed_name, item.relevance_score, item.title,
        )

    if not aggregated.items:
        logger.warning("No relevant items found")
        return

    save_records(aggregated.items, "feed_items", args.load_s3, args.load_local)


if __name__ == "__main__":
    main()
