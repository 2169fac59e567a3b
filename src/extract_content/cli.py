"""CLI for extracting article content from news links."""

from __future__ import annotations

import asyncio
import json
import logging
import sys

from dotenv import load_dotenv

from common.cli_helpers import save_records, setup_logging
from common.config import get_config, load_config, set_config
from common.serialization import serialize_dataclass
from extract_content.extract_google_news import batch_extract_articles, get_default_monitor
from extract_content.helpers import parse_extract_content_args
from resolve_redirects.helpers import build_resolver

load_dotenv()

logger = logging.getLogger(__name__)


def main() -> None:
    args = parse_extract_content_args()
    setup_logging(args.verbose)

    set_config(load_config(args.config))
    config = get_config().extract
    monitor = get_default_monitor()

    results = asyncio.run(
        batch_extract_articles(
            args.urls,
            resolver=build_resolver(),
            monitor=monitor,
            concurrency=args.concurrency,
            timeout=config.request_timeout,
            retries=config.retries,
        )
    )

    for result in results:
        if args.format == "json":
            print(json.dumps(serialize_dataclass(result), ensure_ascii=False))
        elif not result.success:
            print(f"{result.original_url}\tFAILED\t{result.error}")
        elif args.format == "html":
            print(result.html_content or result.content)
        else:
            print(result.text_content or "")

    if args.health:
        health = monitor.health_check()
        logger.info(
            "Extraction health: %s (success rate %.0f%%, avg %.0f ms)",
            health.status.value,
            health.metrics.success_rate * 100,
            health.metrics.average_total_ms,
        )
        for recommendation in health.insights.recommendations:
            logger.info("Recommendation: %s", recommendation)

    save_records(results, "extracted_articles", args.load_s3, args.load_local)

    if not any(result.success for result in results):
        sys.exit(1)


if __name__ == "__main__":
    main()
