"""CLI for resolving Google News redirect links."""

from __future__ import annotations

import asyncio
import logging
import sys

from dotenv import load_dotenv

from common.cli_helpers import save_records, setup_logging
from common.config import get_config, load_config, set_config
from resolve_redirects.helpers import build_resolver, parse_resolve_redirects_args, read_urls

load_dotenv()

logger = logging.getLogger(__name__)


def main() -> None:
    args = parse_resolve_redirects_args()
    setup_logging(args.verbose)

    set_config(load_config(args.config))
    config = get_config().resolve
    urls = read_urls(args.urls, args.urls_file)
    if not urls:
        logger.error("No URLs provided")
        sys.exit(2)

    results = asyncio.run(
        build_resolver().batch_resolve(
            urls,
            concurrency=args.concurrency or config.concurrency,
            delay_ms=config.delay_ms if args.delay_ms is None else args.delay_ms,
        )
    )

    for url, result in results.items():
        if result.success:
            print(f"{url}\t{result.final_url}\t{result.method.value}")
        else:
            print(f"{url}\tFAILED\t{result.error}")

    save_records(list(results.values()), "resolved_redirects", args.load_s3, args.load_local)

    if not any(result.success for result in results.values()):
        sys.exit(1)


if __name__ == "__main__":
    main()
