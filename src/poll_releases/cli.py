"""CLI for polling press-release feeds into the content store."""

from __future__ import annotations

import asyncio
import logging
import sys

from dotenv import load_dotenv

from common.cli_helpers import save_records, setup_logging
from common.config import get_config, load_config, set_config
from poll_releases.helpers import build_poll_job, parse_poll_releases_args, to_companies
from poll_releases.memory_store import InMemoryContentStore, InMemoryPollLogStore
from poll_releases.poll_releases import cleanup_old_releases

load_dotenv()

logger = logging.getLogger(__name__)


async def _run(args) -> tuple:
    config = get_config()
    store = InMemoryContentStore()
    log_store = InMemoryPollLogStore()

    job = build_poll_job(store, log_store)
    summary = await job.poll_user(args.user_id, to_companies(config.companies), args.company_id)

    if args.cleanup:
        await cleanup_old_releases(store, args.user_id, days=config.poll.retention_days)

    poll_logs = await log_store.recent_poll_logs(args.user_id)
    return summary, poll_logs


def main() -> None:
    args = parse_poll_releases_args()
    setup_logging(args.verbose)

    set_config(load_config(args.config))

    if not get_config().companies:
        logger.warning("No companies configured")
        return

    try:
        summary, poll_logs = asyncio.run(_run(args))
    except ValueError as e:
        logger.error("%s", e)
        sys.exit(2)

    for result in summary.results:
        if result.success:
            logger.info(
                "%s: %d found, %d new, %d duplicates, %d failed to save",
                result.company_name, result.releases_found, result.releases_new,
                result.releases_duplicate, result.releases_failed,
            )
        else:
            logger.error("%s: %s", result.company_name, result.error)

    save_records([summary], "poll_summaries", args.load_s3, args.load_local)
    save_records(poll_logs, "poll_logs", args.load_s3, args.load_local)

    if summary.errors and summary.errors == summary.companies_processed:
        sys.exit(1)


if __name__ == "__main__":
    main()
