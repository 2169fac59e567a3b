"""CLI for summarizing a press release."""

from __future__ import annotations

import json
import logging
import sys

from dotenv import load_dotenv

from common.cli_helpers import save_records, setup_logging
from common.config import load_config, set_config
from common.errors import CompletionServiceError
from common.serialization import serialize_dataclass
from summarize_releases.helpers import build_completion_service, parse_summarize_releases_args, read_content
from summarize_releases.summarize import summarize_release

load_dotenv()

logger = logging.getLogger(__name__)


def main() -> None:
    args = parse_summarize_releases_args()
    setup_logging(args.verbose)

    set_config(load_config(args.config))
    service = build_completion_service(args.model)

    try:
        summary = summarize_release(
            args.title,
            read_content(args.content, args.content_file),
            service,
            company_name=args.company_name,
            date=args.date,
        )
    except CompletionServiceError as e:
        logger.error("Summary failed (%s): %s", e.kind.value, e.message)
        print(e.user_message, file=sys.stderr)
        sys.exit(1)

    print(json.dumps(serialize_dataclass(summary), indent=2, ensure_ascii=False))
    save_records([summary], "release_summaries", args.load_s3, args.load_local)


if __name__ == "__main__":
    main()
