"""Helper functions for extract_content CLI."""

import argparse

from common.cli_helpers import add_common_args


def parse_extract_content_args() -> argparse.Namespace:
    '''Parse CLI arguments for extract_content.'''

    parser = argparse.ArgumentParser(description="Extract article body content from news links.")
    parser.add_argument("urls", nargs="+", help="Article or Google News URLs.")
    parser.add_argument("--format", choices=["text", "html", "json"], default="text",
                        help="Output format for extracted content.")
    parser.add_argument("--concurrency", type=int, default=3)
    parser.add_argument("--health", action="store_true", help="Log a health report after extraction.")
    add_common_args(parser)
    return parser.parse_args()
