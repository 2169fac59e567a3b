"""Helper functions for resolve_redirects CLI."""

from __future__ import annotations

import argparse
from pathlib import Path

from common.cli_helpers import add_common_args
from common.config import get_config
from resolve_redirects.cache import RedirectCache
from resolve_redirects.resolve_redirects import GoogleNewsResolver


def read_urls(urls: list[str], urls_file: str | None) -> list[str]:
    '''Collect URLs from positional arguments and an optional file (one per line, # comments).'''

    collected = [url.strip() for url in urls if url.strip()]
    if urls_file:
        for line in Path(urls_file).read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#"):
                collected.append(line)
    return collected


def build_resolver() -> GoogleNewsResolver:
    '''Resolver with cache and HTTP settings from the loaded config.'''

    config = get_config().resolve
    return GoogleNewsResolver(
        cache=RedirectCache(
            ttl_seconds=config.cache_ttl_hours * 3600,
            max_entries=config.cache_max_entries,
        ),
        timeout=config.request_timeout,
        max_redirects=config.max_redirects,
    )


def parse_resolve_redirects_args() -> argparse.Namespace:
    '''Parse CLI arguments for resolve_redirects.'''

    parser = argparse.ArgumentParser(description="Resolve Google News wrapper links to publisher URLs.")
    parser.add_argument("urls", nargs="*", help="Google News URLs to resolve.")
    parser.add_argument("--urls-file", default=None, help="File with one URL per line.")
    parser.add_argument("--concurrency", type=int, default=None)
    parser.add_argument("--delay-ms", type=int, default=None)
    add_common_args(parser)
    return parser.parse_args()
