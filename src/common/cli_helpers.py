"""Common CLI helper utilities."""

from __future__ import annotations

import argparse
import logging
from typing import Any

from common.aws import upload_jsonl_records_to_s3
from common.local_io import save_jsonl_records_local


def setup_logging(verbose: bool = False) -> None:
    """Configure standard logging format for CLI tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add the --config/--load-*/--verbose flags shared by every stage CLI."""
    parser.add_argument(
        "--config",
        default=None,
        help="Config name in configs/ or path to a YAML file (default: $CONFIG_ENV or prod).",
    )
    parser.add_argument("--load-s3", action="store_true")
    parser.add_argument("--load-local", action="store_true")
    parser.add_argument("--verbose", action="store_true")


def parse_company_names(value: str | None) -> list[str]:
    """Parse a comma-separated --companies argument. Empty means all configured companies."""
    if not value or value.strip().lower() == "all":
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def save_records(records: list[Any], prefix: str, load_s3: bool, load_local: bool) -> None:
    """Write dataclass records to S3 and/or a local JSONL file as requested."""
    if not records:
        return
    if load_s3:
        upload_jsonl_records_to_s3(records, prefix)
    if load_local:
        save_jsonl_records_local(records, prefix)
