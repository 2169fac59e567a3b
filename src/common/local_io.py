"""Local JSONL output for stage CLIs."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from common.serialization import serialize_dataclass

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = "output"


def output_filename(prefix: str, now: datetime) -> str:
    """``<prefix>_YYYY_MM_DD_HH_MM.jsonl`` in UTC."""
    return f"{prefix}_{now.astimezone(timezone.utc).strftime('%Y_%m_%d_%H_%M')}.jsonl"


def save_jsonl_records_local(
    records: list[Any],
    prefix: str,
    output_dir: str | Path = DEFAULT_OUTPUT_DIR,
    now: Optional[datetime] = None,
) -> Path:
    """Write one JSON object per record (releases, poll logs, extractions, ...).

    Appends when a file for the same prefix and minute already exists, so
    repeated polls within a minute do not overwrite each other.

    Returns:
        Path of the written file.
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    filepath = output_path / output_filename(prefix, now or datetime.now(timezone.utc))

    with filepath.open("a", encoding="utf-8") as f:
        for record in records:
            f.write(json.dumps(serialize_dataclass(record), default=str, ensure_ascii=False) + "\n")

    logger.info("Saved %d records to %s", len(records), filepath)
    return filepath
