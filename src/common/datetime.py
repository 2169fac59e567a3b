"""Feed date parsing and canonical UTC rendering."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil.parser import parse as parse_date

# Common timezone abbreviations found in RSS pubDate fields
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "MST": timezone(timedelta(hours=-7)),
    "MDT": timezone(timedelta(hours=-6)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "BST": timezone(timedelta(hours=1)),
}


def parse_published_date(value: Optional[str]) -> Optional[datetime]:
    """Parse a feed date string (RFC 822, ISO 8601, ...) into an aware datetime.

    Returns None for missing or unparsable values. Naive results are taken as UTC.
    """
    if not value or not value.strip():
        return None

    try:
        dt = parse_date(value.strip(), tzinfos=TZINFOS)
    except (ValueError, OverflowError):
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def to_iso_instant(value) -> str:
    """Render a date as a canonical UTC instant, e.g. ``2024-01-01T12:00:00.000Z``.

    Accepts a datetime or any string `parse_published_date` understands.

    Raises:
        ValueError: If the value cannot be parsed as a date.
    """
    if isinstance(value, datetime):
        dt = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    else:
        dt = parse_published_date(value)
        if dt is None:
            raise ValueError(f"Invalid date: {value!r}")

    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"
