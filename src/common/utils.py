"""Field access for feed items, which arrive either as dicts or as dataclasses."""

from typing import Any


def get_value(obj: Any, key: str, default: Any = None) -> Any:
    """Get value from dict or object attribute."""
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


def get_text(obj: Any, key: str) -> str:
    """Field value as a stripped string; empty when missing or not a string."""
    value = get_value(obj, key)
    return value.strip() if isinstance(value, str) else ""
