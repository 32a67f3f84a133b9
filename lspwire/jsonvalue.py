"""Lenient accessors for decoded JSON values."""

from __future__ import annotations

import json
from typing import Any

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


def get_value(obj: Any, key: str) -> Any:
    """Return ``obj[key]`` if ``obj`` is an object holding ``key``, else None."""
    if isinstance(obj, dict):
        return obj.get(key)
    return None


def get_string(obj: Any, key: str) -> str:
    value = get_value(obj, key)
    return value if isinstance(value, str) else ""


def get_int(obj: Any, key: str, default: int = -1) -> int:
    """Return a 32-bit integer member, or ``default`` if absent or of another type."""
    value = get_value(obj, key)
    if isinstance(value, int) and not isinstance(value, bool) and _INT_MIN <= value <= _INT_MAX:
        return value
    return default


def get_bool(obj: Any, key: str) -> bool:
    value = get_value(obj, key)
    return value if isinstance(value, bool) else False


def get_object(obj: Any, key: str) -> dict:
    value = get_value(obj, key)
    return value if isinstance(value, dict) else {}


def get_array(obj: Any, key: str) -> list:
    value = get_value(obj, key)
    return value if isinstance(value, list) else []


def stringify(value: Any) -> str:
    """Serialize a JSON value compactly."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)