"""Coerce raw values from collector JSON into model field values."""

from typing import Any, Optional


def get_by_path(obj: dict[str, Any], path: str) -> Optional[Any]:
    """
    Get a value from a nested dict using a dotted path.

    Args:
        obj: The dictionary to search
        path: Dotted path like "meta.at" or "wal_archiving.stats_reset"

    Returns:
        The value at the path, or None if not found
    """
    parts = path.split(".")
    current: Any = obj

    for part in parts:
        if current is None:
            return None
        if isinstance(current, dict):
            current = current.get(part)
        else:
            return None

    return current


def coerce_to_int(value: Any, default: int = 0) -> int:
    """
    Safely coerce a value to int.

    Booleans, floats and numeric strings are accepted; anything else
    yields ``default``.
    """
    if value is None:
        return default

    if isinstance(value, bool):
        return int(value)

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        return int(value)

    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return default

    return default


def coerce_to_float(value: Any, default: float = 0.0) -> float:
    """Safely coerce a value to float."""
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, (int, float)):
        return float(value)

    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return default

    return default


def coerce_to_str(value: Any) -> str:
    """Coerce a value to str, mapping None to an empty string."""
    if value is None:
        return ""
    return str(value)


def coerce_epoch(value: Any) -> Optional[int]:
    """
    Coerce an epoch-seconds timestamp.

    The collector writes 0 for "never" or "unknown"; that becomes None.
    """
    ts = coerce_to_int(value)
    if ts == 0:
        return None
    return ts


def coerce_size(value: Any) -> Optional[int]:
    """
    Coerce a byte count or file count.

    The collector writes -1 when a size could not be determined (for
    example when collection ran remotely); that becomes None.
    """
    if value is None:
        return None
    size = coerce_to_int(value, default=-1)
    if size < 0:
        return None
    return size
