"""Accessors for server configuration settings in a snapshot.

Settings are raw strings. Values that do not parse fall back to the raw
string (for display) or to a documented default (for arithmetic). Only
plain decimal digits parse: no whitespace, underscores or fractions.
"""

import re

from .formatters import humanize_bytes
from .models import Snapshot

DEFAULT_BLOCK_SIZE = 8192
WAL_SEGMENT_SIZE = 16 * 1024 * 1024

# First server version that names the WAL size limit "max_wal_size"
MAX_WAL_SIZE_VERSION = 90500

# Signed integer setting, e.g. "-1" or "100"
_INT_RE = re.compile(r"[+-]?[0-9]+")
# Unsigned count of units; a sign makes the value unparsable
_UINT_RE = re.compile(r"[0-9]+")


def get_setting(snapshot: Snapshot, key: str) -> str:
    """Raw setting value, or "" if the setting was not collected."""
    return snapshot.settings.get(key, "")


def get_setting_int(snapshot: Snapshot, key: str) -> int:
    """Setting as an integer, or 0 if absent or unparsable."""
    raw = get_setting(snapshot, key)
    if not _INT_RE.fullmatch(raw):
        return 0
    return int(raw)


def get_setting_bytes(snapshot: Snapshot, key: str, factor: int) -> str:
    """
    Setting expressed in units of ``factor`` bytes, with a humanized size.

    Returns "<raw> (<size>)" when the raw value is a positive integer,
    otherwise the raw value unchanged.
    """
    raw = get_setting(snapshot, key)
    if not _UINT_RE.fullmatch(raw):
        return raw
    val = int(raw)
    if val <= 0:
        return raw
    return f"{raw} ({humanize_bytes(val * factor)})"


def get_block_size(snapshot: Snapshot) -> int:
    """Server block size in bytes (8192 if unknown)."""
    return get_setting_int(snapshot, "block_size") or DEFAULT_BLOCK_SIZE


def get_version(snapshot: Snapshot) -> int:
    """Server version number, e.g. 90600 for 9.6.0 (0 if unknown)."""
    return get_setting_int(snapshot, "server_version_num")


def get_max_wal_size(snapshot: Snapshot) -> tuple[str, str]:
    """Name and display value of the setting that bounds WAL size.

    Servers before 9.5 expose ``checkpoint_segments`` instead of
    ``max_wal_size``; both count 16 MiB segments.
    """
    if get_version(snapshot) >= MAX_WAL_SIZE_VERSION:
        key = "max_wal_size"
    else:
        key = "checkpoint_segments"
    return key, get_setting_bytes(snapshot, key, WAL_SEGMENT_SIZE)
