"""Numeric derivations over raw snapshot values.

Pure functions with a defined fallback for every degenerate input, so a
report always renders for a valid snapshot.
"""

import re
from typing import Optional

# Two hex components separated by a slash, e.g. "16/B374D848"
_LSN_RE = re.compile(r"([0-9A-Fa-f]{1,16})/([0-9A-Fa-f]{1,16})")

_UINT64_MASK = 0xFFFF_FFFF_FFFF_FFFF


def position_value(lsn: str) -> Optional[int]:
    """
    Parse a log position ("hi/lo" in hex) into its 64-bit value.

    Args:
        lsn: Position string, possibly empty

    Returns:
        ``hi << 32 | lo``, or None if the string is empty or malformed
    """
    if not lsn:
        return None
    match = _LSN_RE.fullmatch(lsn)
    if match is None:
        return None
    hi = int(match.group(1), 16)
    lo = int(match.group(2), 16)
    return ((hi << 32) | lo) & _UINT64_MASK


def position_distance(a: str, b: str) -> Optional[int]:
    """Bytes from position ``b`` to position ``a``; None if either is unparsable."""
    va = position_value(a)
    vb = position_value(b)
    if va is None or vb is None:
        return None
    return va - vb


def safe_ratio(a: float, b: float) -> float:
    """Return a/b, or 0.0 when b is zero."""
    if b == 0:
        return 0.0
    return a / b


def percent(a: float, b: float) -> float:
    """Return a as a percentage of b, or 0.0 when b is zero."""
    return 100 * safe_ratio(a, b)


def rate_per_minute(count: float, elapsed_seconds: float) -> float:
    """Average events per minute over an interval; 0.0 for a non-positive interval."""
    if elapsed_seconds <= 0:
        return 0.0
    return count / (elapsed_seconds / 60)


def rate_per_second(count: float, elapsed_seconds: float) -> float:
    """Average events per second over an interval; 0.0 for a non-positive interval."""
    if elapsed_seconds <= 0:
        return 0.0
    return count / elapsed_seconds


def elapsed_since(at: int, since: Optional[int]) -> int:
    """Seconds between a stats reset (None counts as epoch) and capture time."""
    return at - (since or 0)
