"""Shared formatting functions for display values."""

from datetime import datetime
from typing import Optional

from .derive import percent, position_distance

BYTE_UNITS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB")

# Longest query prefix shown in a table cell
QUERY_DISPLAY_LENGTH = 50

_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_WEEK = 7 * _DAY
_MONTH = 30 * _DAY
_YEAR = 12 * _MONTH

# (upper bound in seconds, phrase, divisor for {n})
_RELATIVE_MAGNITUDES = [
    (1, "now", 1),
    (2, "1 second {label}", 1),
    (_MINUTE, "{n} seconds {label}", 1),
    (2 * _MINUTE, "1 minute {label}", 1),
    (_HOUR, "{n} minutes {label}", _MINUTE),
    (2 * _HOUR, "1 hour {label}", 1),
    (_DAY, "{n} hours {label}", _HOUR),
    (2 * _DAY, "1 day {label}", 1),
    (_WEEK, "{n} days {label}", _DAY),
    (2 * _WEEK, "1 week {label}", 1),
    (_MONTH, "{n} weeks {label}", _WEEK),
    (2 * _MONTH, "1 month {label}", 1),
    (_YEAR, "{n} months {label}", _MONTH),
    (18 * _MONTH, "1 year {label}", 1),
    (2 * _YEAR, "2 years {label}", 1),
    (37 * _YEAR, "{n} years {label}", _YEAR),
]


def humanize_bytes(n: Optional[int]) -> str:
    """Format a byte count with binary prefixes ("1.5 KiB", "10 MiB").

    Unknown (None) or negative counts format as an empty string.
    """
    if n is None or n < 0:
        return ""
    if n < 10:
        return f"{n} B"

    exp = 0
    while exp < len(BYTE_UNITS) - 1 and n >= 1024 ** (exp + 1):
        exp += 1

    # Round half up to one decimal at the chosen scale
    val = int(n / 1024 ** exp * 10 + 0.5) / 10
    if val < 10:
        return f"{val:.1f} {BYTE_UNITS[exp]}"
    return f"{val:.0f} {BYTE_UNITS[exp]}"


def format_time(ts: Optional[int], default: str = "") -> str:
    """Format a Unix timestamp as "2 Jan 2006 3:04:05 PM" in local time."""
    if ts is None:
        return default
    try:
        dt = datetime.fromtimestamp(ts)
    except (ValueError, OSError, OverflowError):
        return default
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{dt.day} {dt.strftime('%b')} {dt.year} {hour}:{dt.strftime('%M:%S')} {meridiem}"


def relative_time(ts: int, now: int) -> str:
    """Describe ``ts`` relative to ``now``, e.g. "3 minutes ago"."""
    if ts > now:
        diff, label = ts - now, "from now"
    else:
        diff, label = now - ts, "ago"

    for bound, phrase, divisor in _RELATIVE_MAGNITUDES:
        if diff < bound:
            return phrase.format(n=diff // divisor, label=label)
    return f"a long while {label}"


def format_since(ts: Optional[int], now: int) -> str:
    """Relative phrase for a timestamp, or "never" if it is unknown."""
    if ts is None:
        return "never"
    return relative_time(ts, now)


def format_time_and_since(ts: Optional[int], now: int, default: str = "") -> str:
    """Absolute time followed by the relative phrase in parentheses."""
    if ts is None:
        return default
    absolute = format_time(ts)
    if not absolute:
        return default
    return f"{absolute} ({relative_time(ts, now)})"


def _fraction(value: int, unit: int) -> str:
    """Render value/unit with trailing zeros of the fraction dropped."""
    whole, rem = divmod(value, unit)
    if rem == 0:
        return str(whole)
    digits = str(rem).zfill(len(str(unit)) - 1).rstrip("0")
    return f"{whole}.{digits}"


def format_duration_ns(ns: int) -> str:
    """Compact duration string from nanoseconds: "950ns", "2.5ms", "1h2m3.5s"."""
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    ns = abs(ns)

    if ns < 1_000:
        return f"{sign}{ns}ns"
    if ns < 1_000_000:
        return f"{sign}{_fraction(ns, 1_000)}µs"
    if ns < 1_000_000_000:
        return f"{sign}{_fraction(ns, 1_000_000)}ms"

    secs, frac = divmod(ns, 1_000_000_000)
    hours, rem = divmod(secs, 3600)
    mins, secs = divmod(rem, 60)
    text = f"{_fraction(secs * 1_000_000_000 + frac, 1_000_000_000)}s"
    if hours or mins:
        text = f"{mins}m{text}"
    if hours:
        text = f"{hours}h{text}"
    return sign + text


def format_micros(us: int) -> str:
    """Duration from microseconds, spelling the micro sign as "u"."""
    return format_duration_ns(us * 1_000).replace("µ", "u")


def format_millis(ms: float) -> str:
    """Duration from (fractional) milliseconds."""
    return format_duration_ns(int(ms * 1e6))


def format_millis_truncated(ms: float) -> str:
    """Duration from milliseconds, truncated to whole milliseconds."""
    ns = int(1e6 * ms)
    whole_ms = abs(ns) // 1_000_000 * 1_000_000
    return format_duration_ns(whole_ms if ns >= 0 else -whole_ms)


def format_yes_no(value: bool) -> str:
    return "yes" if value else "no"


def format_yes_blank(value: bool) -> str:
    return "yes" if value else ""


def format_int_zero(value: int) -> str:
    """Integer as text, with zero shown as blank."""
    if value == 0:
        return ""
    return str(value)


def format_pct(a: float, b: float) -> str:
    """a as a percentage of b ("42.0%"), blank when b is zero."""
    if b == 0:
        return ""
    return f"{percent(a, b):.1f}%"


def format_count_and_time(count: int, last: Optional[int], now: int) -> str:
    """ "3, last 2 days ago", or "never" when nothing happened."""
    if count == 0 or last is None:
        return "never"
    return f"{count}, last {format_since(last, now)}"


def format_size_and_bloat(size: Optional[int], bloat: Optional[int]) -> str:
    """Bloat bytes, with its share of the size when the size is known."""
    if bloat is None:
        return ""
    if size is None:
        return humanize_bytes(bloat)
    return f"{humanize_bytes(bloat)} ({percent(bloat, size):.1f}%)"


def format_query(query: str) -> str:
    """Shorten a query for single-line display."""
    query = query[:QUERY_DISPLAY_LENGTH]
    return query.translate({ord("\r"): " ", ord("\n"): " ", ord("\t"): " "})


def format_operations(insert: bool, update: bool, delete: bool) -> str:
    """List the DML operations a publication propagates."""
    parts = []
    if insert:
        parts.append("inserts")
    if update:
        parts.append("updates")
    if delete:
        parts.append("deletes")
    return ", ".join(parts)


def format_lag(ahead: str, behind: str, qualifier: str = "") -> str:
    """
    Describe the distance between two chained log positions.

    Returns " (no <q> lag)" for zero distance, " (<q> lag = 1.5 KiB)" for a
    positive one, and an empty string when either position is unparsable
    or the distance is negative.
    """
    if qualifier and not qualifier.endswith(" "):
        qualifier += " "
    distance = position_distance(ahead, behind)
    if distance is None or distance < 0:
        return ""
    if distance == 0:
        return f" (no {qualifier}lag)"
    return f" ({qualifier}lag = {humanize_bytes(distance)})"
