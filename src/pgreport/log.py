"""Simple logging helper.

All messages go to stderr so they never mix with a report on stdout.
"""

import sys
from datetime import datetime

from .env import get_config


def _ts() -> str:
    """Get current timestamp string."""
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def info(msg: str) -> None:
    """Print info message to stderr."""
    print(f"[{_ts()}] {msg}", file=sys.stderr)


def debug(msg: str) -> None:
    """Print debug message if PGREPORT_DEBUG is enabled."""
    if get_config().debug:
        print(f"[{_ts()}] DEBUG: {msg}", file=sys.stderr)


def error(msg: str) -> None:
    """Print error message to stderr."""
    print(f"[{_ts()}] ERROR: {msg}", file=sys.stderr)


def warn(msg: str) -> None:
    """Print warning message to stderr."""
    print(f"[{_ts()}] WARN: {msg}", file=sys.stderr)
