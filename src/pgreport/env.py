"""Environment variable parsing and configuration."""

import os
from typing import Optional


def get_str(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get string env var."""
    return os.environ.get(key, default)


def get_int(key: str, default: int) -> int:
    """Get integer env var."""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        return default


def get_bool(key: str, default: bool = False) -> bool:
    """Get boolean env var (0/1, true/false, yes/no)."""
    val = os.environ.get(key, "").lower()
    if not val:
        return default
    return val in ("1", "true", "yes", "on")


class Config:
    """Configuration loaded from environment variables."""

    def __init__(self):
        # Backends with a transaction open longer than this are flagged
        self.too_long_sec = get_int("PGREPORT_TOO_LONG_SEC", 60)
        self.debug = get_bool("PGREPORT_DEBUG", False)

        # Snapshot rendered when the script is given no path
        self.snapshot_path = get_str("PGREPORT_SNAPSHOT")


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config
