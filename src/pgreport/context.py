"""Render options and the per-render context shared by section renderers."""

from dataclasses import dataclass
from typing import Optional

from .env import Config, get_config
from .formatters import format_time_and_since
from .models import Snapshot
from .settings import get_version


@dataclass(frozen=True)
class ReportOptions:
    """Caller-supplied render configuration.

    Attributes:
        too_long_secs: Transactions open longer than this are reported
        now: Reference time for "N minutes ago" phrases; defaults to the
            snapshot's capture time
    """

    too_long_secs: int = 60
    now: Optional[int] = None

    @classmethod
    def from_config(cls, cfg: Optional[Config] = None) -> "ReportOptions":
        cfg = cfg or get_config()
        return cls(too_long_secs=cfg.too_long_sec)


@dataclass(frozen=True)
class RenderContext:
    """Everything a section renderer reads, resolved once per render."""

    snapshot: Snapshot
    options: ReportOptions
    version: int
    now: int

    @classmethod
    def create(cls, snapshot: Snapshot, options: ReportOptions) -> "RenderContext":
        now = options.now if options.now is not None else snapshot.metadata.at
        return cls(
            snapshot=snapshot,
            options=options,
            version=get_version(snapshot),
            now=now,
        )

    def time_and_since(self, ts: Optional[int], default: str = "") -> str:
        return format_time_and_since(ts, self.now, default)
