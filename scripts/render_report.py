#!/usr/bin/env python3
"""
Render a collected metrics snapshot as a text report.

Usage:
    render_report.py [SNAPSHOT_JSON]

The snapshot path defaults to PGREPORT_SNAPSHOT. The report goes to stdout,
log messages to stderr.

Exit status: 0 on success, 1 if the snapshot cannot be loaded or the report
cannot be written, 2 on a usage error.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pgreport.context import ReportOptions
from pgreport.env import get_config
from pgreport import log
from pgreport.report import render
from pgreport.snapshot import load_snapshot


def main(argv=None) -> int:
    """Load the snapshot and write its report to stdout."""
    args = sys.argv[1:] if argv is None else argv
    cfg = get_config()

    if len(args) > 1:
        log.error("Usage: render_report.py [SNAPSHOT_JSON]")
        return 2

    path = args[0] if args else cfg.snapshot_path
    if not path:
        log.error("No snapshot given (pass a path or set PGREPORT_SNAPSHOT)")
        return 2

    snapshot = load_snapshot(Path(path))
    if snapshot is None:
        return 1

    log.debug(f"Rendering report (too_long_sec={cfg.too_long_sec})")
    try:
        render(sys.stdout, snapshot, ReportOptions.from_config(cfg))
        sys.stdout.flush()
    except OSError as e:
        log.error(f"Failed to write report: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
