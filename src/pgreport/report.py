"""Report assembly: the fixed section order and top-level inclusion rules."""

import io
from typing import Callable, NamedTuple, Optional, TextIO

from . import log
from .context import RenderContext, ReportOptions
from .models import Snapshot
from .sections import (
    render_backends,
    render_bgwriter,
    render_cluster,
    render_databases,
    render_header,
    render_publications,
    render_recovery,
    render_replication_in,
    render_replication_out,
    render_replication_slots,
    render_roles,
    render_subscriptions,
    render_system,
    render_tables,
    render_tablespaces,
    render_vacuum_progress,
    render_wal,
)

# Vacuum progress reporting appeared in server 9.6
VACUUM_PROGRESS_VERSION = 90600


class Section(NamedTuple):
    """One top-level report section.

    Attributes:
        name: Short name used in log messages
        render: Writes the section
        include: Section is rendered only if this returns True (optional)
    """
    name: str
    render: Callable[[TextIO, RenderContext], None]
    include: Optional[Callable[[RenderContext], bool]] = None


SECTIONS = [
    Section("header", render_header),
    Section("cluster", render_cluster),
    Section(
        "system",
        render_system,
        include=lambda ctx: ctx.snapshot.system is not None,
    ),
    Section(
        "recovery",
        render_recovery,
        include=lambda ctx: ctx.snapshot.cluster.is_in_recovery,
    ),
    Section(
        "replication_in",
        render_replication_in,
        include=lambda ctx: ctx.snapshot.replication_incoming is not None,
    ),
    Section(
        "replication_out",
        render_replication_out,
        include=lambda ctx: len(ctx.snapshot.replication_outgoing) > 0,
    ),
    Section(
        "replication_slots",
        render_replication_slots,
        include=lambda ctx: len(ctx.snapshot.replication_slots) > 0,
    ),
    Section(
        "publications",
        render_publications,
        include=lambda ctx: len(ctx.snapshot.publications) > 0,
    ),
    Section(
        "subscriptions",
        render_subscriptions,
        include=lambda ctx: len(ctx.snapshot.subscriptions) > 0,
    ),
    Section("wal", render_wal),
    Section("bgwriter", render_bgwriter),
    Section("backends", render_backends),
    Section(
        "vacuum_progress",
        render_vacuum_progress,
        include=lambda ctx: ctx.version >= VACUUM_PROGRESS_VERSION,
    ),
    Section("roles", render_roles),
    Section("tablespaces", render_tablespaces),
    Section("databases", render_databases),
    Section("tables", render_tables),
]


def render(out: TextIO, snapshot: Snapshot, options: Optional[ReportOptions] = None) -> None:
    """
    Write the full text report for a snapshot.

    Sections are written straight to ``out`` in a fixed order. Any exception
    raised by ``out.write`` aborts the report and propagates; whatever was
    already written stays written.

    Args:
        out: Text sink, e.g. ``sys.stdout`` or an ``io.StringIO``
        snapshot: Snapshot to render
        options: Render options (default: from environment config)
    """
    if options is None:
        options = ReportOptions.from_config()
    ctx = RenderContext.create(snapshot, options)

    for section in SECTIONS:
        if section.include is not None and not section.include(ctx):
            log.debug(f"Skipping section {section.name}")
            continue
        log.debug(f"Rendering section {section.name}")
        section.render(out, ctx)

    out.write("\n")


def render_to_string(snapshot: Snapshot, options: Optional[ReportOptions] = None) -> str:
    """Render the report into a string."""
    buf = io.StringIO()
    render(buf, snapshot, options)
    return buf.getvalue()
