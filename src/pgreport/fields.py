"""Declarative field lists for scalar report blocks and settings tables."""

from typing import Callable, NamedTuple, Optional, TextIO, Union

from .context import RenderContext
from .derive import position_distance
from .formatters import format_yes_no, humanize_bytes
from .models import Snapshot
from .settings import (
    get_block_size,
    get_max_wal_size,
    get_setting,
    get_setting_bytes,
    WAL_SEGMENT_SIZE,
)
from .table import Table

# Scalar values line up at this column whatever the nesting depth
VALUE_COLUMN = 25


def field_line(label: str, value: str, indent: int = 4) -> str:
    """Label padded out to the value column, then the value."""
    return " " * indent + label.ljust(VALUE_COLUMN - indent) + value


def write_field(out: TextIO, label: str, value: str, indent: int = 4) -> None:
    out.write(field_line(label, value, indent) + "\n")


class ReportField(NamedTuple):
    """Configuration for a single scalar report line.

    Attributes:
        label: Label including its trailing ":" (or "?")
        value: Computes the display value from the render context
        condition: Line is written only if this returns True (optional)
    """
    label: str
    value: Callable[[RenderContext], str]
    condition: Optional[Callable[[RenderContext], bool]] = None


def write_fields(
    out: TextIO, ctx: RenderContext, fields: list[ReportField], indent: int = 4
) -> None:
    """Write every field whose condition holds, in order."""
    for f in fields:
        if f.condition and not f.condition(ctx):
            continue
        write_field(out, f.label, f.value(ctx), indent)


def since_version(version: int) -> Callable[[RenderContext], bool]:
    """Condition: server is at least ``version``."""
    return lambda ctx: ctx.version >= version


def _all(*conditions: Callable[[RenderContext], bool]) -> Callable[[RenderContext], bool]:
    return lambda ctx: all(c(ctx) for c in conditions)


def _lsn_since(lsn: str, earlier: str, earlier_name: str) -> str:
    """ "<lsn> (<bytes> since <earlier_name>)", or the bare position."""
    distance = position_distance(lsn, earlier)
    if distance is None or distance < 0:
        return lsn
    return f"{lsn} ({humanize_bytes(distance)} since {earlier_name})"


def _has_checkpoint_lsns(ctx: RenderContext) -> bool:
    c = ctx.snapshot.cluster
    return bool(c.redo_lsn and c.checkpoint_lsn)


def _has_prior_lsn(ctx: RenderContext) -> bool:
    return bool(ctx.snapshot.cluster.prior_lsn)


def _redo_lsn(ctx: RenderContext) -> str:
    c = ctx.snapshot.cluster
    if c.prior_lsn:
        return _lsn_since(c.redo_lsn, c.prior_lsn, "Prior")
    return c.redo_lsn


def _transaction_ids(ctx: RenderContext) -> str:
    c = ctx.snapshot.cluster
    newest = c.next_xid - 1
    return f"{c.oldest_xid} to {newest} (diff = {newest - c.oldest_xid})"


CLUSTER_FIELDS = [
    ReportField(
        label="Name:",
        value=lambda ctx: get_setting(ctx.snapshot, "cluster_name"),
    ),
    ReportField(
        label="Server Version:",
        value=lambda ctx: get_setting(ctx.snapshot, "server_version"),
    ),
    ReportField(
        label="Server Started:",
        value=lambda ctx: ctx.time_and_since(ctx.snapshot.cluster.start_time),
    ),
    ReportField(
        label="System Identifier:",
        value=lambda ctx: ctx.snapshot.cluster.system_identifier,
        condition=since_version(90600),
    ),
    ReportField(
        label="Timeline:",
        value=lambda ctx: str(ctx.snapshot.cluster.timeline_id),
        condition=since_version(90600),
    ),
    ReportField(
        label="Last Checkpoint:",
        value=lambda ctx: ctx.time_and_since(ctx.snapshot.cluster.checkpoint_time),
        condition=since_version(90600),
    ),
    ReportField(
        label="Prior LSN:",
        value=lambda ctx: ctx.snapshot.cluster.prior_lsn,
        condition=_all(since_version(90600), _has_checkpoint_lsns, _has_prior_lsn),
    ),
    ReportField(
        label="REDO LSN:",
        value=_redo_lsn,
        condition=_all(since_version(90600), _has_checkpoint_lsns),
    ),
    ReportField(
        label="Checkpoint LSN:",
        value=lambda ctx: _lsn_since(
            ctx.snapshot.cluster.checkpoint_lsn, ctx.snapshot.cluster.redo_lsn, "REDO"
        ),
        condition=_all(since_version(90600), _has_checkpoint_lsns),
    ),
    ReportField(
        label="Transaction IDs:",
        value=_transaction_ids,
        condition=since_version(90600),
    ),
    ReportField(
        label="Last Transaction:",
        value=lambda ctx: ctx.time_and_since(ctx.snapshot.cluster.last_xact_timestamp),
        condition=lambda ctx: ctx.snapshot.cluster.last_xact_timestamp is not None,
    ),
    ReportField(
        label="Notification Queue:",
        value=lambda ctx: f"{ctx.snapshot.cluster.notification_queue_usage:.1f}% used",
        condition=since_version(90600),
    ),
    ReportField(
        label="Active Backends:",
        value=lambda ctx: (
            f"{len(ctx.snapshot.backends)} "
            f"(max {get_setting(ctx.snapshot, 'max_connections')})"
        ),
    ),
    ReportField(
        label="Recovery Mode?",
        value=lambda ctx: format_yes_no(ctx.snapshot.cluster.is_in_recovery),
    ),
]


# --- Settings tables ---


class SettingRow(NamedTuple):
    """One row of a "Setting | Value" table.

    Attributes:
        key: Setting name, or a function choosing it per snapshot
        factor: Bytes per unit (or a function of the snapshot); when set,
            the value also shows a humanized size
        suffix: Unit text appended to the raw value (e.g. " sec")
        raw_value: Show the raw value, unscaled, when it equals this
    """
    key: Union[str, Callable[[Snapshot], str]]
    factor: Union[int, Callable[[Snapshot], int], None] = None
    suffix: str = ""
    raw_value: Optional[str] = None

    def render(self, snapshot: Snapshot) -> tuple[str, str]:
        key = self.key(snapshot) if callable(self.key) else self.key
        raw = get_setting(snapshot, key)
        if self.factor is None or raw == self.raw_value:
            return key, raw + self.suffix
        factor = self.factor(snapshot) if callable(self.factor) else self.factor
        return key, get_setting_bytes(snapshot, key, factor)


def settings_table(snapshot: Snapshot, rows: list[SettingRow]) -> Table:
    table = Table("Setting", "Value")
    for row in rows:
        table.add(*row.render(snapshot))
    return table


MEMORY_SETTINGS = [
    SettingRow("shared_buffers", factor=8192),
    SettingRow("work_mem", factor=1024),
    SettingRow("maintenance_work_mem", factor=1024),
    SettingRow("temp_buffers", factor=8192),
    SettingRow("autovacuum_work_mem", factor=1024, raw_value="-1"),
    SettingRow("temp_file_limit", factor=1024, raw_value="-1"),
    SettingRow("max_worker_processes"),
    SettingRow("autovacuum_max_workers"),
    SettingRow("max_parallel_workers_per_gather"),
    SettingRow("effective_io_concurrency"),
]

WAL_SETTINGS = [
    SettingRow("wal_level"),
    SettingRow("archive_timeout"),
    SettingRow("wal_compression"),
    SettingRow(lambda s: get_max_wal_size(s)[0], factor=WAL_SEGMENT_SIZE),
    SettingRow("min_wal_size", factor=WAL_SEGMENT_SIZE),
    SettingRow("checkpoint_timeout"),
    SettingRow("full_page_writes"),
    SettingRow("wal_keep_segments"),
]

BGWRITER_SETTINGS = [
    SettingRow("bgwriter_delay", suffix=" msec"),
    SettingRow("bgwriter_flush_after", factor=get_block_size),
    SettingRow("bgwriter_lru_maxpages"),
    SettingRow("bgwriter_lru_multiplier"),
    SettingRow("block_size"),
    SettingRow("checkpoint_timeout", suffix=" sec"),
    SettingRow("checkpoint_completion_target"),
]

VACUUM_SETTINGS = [
    SettingRow("maintenance_work_mem", factor=1024),
    SettingRow("autovacuum"),
    SettingRow("autovacuum_analyze_threshold"),
    SettingRow("autovacuum_vacuum_threshold"),
    SettingRow("autovacuum_freeze_max_age"),
    SettingRow("autovacuum_max_workers"),
    SettingRow("autovacuum_naptime", suffix=" sec"),
    SettingRow("vacuum_freeze_min_age"),
    SettingRow("vacuum_freeze_table_age"),
]
