"""Section renderers for the text report.

Each renderer writes one titled section to the output stream. A section
starts with a blank line and its title, followed by scalar lines (see
``pgreport.fields``) and bordered tables. Renderers only read the snapshot;
deciding whether a section appears at all is up to ``pgreport.report``.
"""

from typing import Optional, TextIO

from .context import RenderContext
from .derive import (
    elapsed_since,
    percent,
    position_distance,
    rate_per_minute,
    rate_per_second,
    safe_ratio,
)
from .fields import (
    BGWRITER_SETTINGS,
    CLUSTER_FIELDS,
    MEMORY_SETTINGS,
    VACUUM_SETTINGS,
    WAL_SETTINGS,
    settings_table,
    write_field,
    write_fields,
)
from .formatters import (
    format_count_and_time,
    format_int_zero,
    format_lag,
    format_micros,
    format_millis,
    format_millis_truncated,
    format_operations,
    format_pct,
    format_query,
    format_size_and_bloat,
    format_time,
    format_yes_blank,
    format_yes_no,
    humanize_bytes,
)
from .models import Backend, Database, Snapshot, Table as TableStats
from .settings import get_block_size, get_setting, get_setting_int
from .table import Table

SECTION_INDENT = "    "
NESTED_INDENT = "      "

# Wait event type of a backend blocked on a heavyweight lock
LOCK_WAIT = "Lock"
# Servers before 9.6 only report a boolean "waiting"; the collector puts
# this marker in both wait_event_type and wait_event
LEGACY_WAIT = "waiting"

IDLE_IN_TRANSACTION = "idle in transaction"


def _line(out: TextIO, text: str = "") -> None:
    out.write(text + "\n")


def _heading(out: TextIO, title: str) -> None:
    _line(out)
    _line(out, title)


def _write_subtables(
    out: TextIO, subtables: list[tuple[str, Table]], prefix: str = NESTED_INDENT
) -> None:
    """Write titled tables one after another, separated by blank lines.

    Tables with no data rows are skipped along with their title.
    """
    first = True
    for title, table in subtables:
        if len(table) <= 1:
            continue
        if not first:
            _line(out)
        _line(out, SECTION_INDENT + title)
        table.write(out, prefix)
        first = False


# --- Cluster ---


def render_header(out: TextIO, ctx: RenderContext) -> None:
    at = ctx.snapshot.metadata.at
    _line(out)
    _line(out, f"pgmetrics run at: {ctx.time_and_since(at or None)}")


def render_cluster(out: TextIO, ctx: RenderContext) -> None:
    _heading(out, "PostgreSQL Cluster:")
    write_fields(out, ctx, CLUSTER_FIELDS)


def render_system(out: TextIO, ctx: RenderContext) -> None:
    s = ctx.snapshot.system
    if s is None:
        return

    _heading(out, "System Information:")
    write_field(out, "Hostname:", s.hostname)
    write_field(out, "CPU Cores:", f"{s.num_cores} x {s.cpu_model}")
    write_field(out, "Load Average:", f"{s.load_avg:.2f}")
    write_field(
        out,
        "Memory:",
        f"used={humanize_bytes(s.mem_used)}, free={humanize_bytes(s.mem_free)}, "
        f"buff={humanize_bytes(s.mem_buffers)}, cache={humanize_bytes(s.mem_cached)}",
    )
    write_field(
        out, "Swap:", f"used={humanize_bytes(s.swap_used)}, free={humanize_bytes(s.swap_free)}"
    )
    settings_table(ctx.snapshot, MEMORY_SETTINGS).write(out, SECTION_INDENT)


# --- Replication ---


def render_recovery(out: TextIO, ctx: RenderContext) -> None:
    c = ctx.snapshot.cluster
    _heading(out, "Recovery Status:")
    write_field(out, "Replay paused:", format_yes_no(c.is_wal_replay_paused))
    write_field(out, "Received LSN:", c.last_wal_receive_lsn)
    write_field(
        out,
        "Replayed LSN:",
        c.last_wal_replay_lsn + format_lag(c.last_wal_receive_lsn, c.last_wal_replay_lsn),
    )
    write_field(out, "Last Replayed Txn:", ctx.time_and_since(c.last_xact_replay_timestamp))


def render_replication_in(out: TextIO, ctx: RenderContext) -> None:
    ri = ctx.snapshot.replication_incoming
    if ri is None:
        return

    received = ""
    distance = position_distance(ri.received_lsn, ri.receive_start_lsn)
    if distance is not None and distance > 0:
        received = ", " + humanize_bytes(distance)

    _heading(out, "Incoming Replication Stats:")
    write_field(out, "Status:", ri.status)
    write_field(
        out, "Received LSN:", f"{ri.received_lsn} (started at {ri.receive_start_lsn}{received})"
    )
    write_field(out, "Timeline:", f"{ri.received_tli} (was {ri.receive_start_tli} at start)")
    write_field(out, "Latency:", format_micros(ri.latency_micros))
    write_field(out, "Replication Slot:", ri.slot_name)


def render_replication_out(out: TextIO, ctx: RenderContext) -> None:
    _heading(out, "Outgoing Replication Stats:")
    for i, r in enumerate(ctx.snapshot.replication_outgoing, 1):
        sync_priority = "" if r.sync_priority is None else str(r.sync_priority)
        _line(out, f"{SECTION_INDENT}Destination #{i}:")
        write_field(out, "User:", r.role_name, 6)
        write_field(out, "Application:", r.application_name, 6)
        write_field(out, "Client Address:", r.client_addr, 6)
        write_field(out, "State:", r.state, 6)
        write_field(out, "Started At:", ctx.time_and_since(r.backend_start), 6)
        write_field(out, "Sent LSN:", r.sent_lsn, 6)
        write_field(
            out, "Written Until:", r.write_lsn + format_lag(r.sent_lsn, r.write_lsn, "write"), 6
        )
        write_field(
            out, "Flushed Until:", r.flush_lsn + format_lag(r.write_lsn, r.flush_lsn, "flush"), 6
        )
        write_field(
            out,
            "Replayed Until:",
            r.replay_lsn + format_lag(r.flush_lsn, r.replay_lsn, "replay"),
            6,
        )
        write_field(out, "Sync Priority:", sync_priority, 6)
        write_field(out, "Sync State:", r.sync_state, 6)


def render_replication_slots(out: TextIO, ctx: RenderContext) -> None:
    """Physical and logical slots, each in its own table."""
    slots = ctx.snapshot.replication_slots
    show_temporary = ctx.version >= 100000
    physical = [s for s in slots if s.slot_type == "physical"]
    logical = [s for s in slots if s.slot_type == "logical"]

    if physical:
        _heading(out, "Physical Replication Slots:")
        cols = ["Name", "Active", "Oldest Txn ID", "Restart LSN"]
        if show_temporary:
            cols.append("Temporary")
        table = Table(*cols)
        for s in physical:
            vals = [s.slot_name, format_yes_no(s.active), format_int_zero(s.xmin), s.restart_lsn]
            if show_temporary:
                vals.append(format_yes_no(s.temporary))
            table.add(*vals)
        table.write(out, SECTION_INDENT)

    if logical:
        _heading(out, "Logical Replication Slots:")
        cols = [
            "Name", "Plugin", "Database", "Active",
            "Oldest Txn ID", "Restart LSN", "Flushed Until",
        ]
        if show_temporary:
            cols.append("Temporary")
        table = Table(*cols)
        for s in logical:
            vals = [
                s.slot_name, s.plugin, s.db_name, format_yes_no(s.active),
                format_int_zero(s.xmin), s.restart_lsn, s.confirmed_flush_lsn,
            ]
            if show_temporary:
                vals.append(format_yes_no(s.temporary))
            table.add(*vals)
        table.write(out, SECTION_INDENT)


def render_publications(out: TextIO, ctx: RenderContext) -> None:
    _heading(out, "Logical Replication Publications:")
    for i, pub in enumerate(ctx.snapshot.publications, 1):
        _line(out, f"{SECTION_INDENT}Publication #{i}:")
        write_field(out, "Name:", pub.name, 6)
        write_field(out, "All Tables?", format_yes_no(pub.all_tables), 6)
        write_field(out, "Propogate:", format_operations(pub.insert, pub.update, pub.delete), 6)
        write_field(out, "Tables:", str(pub.table_count), 6)


def render_subscriptions(out: TextIO, ctx: RenderContext) -> None:
    _heading(out, "Logical Replication Subscriptions:")
    for i, sub in enumerate(ctx.snapshot.subscriptions, 1):
        _line(out, f"{SECTION_INDENT}Subscription #{i}:")
        write_field(out, "Name:", sub.name, 6)
        write_field(out, "Enabled?", format_yes_no(sub.enabled), 6)
        write_field(out, "Publications:", str(sub.pub_count), 6)
        write_field(out, "Tables:", str(sub.table_count), 6)
        write_field(out, "Workers:", str(sub.worker_count), 6)
        write_field(out, "Received Until:", sub.received_lsn, 6)
        write_field(out, "Latency:", format_micros(sub.latency_micros), 6)


# --- WAL and background writer ---


def render_wal(out: TextIO, ctx: RenderContext) -> None:
    snapshot = ctx.snapshot
    archive_mode = get_setting(snapshot, "archive_mode") == "on"

    _heading(out, "WAL Files:")
    write_field(out, "WAL Archiving?", format_yes_no(archive_mode))
    if snapshot.cluster.wal_count is not None:
        write_field(out, "WAL Files:", str(snapshot.cluster.wal_count))
    if archive_mode:
        arch = snapshot.wal_archiving
        secs = elapsed_since(snapshot.metadata.at, arch.stats_reset)
        ready = snapshot.cluster.wal_ready_count
        write_field(out, "Ready Files:", "" if ready is None else str(ready))
        write_field(out, "Archive Rate:", f"{rate_per_minute(arch.archived_count, secs):.2f} per min")
        write_field(out, "Last Archived:", ctx.time_and_since(arch.last_archived_time))
        write_field(out, "Last Failure:", ctx.time_and_since(arch.last_failed_time))
        write_field(
            out, "Totals:", f"{arch.archived_count} succeeded, {arch.failed_count} failed"
        )
        write_field(out, "Totals Since:", ctx.time_and_since(arch.stats_reset))
    settings_table(snapshot, WAL_SETTINGS).write(out, SECTION_INDENT)


def render_bgwriter(out: TextIO, ctx: RenderContext) -> None:
    bgw = ctx.snapshot.bg_writer
    block_size = get_block_size(ctx.snapshot)
    secs = elapsed_since(ctx.snapshot.metadata.at, bgw.stats_reset)
    checkpoints = bgw.checkpoints_timed + bgw.checkpoints_req
    buffers = bgw.buffers_checkpoint + bgw.buffers_clean + bgw.buffers_backend
    avg_write = safe_ratio(bgw.buffers_checkpoint * block_size, checkpoints)
    write_rate = block_size * rate_per_second(buffers, secs)

    _heading(out, "BG Writer:")
    write_field(out, "Checkpoint Rate:", f"{rate_per_minute(checkpoints, secs):.2f} per min")
    write_field(out, "Average Write:", f"{humanize_bytes(int(avg_write))} per checkpoint")
    write_field(
        out,
        "Total Checkpoints:",
        f"{bgw.checkpoints_timed} sched ({percent(bgw.checkpoints_timed, checkpoints):.1f}%) + "
        f"{bgw.checkpoints_req} req ({percent(bgw.checkpoints_req, checkpoints):.1f}%) = "
        f"{checkpoints}",
    )
    write_field(
        out,
        "Total Write:",
        f"{humanize_bytes(block_size * buffers)}, @ {humanize_bytes(int(write_rate))} per sec",
    )
    write_field(
        out,
        "Buffers Allocated:",
        f"{bgw.buffers_alloc} ({humanize_bytes(block_size * bgw.buffers_alloc)})",
    )
    write_field(
        out,
        "Buffers Written:",
        f"{bgw.buffers_checkpoint} chkpt ({percent(bgw.buffers_checkpoint, buffers):.1f}%) + "
        f"{bgw.buffers_clean} bgw ({percent(bgw.buffers_clean, buffers):.1f}%) + "
        f"{bgw.buffers_backend} be ({percent(bgw.buffers_backend, buffers):.1f}%)",
    )
    write_field(out, "Clean Scan Stops:", str(bgw.maxwritten_clean))
    write_field(out, "BE fsyncs:", str(bgw.buffers_backend_fsync))
    write_field(out, "Counts Since:", ctx.time_and_since(bgw.stats_reset))
    settings_table(ctx.snapshot, BGWRITER_SETTINGS).write(out, SECTION_INDENT)


# --- Backends ---


def is_waiting_lock(be: Backend) -> bool:
    """Backend is blocked on a lock (including the pre-9.6 "waiting" flag)."""
    if be.wait_event_type == LEGACY_WAIT and be.wait_event == LEGACY_WAIT:
        return True
    return be.wait_event_type == LOCK_WAIT


def is_waiting_other(be: Backend) -> bool:
    """Backend is waiting on something other than a lock."""
    return bool(be.wait_event_type) and be.wait_event_type not in (LOCK_WAIT, LEGACY_WAIT)


def is_idle_in_transaction(be: Backend) -> bool:
    return be.state.startswith(IDLE_IN_TRANSACTION)


def is_too_long(be: Backend, at: int, too_long_secs: int) -> bool:
    """Backend's transaction has been open longer than the threshold."""
    return be.xact_start is not None and at - be.xact_start > too_long_secs


def _backend_cells(be: Backend) -> list[str]:
    return [str(be.pid), be.role_name, be.application_name, be.client_addr, be.db_name]


def render_backends(out: TextIO, ctx: RenderContext) -> None:
    backends = ctx.snapshot.backends
    at = ctx.snapshot.metadata.at
    too_long_secs = ctx.options.too_long_secs
    max_conn = get_setting_int(ctx.snapshot, "max_connections")

    locks = [be for be in backends if is_waiting_lock(be)]
    other = [be for be in backends if is_waiting_other(be)]
    too_long = [be for be in backends if is_too_long(be, at, too_long_secs)]
    idle = [be for be in backends if is_idle_in_transaction(be)]

    _heading(out, "Backends:")
    write_field(
        out,
        "Total Backends:",
        f"{len(backends)} ({percent(len(backends), max_conn):.1f}% of max {max_conn})",
    )
    write_field(
        out,
        "Problematic:",
        f"{len(locks)} waiting on locks, {len(other)} waiting on other, "
        f"{len(too_long)} xact too long, {len(idle)} idle in xact",
    )

    wait_cols = ("PID", "User", "App", "Client Addr", "Database", "Wait", "Query Start")
    lock_table = Table(*wait_cols)
    for be in locks:
        lock_table.add(
            *_backend_cells(be),
            f"{be.wait_event_type} / {be.wait_event}",
            format_time(be.query_start),
        )

    other_table = Table(*wait_cols)
    for be in other:
        other_table.add(
            *_backend_cells(be),
            f"{be.wait_event_type} / {be.wait_event}",
            format_time(be.query_start),
        )

    long_table = Table("PID", "User", "App", "Client Addr", "Database", "Transaction Start")
    for be in too_long:
        long_table.add(*_backend_cells(be), ctx.time_and_since(be.xact_start))

    idle_table = Table(
        "PID", "User", "App", "Client Addr", "Database", "Aborted?", "State Change"
    )
    for be in idle:
        idle_table.add(
            *_backend_cells(be),
            format_yes_no("aborted" in be.state),
            format_time(be.state_change),
        )

    _write_subtables(out, [
        ("Waiting for Locks:", lock_table),
        ("Other Waiting Backends:", other_table),
        (f"Long Running (>{too_long_secs} sec) Transactions:", long_table),
        ("Idling in Transaction:", idle_table),
    ])


def render_vacuum_progress(out: TextIO, ctx: RenderContext) -> None:
    _heading(out, "Vacuum Progress:")
    progress = ctx.snapshot.vacuum_progress
    for i, v in enumerate(progress, 1):
        scanned = (
            f"{v.heap_blks_scanned} of {v.heap_blks_total} "
            f"({percent(v.heap_blks_scanned, v.heap_blks_total):.1f}% complete)"
        )
        _line(out, f"{SECTION_INDENT}Vacuum Process #{i}:")
        write_field(out, "Phase:", v.phase, 6)
        write_field(out, "Database:", v.db_name, 6)
        write_field(out, "Table:", v.table_name, 6)
        write_field(out, "Scan Progress:", scanned, 6)
        write_field(out, "Heap Blks Vac'ed:", f"{v.heap_blks_vacuumed} of {v.heap_blks_total}", 6)
        write_field(out, "Idx Vac Cycles:", str(v.index_vacuum_count), 6)
        write_field(out, "Dead Tuples:", str(v.num_dead_tuples), 6)
        write_field(out, "Dead Tuples Max:", str(v.max_dead_tuples), 6)
    if not progress:
        _line(out, f"{SECTION_INDENT}No manual or auto vacuum jobs in progress.")
    settings_table(ctx.snapshot, VACUUM_SETTINGS).write(out, SECTION_INDENT)


# --- Roles and tablespaces ---


def render_roles(out: TextIO, ctx: RenderContext) -> None:
    _heading(out, "Roles:")
    table = Table(
        "Name", "Login", "Repl", "Super", "Creat Rol",
        "Creat DB", "Bypass RLS", "Inherit", "Expires", "Member Of",
    )
    for r in ctx.snapshot.roles:
        table.add(
            r.name,
            format_yes_blank(r.rolcanlogin),
            format_yes_blank(r.rolreplication),
            format_yes_blank(r.rolsuper),
            format_yes_blank(r.rolcreaterole),
            format_yes_blank(r.rolcreatedb),
            format_yes_blank(r.rolbypassrls),
            format_yes_blank(r.rolinherit),
            format_time(r.rolvaliduntil),
            ", ".join(r.member_of),
        )
    table.write(out, SECTION_INDENT)


def _usage(used: int, total: int, fmt=str) -> str:
    """ "<used> (<pct>%) of <total>", blank unless both are positive."""
    if used <= 0 or total <= 0:
        return ""
    return f"{fmt(used)} ({percent(used, total):.1f}%) of {fmt(total)}"


def render_tablespaces(out: TextIO, ctx: RenderContext) -> None:
    """Tablespaces; disk and inode usage are only known for local collection."""
    local = ctx.snapshot.metadata.local
    _heading(out, "Tablespaces:")
    if local:
        table = Table("Name", "Owner", "Location", "Size", "Disk Used", "Inode Used")
    else:
        table = Table("Name", "Owner", "Location", "Size")
    for t in ctx.snapshot.tablespaces:
        location = t.location
        if t.name in ("pg_default", "pg_global") and location:
            location = "$PGDATA = " + location
        cells = [t.name, t.owner, location, humanize_bytes(t.size)]
        if local:
            cells.append(_usage(t.disk_used, t.disk_total, humanize_bytes))
            cells.append(_usage(t.inodes_used, t.inodes_total))
        table.add(*cells)
    table.write(out, SECTION_INDENT)


# --- Databases ---


def _role_name(snapshot: Snapshot, oid: int) -> str:
    return next((r.name for r in snapshot.roles if r.oid == oid), "")


def _tablespace_name(snapshot: Snapshot, oid: int) -> str:
    return next((t.name for t in snapshot.tablespaces if t.oid == oid), "")


def format_connections(d: Database) -> str:
    """Backend count against the database's connection limit."""
    if d.datconnlimit < 0:
        return f"{d.numbackends} (no max limit)"
    pct = percent(d.numbackends, d.datconnlimit)
    return f"{d.numbackends} ({pct:.1f}%) of {d.datconnlimit}"


def _database_subtables(snapshot: Snapshot, db: str) -> list[tuple[str, Table]]:
    """Sequences, functions, extensions, disabled triggers and slow queries of one database."""
    sequences = Table("Sequence", "Cache Hits")
    for sq in snapshot.sequences:
        if sq.db_name == db:
            sequences.add(sq.name, format_pct(sq.blks_hit, sq.blks_hit + sq.blks_read))

    functions = Table("Function", "Calls", "Time (self)", "Time (self+children)")
    for uf in snapshot.user_functions:
        if uf.db_name == db:
            functions.add(
                uf.name, str(uf.calls), format_millis(uf.self_time), format_millis(uf.total_time)
            )

    extensions = Table("Name", "Version", "Comment")
    for ext in snapshot.extensions:
        if ext.db_name == db:
            extensions.add(ext.name, ext.installed_version, ext.comment)

    triggers = Table("Name", "Table", "Procedure")
    for tg in snapshot.disabled_triggers:
        if tg.db_name == db:
            triggers.add(tg.name, f"{tg.schema_name}.{tg.table_name}", tg.proc_name)

    statements = Table("Calls", "Avg Time", "Total Time", "Rows/Call", "Query")
    for st in snapshot.statements:
        if st.db_name == db:
            rows_per_call = st.rows // st.calls if st.calls > 0 else 0
            statements.add(
                str(st.calls),
                format_millis_truncated(safe_ratio(st.total_time, st.calls)),
                format_millis_truncated(st.total_time),
                str(rows_per_call),
                format_query(st.query),
            )

    return [
        ("Sequences:", sequences),
        ("Tracked Functions:", functions),
        ("Installed Extensions:", extensions),
        ("Disabled Triggers:", triggers),
        ("Slow Queries:", statements),
    ]


def render_databases(out: TextIO, ctx: RenderContext) -> None:
    snapshot = ctx.snapshot
    for i, d in enumerate(snapshot.databases, 1):
        xacts = d.xact_commit + d.xact_rollback
        tuples = d.tup_inserted + d.tup_updated + d.tup_deleted

        _heading(out, f"Database #{i}:")
        write_field(out, "Name:", d.name)
        write_field(out, "Owner:", _role_name(snapshot, d.datdba))
        write_field(out, "Tablespace:", _tablespace_name(snapshot, d.dattablespace))
        write_field(out, "Connections:", format_connections(d))
        write_field(out, "Frozen Xid Age:", str(d.age_datfrozenxid))
        write_field(
            out,
            "Transactions:",
            f"{d.xact_commit} ({percent(d.xact_commit, xacts):.1f}%) commits, "
            f"{d.xact_rollback} ({percent(d.xact_rollback, xacts):.1f}%) rollbacks",
        )
        write_field(out, "Cache Hits:", f"{percent(d.blks_hit, d.blks_hit + d.blks_read):.1f}%")
        write_field(
            out,
            "Rows Changed:",
            f"ins {percent(d.tup_inserted, tuples):.1f}%, "
            f"upd {percent(d.tup_updated, tuples):.1f}%, "
            f"del {percent(d.tup_deleted, tuples):.1f}%",
        )
        write_field(out, "Total Temp:", f"{humanize_bytes(d.temp_bytes)} in {d.temp_files} files")
        write_field(out, "Problems:", f"{d.deadlocks} deadlocks, {d.conflicts} conflicts")
        write_field(out, "Totals Since:", ctx.time_and_since(d.stats_reset))
        if d.size is not None:
            write_field(out, "Size:", humanize_bytes(d.size))

        _write_subtables(out, _database_subtables(snapshot, d.name))


# --- Tables and indexes ---


def table_attributes(t: TableStats) -> str:
    """Persistence, kind and partitioning of a table, comma separated."""
    parts = []
    if t.relpersistence == "u":
        parts.append("unlogged")
    elif t.relpersistence == "t":
        parts.append("temporary")
    if t.relkind == "m":
        parts.append("materialized view")
    elif t.relkind == "p":
        parts.append("partition parent")
    if t.relispartition:
        parts.append("partition")
    return ", ".join(parts)


def _index_table(snapshot: Snapshot, t: TableStats) -> Optional[Table]:
    indexes = [
        idx for idx in snapshot.indexes
        if (idx.db_name, idx.schema_name, idx.table_name) == (t.db_name, t.schema_name, t.name)
    ]
    if not indexes:
        return None

    table = Table(
        "Index", "Type", "Size", "Bloat", "Cache Hits",
        "Scans", "Rows Read/Scan", "Rows Fetched/Scan",
    )
    for idx in indexes:
        table.add(
            idx.name,
            idx.amname,
            humanize_bytes(idx.size),
            format_size_and_bloat(idx.size, idx.bloat),
            format_pct(idx.idx_blks_hit, idx.idx_blks_hit + idx.idx_blks_read),
            str(idx.idx_scan),
            f"{safe_ratio(idx.idx_tup_read, idx.idx_scan):.1f}",
            f"{safe_ratio(idx.idx_tup_fetch, idx.idx_scan):.1f}",
        )
    return table


def _render_table(out: TextIO, ctx: RenderContext, num: int, t: TableStats) -> None:
    n_tup = t.n_live_tup + t.n_dead_tup
    n_changed = t.n_tup_ins + t.n_tup_upd + t.n_tup_del
    blks_hit = t.heap_blks_hit + t.toast_blks_hit + t.tidx_blks_hit
    blks_read = t.heap_blks_read + t.toast_blks_read + t.tidx_blks_read
    attrs = table_attributes(t)

    _heading(out, f'Table #{num} in "{t.db_name}":')
    write_field(out, "Name:", f"{t.db_name}.{t.schema_name}.{t.name}")
    if attrs:
        write_field(out, "Attributes:", attrs)
    if t.tablespace_name:
        write_field(out, "Tablespace:", t.tablespace_name)
    write_field(out, "Columns:", str(t.relnatts))
    write_field(out, "Manual Vacuums:", format_count_and_time(t.vacuum_count, t.last_vacuum, ctx.now))
    write_field(out, "Manual Analyze:", format_count_and_time(t.analyze_count, t.last_analyze, ctx.now))
    write_field(
        out, "Auto Vacuums:", format_count_and_time(t.autovacuum_count, t.last_autovacuum, ctx.now)
    )
    write_field(
        out, "Auto Analyze:", format_count_and_time(t.autoanalyze_count, t.last_autoanalyze, ctx.now)
    )
    write_field(
        out, "Post-Analyze:", f"{percent(t.n_mod_since_analyze, n_tup):.1f}% est. rows modified"
    )
    write_field(out, "Row Estimate:", f"{percent(t.n_live_tup, n_tup):.1f}% live of total {n_tup}")
    write_field(
        out,
        "Rows Changed:",
        f"ins {percent(t.n_tup_ins, n_changed):.1f}%, "
        f"upd {percent(t.n_tup_upd, n_changed):.1f}%, "
        f"del {percent(t.n_tup_del, n_changed):.1f}%",
    )
    write_field(out, "HOT Updates:", f"{percent(t.n_tup_hot_upd, t.n_tup_upd):.1f}% of all updates")
    write_field(out, "Seq Scans:", f"{t.seq_scan}, {safe_ratio(t.seq_tup_read, t.seq_scan):.1f} rows/scan")
    write_field(out, "Idx Scans:", f"{t.idx_scan}, {safe_ratio(t.idx_tup_fetch, t.idx_scan):.1f} rows/scan")
    write_field(
        out,
        "Cache Hits:",
        f"{percent(blks_hit, blks_hit + blks_read):.1f}% "
        f"(idx={percent(t.idx_blks_hit, t.idx_blks_hit + t.idx_blks_read):.1f}%)",
    )
    if t.size is not None:
        write_field(out, "Size:", humanize_bytes(t.size))
    if t.bloat is not None:
        write_field(out, "Bloat:", format_size_and_bloat(t.size, t.bloat))

    indexes = _index_table(ctx.snapshot, t)
    if indexes is not None:
        indexes.write(out, SECTION_INDENT)


def render_tables(out: TextIO, ctx: RenderContext) -> None:
    """Tables of every scanned database, numbered per database."""
    for db in ctx.snapshot.metadata.collected_dbs:
        tables = [t for t in ctx.snapshot.tables if t.db_name == db]
        for i, t in enumerate(tables, 1):
            _render_table(out, ctx, i, t)
