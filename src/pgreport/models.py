"""Data models for a collected PostgreSQL metrics snapshot.

The snapshot is built once by the collector (see ``pgreport.snapshot``) and
is never mutated while a report is rendered. Sizes and epoch timestamps that
the collector could not determine are stored as ``None`` rather than as the
``-1`` / ``0`` sentinels used in the collector's JSON output.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Metadata:
    """Collection metadata."""

    at: int = 0  # Capture time, epoch seconds
    collected_dbs: tuple[str, ...] = ()
    local: bool = False  # Collected on the database host itself


@dataclass(frozen=True)
class ClusterInfo:
    """Server identity, checkpoint and transaction-id state."""

    start_time: Optional[int] = None
    system_identifier: str = ""
    timeline_id: int = 0
    checkpoint_time: Optional[int] = None
    prior_lsn: str = ""
    redo_lsn: str = ""
    checkpoint_lsn: str = ""
    next_xid: int = 0
    oldest_xid: int = 0
    last_xact_timestamp: Optional[int] = None
    notification_queue_usage: float = 0.0
    is_in_recovery: bool = False
    is_wal_replay_paused: bool = False
    last_wal_receive_lsn: str = ""
    last_wal_replay_lsn: str = ""
    last_xact_replay_timestamp: Optional[int] = None
    wal_count: Optional[int] = None
    wal_ready_count: Optional[int] = None


@dataclass(frozen=True)
class System:
    """Host-level CPU and memory figures (local collection only)."""

    cpu_model: str = ""
    num_cores: int = 0
    load_avg: float = 0.0
    mem_used: int = 0
    mem_free: int = 0
    mem_buffers: int = 0
    mem_cached: int = 0
    swap_used: int = 0
    swap_free: int = 0
    hostname: str = ""


@dataclass(frozen=True)
class Backend:
    """A single server process."""

    pid: int = 0
    db_name: str = ""
    role_name: str = ""
    application_name: str = ""
    client_addr: str = ""
    backend_start: Optional[int] = None
    xact_start: Optional[int] = None
    query_start: Optional[int] = None
    state_change: Optional[int] = None
    wait_event_type: str = ""
    wait_event: str = ""
    state: str = ""
    query: str = ""


@dataclass(frozen=True)
class ReplicationOut:
    """A downstream replica connected to this server."""

    role_name: str = ""
    application_name: str = ""
    client_addr: str = ""
    backend_start: Optional[int] = None
    state: str = ""
    sent_lsn: str = ""
    write_lsn: str = ""
    flush_lsn: str = ""
    replay_lsn: str = ""
    sync_priority: Optional[int] = None
    sync_state: str = ""


@dataclass(frozen=True)
class ReplicationIn:
    """The WAL receiver state when this server is a replica."""

    status: str = ""
    receive_start_lsn: str = ""
    receive_start_tli: int = 0
    received_lsn: str = ""
    received_tli: int = 0
    latency_micros: int = 0
    slot_name: str = ""


@dataclass(frozen=True)
class ReplicationSlot:
    slot_name: str = ""
    plugin: str = ""
    slot_type: str = ""  # "physical" or "logical"
    db_name: str = ""
    active: bool = False
    xmin: int = 0
    restart_lsn: str = ""
    confirmed_flush_lsn: str = ""
    temporary: bool = False


@dataclass(frozen=True)
class Publication:
    name: str = ""
    all_tables: bool = False
    insert: bool = False
    update: bool = False
    delete: bool = False
    table_count: int = 0


@dataclass(frozen=True)
class Subscription:
    name: str = ""
    enabled: bool = False
    pub_count: int = 0
    table_count: int = 0
    worker_count: int = 0
    received_lsn: str = ""
    latency_micros: int = 0


@dataclass(frozen=True)
class WALArchiving:
    archived_count: int = 0
    last_archived_wal: str = ""
    last_archived_time: Optional[int] = None
    failed_count: int = 0
    last_failed_wal: str = ""
    last_failed_time: Optional[int] = None
    stats_reset: Optional[int] = None


@dataclass(frozen=True)
class BGWriter:
    checkpoints_timed: int = 0
    checkpoints_req: int = 0
    buffers_checkpoint: int = 0
    buffers_clean: int = 0
    maxwritten_clean: int = 0
    buffers_backend: int = 0
    buffers_backend_fsync: int = 0
    buffers_alloc: int = 0
    stats_reset: Optional[int] = None


@dataclass(frozen=True)
class VacuumProgress:
    db_name: str = ""
    table_name: str = ""
    phase: str = ""
    heap_blks_total: int = 0
    heap_blks_scanned: int = 0
    heap_blks_vacuumed: int = 0
    index_vacuum_count: int = 0
    max_dead_tuples: int = 0
    num_dead_tuples: int = 0


@dataclass(frozen=True)
class Role:
    oid: int = 0
    name: str = ""
    rolsuper: bool = False
    rolinherit: bool = False
    rolcreaterole: bool = False
    rolcreatedb: bool = False
    rolcanlogin: bool = False
    rolreplication: bool = False
    rolbypassrls: bool = False
    rolvaliduntil: Optional[int] = None
    member_of: tuple[str, ...] = ()


@dataclass(frozen=True)
class Tablespace:
    oid: int = 0
    name: str = ""
    owner: str = ""
    location: str = ""
    size: Optional[int] = None
    disk_used: int = 0
    disk_total: int = 0
    inodes_used: int = 0
    inodes_total: int = 0


@dataclass(frozen=True)
class Database:
    oid: int = 0
    name: str = ""
    datdba: int = 0  # Owner role OID
    dattablespace: int = 0
    datconnlimit: int = -1  # Negative means no limit
    age_datfrozenxid: int = 0
    numbackends: int = 0
    xact_commit: int = 0
    xact_rollback: int = 0
    blks_read: int = 0
    blks_hit: int = 0
    tup_inserted: int = 0
    tup_updated: int = 0
    tup_deleted: int = 0
    conflicts: int = 0
    temp_files: int = 0
    temp_bytes: int = 0
    deadlocks: int = 0
    stats_reset: Optional[int] = None
    size: Optional[int] = None


@dataclass(frozen=True)
class Table:
    oid: int = 0
    db_name: str = ""
    schema_name: str = ""
    name: str = ""
    relkind: str = "r"
    relpersistence: str = "p"
    relnatts: int = 0
    relispartition: bool = False
    tablespace_name: str = ""
    seq_scan: int = 0
    seq_tup_read: int = 0
    idx_scan: int = 0
    idx_tup_fetch: int = 0
    n_tup_ins: int = 0
    n_tup_upd: int = 0
    n_tup_del: int = 0
    n_tup_hot_upd: int = 0
    n_live_tup: int = 0
    n_dead_tup: int = 0
    n_mod_since_analyze: int = 0
    last_vacuum: Optional[int] = None
    last_autovacuum: Optional[int] = None
    last_analyze: Optional[int] = None
    last_autoanalyze: Optional[int] = None
    vacuum_count: int = 0
    autovacuum_count: int = 0
    analyze_count: int = 0
    autoanalyze_count: int = 0
    heap_blks_read: int = 0
    heap_blks_hit: int = 0
    idx_blks_read: int = 0
    idx_blks_hit: int = 0
    toast_blks_read: int = 0
    toast_blks_hit: int = 0
    tidx_blks_read: int = 0
    tidx_blks_hit: int = 0
    size: Optional[int] = None
    bloat: Optional[int] = None


@dataclass(frozen=True)
class Index:
    db_name: str = ""
    schema_name: str = ""
    table_name: str = ""
    name: str = ""
    amname: str = ""
    idx_scan: int = 0
    idx_tup_read: int = 0
    idx_tup_fetch: int = 0
    idx_blks_read: int = 0
    idx_blks_hit: int = 0
    size: Optional[int] = None
    bloat: Optional[int] = None


@dataclass(frozen=True)
class Sequence:
    db_name: str = ""
    name: str = ""
    blks_read: int = 0
    blks_hit: int = 0


@dataclass(frozen=True)
class UserFunction:
    db_name: str = ""
    name: str = ""
    calls: int = 0
    total_time: float = 0.0  # Milliseconds
    self_time: float = 0.0  # Milliseconds


@dataclass(frozen=True)
class Extension:
    db_name: str = ""
    name: str = ""
    installed_version: str = ""
    comment: str = ""


@dataclass(frozen=True)
class Trigger:
    db_name: str = ""
    schema_name: str = ""
    table_name: str = ""
    name: str = ""
    proc_name: str = ""


@dataclass(frozen=True)
class Statement:
    db_name: str = ""
    user_name: str = ""
    query: str = ""
    calls: int = 0
    total_time: float = 0.0  # Milliseconds
    rows: int = 0


@dataclass(frozen=True)
class Snapshot:
    """Root of a collected snapshot.

    ``settings`` maps server configuration parameter names to their raw
    string values.
    """

    metadata: Metadata = field(default_factory=Metadata)
    cluster: ClusterInfo = field(default_factory=ClusterInfo)
    settings: dict[str, str] = field(default_factory=dict)
    system: Optional[System] = None
    wal_archiving: WALArchiving = field(default_factory=WALArchiving)
    bg_writer: BGWriter = field(default_factory=BGWriter)
    replication_incoming: Optional[ReplicationIn] = None
    replication_outgoing: tuple[ReplicationOut, ...] = ()
    replication_slots: tuple[ReplicationSlot, ...] = ()
    publications: tuple[Publication, ...] = ()
    subscriptions: tuple[Subscription, ...] = ()
    backends: tuple[Backend, ...] = ()
    vacuum_progress: tuple[VacuumProgress, ...] = ()
    roles: tuple[Role, ...] = ()
    tablespaces: tuple[Tablespace, ...] = ()
    databases: tuple[Database, ...] = ()
    tables: tuple[Table, ...] = ()
    indexes: tuple[Index, ...] = ()
    sequences: tuple[Sequence, ...] = ()
    user_functions: tuple[UserFunction, ...] = ()
    extensions: tuple[Extension, ...] = ()
    disabled_triggers: tuple[Trigger, ...] = ()
    statements: tuple[Statement, ...] = ()
