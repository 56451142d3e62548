"""Root fixtures for all tests."""

import os
import time

import pytest

from pgreport.context import RenderContext, ReportOptions
from pgreport.snapshot import snapshot_from_dict

# 14 Nov 2023 10:13:20 PM UTC
AT = 1_700_000_000


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Clear PGREPORT_* env vars, pin TZ=UTC and reset config singleton."""
    for key in list(os.environ.keys()):
        if key.startswith("PGREPORT_"):
            monkeypatch.delenv(key, raising=False)

    monkeypatch.setenv("TZ", "UTC")
    time.tzset()

    # Reset config singleton
    import pgreport.env

    pgreport.env._config = None

    yield

    # Reset again after test
    pgreport.env._config = None


def _settings(**values):
    """Collector-style settings block from keyword values."""
    return {key: {"setting": value} for key, value in values.items()}


@pytest.fixture
def sample_settings():
    """Settings of an 11.x server."""
    return _settings(
        cluster_name="main",
        server_version="11.5",
        server_version_num="110005",
        max_connections="100",
        block_size="8192",
        shared_buffers="16384",
        work_mem="4096",
        maintenance_work_mem="65536",
        temp_buffers="1024",
        autovacuum_work_mem="-1",
        temp_file_limit="-1",
        max_worker_processes="8",
        autovacuum_max_workers="3",
        max_parallel_workers_per_gather="2",
        effective_io_concurrency="1",
        wal_level="replica",
        archive_timeout="0",
        wal_compression="off",
        max_wal_size="64",
        min_wal_size="5",
        checkpoint_timeout="300",
        full_page_writes="on",
        wal_keep_segments="0",
        archive_mode="off",
        bgwriter_delay="200",
        bgwriter_flush_after="64",
        bgwriter_lru_maxpages="100",
        bgwriter_lru_multiplier="2",
        checkpoint_completion_target="0.5",
        autovacuum="on",
        autovacuum_analyze_threshold="50",
        autovacuum_vacuum_threshold="50",
        autovacuum_freeze_max_age="200000000",
        autovacuum_naptime="60",
        vacuum_freeze_min_age="50000000",
        vacuum_freeze_table_age="150000000",
    )


@pytest.fixture
def snapshot_data(sample_settings):
    """A collector JSON document for a small primary server."""
    return {
        "meta": {"at": AT, "collected_dbs": ["app"], "local": True},
        "start_time": AT - 3 * 86400,
        "system_identifier": "6700000000000000001",
        "timeline_id": 1,
        "checkpoint_time": AT - 120,
        "prior_lsn": "0/1000000",
        "redo_lsn": "0/1000400",
        "checkpoint_lsn": "0/1000800",
        "next_xid": 1001,
        "oldest_xid": 561,
        "last_xact_timestamp": AT - 5,
        "notification_queue_usage": 0.0,
        "is_in_recovery": False,
        "wal_count": 12,
        "wal_ready_count": -1,
        "settings": sample_settings,
        "system": {
            "cpu_model": "Intel Xeon",
            "num_cores": 4,
            "load_avg": 0.5,
            "mem_used": 2 * 1024**3,
            "mem_free": 1024**3,
            "mem_buffers": 512 * 1024**2,
            "mem_cached": 3 * 1024**3,
            "swap_used": 0,
            "swap_free": 1024**3,
            "hostname": "db1",
        },
        "wal_archiving": {"stats_reset": AT - 3600},
        "bg_writer": {
            "checkpoints_timed": 30,
            "checkpoints_req": 10,
            "buffers_checkpoint": 600,
            "buffers_clean": 300,
            "maxwritten_clean": 2,
            "buffers_backend": 100,
            "buffers_backend_fsync": 0,
            "buffers_alloc": 1024,
            "stats_reset": AT - 3600,
        },
        "backends": [
            {
                "pid": 101,
                "db_name": "app",
                "role_name": "alice",
                "application_name": "psql",
                "client_addr": "10.0.0.5",
                "xact_start": AT - 10,
                "query_start": AT - 10,
                "state": "active",
                "query": "SELECT 1",
            },
        ],
        "roles": [
            {"oid": 10, "name": "postgres", "rolsuper": True, "rolinherit": True,
             "rolcreaterole": True, "rolcreatedb": True, "rolcanlogin": True,
             "rolreplication": True, "rolbypassrls": True, "rolvaliduntil": 0,
             "member_of": []},
            {"oid": 16384, "name": "alice", "rolinherit": True, "rolcanlogin": True,
             "rolvaliduntil": 0, "member_of": ["readers", "writers"]},
        ],
        "tablespaces": [
            {"oid": 1663, "name": "pg_default", "owner": "postgres",
             "location": "/var/lib/postgresql/data", "size": 40 * 1024**2,
             "disk_used": 25, "disk_total": 100, "inodes_used": 10, "inodes_total": 1000},
        ],
        "databases": [
            {
                "oid": 16400,
                "name": "app",
                "datdba": 16384,
                "dattablespace": 1663,
                "datconnlimit": -1,
                "age_datfrozenxid": 440,
                "numbackends": 1,
                "xact_commit": 900,
                "xact_rollback": 100,
                "blks_read": 10,
                "blks_hit": 90,
                "tup_inserted": 50,
                "tup_updated": 30,
                "tup_deleted": 20,
                "conflicts": 0,
                "temp_files": 2,
                "temp_bytes": 2048,
                "deadlocks": 1,
                "stats_reset": 0,
                "size": 8 * 1024**2,
            },
        ],
        "tables": [
            {
                "oid": 16500,
                "db_name": "app",
                "schema_name": "public",
                "name": "orders",
                "relkind": "r",
                "relpersistence": "p",
                "relnatts": 5,
                "seq_scan": 4,
                "seq_tup_read": 10,
                "idx_scan": 10,
                "idx_tup_fetch": 25,
                "n_tup_ins": 50,
                "n_tup_upd": 30,
                "n_tup_del": 20,
                "n_tup_hot_upd": 15,
                "n_live_tup": 75,
                "n_dead_tup": 25,
                "n_mod_since_analyze": 10,
                "last_autovacuum": AT - 2 * 86400,
                "autovacuum_count": 3,
                "heap_blks_read": 10,
                "heap_blks_hit": 90,
                "idx_blks_read": 1,
                "idx_blks_hit": 3,
                "size": 1000,
                "bloat": 250,
            },
        ],
        "indexes": [
            {
                "db_name": "app",
                "schema_name": "public",
                "table_name": "orders",
                "name": "orders_pkey",
                "amname": "btree",
                "idx_scan": 10,
                "idx_tup_read": 20,
                "idx_tup_fetch": 25,
                "idx_blks_read": 1,
                "idx_blks_hit": 3,
                "size": 16384,
                "bloat": -1,
            },
        ],
        "sequences": [
            {"db_name": "app", "name": "public.orders_id_seq", "blks_read": 1, "blks_hit": 3},
        ],
        "statements": [
            {"db_name": "app", "user_name": "alice", "query": "SELECT *\nFROM orders",
             "calls": 4, "total_time": 10.0, "rows": 10},
        ],
    }


@pytest.fixture
def sample_snapshot(snapshot_data):
    """Snapshot built from the sample collector document."""
    return snapshot_from_dict(snapshot_data)


@pytest.fixture
def make_context():
    """Build a RenderContext for a snapshot with default options."""

    def _make(snapshot, **options):
        return RenderContext.create(snapshot, ReportOptions(**options))

    return _make
