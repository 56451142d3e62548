"""Tests for recovery and replication sections."""

import dataclasses

from pgreport.fields import field_line
from pgreport.models import (
    Publication,
    ReplicationIn,
    ReplicationOut,
    ReplicationSlot,
    Subscription,
)
from pgreport.sections import (
    render_publications,
    render_recovery,
    render_replication_in,
    render_replication_out,
    render_replication_slots,
    render_subscriptions,
)

AT = 1_700_000_000


def _replica(**overrides):
    values = dict(
        role_name="repl",
        application_name="walreceiver",
        client_addr="10.0.0.6",
        backend_start=AT - 600,
        state="streaming",
        sent_lsn="0/3000",
        write_lsn="0/2000",
        flush_lsn="0/2000",
        replay_lsn="0/1000",
        sync_priority=0,
        sync_state="async",
    )
    values.update(overrides)
    return ReplicationOut(**values)


class TestRecovery:
    """Test the recovery status section."""

    def test_fields(self, sample_snapshot, make_context, render_lines):
        cluster = dataclasses.replace(
            sample_snapshot.cluster,
            is_in_recovery=True,
            last_wal_receive_lsn="0/2000",
            last_wal_replay_lsn="0/1800",
            last_xact_replay_timestamp=AT - 30,
        )
        snapshot = dataclasses.replace(sample_snapshot, cluster=cluster)
        lines = render_lines(render_recovery, make_context(snapshot))
        assert lines == [
            "",
            "Recovery Status:",
            field_line("Replay paused:", "no"),
            field_line("Received LSN:", "0/2000"),
            field_line("Replayed LSN:", "0/1800 (lag = 2.0 KiB)"),
            field_line("Last Replayed Txn:", "14 Nov 2023 10:12:50 PM (30 seconds ago)"),
        ]

    def test_caught_up(self, sample_snapshot, make_context, render_lines):
        cluster = dataclasses.replace(
            sample_snapshot.cluster,
            last_wal_receive_lsn="0/2000",
            last_wal_replay_lsn="0/2000",
        )
        snapshot = dataclasses.replace(sample_snapshot, cluster=cluster)
        lines = render_lines(render_recovery, make_context(snapshot))
        assert field_line("Replayed LSN:", "0/2000 (no lag)") in lines


class TestIncomingReplication:
    """Test the incoming replication section."""

    def test_fields(self, sample_snapshot, make_context, render_lines):
        incoming = ReplicationIn(
            status="streaming",
            receive_start_lsn="0/1000",
            receive_start_tli=1,
            received_lsn="0/3000",
            received_tli=2,
            latency_micros=1500,
            slot_name="s1",
        )
        snapshot = dataclasses.replace(sample_snapshot, replication_incoming=incoming)
        lines = render_lines(render_replication_in, make_context(snapshot))
        assert lines == [
            "",
            "Incoming Replication Stats:",
            field_line("Status:", "streaming"),
            field_line("Received LSN:", "0/3000 (started at 0/1000, 8.0 KiB)"),
            field_line("Timeline:", "2 (was 1 at start)"),
            field_line("Latency:", "1.5ms"),
            field_line("Replication Slot:", "s1"),
        ]

    def test_no_progress_omits_distance(self, sample_snapshot, make_context, render_lines):
        incoming = ReplicationIn(receive_start_lsn="0/1000", received_lsn="0/1000")
        snapshot = dataclasses.replace(sample_snapshot, replication_incoming=incoming)
        lines = render_lines(render_replication_in, make_context(snapshot))
        assert field_line("Received LSN:", "0/1000 (started at 0/1000)") in lines


class TestOutgoingReplication:
    """Test the outgoing replication section."""

    def test_destination_block(self, sample_snapshot, make_context, render_lines):
        snapshot = dataclasses.replace(sample_snapshot, replication_outgoing=(_replica(),))
        lines = render_lines(render_replication_out, make_context(snapshot))
        assert lines == [
            "",
            "Outgoing Replication Stats:",
            "    Destination #1:",
            field_line("User:", "repl", 6),
            field_line("Application:", "walreceiver", 6),
            field_line("Client Address:", "10.0.0.6", 6),
            field_line("State:", "streaming", 6),
            field_line("Started At:", "14 Nov 2023 10:03:20 PM (10 minutes ago)", 6),
            field_line("Sent LSN:", "0/3000", 6),
            field_line("Written Until:", "0/2000 (write lag = 4.0 KiB)", 6),
            field_line("Flushed Until:", "0/2000 (no flush lag)", 6),
            field_line("Replayed Until:", "0/1000 (replay lag = 4.0 KiB)", 6),
            field_line("Sync Priority:", "0", 6),
            field_line("Sync State:", "async", 6),
        ]

    def test_numbered_destinations(self, sample_snapshot, make_context, render_lines):
        replicas = (_replica(), _replica(application_name="second"))
        snapshot = dataclasses.replace(sample_snapshot, replication_outgoing=replicas)
        lines = render_lines(render_replication_out, make_context(snapshot))
        assert "    Destination #2:" in lines

    def test_unknown_positions_suppress_lag(self, sample_snapshot, make_context, render_lines):
        replica = _replica(write_lsn="", sync_priority=None)
        snapshot = dataclasses.replace(sample_snapshot, replication_outgoing=(replica,))
        lines = render_lines(render_replication_out, make_context(snapshot))
        assert field_line("Written Until:", "", 6) in lines
        assert field_line("Flushed Until:", "0/2000", 6) in lines
        assert field_line("Sync Priority:", "", 6) in lines


class TestReplicationSlots:
    """Test the replication slot tables."""

    def _slots(self):
        return (
            ReplicationSlot(
                slot_name="standby1", slot_type="physical", active=True, restart_lsn="0/1000"
            ),
            ReplicationSlot(
                slot_name="decoder", plugin="pgoutput", slot_type="logical", db_name="app",
                xmin=561, restart_lsn="0/1000", confirmed_flush_lsn="0/2000",
            ),
        )

    def test_physical_and_logical(self, sample_snapshot, make_context, render_lines):
        snapshot = dataclasses.replace(sample_snapshot, replication_slots=self._slots())
        lines = render_lines(render_replication_slots, make_context(snapshot))
        assert lines[:2] == ["", "Physical Replication Slots:"]
        assert "Logical Replication Slots:" in lines
        assert "Temporary" in lines[3]
        physical_row = [cell.strip() for cell in lines[5].strip(" |").split("|")]
        assert physical_row == ["standby1", "yes", "", "0/1000", "no"]

    def test_temporary_column_needs_v10(self, sample_snapshot, make_context, render_lines):
        settings = dict(sample_snapshot.settings, server_version_num="90600")
        snapshot = dataclasses.replace(
            sample_snapshot, settings=settings, replication_slots=self._slots()
        )
        lines = render_lines(render_replication_slots, make_context(snapshot))
        assert not any("Temporary" in line for line in lines)

    def test_only_logical(self, sample_snapshot, make_context, render_lines):
        snapshot = dataclasses.replace(sample_snapshot, replication_slots=self._slots()[1:])
        lines = render_lines(render_replication_slots, make_context(snapshot))
        assert "Physical Replication Slots:" not in lines
        assert lines[:2] == ["", "Logical Replication Slots:"]


class TestLogicalReplication:
    """Test publications and subscriptions."""

    def test_publication(self, sample_snapshot, make_context, render_lines):
        pub = Publication(name="pub1", insert=True, update=True, table_count=3)
        snapshot = dataclasses.replace(sample_snapshot, publications=(pub,))
        lines = render_lines(render_publications, make_context(snapshot))
        assert lines == [
            "",
            "Logical Replication Publications:",
            "    Publication #1:",
            field_line("Name:", "pub1", 6),
            field_line("All Tables?", "no", 6),
            field_line("Propogate:", "inserts, updates", 6),
            field_line("Tables:", "3", 6),
        ]

    def test_subscription(self, sample_snapshot, make_context, render_lines):
        sub = Subscription(
            name="sub1", enabled=True, pub_count=1, table_count=2,
            worker_count=1, received_lsn="0/5000", latency_micros=250,
        )
        snapshot = dataclasses.replace(sample_snapshot, subscriptions=(sub,))
        lines = render_lines(render_subscriptions, make_context(snapshot))
        assert lines[2] == "    Subscription #1:"
        assert field_line("Enabled?", "yes", 6) in lines
        assert field_line("Received Until:", "0/5000", 6) in lines
        assert field_line("Latency:", "250us", 6) in lines
