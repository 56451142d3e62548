"""Build a Snapshot from the collector's JSON document."""

import json
from dataclasses import fields
from pathlib import Path
from typing import Any, Callable, Optional

from .extract import (
    coerce_epoch,
    coerce_size,
    coerce_to_float,
    coerce_to_int,
    coerce_to_str,
    get_by_path,
)
from .models import (
    Backend,
    BGWriter,
    ClusterInfo,
    Database,
    Extension,
    Index,
    Metadata,
    Publication,
    ReplicationIn,
    ReplicationOut,
    ReplicationSlot,
    Role,
    Sequence,
    Snapshot,
    Statement,
    Subscription,
    System,
    Table,
    Tablespace,
    Trigger,
    UserFunction,
    VacuumProgress,
    WALArchiving,
)
from . import log

# Optional[int] fields that use -1 for "unknown"; every other Optional[int]
# field is an epoch timestamp that uses 0 for "unknown".
SIZE_FIELDS = frozenset(
    {"size", "bloat", "wal_count", "wal_ready_count", "sync_priority"}
)

# Top-level lists in the JSON document and the model of their items
COLLECTIONS: dict[str, type] = {
    "replication_outgoing": ReplicationOut,
    "replication_slots": ReplicationSlot,
    "publications": Publication,
    "subscriptions": Subscription,
    "backends": Backend,
    "vacuum_progress": VacuumProgress,
    "roles": Role,
    "tablespaces": Tablespace,
    "databases": Database,
    "tables": Table,
    "indexes": Index,
    "sequences": Sequence,
    "user_functions": UserFunction,
    "extensions": Extension,
    "disabled_triggers": Trigger,
    "statements": Statement,
}


def _converter(name: str, tp: Any) -> Callable[[Any], Any]:
    """Pick the coercion function for a model field."""
    if tp is int:
        return coerce_to_int
    if tp is float:
        return coerce_to_float
    if tp is str:
        return coerce_to_str
    if tp is bool:
        return bool
    if tp == Optional[int]:
        return coerce_size if name in SIZE_FIELDS else coerce_epoch
    if tp == tuple[str, ...]:
        return lambda v: tuple(coerce_to_str(x) for x in (v or []))
    raise TypeError(f"No converter for field {name!r} of type {tp!r}")


def build_model(cls: type, data: Optional[dict[str, Any]]) -> Any:
    """
    Build a flat model dataclass from a JSON object.

    Missing keys keep the dataclass default. Keys the model does not know
    are ignored.

    Args:
        cls: Model dataclass (flat, scalar fields only)
        data: JSON object, or None for an all-defaults instance

    Returns:
        Instance of ``cls``
    """
    data = data or {}
    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        if f.name not in data:
            continue
        kwargs[f.name] = _converter(f.name, f.type)(data[f.name])
    return cls(**kwargs)


def _build_settings(raw: Any) -> dict[str, str]:
    """Flatten {"name": {"setting": "value", ...}} to {"name": "value"}."""
    if not isinstance(raw, dict):
        return {}
    settings: dict[str, str] = {}
    for key, value in raw.items():
        if isinstance(value, dict):
            settings[key] = coerce_to_str(value.get("setting"))
        else:
            settings[key] = coerce_to_str(value)
    return settings


def _build_list(cls: type, raw: Any) -> tuple:
    if not isinstance(raw, list):
        return ()
    return tuple(build_model(cls, item) for item in raw if isinstance(item, dict))


def snapshot_from_dict(data: dict[str, Any]) -> Snapshot:
    """
    Convert a collector JSON document into an immutable Snapshot.

    Collection metadata lives under "meta"; cluster-level values are
    top-level keys; optional sub-models ("system", "replication_incoming")
    stay None when absent.

    Args:
        data: Parsed JSON document

    Returns:
        Snapshot model
    """
    system = data.get("system")
    incoming = data.get("replication_incoming")

    return Snapshot(
        metadata=build_model(Metadata, get_by_path(data, "meta")),
        cluster=build_model(ClusterInfo, data),
        settings=_build_settings(data.get("settings")),
        system=build_model(System, system) if isinstance(system, dict) else None,
        wal_archiving=build_model(WALArchiving, data.get("wal_archiving")),
        bg_writer=build_model(BGWriter, data.get("bg_writer")),
        replication_incoming=(
            build_model(ReplicationIn, incoming) if isinstance(incoming, dict) else None
        ),
        **{name: _build_list(cls, data.get(name)) for name, cls in COLLECTIONS.items()},
    )


def load_snapshot(path: Path) -> Optional[Snapshot]:
    """Load a snapshot JSON file from a specific path."""
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError) as e:
        log.error(f"Failed to load snapshot {path}: {e}")
        return None

    if not isinstance(data, dict):
        log.error(f"Failed to load snapshot {path}: top-level value is not an object")
        return None

    log.debug(f"Loaded snapshot from {path}")
    return snapshot_from_dict(data)
