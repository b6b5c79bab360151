# sequin_platform/models.py
# Domain records for connections, stream consumers, destinations and backfills.
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
#
# One record per resource serves as both the desired configuration (identity and
# server-computed fields left as None) and the persisted state. None is the only
# "absent" value. Records are frozen; reconcilers return new instances.
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Union

from .errors import ValidationError

__all__ = [
    "CONSUMER_STATUSES",
    "ACTIONS",
    "LOAD_SHEDDING_POLICIES",
    "TIMESTAMP_FORMATS",
    "SASL_MECHANISMS",
    "BACKFILL_STATES",
    "BACKFILL_LIFECYCLE",
    "ReplicationSlot",
    "PrimaryConnection",
    "Connection",
    "KafkaDestination",
    "SqsDestination",
    "KinesisDestination",
    "WebhookDestination",
    "Destination",
    "DESTINATION_TYPES",
    "ALL_DESTINATION_FIELDS",
    "destination_fields",
    "flatten_destination",
    "SourceFilter",
    "TableSpec",
    "StatusInfo",
    "StreamConsumer",
    "BackfillProgress",
    "Backfill",
]

CONSUMER_STATUSES = ("active", "disabled", "paused")
ACTIONS = ("insert", "update", "delete")
LOAD_SHEDDING_POLICIES = ("pause_on_full", "discard_on_full")
TIMESTAMP_FORMATS = ("iso8601", "unix_microsecond")
SASL_MECHANISMS = ("PLAIN", "SCRAM-SHA-256", "SCRAM-SHA-512", "AWS_MSK_IAM")
BACKFILL_STATES = ("active", "cancelled")
BACKFILL_LIFECYCLE = ("active", "completed", "cancelled")


def _check_keys(what: str, cfg: Mapping[str, Any], allowed: set[str]) -> None:
    unknown = sorted(set(cfg) - allowed)
    if unknown:
        raise ValidationError(f"{what}: unknown field(s) {', '.join(unknown)}")


def _names(cls: type) -> set[str]:
    return {f.name for f in fields(cls)}


def _str_list(what: str, v: Any) -> list[str] | None:
    if v is None:
        return None
    if isinstance(v, (str, bytes)) or not isinstance(v, (list, tuple)):
        raise ValidationError(f"{what}: expected a list of strings")
    return [str(x) for x in v]


# --- Connection ---------------------------------------------------------------

@dataclass(frozen=True)
class ReplicationSlot:
    publication_name: str
    slot_name: str
    id: str | None = None
    status: str | None = None

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "ReplicationSlot":
        _check_keys("replication_slots[]", cfg, _names(cls))
        if not cfg.get("publication_name") or not cfg.get("slot_name"):
            raise ValidationError("replication_slots[]: publication_name and slot_name are required")
        return cls(**dict(cfg))


@dataclass(frozen=True)
class PrimaryConnection:
    hostname: str | None = None
    database: str | None = None
    username: str | None = None
    password: str | None = None
    port: int | None = None
    ssl: bool | None = None

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "PrimaryConnection":
        _check_keys("primary", cfg, _names(cls))
        return cls(**dict(cfg))


@dataclass(frozen=True)
class Connection:
    name: str | None = None
    id: str | None = None
    url: str | None = None
    hostname: str | None = None
    port: int | None = None
    database: str | None = None
    username: str | None = None
    password: str | None = None
    ssl: bool | None = None
    ipv6: bool | None = None
    replication_slots: list[ReplicationSlot] = field(default_factory=list)
    primary: PrimaryConnection | None = None
    # server-computed
    use_local_tunnel: bool | None = None
    pool_size: int | None = None
    queue_interval: int | None = None
    queue_target: int | None = None

    secret_fields: ClassVar[tuple[str, ...]] = ("password", "url")

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "Connection":
        _check_keys("connection", cfg, _names(cls))
        data = dict(cfg)
        data["replication_slots"] = [
            s if isinstance(s, ReplicationSlot) else ReplicationSlot.from_config(s)
            for s in (data.get("replication_slots") or [])
        ]
        p = data.get("primary")
        if isinstance(p, Mapping):
            data["primary"] = PrimaryConnection.from_config(p)
        return cls(**data)


# --- Destinations ---------------------------------------------------------------

@dataclass(frozen=True)
class KafkaDestination:
    hosts: str | None = None
    topic: str | None = None
    tls: bool | None = None
    username: str | None = None
    password: str | None = None
    sasl_mechanism: str | None = None
    aws_region: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None

    kind: ClassVar[str] = "kafka"
    secret_fields: ClassVar[tuple[str, ...]] = ("password", "aws_access_key_id", "aws_secret_access_key")


@dataclass(frozen=True)
class SqsDestination:
    queue_url: str | None = None
    region: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    is_fifo: bool | None = None

    kind: ClassVar[str] = "sqs"
    secret_fields: ClassVar[tuple[str, ...]] = ("access_key_id", "secret_access_key")


@dataclass(frozen=True)
class KinesisDestination:
    stream_arn: str | None = None
    region: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None

    kind: ClassVar[str] = "kinesis"
    secret_fields: ClassVar[tuple[str, ...]] = ("access_key_id", "secret_access_key")


@dataclass(frozen=True)
class WebhookDestination:
    http_endpoint: str | None = None
    http_endpoint_path: str | None = None
    batch: bool | None = None

    kind: ClassVar[str] = "webhook"
    secret_fields: ClassVar[tuple[str, ...]] = ()


Destination = Union[KafkaDestination, SqsDestination, KinesisDestination, WebhookDestination]

DESTINATION_TYPES: dict[str, type] = {
    "kafka": KafkaDestination,
    "sqs": SqsDestination,
    "kinesis": KinesisDestination,
    "webhook": WebhookDestination,
}


def destination_fields(kind: str) -> tuple[str, ...]:
    return tuple(f.name for f in fields(DESTINATION_TYPES[kind]))


def _all_destination_fields() -> tuple[str, ...]:
    out: list[str] = []
    for kind in DESTINATION_TYPES:
        for name in destination_fields(kind):
            if name not in out:
                out.append(name)
    return tuple(out)


ALL_DESTINATION_FIELDS: tuple[str, ...] = _all_destination_fields()


def flatten_destination(dest: Destination | None) -> dict[str, Any]:
    """Single-record view: "type" plus every field of every kind, None outside the active kind."""
    flat: dict[str, Any] = {"type": None}
    flat.update({name: None for name in ALL_DESTINATION_FIELDS})
    if dest is None:
        return flat
    flat["type"] = dest.kind
    for f in fields(dest):
        flat[f.name] = getattr(dest, f.name)
    return flat


# --- Stream consumer -----------------------------------------------------------

@dataclass(frozen=True)
class SourceFilter:
    include_schemas: list[str] | None = None
    exclude_schemas: list[str] | None = None
    include_tables: list[str] | None = None
    exclude_tables: list[str] | None = None

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "SourceFilter":
        _check_keys("source", cfg, _names(cls))
        return cls(**{k: _str_list(f"source.{k}", v) for k, v in cfg.items()})


@dataclass(frozen=True)
class TableSpec:
    name: str
    group_column_names: list[str] | None = None

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "TableSpec":
        _check_keys("tables[]", cfg, _names(cls))
        if not cfg.get("name"):
            raise ValidationError("tables[]: name is required")
        return cls(
            name=str(cfg["name"]),
            group_column_names=_str_list("tables[].group_column_names", cfg.get("group_column_names")),
        )


@dataclass(frozen=True)
class StatusInfo:
    state: str = ""
    created_at: str = ""
    updated_at: str = ""
    last_error: str = ""


@dataclass(frozen=True)
class StreamConsumer:
    name: str | None = None
    database: str | None = None
    destination: Destination | Mapping[str, Any] | None = None
    tables: list[TableSpec] = field(default_factory=list)
    id: str | None = None
    status: str | None = None
    source: SourceFilter | None = None
    actions: list[str] | None = None
    filter: str | None = None
    transform: str | None = None
    enrichment: str | None = None
    routing: str | None = None
    message_grouping: bool | None = None
    batch_size: int | None = None
    max_retry_count: int | None = None
    load_shedding_policy: str | None = None
    timestamp_format: str | None = None
    # read-only
    status_info: StatusInfo | None = None

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "StreamConsumer":
        from .reconcile._destination import parse_destination

        _check_keys("stream consumer", cfg, _names(cls) - {"status_info"})
        data = dict(cfg)
        data["tables"] = [
            t if isinstance(t, TableSpec) else TableSpec.from_config(t)
            for t in (data.get("tables") or [])
        ]
        src = data.get("source")
        if isinstance(src, Mapping):
            data["source"] = SourceFilter.from_config(src)
        if "actions" in data:
            data["actions"] = _str_list("actions", data["actions"])
        dest = data.get("destination")
        if isinstance(dest, Mapping):
            data["destination"] = parse_destination(dest)
        return cls(**data)


# --- Backfill -----------------------------------------------------------------

@dataclass(frozen=True)
class BackfillProgress:
    state: str | None = None
    inserted_at: str | None = None
    updated_at: str | None = None
    canceled_at: str | None = None
    completed_at: str | None = None
    rows_ingested_count: int = 0
    rows_initial_count: int = 0
    rows_processed_count: int = 0
    sort_column: str | None = None


@dataclass(frozen=True)
class Backfill:
    sink_consumer: str | None = None
    table: str | None = None
    state: str = "active"
    id: str | None = None
    # read-only
    progress: BackfillProgress | None = None

    immutable_fields: ClassVar[tuple[str, ...]] = ("sink_consumer", "table")

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "Backfill":
        _check_keys("backfill", cfg, _names(cls) - {"progress"})
        data = dict(cfg)
        if data.get("state") is None:
            data.pop("state", None)
        return cls(**data)
