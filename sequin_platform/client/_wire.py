# sequin_platform/client/_wire.py
# Wire models for the Sequin management API (requests and response snapshots).
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "ReplicationSlotWire",
    "PrimaryWire",
    "ConnectionRequest",
    "ConnectionSnapshot",
    "SourceWire",
    "TableWire",
    "DestinationWire",
    "StatusInfoWire",
    "SinkRequest",
    "SinkSnapshot",
    "BackfillCreateRequest",
    "BackfillUpdateRequest",
    "BackfillSnapshot",
    "BackfillList",
]


class _Wire(BaseModel):
    # the API adds fields over time; unknown keys are not an error
    model_config = ConfigDict(extra="ignore")

    def body(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


# Postgres connections
class ReplicationSlotWire(_Wire):
    id: str | None = None
    publication_name: str | None = None
    slot_name: str | None = None
    status: str | None = None


class PrimaryWire(_Wire):
    hostname: str | None = None
    database: str | None = None
    username: str | None = None
    password: str | None = None
    port: int | None = None
    ssl: bool | None = None


class ConnectionRequest(_Wire):
    name: str
    url: str | None = None
    hostname: str | None = None
    port: int | None = None
    database: str | None = None
    username: str | None = None
    password: str | None = None
    ssl: bool | None = None
    ipv6: bool | None = None
    replication_slots: list[ReplicationSlotWire] | None = None
    primary: PrimaryWire | None = None


class ConnectionSnapshot(_Wire):
    id: str
    name: str | None = None
    hostname: str | None = None
    port: int | None = None
    database: str | None = None
    username: str | None = None
    password: str | None = None
    ssl: bool | None = None
    ipv6: bool | None = None
    use_local_tunnel: bool | None = None
    pool_size: int | None = None
    queue_interval: int | None = None
    queue_target: int | None = None
    replication_slots: list[ReplicationSlotWire] | None = None
    primary: PrimaryWire | None = None


# Sink consumers
class SourceWire(_Wire):
    include_schemas: list[str] | None = None
    exclude_schemas: list[str] | None = None
    include_tables: list[str] | None = None
    exclude_tables: list[str] | None = None


class TableWire(_Wire):
    name: str
    group_column_names: list[str] | None = None


class DestinationWire(_Wire):
    type: str
    # kafka
    hosts: str | None = None
    topic: str | None = None
    tls: bool | None = None
    username: str | None = None
    password: str | None = None
    sasl_mechanism: str | None = None
    aws_region: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    # sqs / kinesis
    queue_url: str | None = None
    region: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    is_fifo: bool | None = None
    stream_arn: str | None = None
    # webhook
    http_endpoint: str | None = None
    http_endpoint_path: str | None = None
    batch: bool | None = None


class StatusInfoWire(_Wire):
    state: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    last_error: str | None = None


class SinkRequest(_Wire):
    name: str
    status: str | None = None
    database: str | None = None
    source: SourceWire | None = None
    tables: list[TableWire] | None = None
    actions: list[str] | None = None
    destination: dict[str, Any] | None = None
    filter: str | None = None
    transform: str | None = None
    enrichment: str | None = None
    routing: str | None = None
    message_grouping: bool | None = None
    batch_size: int | None = None
    max_retry_count: int | None = None
    load_shedding_policy: str | None = None
    timestamp_format: str | None = None


class SinkSnapshot(_Wire):
    id: str
    name: str | None = None
    status: str | None = None
    database: str | None = None
    source: SourceWire | None = None
    tables: list[TableWire] | None = None
    actions: list[str] | None = None
    destination: DestinationWire
    filter: str | None = None
    transform: str | None = None
    enrichment: str | None = None
    routing: str | None = None
    message_grouping: bool | None = None
    batch_size: int | None = None
    max_retry_count: int | None = None
    load_shedding_policy: str | None = None
    timestamp_format: str | None = None
    status_info: StatusInfoWire | None = None


# Backfills
class BackfillCreateRequest(_Wire):
    table: str | None = None


class BackfillUpdateRequest(_Wire):
    state: str


class BackfillSnapshot(_Wire):
    id: str
    state: str | None = None
    table: str | None = None
    sink_consumer: str | None = None
    inserted_at: str | None = None
    updated_at: str | None = None
    canceled_at: str | None = None
    completed_at: str | None = None
    rows_ingested_count: int | None = None
    rows_initial_count: int | None = None
    rows_processed_count: int | None = None
    sort_column: str | None = None


class BackfillList(_Wire):
    data: list[BackfillSnapshot] = Field(default_factory=list)
