# sequin_platform/resources/_consumer.py
# Stream (sink) consumer reconciler.
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from ..client._wire import SinkRequest, SinkSnapshot, SourceWire, StatusInfoWire, TableWire
from ..errors import InvalidIdentifier, NotFoundError, ValidationError
from ..models import (
    ACTIONS,
    CONSUMER_STATUSES,
    LOAD_SHEDDING_POLICIES,
    TIMESTAMP_FORMATS,
    StatusInfo,
    StreamConsumer,
    TableSpec,
)
from ..reconcile import (
    FieldKind,
    destination_request,
    merge_destination,
    normalize,
    normalize_source,
    parse_destination,
)
from ._base import BaseReconciler, OpContext, ReadResult

__all__ = ["StreamConsumerReconciler", "consumer_request", "merge_consumer", "merge_status_info"]


def _one_of(what: str, value: Any, allowed: tuple[str, ...]) -> None:
    if value is not None and value not in allowed:
        raise ValidationError(f"{what}: {value!r} is not one of {', '.join(allowed)}")


def _validate(desired: StreamConsumer, *, creating: bool) -> None:
    if not desired.name:
        raise ValidationError("name is required")
    if creating and not desired.database:
        raise ValidationError("database is required")
    if not desired.tables:
        raise ValidationError("tables: at least one table is required")
    if desired.destination is None:
        raise ValidationError("destination is required")
    _one_of("status", desired.status, CONSUMER_STATUSES)
    _one_of("load_shedding_policy", desired.load_shedding_policy, LOAD_SHEDDING_POLICIES)
    _one_of("timestamp_format", desired.timestamp_format, TIMESTAMP_FORMATS)
    for action in desired.actions or []:
        _one_of("actions[]", action, ACTIONS)
    if desired.batch_size is not None and desired.batch_size < 0:
        raise ValidationError("batch_size must not be negative")
    if desired.max_retry_count is not None and desired.max_retry_count < 0:
        raise ValidationError("max_retry_count must not be negative")


def consumer_request(desired: StreamConsumer, *, creating: bool = True) -> SinkRequest:
    _validate(desired, creating=creating)
    src = desired.source
    return SinkRequest(
        name=desired.name,  # type: ignore[arg-type]
        status=desired.status,
        database=desired.database,
        source=SourceWire(
            include_schemas=src.include_schemas,
            exclude_schemas=src.exclude_schemas,
            include_tables=src.include_tables,
            exclude_tables=src.exclude_tables,
        ) if src is not None else None,
        tables=[TableWire(name=t.name, group_column_names=t.group_column_names) for t in desired.tables],
        actions=desired.actions,
        destination=destination_request(desired.destination),  # type: ignore[arg-type]
        filter=desired.filter,
        transform=desired.transform,
        enrichment=desired.enrichment,
        routing=desired.routing,
        message_grouping=desired.message_grouping,
        batch_size=desired.batch_size,
        max_retry_count=desired.max_retry_count,
        load_shedding_policy=desired.load_shedding_policy,
        timestamp_format=desired.timestamp_format,
    )


def merge_status_info(snap: StatusInfoWire | None, prior: StatusInfo | None) -> StatusInfo:
    """Overwrite only when the API reported something; otherwise keep the prior (or an empty record)."""
    if snap is not None and (snap.state or snap.created_at or snap.updated_at):
        return StatusInfo(
            state=snap.state or "",
            created_at=snap.created_at or "",
            updated_at=snap.updated_at or "",
            last_error=snap.last_error or "",
        )
    return prior if prior is not None else StatusInfo()


def merge_consumer(snap: SinkSnapshot, prior: StreamConsumer | None) -> StreamConsumer:
    """Snapshot + prior (desired on create/update, persisted on read) -> persisted state."""
    prior = prior or StreamConsumer()
    prior_dest = parse_destination(prior.destination) if prior.destination is not None else None
    routing = normalize(snap.routing, FieldKind.REFERENCE)

    return StreamConsumer(
        id=snap.id,
        name=normalize(snap.name, FieldKind.TEXT),
        status=normalize(snap.status, FieldKind.TEXT),
        database=normalize(snap.database, FieldKind.TEXT),
        source=normalize_source(snap.source),
        tables=[
            TableSpec(name=t.name, group_column_names=normalize(t.group_column_names, FieldKind.FILTER_LIST))
            for t in snap.tables or []
        ],
        actions=normalize(snap.actions, FieldKind.FILTER_LIST),
        destination=merge_destination(snap.destination, prior_dest, routing=routing),
        filter=normalize(snap.filter, FieldKind.REFERENCE),
        transform=normalize(snap.transform, FieldKind.REFERENCE),
        enrichment=normalize(snap.enrichment, FieldKind.REFERENCE),
        routing=routing,
        message_grouping=snap.message_grouping,
        batch_size=normalize(snap.batch_size, FieldKind.ZERO_UNSET),
        max_retry_count=snap.max_retry_count,
        load_shedding_policy=normalize(snap.load_shedding_policy, FieldKind.TEXT),
        timestamp_format=normalize(snap.timestamp_format, FieldKind.TEXT),
        status_info=merge_status_info(snap.status_info, prior.status_info),
    )


class StreamConsumerReconciler(BaseReconciler[StreamConsumer]):
    resource = "stream_consumer"
    record = StreamConsumer

    def create(self, desired: StreamConsumer | Mapping[str, Any], ctx: OpContext | None = None) -> StreamConsumer:
        with self._op("create", None):
            want = self._coerce(desired)
            req = consumer_request(want, creating=True)
            snap = self._call(ctx, self.api.create_sink, req)
            state = merge_consumer(snap, want)
        self.log.info("Created stream consumer", extra={"id": state.id, "name": state.name})
        return state

    def read(self, persisted: StreamConsumer, ctx: OpContext | None = None) -> ReadResult[StreamConsumer]:
        with self._op("read", persisted.id):
            sink_id = self._require_id(persisted)
            try:
                snap = self._call(ctx, self.api.get_sink, sink_id)
            except NotFoundError:
                self.log.warn("Stream consumer not found, removing from state", extra={"id": sink_id})
                return ReadResult(None, removed=True)
            return ReadResult(merge_consumer(snap, persisted))

    def update(
        self,
        desired: StreamConsumer | Mapping[str, Any],
        persisted: StreamConsumer,
        ctx: OpContext | None = None,
    ) -> StreamConsumer:
        with self._op("update", persisted.id):
            sink_id = self._require_id(persisted)
            want = self._coerce(desired)
            req = consumer_request(want, creating=False)
            snap = self._call(ctx, self.api.update_sink, sink_id, req)
            # read-only status survives an update that does not report it
            state = merge_consumer(snap, replace(want, status_info=persisted.status_info))
        self.log.info("Updated stream consumer", extra={"id": sink_id})
        return state

    def delete(self, persisted: StreamConsumer, ctx: OpContext | None = None) -> None:
        with self._op("delete", persisted.id):
            sink_id = self._require_id(persisted)
            try:
                self._call(ctx, self.api.delete_sink, sink_id)
            except NotFoundError:
                self.log.warn("Stream consumer already deleted", extra={"id": sink_id})
                return
        self.log.info("Deleted stream consumer", extra={"id": sink_id})

    def import_state(self, external_id: str) -> StreamConsumer:
        with self._op("import", external_id):
            ident = str(external_id or "").strip()
            if not ident:
                raise InvalidIdentifier("Expected a stream consumer id or name, got an empty string")
            return StreamConsumer(id=ident)
