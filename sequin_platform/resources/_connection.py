# sequin_platform/resources/_connection.py
# Postgres connection reconciler.
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..client._wire import ConnectionRequest, ConnectionSnapshot, PrimaryWire, ReplicationSlotWire
from ..errors import InvalidIdentifier, NotFoundError, ValidationError
from ..models import Connection, PrimaryConnection, ReplicationSlot
from ..reconcile import FieldKind, merge_secrets, normalize
from ._base import BaseReconciler, OpContext, ReadResult

__all__ = ["ConnectionReconciler", "connection_request", "merge_connection"]


def _slots_request(desired: Connection, persisted: Connection | None) -> list[ReplicationSlotWire]:
    if not desired.replication_slots:
        raise ValidationError("replication_slots: at least one replication slot is required")
    known = {s.id for s in (persisted.replication_slots if persisted else []) if s.id}
    out: list[ReplicationSlotWire] = []
    for slot in desired.replication_slots:
        slot_id = slot.id if persisted is not None else None
        if slot_id and slot_id not in known:
            raise ValidationError(f"replication_slots: slot id {slot_id!r} does not exist on this connection")
        out.append(
            ReplicationSlotWire(
                id=slot_id,
                publication_name=slot.publication_name,
                slot_name=slot.slot_name,
                status=slot.status,
            )
        )
    return out


def connection_request(desired: Connection, persisted: Connection | None = None) -> ConnectionRequest:
    """Outbound body. With a persisted state (update), desired slots carrying an id must already exist."""
    if not desired.name:
        raise ValidationError("name is required")
    if not desired.url and not desired.hostname:
        raise ValidationError("either url or hostname/database/username/password is required")

    primary = None
    if desired.primary is not None:
        p = desired.primary
        primary = PrimaryWire(
            hostname=p.hostname,
            database=p.database,
            username=p.username,
            password=p.password,
            port=p.port,
            ssl=p.ssl,
        )

    return ConnectionRequest(
        name=desired.name,
        url=desired.url,
        hostname=desired.hostname,
        port=desired.port,
        database=desired.database,
        username=desired.username,
        password=desired.password,
        ssl=desired.ssl,
        ipv6=desired.ipv6,
        replication_slots=_slots_request(desired, persisted),
        primary=primary,
    )


def _merge_primary(snap: PrimaryWire | None, prior: PrimaryConnection | None) -> PrimaryConnection | None:
    if snap is None:
        return None
    return PrimaryConnection(
        hostname=normalize(snap.hostname, FieldKind.TEXT),
        database=normalize(snap.database, FieldKind.TEXT),
        username=normalize(snap.username, FieldKind.TEXT),
        # write-only, the API obfuscates it
        password=prior.password if prior else None,
        port=normalize(snap.port, FieldKind.ZERO_UNSET),
        ssl=snap.ssl,
    )


def merge_connection(snap: ConnectionSnapshot, prior: Connection | None) -> Connection:
    """Snapshot + prior (desired on create/update, persisted on read) -> persisted state."""
    prior = prior or Connection()
    # neither is ever echoed: url is omitted and password comes back as "***obfuscated***"
    secrets = merge_secrets(
        {"password": None, "url": None},
        {"password": prior.password, "url": prior.url},
        Connection.secret_fields,
    )
    slots = [
        ReplicationSlot(
            id=normalize(s.id, FieldKind.TEXT),
            publication_name=s.publication_name or "",
            slot_name=s.slot_name or "",
            status=normalize(s.status, FieldKind.TEXT),
        )
        for s in snap.replication_slots or []
    ]
    return Connection(
        id=snap.id,
        name=normalize(snap.name, FieldKind.TEXT),
        url=secrets["url"],
        hostname=normalize(snap.hostname, FieldKind.TEXT),
        port=normalize(snap.port, FieldKind.ZERO_UNSET),
        database=normalize(snap.database, FieldKind.TEXT),
        username=normalize(snap.username, FieldKind.TEXT),
        password=secrets["password"],
        ssl=snap.ssl,
        ipv6=snap.ipv6,
        replication_slots=slots,
        primary=_merge_primary(snap.primary, prior.primary),
        use_local_tunnel=snap.use_local_tunnel,
        pool_size=snap.pool_size,
        queue_interval=snap.queue_interval,
        queue_target=snap.queue_target,
    )


class ConnectionReconciler(BaseReconciler[Connection]):
    resource = "connection"
    record = Connection

    def create(self, desired: Connection | Mapping[str, Any], ctx: OpContext | None = None) -> Connection:
        with self._op("create", None):
            want = self._coerce(desired)
            req = connection_request(want)
            snap = self._call(ctx, self.api.create_connection, req)
            state = merge_connection(snap, want)
        self.log.info("Created connection", extra={"id": state.id, "name": state.name})
        return state

    def read(self, persisted: Connection, ctx: OpContext | None = None) -> ReadResult[Connection]:
        ident = persisted.id
        with self._op("read", ident):
            conn_id = self._require_id(persisted)
            try:
                snap = self._call(ctx, self.api.get_connection, conn_id)
            except NotFoundError:
                self.log.warn("Connection not found, removing from state", extra={"id": conn_id})
                return ReadResult(None, removed=True)
            return ReadResult(merge_connection(snap, persisted))

    def update(
        self,
        desired: Connection | Mapping[str, Any],
        persisted: Connection,
        ctx: OpContext | None = None,
    ) -> Connection:
        ident = persisted.id
        with self._op("update", ident):
            conn_id = self._require_id(persisted)
            want = self._coerce(desired)
            req = connection_request(want, persisted)
            snap = self._call(ctx, self.api.update_connection, conn_id, req)
            state = merge_connection(snap, want)
        self.log.info("Updated connection", extra={"id": conn_id})
        return state

    def delete(self, persisted: Connection, ctx: OpContext | None = None) -> None:
        ident = persisted.id
        with self._op("delete", ident):
            conn_id = self._require_id(persisted)
            try:
                self._call(ctx, self.api.delete_connection, conn_id)
            except NotFoundError:
                self.log.warn("Connection already deleted", extra={"id": conn_id})
                return
        self.log.info("Deleted connection", extra={"id": conn_id})

    def import_state(self, external_id: str) -> Connection:
        with self._op("import", external_id):
            ident = str(external_id or "").strip()
            if not ident:
                raise InvalidIdentifier("Expected a connection id, got an empty string")
            return Connection(id=ident)
