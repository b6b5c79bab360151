# sequin_platform/resources/_backfill.py
# Backfill reconciler. Backfills live under a stream consumer; identity is "<sink_consumer>/<backfill_id>".
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .. import id_codec
from ..client._wire import BackfillCreateRequest, BackfillSnapshot, BackfillUpdateRequest
from ..errors import NotFoundError, ValidationError
from ..models import BACKFILL_STATES, Backfill, BackfillProgress
from ..reconcile import FieldKind, normalize
from ._base import BaseReconciler, OpContext, ReadResult

__all__ = ["BackfillReconciler", "merge_backfill", "replacement_fields"]


def _ident(b: Backfill) -> str | None:
    if b.sink_consumer and b.id:
        return f"{b.sink_consumer}{id_codec.SEPARATOR}{b.id}"
    return b.id


def _check_state(state: Any) -> str:
    if state not in BACKFILL_STATES:
        raise ValidationError(f"state: {state!r} is not one of {', '.join(BACKFILL_STATES)}")
    return str(state)


def replacement_fields(desired: Backfill, persisted: Backfill) -> list[str]:
    """Immutable fields the desired value changes; an unset desired table keeps the server's choice."""
    out: list[str] = []
    for name in Backfill.immutable_fields:
        want = getattr(desired, name)
        if want is not None and want != getattr(persisted, name):
            out.append(name)
    return out


def merge_backfill(snap: BackfillSnapshot, prior: Backfill | None) -> Backfill:
    prior = prior or Backfill()
    remote_state = normalize(snap.state, FieldKind.TEXT)
    # the caller addresses the parent by the reference it chose (name or id); keep it
    sink = prior.sink_consumer or normalize(snap.sink_consumer, FieldKind.TEXT)
    return Backfill(
        id=snap.id,
        sink_consumer=sink,
        table=normalize(snap.table, FieldKind.TEXT) or prior.table,
        # completed is a lifecycle outcome, not a desired state
        state="cancelled" if remote_state == "cancelled" else "active",
        progress=BackfillProgress(
            state=remote_state,
            inserted_at=normalize(snap.inserted_at, FieldKind.TEXT),
            updated_at=normalize(snap.updated_at, FieldKind.TEXT),
            canceled_at=normalize(snap.canceled_at, FieldKind.TEXT),
            completed_at=normalize(snap.completed_at, FieldKind.TEXT),
            rows_ingested_count=snap.rows_ingested_count or 0,
            rows_initial_count=snap.rows_initial_count or 0,
            rows_processed_count=snap.rows_processed_count or 0,
            sort_column=normalize(snap.sort_column, FieldKind.TEXT),
        ),
    )


class BackfillReconciler(BaseReconciler[Backfill]):
    resource = "backfill"
    record = Backfill

    def create(self, desired: Backfill | Mapping[str, Any], ctx: OpContext | None = None) -> Backfill:
        with self._op("create", None):
            want = self._coerce(desired)
            if not want.sink_consumer:
                raise ValidationError("sink_consumer is required")
            if _check_state(want.state) != "active":
                raise ValidationError("a backfill can only be created in the active state")
            req = BackfillCreateRequest(table=want.table)
            snap = self._call(ctx, self.api.create_backfill, want.sink_consumer, req)
            state = merge_backfill(snap, want)
        self.log.info("Created backfill", extra={"id": state.id, "sink": state.sink_consumer, "table": state.table})
        return state

    def read(self, persisted: Backfill, ctx: OpContext | None = None) -> ReadResult[Backfill]:
        with self._op("read", _ident(persisted)):
            backfill_id = self._require_id(persisted)
            sink = self._require_id(persisted, "sink_consumer")
            try:
                snap = self._call(ctx, self.api.get_backfill, sink, backfill_id)
            except NotFoundError:
                self.log.warn("Backfill not found, removing from state", extra={"id": backfill_id})
                return ReadResult(None, removed=True)
            return ReadResult(merge_backfill(snap, persisted))

    def update(
        self,
        desired: Backfill | Mapping[str, Any],
        persisted: Backfill,
        ctx: OpContext | None = None,
    ) -> Backfill:
        with self._op("update", _ident(persisted)):
            backfill_id = self._require_id(persisted)
            sink = self._require_id(persisted, "sink_consumer")
            want = self._coerce(desired)
            changed = replacement_fields(want, persisted)
            if changed:
                raise ValidationError(
                    f"{', '.join(changed)} cannot be changed in place; the backfill must be replaced"
                )
            req = BackfillUpdateRequest(state=_check_state(want.state))
            snap = self._call(ctx, self.api.update_backfill, sink, backfill_id, req)
            # immutable identity comes from what is already persisted
            seed = Backfill(sink_consumer=sink, table=persisted.table, state=want.state)
            state = merge_backfill(snap, seed)
        self.log.info("Updated backfill", extra={"id": backfill_id, "state": state.state})
        return state

    def delete(self, persisted: Backfill, ctx: OpContext | None = None) -> None:
        with self._op("delete", _ident(persisted)):
            backfill_id = self._require_id(persisted)
            sink = self._require_id(persisted, "sink_consumer")
            try:
                self._call(ctx, self.api.delete_backfill, sink, backfill_id)
            except NotFoundError:
                self.log.warn("Backfill already deleted", extra={"id": backfill_id})
                return
        self.log.info("Deleted backfill", extra={"id": backfill_id})

    def import_state(self, external_id: str) -> Backfill:
        with self._op("import", external_id):
            sink, backfill_id = id_codec.decode(external_id)
            return Backfill(sink_consumer=sink, id=backfill_id)

    def list_for(self, sink_consumer: str, ctx: OpContext | None = None) -> list[Backfill]:
        """All backfills of one stream consumer, as persisted states."""
        with self._op("list", sink_consumer):
            if not sink_consumer:
                raise ValidationError("sink_consumer is required")
            snaps = self._call(ctx, self.api.list_backfills, sink_consumer)
            return [merge_backfill(s, Backfill(sink_consumer=sink_consumer)) for s in snaps]
