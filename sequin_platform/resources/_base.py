# sequin_platform/resources/_base.py
# Shared types for resource reconcilers: operation context, read result, API protocol.
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Protocol, TypeVar

from .._logging import Logger, log as _root_log
from ..client._wire import (
    BackfillCreateRequest,
    BackfillSnapshot,
    BackfillUpdateRequest,
    ConnectionRequest,
    ConnectionSnapshot,
    SinkRequest,
    SinkSnapshot,
)
from ..errors import CancellationError, SequinError, ValidationError

__all__ = ["RemoteAPI", "OpContext", "ReadResult", "BaseReconciler"]

S = TypeVar("S")
T = TypeVar("T")


class RemoteAPI(Protocol):
    def create_connection(self, req: ConnectionRequest) -> ConnectionSnapshot: ...
    def get_connection(self, conn_id: str) -> ConnectionSnapshot: ...
    def update_connection(self, conn_id: str, req: ConnectionRequest) -> ConnectionSnapshot: ...
    def delete_connection(self, conn_id: str) -> None: ...

    def create_sink(self, req: SinkRequest) -> SinkSnapshot: ...
    def get_sink(self, sink_id: str) -> SinkSnapshot: ...
    def update_sink(self, sink_id: str, req: SinkRequest) -> SinkSnapshot: ...
    def delete_sink(self, sink_id: str) -> None: ...

    def create_backfill(self, sink_ref: str, req: BackfillCreateRequest) -> BackfillSnapshot: ...
    def get_backfill(self, sink_ref: str, backfill_id: str) -> BackfillSnapshot: ...
    def update_backfill(self, sink_ref: str, backfill_id: str, req: BackfillUpdateRequest) -> BackfillSnapshot: ...
    def delete_backfill(self, sink_ref: str, backfill_id: str) -> None: ...
    def list_backfills(self, sink_ref: str) -> list[BackfillSnapshot]: ...


@dataclass
class OpContext:
    run_id: str = ""
    cancel_flag: list[bool] = field(default_factory=lambda: [False])

    def cancel(self) -> None:
        self.cancel_flag[0] = True

    @property
    def cancelled(self) -> bool:
        return bool(self.cancel_flag and self.cancel_flag[0])


@dataclass(frozen=True)
class ReadResult(Generic[S]):
    state: S | None
    removed: bool = False


class BaseReconciler(Generic[S]):
    resource = "resource"
    record: type = object

    def __init__(self, api: RemoteAPI, *, logger: Logger | None = None):
        self.api = api
        self.log = (logger or _root_log).child(self.resource)

    @contextmanager
    def _op(self, operation: str, ident: str | None) -> Iterator[None]:
        # every error leaving an operation names the resource, the operation and the instance
        try:
            yield
        except SequinError as e:
            e.bind(resource=self.resource, operation=operation, ident=ident)
            raise

    def _checkpoint(self, ctx: OpContext | None, where: str) -> None:
        if ctx is not None and ctx.cancelled:
            raise CancellationError(f"cancelled {where} the API call")

    def _call(self, ctx: OpContext | None, fn: Callable[..., T], *args: Any) -> T:
        self._checkpoint(ctx, "before")
        out = fn(*args)
        self._checkpoint(ctx, "after")
        return out

    def _coerce(self, value: S | Mapping[str, Any]) -> S:
        if isinstance(value, self.record):
            return value  # type: ignore[return-value]
        if isinstance(value, Mapping):
            return self.record.from_config(value)  # type: ignore[attr-defined]
        raise ValidationError(f"expected {self.record.__name__} or a mapping, got {type(value).__name__}")

    @staticmethod
    def _require_id(state: Any, what: str = "id") -> str:
        ident = getattr(state, what, None)
        if not ident:
            raise ValidationError(f"persisted state has no {what}")
        return str(ident)
