# sequin_platform/client/api.py
# Sequin management API client: one synchronous attempt per call, typed snapshots back.
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from typing import Any, TypeVar
from urllib.parse import quote

import requests
from pydantic import BaseModel
from pydantic import ValidationError as WireError

from .._logging import log as _root_log
from ..errors import RemoteAPIError
from ._common import BODY_PREVIEW, build_session, raise_for_status, safe_json
from ._wire import (
    BackfillCreateRequest,
    BackfillList,
    BackfillSnapshot,
    BackfillUpdateRequest,
    ConnectionRequest,
    ConnectionSnapshot,
    SinkRequest,
    SinkSnapshot,
)

__all__ = ["SequinClient", "DEFAULT_TIMEOUT"]

DEFAULT_TIMEOUT = 30.0

log = _root_log.child("client")

M = TypeVar("M", bound=BaseModel)


def _seg(v: str) -> str:
    return quote(str(v), safe="")


class SequinClient:
    def __init__(
        self,
        endpoint: str,
        api_key: str,
        *,
        version: str = "dev",
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.endpoint = str(endpoint).rstrip("/")
        self.version = version
        self.timeout = float(timeout)
        self.session = session or build_session(api_key=api_key, version=version)

    def __repr__(self) -> str:
        return f"SequinClient(endpoint={self.endpoint!r}, version={self.version!r})"

    # --- plumbing -------------------------------------------------------------

    def _call(self, method: str, path: str, what: str, body: BaseModel | None = None) -> Any:
        url = f"{self.endpoint}{path}"
        kwargs: dict[str, Any] = {"timeout": self.timeout}
        if body is not None:
            kwargs["json"] = body.body()  # type: ignore[attr-defined]
        try:
            resp = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            raise RemoteAPIError(f"request failed: {e}") from e
        raise_for_status(resp, what)
        return safe_json(resp)

    @staticmethod
    def _parse(model: type[M], data: Any) -> M:
        try:
            return model.model_validate(data)
        except WireError as e:
            raise RemoteAPIError(
                f"unexpected {model.__name__} payload: {e.error_count()} validation error(s)",
                body=str(data)[:BODY_PREVIEW],
            ) from e

    # --- postgres connections -------------------------------------------------

    def create_connection(self, req: ConnectionRequest) -> ConnectionSnapshot:
        snap = self._parse(ConnectionSnapshot, self._call("POST", "/api/postgres_databases", "database", req))
        log.info("Created database", extra={"id": snap.id})
        return snap

    def get_connection(self, conn_id: str) -> ConnectionSnapshot:
        data = self._call("GET", f"/api/postgres_databases/{_seg(conn_id)}", f"database {conn_id}")
        return self._parse(ConnectionSnapshot, data)

    def update_connection(self, conn_id: str, req: ConnectionRequest) -> ConnectionSnapshot:
        data = self._call("PUT", f"/api/postgres_databases/{_seg(conn_id)}", f"database {conn_id}", req)
        return self._parse(ConnectionSnapshot, data)

    def delete_connection(self, conn_id: str) -> None:
        self._call("DELETE", f"/api/postgres_databases/{_seg(conn_id)}", f"database {conn_id}")

    # --- sink consumers -------------------------------------------------------

    def create_sink(self, req: SinkRequest) -> SinkSnapshot:
        snap = self._parse(SinkSnapshot, self._call("POST", "/api/sinks", "sink consumer", req))
        log.info("Created sink consumer", extra={"id": snap.id})
        return snap

    def get_sink(self, sink_id: str) -> SinkSnapshot:
        return self._parse(SinkSnapshot, self._call("GET", f"/api/sinks/{_seg(sink_id)}", f"sink consumer {sink_id}"))

    def update_sink(self, sink_id: str, req: SinkRequest) -> SinkSnapshot:
        data = self._call("PUT", f"/api/sinks/{_seg(sink_id)}", f"sink consumer {sink_id}", req)
        return self._parse(SinkSnapshot, data)

    def delete_sink(self, sink_id: str) -> None:
        self._call("DELETE", f"/api/sinks/{_seg(sink_id)}", f"sink consumer {sink_id}")

    # --- backfills (scoped under a sink consumer name or id) -------------------

    def create_backfill(self, sink_ref: str, req: BackfillCreateRequest) -> BackfillSnapshot:
        data = self._call("POST", f"/api/sinks/{_seg(sink_ref)}/backfills", f"sink consumer {sink_ref}", req)
        snap = self._parse(BackfillSnapshot, data)
        log.info("Created backfill", extra={"id": snap.id, "sink": sink_ref})
        return snap

    def get_backfill(self, sink_ref: str, backfill_id: str) -> BackfillSnapshot:
        path = f"/api/sinks/{_seg(sink_ref)}/backfills/{_seg(backfill_id)}"
        return self._parse(BackfillSnapshot, self._call("GET", path, f"backfill {backfill_id}"))

    def update_backfill(self, sink_ref: str, backfill_id: str, req: BackfillUpdateRequest) -> BackfillSnapshot:
        path = f"/api/sinks/{_seg(sink_ref)}/backfills/{_seg(backfill_id)}"
        return self._parse(BackfillSnapshot, self._call("PATCH", path, f"backfill {backfill_id}", req))

    def delete_backfill(self, sink_ref: str, backfill_id: str) -> None:
        path = f"/api/sinks/{_seg(sink_ref)}/backfills/{_seg(backfill_id)}"
        self._call("DELETE", path, f"backfill {backfill_id}")

    def list_backfills(self, sink_ref: str) -> list[BackfillSnapshot]:
        data = self._call("GET", f"/api/sinks/{_seg(sink_ref)}/backfills", f"sink consumer {sink_ref}")
        return self._parse(BackfillList, data).data
