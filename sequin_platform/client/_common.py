# sequin_platform/client/_common.py
# HTTP plumbing shared by the API client: traced session, JSON decoding, error mapping.
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

import json
import time
from typing import Any
from urllib.parse import urlparse

import requests

from .._logging import log as _root_log
from ..errors import NotFoundError, RemoteAPIError

__all__ = ["TracedSession", "build_session", "safe_json", "raise_for_status", "BODY_PREVIEW"]

BODY_PREVIEW = 500

log = _root_log.child("client")


def _label(method: str, url: str) -> str:
    segs = [s for s in (urlparse(url).path or "/").split("/") if s]
    # /api/<collection>[/<id>[/<sub>]] -> collection[:sub]
    if segs[:1] == ["api"]:
        segs = segs[1:]
    if not segs:
        return method.lower()
    head = segs[0]
    if len(segs) >= 3:
        return f"{head}:{segs[2]}:{method.lower()}"
    return f"{head}:{method.lower()}"


class TracedSession(requests.Session):
    """requests.Session that traces every call at debug level (method, endpoint, status, latency)."""

    def __init__(self, *, user_agent: str, api_key: str):
        super().__init__()
        self.headers.update(
            {
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": user_agent,
            }
        )

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:  # type: ignore[override]
        t0 = time.monotonic()
        status: int | None = None
        try:
            resp = super().request(method, url, **kwargs)
            status = resp.status_code
            return resp
        finally:
            ms = int((time.monotonic() - t0) * 1000)
            log.debug(
                "api call",
                extra={"feature": _label(method.upper(), url), "method": method.upper(), "status": status, "ms": ms},
            )


def build_session(*, api_key: str, version: str) -> TracedSession:
    return TracedSession(user_agent=f"sequin-platform/{version}", api_key=api_key)


def safe_json(resp: requests.Response) -> Any:
    text = resp.text or ""
    if not text.strip():
        return {}
    try:
        return json.loads(text)
    except ValueError as e:
        raise RemoteAPIError(
            f"response is not valid JSON: {e}",
            status=resp.status_code,
            body=text[:BODY_PREVIEW],
        ) from e


def raise_for_status(resp: requests.Response, what: str) -> None:
    """404 -> NotFoundError; any other status >= 400 -> RemoteAPIError carrying status and body."""
    code = resp.status_code
    if code < 400:
        return
    body = (resp.text or "")[:BODY_PREVIEW]
    if code == 404:
        raise NotFoundError(f"{what} not found")
    log.error("API error response", extra={"status": code})
    raise RemoteAPIError(f"API error (status {code}): {body}", status=code, body=body)
