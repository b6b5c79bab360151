# sequin_platform/reconcile/_secrets.py
# Carry write-only values forward when the API does not echo them.
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from ._normalize import FieldKind, normalize

__all__ = ["preserve", "merge_secrets"]


def preserve(remote: Any, prior: Any) -> Any:
    """Remote value when present, otherwise the prior value verbatim (None included)."""
    value = normalize(remote, FieldKind.SECRET)
    return prior if value is None else value


def merge_secrets(
    remote: Mapping[str, Any],
    prior: Mapping[str, Any] | None,
    secret_fields: Iterable[str],
) -> dict[str, Any]:
    prior = prior or {}
    return {name: preserve(remote.get(name), prior.get(name)) for name in secret_fields}
