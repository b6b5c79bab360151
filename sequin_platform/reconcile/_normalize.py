# sequin_platform/reconcile/_normalize.py
# Canonicalize the API's "unset" encodings into None.
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any

from ..models import SourceFilter

__all__ = ["SENTINEL", "FieldKind", "normalize", "normalize_source", "is_masked"]

# literal the API returns for an unset function reference
SENTINEL = "none"


class FieldKind(Enum):
    TEXT = "text"                # "" -> None
    REFERENCE = "reference"      # "" or SENTINEL -> None
    SECRET = "secret"            # "" or an obfuscation mask -> None
    FILTER_LIST = "filter_list"  # [] -> None (empty means "no restriction")
    SCALAR = "scalar"            # unchanged
    ZERO_UNSET = "zero_unset"    # 0 -> None (explicit zero and unset are the same to the API)


def is_masked(v: Any) -> bool:
    s = str(v or "")
    return bool(s) and set(s) == {"*"}


def _text(v: Any) -> str | None:
    if v is None:
        return None
    s = str(v)
    return s if s.strip() else None


def normalize(value: Any, kind: FieldKind) -> Any:
    if value is None:
        return None

    if kind is FieldKind.TEXT:
        return _text(value)

    if kind is FieldKind.REFERENCE:
        s = _text(value)
        if s is None or s.strip().lower() == SENTINEL:
            return None
        return s

    if kind is FieldKind.SECRET:
        s = _text(value)
        if s is None or is_masked(s):
            return None
        return s

    if kind is FieldKind.FILTER_LIST:
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            raise TypeError(f"expected a list for {kind.value} field, got {type(value).__name__}")
        items = [str(x) for x in value]
        if not items:
            return None
        return items

    if kind is FieldKind.ZERO_UNSET:
        # bool is an int subclass; False is a real value, not a zero
        if not isinstance(value, bool) and value == 0:
            return None
        return value

    return value


def normalize_source(src: Any) -> SourceFilter | None:
    """Source filter from a snapshot (mapping, wire model or record); all-empty collapses to None."""
    if src is None:
        return None

    def _get(name: str) -> Any:
        if isinstance(src, dict):
            return src.get(name)
        return getattr(src, name, None)

    out = SourceFilter(
        include_schemas=normalize(_get("include_schemas"), FieldKind.FILTER_LIST),
        exclude_schemas=normalize(_get("exclude_schemas"), FieldKind.FILTER_LIST),
        include_tables=normalize(_get("include_tables"), FieldKind.FILTER_LIST),
        exclude_tables=normalize(_get("exclude_tables"), FieldKind.FILTER_LIST),
    )
    if out == SourceFilter():
        return None
    return out
