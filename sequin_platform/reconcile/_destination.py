# sequin_platform/reconcile/_destination.py
# Map between the destination sum type, the flattened wire record, and persisted state.
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..errors import InvalidDestinationField, RemoteAPIError, ValidationError
from ..models import (
    ALL_DESTINATION_FIELDS,
    DESTINATION_TYPES,
    Destination,
    destination_fields,
    flatten_destination,
)
from ._normalize import FieldKind, normalize
from ._secrets import preserve

__all__ = [
    "is_destination",
    "parse_destination",
    "destination_request",
    "merge_destination",
    "topic_suppressed",
]

_BOOL_FIELDS = frozenset({"tls", "is_fifo", "batch"})


def is_destination(obj: Any) -> bool:
    return isinstance(obj, tuple(DESTINATION_TYPES.values()))


def _owners(name: str) -> list[str]:
    return [kind for kind in DESTINATION_TYPES if name in destination_fields(kind)]


def _as_mapping(obj: Any) -> dict[str, Any]:
    if obj is None:
        return {}
    if isinstance(obj, Mapping):
        return dict(obj)
    dump = getattr(obj, "model_dump", None)
    if callable(dump):
        return dict(dump())
    raise TypeError(f"cannot read destination from {type(obj).__name__}")


# --- desired -> request -------------------------------------------------------

def parse_destination(cfg: Destination | Mapping[str, Any]) -> Destination:
    """Desired destination mapping with a "type" discriminator -> variant record.

    Non-null fields that belong to another kind (or to no kind) are rejected
    with InvalidDestinationField; null fields are treated as not given.
    """
    if is_destination(cfg):
        return cfg  # type: ignore[return-value]
    if not isinstance(cfg, Mapping):
        raise ValidationError(f"destination: expected a mapping, got {type(cfg).__name__}")

    data = dict(cfg)
    kind = str(data.pop("type", None) or "").strip().lower()
    if not kind:
        raise ValidationError(f"destination.type is required (one of {', '.join(DESTINATION_TYPES)})")
    cls = DESTINATION_TYPES.get(kind)
    if cls is None:
        raise ValidationError(
            f"destination.type {kind!r} is not supported (one of {', '.join(DESTINATION_TYPES)})"
        )

    own = destination_fields(kind)
    for name in sorted(data):
        if name in own or data[name] is None:
            continue
        owners = _owners(name)
        if owners:
            raise InvalidDestinationField(
                f"destination.{name} belongs to {'/'.join(owners)} destinations, not {kind}",
                field=name,
            )
        raise InvalidDestinationField(f"destination.{name} is not a destination field", field=name)

    return cls(**{name: data[name] for name in own if name in data})


def destination_request(dest: Destination | Mapping[str, Any]) -> dict[str, Any]:
    """Wire body for the active kind only: "type" plus its non-null fields."""
    d = parse_destination(dest)
    flat = flatten_destination(d)
    body: dict[str, Any] = {"type": d.kind}
    for name in destination_fields(d.kind):
        if flat[name] is not None:
            body[name] = flat[name]
    return body


# --- response -> persisted ----------------------------------------------------

def topic_suppressed(routing: Any) -> bool:
    # a routing function overrides the delivery topic and the API stops echoing it
    return normalize(routing, FieldKind.REFERENCE) is not None


def merge_destination(
    snapshot: Any,
    prior: Destination | None,
    *,
    routing: Any = None,
) -> Destination:
    """Fold a snapshot destination into a variant record.

    Fields of the snapshot's kind are normalized; its write-only fields fall back
    to the same-named field of a prior record of the same kind; fields of other
    kinds cannot exist on the result. A kafka topic missing from the snapshot keeps the prior topic
    only while a routing function is set.
    """
    snap = _as_mapping(snapshot)
    kind = str(snap.get("type") or "").strip().lower()
    cls = DESTINATION_TYPES.get(kind)
    if cls is None:
        raise RemoteAPIError(f"API returned unsupported destination type {kind!r}")

    # credentials never carry over from a destination of another kind
    same_kind = is_destination(prior) and prior.kind == kind  # type: ignore[union-attr]
    prior_flat = flatten_destination(prior) if same_kind else dict.fromkeys(ALL_DESTINATION_FIELDS)

    values: dict[str, Any] = {}
    for name in destination_fields(kind):
        raw = snap.get(name)
        if name in cls.secret_fields:
            values[name] = preserve(raw, prior_flat.get(name))
        elif name in _BOOL_FIELDS:
            values[name] = normalize(raw, FieldKind.SCALAR)
        else:
            values[name] = normalize(raw, FieldKind.TEXT)

    if kind == "kafka" and values["topic"] is None and topic_suppressed(routing):
        values["topic"] = prior_flat.get("topic")

    return cls(**values)
