# sequin_platform/client/__init__.py
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from ._wire import (
    BackfillCreateRequest,
    BackfillSnapshot,
    BackfillUpdateRequest,
    ConnectionRequest,
    ConnectionSnapshot,
    DestinationWire,
    PrimaryWire,
    ReplicationSlotWire,
    SinkRequest,
    SinkSnapshot,
    SourceWire,
    StatusInfoWire,
    TableWire,
)
from .api import DEFAULT_TIMEOUT, SequinClient

__all__ = [
    "SequinClient",
    "DEFAULT_TIMEOUT",
    "ConnectionRequest",
    "ConnectionSnapshot",
    "ReplicationSlotWire",
    "PrimaryWire",
    "SinkRequest",
    "SinkSnapshot",
    "SourceWire",
    "TableWire",
    "DestinationWire",
    "StatusInfoWire",
    "BackfillCreateRequest",
    "BackfillUpdateRequest",
    "BackfillSnapshot",
]
