# sequin_platform/resources/__init__.py
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from ._backfill import BackfillReconciler
from ._base import BaseReconciler, OpContext, ReadResult, RemoteAPI
from ._connection import ConnectionReconciler
from ._consumer import StreamConsumerReconciler

__all__ = [
    "RemoteAPI",
    "OpContext",
    "ReadResult",
    "BaseReconciler",
    "ConnectionReconciler",
    "StreamConsumerReconciler",
    "BackfillReconciler",
]
