# sequin_platform/__init__.py
# Reconcile declared Sequin resources (connections, stream consumers, backfills) with the management API.
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from .errors import (
    CancellationError,
    ConfigError,
    InvalidDestinationField,
    InvalidIdentifier,
    NotFoundError,
    RemoteAPIError,
    SequinError,
    ValidationError,
)
from .models import (
    Backfill,
    BackfillProgress,
    Connection,
    KafkaDestination,
    KinesisDestination,
    PrimaryConnection,
    ReplicationSlot,
    SourceFilter,
    SqsDestination,
    StatusInfo,
    StreamConsumer,
    TableSpec,
    WebhookDestination,
    flatten_destination,
)
from .resources import (
    BackfillReconciler,
    ConnectionReconciler,
    OpContext,
    ReadResult,
    StreamConsumerReconciler,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "SequinError",
    "ValidationError",
    "InvalidIdentifier",
    "InvalidDestinationField",
    "ConfigError",
    "NotFoundError",
    "RemoteAPIError",
    "CancellationError",
    "Connection",
    "ReplicationSlot",
    "PrimaryConnection",
    "StreamConsumer",
    "SourceFilter",
    "TableSpec",
    "StatusInfo",
    "KafkaDestination",
    "SqsDestination",
    "KinesisDestination",
    "WebhookDestination",
    "flatten_destination",
    "Backfill",
    "BackfillProgress",
    "OpContext",
    "ReadResult",
    "ConnectionReconciler",
    "StreamConsumerReconciler",
    "BackfillReconciler",
]
