# sequin_platform/reconcile/__init__.py
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
from __future__ import annotations

from ._destination import destination_request, merge_destination, parse_destination, topic_suppressed
from ._normalize import SENTINEL, FieldKind, is_masked, normalize, normalize_source
from ._secrets import merge_secrets, preserve

__all__ = [
    "SENTINEL",
    "FieldKind",
    "is_masked",
    "normalize",
    "normalize_source",
    "preserve",
    "merge_secrets",
    "parse_destination",
    "destination_request",
    "merge_destination",
    "topic_suppressed",
]
