# sequin_platform/id_codec.py
# Compound identifiers for resources scoped under a parent: "<parent>/<child>".
# Copyright (c) 2025-2026 CrossWatch / Cenodude (https://github.com/cenodude/CrossWatch)
#
# decode splits on the first separator into exactly two non-empty segments;
# encode is the inverse and refuses segments that would not decode back.
from __future__ import annotations

from .errors import InvalidIdentifier

SEPARATOR = "/"
BACKFILL_FORMAT = "<sink_consumer>/<backfill_id>"

__all__ = ["SEPARATOR", "BACKFILL_FORMAT", "decode", "encode"]


def decode(raw: str, *, expected: str = BACKFILL_FORMAT) -> tuple[str, str]:
    s = str(raw or "")
    parent, sep, child = s.partition(SEPARATOR)
    if not sep or not parent or not child or SEPARATOR in child:
        raise InvalidIdentifier(f"Expected format: {expected}, got: {s!r}")
    return parent, child


def encode(parent: str, child: str, *, expected: str = BACKFILL_FORMAT) -> str:
    p, c = str(parent or ""), str(child or "")
    for seg in (p, c):
        if not seg or SEPARATOR in seg:
            raise InvalidIdentifier(
                f"Cannot build {expected} from parent={p!r}, child={c!r}: "
                f"segments must be non-empty and must not contain {SEPARATOR!r}"
            )
    return f"{p}{SEPARATOR}{c}"
