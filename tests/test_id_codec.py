# sequin-platform test scripts
from __future__ import annotations

import pytest

from sequin_platform import id_codec
from sequin_platform.errors import InvalidIdentifier, ValidationError


def test_decode_splits_parent_and_child() -> None:
    assert id_codec.decode("orders-sink/bf_123") == ("orders-sink", "bf_123")


def test_encode_decode_round_trip() -> None:
    raw = id_codec.encode("orders-sink", "bf_123")
    assert raw == "orders-sink/bf_123"
    assert id_codec.decode(raw) == ("orders-sink", "bf_123")


@pytest.mark.parametrize("raw", ["bad-id-no-separator", "", "/bf", "sink/", "a/b/c"])
def test_decode_rejects_malformed(raw: str) -> None:
    with pytest.raises(ValidationError) as ei:
        id_codec.decode(raw)
    assert isinstance(ei.value, InvalidIdentifier)
    assert "<sink_consumer>/<backfill_id>" in str(ei.value)


@pytest.mark.parametrize("parent,child", [("", "x"), ("x", ""), ("a/b", "c"), ("a", "b/c")])
def test_encode_rejects_segments_that_would_not_decode(parent: str, child: str) -> None:
    with pytest.raises(InvalidIdentifier):
        id_codec.encode(parent, child)
