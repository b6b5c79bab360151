# sequin-platform test scripts
from __future__ import annotations

import pytest

from sequin_platform.client import DestinationWire
from sequin_platform.errors import InvalidDestinationField, RemoteAPIError, ValidationError
from sequin_platform.models import (
    ALL_DESTINATION_FIELDS,
    KafkaDestination,
    KinesisDestination,
    SqsDestination,
    WebhookDestination,
    destination_fields,
    flatten_destination,
)
from sequin_platform.reconcile import destination_request, merge_destination, parse_destination


def test_parse_destination_builds_variant() -> None:
    d = parse_destination({"type": "kafka", "hosts": "k:9092", "topic": "t", "password": "x"})
    assert d == KafkaDestination(hosts="k:9092", topic="t", password="x")


def test_parse_destination_ignores_null_foreign_fields() -> None:
    d = parse_destination({"type": "webhook", "http_endpoint": "ep", "queue_url": None})
    assert d == WebhookDestination(http_endpoint="ep")


def test_parse_destination_rejects_foreign_field() -> None:
    with pytest.raises(InvalidDestinationField) as ei:
        parse_destination({"type": "sqs", "queue_url": "q", "hosts": "k:9092"})
    assert ei.value.field == "hosts"
    assert "kafka" in str(ei.value)


def test_parse_destination_rejects_unknown_field() -> None:
    with pytest.raises(InvalidDestinationField) as ei:
        parse_destination({"type": "kinesis", "stream_arn": "arn", "bogus": 1})
    assert ei.value.field == "bogus"


@pytest.mark.parametrize("cfg", [{}, {"type": ""}, {"type": "pubsub"}])
def test_parse_destination_rejects_bad_type(cfg: dict) -> None:
    with pytest.raises(ValidationError):
        parse_destination(cfg)


def test_parse_destination_passes_variants_through() -> None:
    d = SqsDestination(queue_url="q")
    assert parse_destination(d) is d


def test_destination_request_only_active_kind() -> None:
    body = destination_request(KinesisDestination(stream_arn="arn:1", region="eu-west-1"))
    assert body == {"type": "kinesis", "stream_arn": "arn:1", "region": "eu-west-1"}


def test_flatten_destination_marks_other_kinds_absent() -> None:
    flat = flatten_destination(WebhookDestination(http_endpoint="ep", batch=True))
    assert flat["type"] == "webhook"
    assert set(flat) == {"type", *ALL_DESTINATION_FIELDS}
    others = set(ALL_DESTINATION_FIELDS) - set(destination_fields("webhook"))
    assert all(flat[name] is None for name in others)


def test_merge_destination_kind_isolation() -> None:
    # the API happens to send a stray region on a webhook; it cannot survive
    snap = {"type": "webhook", "http_endpoint": "ep", "http_endpoint_path": "", "batch": False, "region": "us"}
    prior = SqsDestination(queue_url="q", access_key_id="AK", secret_access_key="SK")
    out = merge_destination(snap, prior)
    assert out == WebhookDestination(http_endpoint="ep", http_endpoint_path=None, batch=False)


def test_merge_destination_does_not_carry_secrets_across_kinds() -> None:
    snap = DestinationWire(type="kinesis", stream_arn="arn:aws:kinesis:us-east-1:1:stream/s", region="us-east-1")
    prior = SqsDestination(queue_url="q", access_key_id="AK", secret_access_key="SK")
    out = merge_destination(snap, prior)
    assert out == KinesisDestination(stream_arn="arn:aws:kinesis:us-east-1:1:stream/s", region="us-east-1")
    assert out.access_key_id is None and out.secret_access_key is None


def test_merge_destination_preserves_write_only_fields() -> None:
    snap = DestinationWire(type="sqs", queue_url="q", region="us-east-1", is_fifo=True)
    prior = SqsDestination(queue_url="q", access_key_id="AK", secret_access_key="SK")
    out = merge_destination(snap, prior)
    assert out == SqsDestination(
        queue_url="q", region="us-east-1", access_key_id="AK", secret_access_key="SK", is_fifo=True
    )


def test_merge_destination_remote_secret_wins() -> None:
    out = merge_destination({"type": "kafka", "hosts": "h", "password": "fresh"}, KafkaDestination(password="old"))
    assert out.password == "fresh"


def test_merge_destination_topic_kept_only_with_routing() -> None:
    prior = KafkaDestination(hosts="h", topic="orders")
    snap = {"type": "kafka", "hosts": "h", "topic": ""}
    assert merge_destination(snap, prior, routing="route-fn").topic == "orders"
    assert merge_destination(snap, prior, routing=None).topic is None
    assert merge_destination(snap, prior, routing="none").topic is None


def test_merge_destination_is_stable_on_unchanged_snapshot() -> None:
    snap = {"type": "kafka", "hosts": "h", "topic": "", "password": "****", "tls": True}
    first = merge_destination(snap, KafkaDestination(hosts="h", topic="t", password="pw"), routing="r")
    assert merge_destination(snap, first, routing="r") == first


def test_merge_destination_unknown_remote_type() -> None:
    with pytest.raises(RemoteAPIError):
        merge_destination({"type": "pubsub"}, None)
