# sequin-platform test scripts
from __future__ import annotations

import pytest

from sequin_platform.models import SourceFilter
from sequin_platform.reconcile import FieldKind, is_masked, merge_secrets, normalize, normalize_source, preserve


@pytest.mark.parametrize(
    "kind,value,expected",
    [
        (FieldKind.TEXT, "", None),
        (FieldKind.TEXT, "   ", None),
        (FieldKind.TEXT, "db-1", "db-1"),
        (FieldKind.TEXT, "none", "none"),
        (FieldKind.REFERENCE, "none", None),
        (FieldKind.REFERENCE, "NONE", None),
        (FieldKind.REFERENCE, "", None),
        (FieldKind.REFERENCE, "my-filter", "my-filter"),
        (FieldKind.SECRET, "********", None),
        (FieldKind.SECRET, "", None),
        (FieldKind.SECRET, "s3cret", "s3cret"),
        (FieldKind.SECRET, "pa**word", "pa**word"),
        (FieldKind.FILTER_LIST, [], None),
        (FieldKind.FILTER_LIST, ["public"], ["public"]),
        (FieldKind.FILTER_LIST, ["a", ""], ["a", ""]),
        (FieldKind.ZERO_UNSET, 0, None),
        (FieldKind.ZERO_UNSET, 5432, 5432),
        (FieldKind.ZERO_UNSET, False, False),
        (FieldKind.SCALAR, False, False),
        (FieldKind.SCALAR, 0, 0),
    ],
)
def test_normalize_kinds(kind: FieldKind, value: object, expected: object) -> None:
    assert normalize(value, kind) == expected


@pytest.mark.parametrize("kind", list(FieldKind))
def test_normalize_none_is_absent_for_every_kind(kind: FieldKind) -> None:
    assert normalize(None, kind) is None


@pytest.mark.parametrize(
    "kind,value",
    [
        (FieldKind.TEXT, ""),
        (FieldKind.REFERENCE, "none"),
        (FieldKind.SECRET, "****"),
        (FieldKind.FILTER_LIST, []),
        (FieldKind.FILTER_LIST, ["a", "b"]),
        (FieldKind.ZERO_UNSET, 0),
        (FieldKind.ZERO_UNSET, 100),
    ],
)
def test_normalize_is_idempotent(kind: FieldKind, value: object) -> None:
    once = normalize(value, kind)
    assert normalize(once, kind) == once


def test_list_kinds_reject_scalars() -> None:
    with pytest.raises(TypeError):
        normalize("public", FieldKind.FILTER_LIST)


def test_field_kinds() -> None:
    assert [k.name for k in FieldKind] == ["TEXT", "REFERENCE", "SECRET", "FILTER_LIST", "SCALAR", "ZERO_UNSET"]


def test_filter_list_returns_a_copy() -> None:
    src = ["a"]
    out = normalize(src, FieldKind.FILTER_LIST)
    assert out == src and out is not src


def test_is_masked() -> None:
    assert is_masked("*")
    assert is_masked("**********")
    assert not is_masked("")
    assert not is_masked(None)
    assert not is_masked("a*")


def test_normalize_source_collapses_all_empty() -> None:
    assert normalize_source(None) is None
    assert normalize_source({"include_schemas": [], "exclude_schemas": [], "include_tables": [], "exclude_tables": []}) is None
    out = normalize_source({"include_schemas": ["public"], "exclude_tables": []})
    assert out == SourceFilter(include_schemas=["public"])


def test_preserve_prefers_remote_then_prior() -> None:
    assert preserve("new", "old") == "new"
    assert preserve("*****", "old") == "old"
    assert preserve("", "old") == "old"
    assert preserve(None, "old") == "old"
    assert preserve(None, None) is None


def test_merge_secrets_only_touches_named_fields() -> None:
    out = merge_secrets(
        {"password": "********", "url": None, "hostname": "db"},
        {"password": "hunter2", "url": None},
        ("password", "url"),
    )
    assert out == {"password": "hunter2", "url": None}


def test_merge_secrets_without_prior() -> None:
    assert merge_secrets({"password": "****"}, None, ("password",)) == {"password": None}
