"""Tests for flattening document trees into path/value items."""

from __future__ import annotations

from yamljson_validator.flattener import flatten


def test_nested_object_uses_dotted_paths() -> None:
    assert flatten({"a": {"b": 1}}) == {"a.b": "1"}


def test_array_uses_indexed_paths() -> None:
    assert flatten({"a": [10, 20]}) == {"a[0]": "10", "a[1]": "20"}


def test_empty_root_object_has_no_items() -> None:
    assert flatten({}) == {}


def test_empty_containers_contribute_nothing() -> None:
    assert flatten({"a": {}, "b": [], "c": 1}) == {"c": "1"}


def test_nested_arrays_and_objects_in_arrays() -> None:
    tree = {"m": [[1, 2], [3]], "servers": [{"host": "a", "port": 80}]}
    assert flatten(tree) == {
        "m[0][0]": "1",
        "m[0][1]": "2",
        "m[1][0]": "3",
        "servers[0].host": "a",
        "servers[0].port": "80",
    }


def test_scalars_use_json_text() -> None:
    tree = {"t": True, "f": False, "n": None, "x": 1.5, "s": "text", "i": -3}
    assert flatten(tree) == {
        "t": "true",
        "f": "false",
        "n": "null",
        "x": "1.5",
        "s": "text",
        "i": "-3",
    }


def test_strings_are_verbatim() -> None:
    assert flatten({"s": "  01 true "}) == {"s": "  01 true "}


def test_root_array() -> None:
    assert flatten([1, {"k": "v"}]) == {"[0]": "1", "[1].k": "v"}


def test_root_scalar_uses_empty_path() -> None:
    assert flatten("value") == {"": "value"}


def test_keys_follow_document_order() -> None:
    items = flatten({"zeta": 1, "alpha": {"y": 2, "b": 3}, "mid": [4]})
    assert list(items) == ["zeta", "alpha.y", "alpha.b", "mid[0]"]
