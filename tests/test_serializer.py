"""Tests for value tree serialization."""

from __future__ import annotations

import json

from lexiview.models import EnumMember, FunctionPlaceholder, PropsResult
from lexiview.serializer import deserialize, serialize, serialize_props


def test_serialize_tags_functions_recursively() -> None:
    value = {
        "title": "Mock Title",
        "onClick": FunctionPlaceholder("onClick"),
        "items": [{"onSelect": FunctionPlaceholder("onSelect")}, 3, None, True],
    }

    encoded = serialize(value)

    assert encoded == {
        "title": "Mock Title",
        "onClick": {"kind": "function", "name": "onClick"},
        "items": [{"onSelect": {"kind": "function", "name": "onSelect"}}, 3, None, True],
    }
    json.dumps(encoded)


def test_round_trip_preserves_structure_and_names_not_identity() -> None:
    original_fn = FunctionPlaceholder("onSave")
    value = {"nested": {"save": original_fn, "count": 42}, "list": [1.5, "x"]}

    restored = deserialize(serialize(value))

    assert restored == value
    restored_fn = restored["nested"]["save"]
    assert isinstance(restored_fn, FunctionPlaceholder)
    assert restored_fn.name == "onSave"
    assert restored_fn is not original_fn
    restored_fn("arg")
    assert original_fn.calls == []


def test_deserialize_leaves_lookalike_records_alone() -> None:
    record = {"kind": "function", "name": "x", "extra": 1}

    assert deserialize(record) == record


def test_serialize_props_includes_enum_metadata() -> None:
    result = PropsResult(
        props={"status": "active", "onChange": FunctionPlaceholder("onChange")},
        enums={"status": (EnumMember("Active", "active"), EnumMember("Inactive", 0))},
    )

    payload = serialize_props(result)

    assert payload == {
        "props": {"status": "active", "onChange": {"kind": "function", "name": "onChange"}},
        "metadata": {
            "enums": {
                "status": {
                    "values": [
                        {"name": "Active", "value": "active"},
                        {"name": "Inactive", "value": 0},
                    ]
                }
            }
        },
    }
