"""JSON-safe encoding of synthesized value trees."""

from __future__ import annotations

from typing import Any, Dict

from .models import FunctionPlaceholder, PropsResult, ValueTree

FUNCTION_KIND = "function"


def serialize(value: ValueTree) -> Any:
    """Replace every FunctionPlaceholder with ``{"kind": "function", "name": ...}``."""
    if isinstance(value, FunctionPlaceholder):
        return {"kind": FUNCTION_KIND, "name": value.name or "anonymous"}
    if isinstance(value, list):
        return [serialize(item) for item in value]
    if isinstance(value, dict):
        return {key: serialize(item) for key, item in value.items()}
    return value


def deserialize(value: Any) -> ValueTree:
    """Inverse of :func:`serialize`; each function tag becomes a fresh placeholder."""
    if isinstance(value, dict):
        if _is_function_tag(value):
            return FunctionPlaceholder(value["name"])
        return {key: deserialize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [deserialize(item) for item in value]
    return value


def _is_function_tag(value: Dict[str, Any]) -> bool:
    return (
        set(value) == {"kind", "name"}
        and value["kind"] == FUNCTION_KIND
        and isinstance(value["name"], str)
    )


def serialize_props(result: PropsResult) -> Dict[str, Any]:
    """Shape a PropsResult the way the preview HTTP layer consumes it."""
    enums = {
        field_name: {"values": [{"name": member.name, "value": member.value} for member in members]}
        for field_name, members in result.enums.items()
    }
    return {"props": serialize(result.props), "metadata": {"enums": enums}}


__all__ = ["FUNCTION_KIND", "deserialize", "serialize", "serialize_props"]
