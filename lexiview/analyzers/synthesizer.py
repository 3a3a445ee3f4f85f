"""Type-driven mock value synthesis for component props."""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple, Union

from tree_sitter import Node

from ..logging import get_logger
from ..models import (
    EnumDescriptor,
    EnumMember,
    EnumMetadataMap,
    FunctionPlaceholder,
    PropsResult,
    ValueTree,
)
from .resolver import Resolution, TypeResolver
from .source import ParsedFile, string_value

logger = get_logger("analyzers.synthesizer")

# Ordered: the first substring that matches the lower-cased field name wins.
STRING_RULES: Tuple[Tuple[Tuple[str, ...], Optional[str]], ...] = (
    (("id",), "mock-id-123"),
    (("title",), "Mock Title"),
    (("name",), None),
    (("description",), "This is a mock description"),
    (("email",), "mock@example.com"),
    (("url", "link"), "https://example.com"),
    (("path",), "/mock/path"),
    (("date",), "2025-10-11"),
    (("time",), "12:34"),
    (("duration",), "10:24"),
    (("color",), "#4a90e2"),
    (
        ("thumbnail",),
        "data:image/svg+xml;base64,PHN2ZyB3aWR0aD0iMzAwIiBoZWlnaHQ9IjIwMCIgeG1sbnM9Imh0dHA6"
        "Ly93d3cudzMub3JnLzIwMDAvc3ZnIj48cmVjdCB3aWR0aD0iMzAwIiBoZWlnaHQ9IjIwMCIgZmlsbD0iIzRh"
        "OTBlMiIvPjwvc3ZnPg==",
    ),
)

NUMBER_RULES: Tuple[Tuple[Tuple[str, ...], Union[int, float]], ...] = (
    (("count", "total"), 42),
    (("views",), 1234),
    (("age",), 25),
    (("price", "cost"), 99.99),
    (("percent",), 75),
    (("index",), 0),
)

DEFAULT_NUMBER = 123

RENDERABLE_TYPES = frozenset({"ReactNode", "ReactElement", "JSX.Element"})
DATE_TYPES = frozenset({"Date"})
BINARY_TYPES = frozenset({"File", "Blob"})
ARRAY_GENERICS = frozenset({"Array", "ReadonlyArray"})

_MEMBER_NAME_NODES = frozenset({"property_identifier", "string"})


def string_for(field_name: str) -> str:
    lower = field_name.lower()
    for keywords, value in STRING_RULES:
        if any(keyword in lower for keyword in keywords):
            return value if value is not None else f"Mock {field_name}"
    return f"Mock {field_name}"


def number_for(field_name: str) -> Union[int, float]:
    lower = field_name.lower()
    for keywords, value in NUMBER_RULES:
        if any(keyword in lower for keyword in keywords):
            return value
    return DEFAULT_NUMBER


def fallback_object(field_name: str) -> Dict[str, ValueTree]:
    return {f"mock{field_name[:1].upper()}{field_name[1:]}": "mock-value"}


def placeholder_file() -> Dict[str, ValueTree]:
    content = "mock content"
    return {"name": "mock.txt", "type": "text/plain", "size": len(content), "content": content}


def parse_number(text: str) -> Optional[Union[int, float]]:
    cleaned = text.replace("_", "")
    try:
        return int(cleaned, 0)
    except ValueError:
        pass
    try:
        value = float(cleaned)
    except ValueError:
        return None
    # `1e3` and `010` are whole numbers in JavaScript.
    return int(value) if value.is_integer() else value


def _numeric_literal(parsed: ParsedFile, node: Node) -> Optional[Union[int, float]]:
    if node.type == "number":
        return parse_number(parsed.text(node))
    if node.type == "unary_expression":
        operator = node.child_by_field_name("operator")
        argument = node.child_by_field_name("argument")
        if operator is not None and argument is not None and argument.type == "number":
            value = parse_number(parsed.text(argument))
            if value is None:
                return None
            sign = parsed.text(operator)
            if sign == "-":
                return -value
            if sign == "+":
                return value
    return None


def enum_members(parsed: ParsedFile, declaration: Node) -> EnumDescriptor:
    """Return an enum's members in declaration order with their effective values.

    A member without an initializer takes the running counter, which starts
    at 0 and only moves past explicit numeric initializers. String members
    leave it untouched. Members with any other computed initializer are
    skipped.
    """
    body = declaration.child_by_field_name("body")
    if body is None:
        return ()
    members: List[EnumMember] = []
    counter: Union[int, float] = 0
    for child in body.named_children:
        if child.type == "enum_assignment":
            name_node = child.child_by_field_name("name")
            value_node = child.child_by_field_name("value")
            if name_node is None or value_node is None:
                continue
            name = _member_name(parsed, name_node)
            text = string_value(parsed, value_node)
            if text is not None:
                members.append(EnumMember(name, text))
                continue
            number = _numeric_literal(parsed, value_node)
            if number is None:
                logger.debug("Skipping computed enum member %s in %s", name, parsed.path)
                continue
            members.append(EnumMember(name, number))
            counter = number + 1
        elif child.type in {"property_identifier", "string", "number"}:
            members.append(EnumMember(_member_name(parsed, child), counter))
            counter += 1
    return tuple(members)


def _member_name(parsed: ParsedFile, node: Node) -> str:
    quoted = string_value(parsed, node)
    return quoted if quoted is not None else parsed.text(node)


def _flatten_union(node: Node) -> List[Node]:
    members: List[Node] = []
    for child in node.named_children:
        if child.type == "union_type":
            members.extend(_flatten_union(child))
        elif child.type != "comment":
            members.append(child)
    return members


def _reference_name(parsed: ParsedFile, node: Node) -> Tuple[str, Optional[Node]]:
    """Return (qualified name, type arguments) for a type reference node."""
    if node.type == "generic_type":
        name = node.child_by_field_name("name")
        arguments = node.child_by_field_name("type_arguments")
        return (parsed.text(name) if name is not None else ""), arguments
    return parsed.text(node), None


class ValueSynthesizer:
    """Produces sample values for declared types, resolving names across files."""

    def __init__(
        self,
        resolver: TypeResolver,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._resolver = resolver
        self._clock = clock

    def synthesize(
        self, type_node: Node, field_name: str, context: ParsedFile
    ) -> Tuple[ValueTree, EnumMetadataMap]:
        """Return a sample for ``type_node`` and the enum metadata for ``field_name``."""
        return self._value_for(type_node, field_name, context, frozenset())

    def generate_props(self, parsed: ParsedFile, interface_name: str) -> PropsResult:
        resolution = self._resolver.resolve(interface_name, parsed)
        if not resolution.found or resolution.kind == "enum":
            logger.info("Props type %s not found from %s", interface_name, parsed.path)
            return PropsResult()

        visiting = frozenset({_visit_key(resolution, interface_name)})
        result = PropsResult()
        members = self._members_container(resolution)
        if members is None:
            value, _ = self._value_for(
                resolution.declaration.child_by_field_name("value"),
                interface_name,
                resolution.file,
                visiting,
            )
            if isinstance(value, dict):
                result.props.update(value)
            return result

        for name, type_node in self._property_signatures(resolution.file, members):
            value, enums = self._value_for(type_node, name, resolution.file, visiting)
            result.props[name] = value
            result.enums.update(enums)
        return result

    # ------------------------------------------------------------------
    # Dispatch

    def _value_for(
        self,
        node: Optional[Node],
        field_name: str,
        context: ParsedFile,
        visiting: FrozenSet[Tuple[str, str]],
    ) -> Tuple[ValueTree, EnumMetadataMap]:
        if node is None:
            return None, {}
        kind = node.type

        if kind in {"type_annotation", "parenthesized_type", "readonly_type"}:
            inner = next((child for child in node.named_children if child.type != "comment"), None)
            return self._value_for(inner, field_name, context, visiting)
        if kind == "predefined_type":
            return self._predefined(context.text(node), field_name), {}
        if kind == "function_type":
            return FunctionPlaceholder(field_name), {}
        if kind == "array_type":
            element = next((child for child in node.named_children if child.type != "comment"), None)
            return self._array_of(element, context, visiting), {}
        if kind == "tuple_type":
            items = [
                self._value_for(child, "", context, visiting)[0]
                for child in node.named_children
                if child.type != "comment"
            ]
            return items, {}
        if kind == "union_type":
            members = _flatten_union(node)
            if not members:
                return None, {}
            return self._value_for(members[0], field_name, context, visiting)
        if kind == "intersection_type":
            return self._intersection(node, field_name, context, visiting), {}
        if kind == "literal_type":
            return self._literal(context, node), {}
        if kind == "object_type":
            return self._record(context, node, visiting), {}
        if kind in {"type_identifier", "generic_type", "nested_type_identifier"}:
            return self._reference(node, field_name, context, visiting)

        logger.debug("No synthesis rule for %s (%s) in %s", kind, field_name, context.path)
        return None, {}

    @staticmethod
    def _predefined(keyword: str, field_name: str) -> ValueTree:
        if keyword == "string":
            return string_for(field_name)
        if keyword == "number":
            return number_for(field_name)
        if keyword == "boolean":
            # Field names are not consulted for booleans.
            return False
        return None

    def _array_of(
        self,
        element: Optional[Node],
        context: ParsedFile,
        visiting: FrozenSet[Tuple[str, str]],
    ) -> List[ValueTree]:
        sample, _ = self._value_for(element, "", context, visiting)
        return [copy.deepcopy(sample), copy.deepcopy(sample)]

    def _intersection(
        self,
        node: Node,
        field_name: str,
        context: ParsedFile,
        visiting: FrozenSet[Tuple[str, str]],
    ) -> ValueTree:
        merged: Dict[str, ValueTree] = {}
        first: ValueTree = None
        for index, part in enumerate(child for child in node.named_children if child.type != "comment"):
            value, _ = self._value_for(part, field_name, context, visiting)
            if index == 0:
                first = value
            if isinstance(value, dict):
                merged.update(value)
        return merged if merged else first

    @staticmethod
    def _literal(parsed: ParsedFile, node: Node) -> ValueTree:
        literal = next((child for child in node.named_children if child.type != "comment"), None)
        if literal is None:
            return None
        text = string_value(parsed, literal)
        if text is not None:
            return text
        number = _numeric_literal(parsed, literal)
        if number is not None:
            return number
        if literal.type == "true":
            return True
        if literal.type == "false":
            return False
        return None

    # ------------------------------------------------------------------
    # Named references

    def _reference(
        self,
        node: Node,
        field_name: str,
        context: ParsedFile,
        visiting: FrozenSet[Tuple[str, str]],
    ) -> Tuple[ValueTree, EnumMetadataMap]:
        qualified, arguments = _reference_name(context, node)
        simple = qualified.rsplit(".", 1)[-1]

        if qualified in RENDERABLE_TYPES or simple in RENDERABLE_TYPES:
            return None, {}
        if qualified in DATE_TYPES:
            return self._clock().isoformat(), {}
        if qualified in BINARY_TYPES:
            return placeholder_file(), {}
        if qualified in ARRAY_GENERICS and arguments is not None:
            element = next(
                (child for child in arguments.named_children if child.type != "comment"), None
            )
            return self._array_of(element, context, visiting), {}

        resolution = self._resolver.resolve(simple, context)
        if not resolution.found:
            return fallback_object(field_name), {}

        key = _visit_key(resolution, simple)
        if key in visiting:
            logger.debug("Cycle through %s while synthesizing %s", simple, field_name)
            return None, {}

        if resolution.kind == "enum":
            members = enum_members(resolution.file, resolution.declaration)
            first: ValueTree = members[0].value if members else 0
            return first, {field_name: members}

        nested = visiting | {key}
        if resolution.kind == "alias":
            value_node = resolution.declaration.child_by_field_name("value")
            return self._value_for(value_node, field_name, resolution.file, nested)

        members_node = self._members_container(resolution)
        if members_node is None:
            return {}, {}
        return self._record(resolution.file, members_node, nested), {}

    # ------------------------------------------------------------------
    # Records

    @staticmethod
    def _members_container(resolution: Resolution) -> Optional[Node]:
        """Return the member list of an interface, or of an alias to an object type."""
        if resolution.kind == "interface":
            return resolution.declaration.child_by_field_name("body")
        if resolution.kind == "alias":
            value = resolution.declaration.child_by_field_name("value")
            while value is not None and value.type == "parenthesized_type":
                value = next((child for child in value.named_children if child.type != "comment"), None)
            if value is not None and value.type == "object_type":
                return value
        return None

    def _record(
        self,
        parsed: ParsedFile,
        members: Node,
        visiting: FrozenSet[Tuple[str, str]],
    ) -> Dict[str, ValueTree]:
        record: Dict[str, ValueTree] = {}
        for name, type_node in self._property_signatures(parsed, members):
            record[name], _ = self._value_for(type_node, name, parsed, visiting)
        return record

    @staticmethod
    def _property_signatures(parsed: ParsedFile, members: Node) -> List[Tuple[str, Node]]:
        signatures: List[Tuple[str, Node]] = []
        for member in members.named_children:
            if member.type != "property_signature":
                continue
            name_node = member.child_by_field_name("name")
            type_node = member.child_by_field_name("type")
            if name_node is None or type_node is None:
                continue
            if name_node.type not in _MEMBER_NAME_NODES:
                continue
            signatures.append((_member_name(parsed, name_node), type_node))
        return signatures


def _visit_key(resolution: Resolution, name: str) -> Tuple[str, str]:
    return str(resolution.file.path), name


__all__ = [
    "DEFAULT_NUMBER",
    "ValueSynthesizer",
    "enum_members",
    "fallback_object",
    "number_for",
    "string_for",
]
