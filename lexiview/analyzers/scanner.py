"""Component detection and translation usage extraction for one parsed file."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from tree_sitter import Node

from ..models import ComponentInfo, TranslationUsage
from .source import ParsedFile, string_value, walk

UNKNOWN_COMPONENT = "Unknown"

TRANSLATE_FUNCTION = "t"
FORMATTED_MESSAGE_TAG = "FormattedMessage"
FORMATTED_MESSAGE_KEY_ATTRIBUTE = "id"

_JSX_NODES = frozenset({"jsx_element", "jsx_self_closing_element", "jsx_fragment"})
_FUNCTION_VALUES = frozenset(
    {"arrow_function", "function_expression", "function", "generator_function"}
)
_VARIABLE_STATEMENTS = frozenset({"lexical_declaration", "variable_declaration"})
_PARAMETER_NODES = frozenset({"required_parameter", "optional_parameter"})


@dataclass
class FileScan:
    """Everything a single-file scan contributes to the project snapshot."""

    path: str
    component: Optional[ComponentInfo] = None
    usages: List[TranslationUsage] = field(default_factory=list)
    imports: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class _Candidate:
    name: str
    # The function node whose first parameter carries the props annotation.
    function: Node


class UsageScanner:
    """Walks one file's tree to find its component and translation usages."""

    def scan(self, parsed: ParsedFile) -> FileScan:
        path = str(parsed.path)
        candidate = self.find_component(parsed)
        component_name = candidate.name if candidate else UNKNOWN_COMPONENT
        usages = list(self._collect_usages(parsed, path, component_name))

        component: Optional[ComponentInfo] = None
        if candidate is not None:
            component = ComponentInfo(
                path=path,
                name=candidate.name,
                props_interface=self._props_interface(parsed, candidate.function),
                translation_keys=list(dict.fromkeys(usage.key for usage in usages)),
            )
        return FileScan(
            path=path,
            component=component,
            usages=usages,
            imports=self.import_specifiers(parsed),
        )

    # ------------------------------------------------------------------
    # Component detection

    def find_component(self, parsed: ParsedFile) -> Optional[_Candidate]:
        """Return the first top-level declaration, in source order, that contains JSX.

        Later JSX-bearing declarations in the same file are ignored.
        """
        for candidate, container in self._top_level_candidates(parsed.root):
            if _contains_jsx(container):
                return candidate
        return None

    def _top_level_candidates(self, root: Node) -> Iterator[Tuple[_Candidate, Node]]:
        for statement in root.named_children:
            declaration = statement
            if statement.type == "export_statement":
                declaration = statement.child_by_field_name("declaration")
                if declaration is None:
                    # `export default function Name() {}` may surface as a named expression.
                    value = statement.child_by_field_name("value")
                    name_node = value.child_by_field_name("name") if value is not None else None
                    if value is not None and value.type in _FUNCTION_VALUES and name_node is not None:
                        yield _Candidate(name_node.text.decode("utf-8"), value), value
                    continue
            if declaration.type in {"function_declaration", "generator_function_declaration"}:
                name_node = declaration.child_by_field_name("name")
                if name_node is not None:
                    yield _Candidate(name_node.text.decode("utf-8"), declaration), declaration
            elif declaration.type in _VARIABLE_STATEMENTS:
                for declarator in declaration.named_children:
                    if declarator.type != "variable_declarator":
                        continue
                    name_node = declarator.child_by_field_name("name")
                    value = declarator.child_by_field_name("value")
                    if name_node is None or name_node.type != "identifier" or value is None:
                        continue
                    if value.type in _FUNCTION_VALUES:
                        yield _Candidate(name_node.text.decode("utf-8"), value), value

    # ------------------------------------------------------------------
    # Props interface

    @staticmethod
    def _props_interface(parsed: ParsedFile, function: Node) -> Optional[str]:
        parameters = function.child_by_field_name("parameters")
        if parameters is None:
            # `props => ...` has a bare identifier and no annotation.
            return None
        first = next(
            (child for child in parameters.named_children if child.type in _PARAMETER_NODES),
            None,
        )
        if first is None:
            return None
        annotation = first.child_by_field_name("type")
        if annotation is None:
            return None
        type_node = _first_named(annotation)
        if type_node is None:
            return None
        if type_node.type == "type_identifier":
            return parsed.text(type_node)
        if type_node.type == "generic_type":
            name = type_node.child_by_field_name("name")
            if name is not None and name.type == "type_identifier":
                return parsed.text(name)
        return None

    # ------------------------------------------------------------------
    # Usages

    def _collect_usages(
        self, parsed: ParsedFile, path: str, component_name: str
    ) -> Iterator[TranslationUsage]:
        for node in walk(parsed.root):
            key: Optional[str] = None
            if node.type == "call_expression":
                key = self._translate_call_key(parsed, node)
            elif node.type in {"jsx_opening_element", "jsx_self_closing_element"}:
                key = self._formatted_message_key(parsed, node)
            if key is None:
                continue
            line, column = parsed.position(node)
            yield TranslationUsage(
                key=key,
                component_path=path,
                component_name=component_name,
                line=line,
                column=column,
            )

    @staticmethod
    def _translate_call_key(parsed: ParsedFile, node: Node) -> Optional[str]:
        callee = node.child_by_field_name("function")
        if callee is None or callee.type != "identifier":
            return None
        if parsed.text(callee) != TRANSLATE_FUNCTION:
            return None
        arguments = node.child_by_field_name("arguments")
        if arguments is None:
            return None
        first = _first_named(arguments)
        if first is None:
            return None
        return string_value(parsed, first)

    @staticmethod
    def _formatted_message_key(parsed: ParsedFile, node: Node) -> Optional[str]:
        name = node.child_by_field_name("name")
        if name is None or name.type != "identifier":
            return None
        if parsed.text(name) != FORMATTED_MESSAGE_TAG:
            return None
        for attribute in node.children_by_field_name("attribute"):
            if attribute.type != "jsx_attribute":
                continue
            parts = [child for child in attribute.named_children if child.type != "comment"]
            if not parts or parts[0].type != "property_identifier":
                continue
            if parsed.text(parts[0]) != FORMATTED_MESSAGE_KEY_ATTRIBUTE:
                continue
            if len(parts) < 2:
                return None
            value = parts[1]
            if value.type == "jsx_expression":
                inner = _first_named(value)
                return string_value(parsed, inner) if inner is not None else None
            return string_value(parsed, value)
        return None

    # ------------------------------------------------------------------
    # Imports

    @staticmethod
    def import_specifiers(parsed: ParsedFile) -> List[str]:
        specifiers: List[str] = []
        for statement in parsed.root.named_children:
            if statement.type != "import_statement":
                continue
            source = statement.child_by_field_name("source")
            if source is None:
                continue
            value = string_value(parsed, source)
            if value:
                specifiers.append(value)
        return specifiers


def _contains_jsx(node: Node) -> bool:
    return any(child.type in _JSX_NODES for child in walk(node))


def _first_named(node: Node) -> Optional[Node]:
    for child in node.named_children:
        if child.type != "comment":
            return child
    return None


__all__ = ["FileScan", "UNKNOWN_COMPONENT", "UsageScanner"]
