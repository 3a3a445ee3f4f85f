"""Named type resolution across at most one import hop."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from tree_sitter import Node

from ..logging import get_logger
from .source import ParsedFile, SourceLoader, SourceReadError, string_value, walk

logger = get_logger("analyzers.resolver")

IMPORT_SUFFIXES = (".tsx", ".ts", ".jsx", ".js")

_DECLARATION_KINDS = {
    "interface_declaration": "interface",
    "enum_declaration": "enum",
    "type_alias_declaration": "alias",
}


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a type name; ``declaration`` is None when unresolved."""

    declaration: Optional[Node]
    kind: Optional[str]
    file: ParsedFile

    @property
    def found(self) -> bool:
        return self.declaration is not None


def find_declaration(parsed: ParsedFile, type_name: str) -> Optional[Node]:
    """Return the first interface, enum or type alias named ``type_name``."""
    for node in walk(parsed.root):
        if node.type not in _DECLARATION_KINDS:
            continue
        name = node.child_by_field_name("name")
        if name is not None and parsed.text(name) == type_name:
            return node
    return None


def find_import_specifier(parsed: ParsedFile, type_name: str) -> Optional[str]:
    """Return the module specifier of the named import that binds ``type_name``."""
    for statement in parsed.root.named_children:
        if statement.type != "import_statement":
            continue
        source = statement.child_by_field_name("source")
        if source is None:
            continue
        for node in walk(statement):
            if node.type != "import_specifier":
                continue
            local = node.child_by_field_name("alias") or node.child_by_field_name("name")
            if local is not None and parsed.text(local) == type_name:
                return string_value(parsed, source)
    return None


def resolve_module_path(specifier: str, from_file: Path) -> Optional[Path]:
    """Map an import specifier onto an existing file next to ``from_file``.

    Tries the literal path, then each suffix in IMPORT_SUFFIXES, then an
    ``index`` file inside a directory of that name.
    """
    base = (from_file.parent / specifier).resolve()
    if base.is_file():
        return base
    for suffix in IMPORT_SUFFIXES:
        candidate = base.with_name(base.name + suffix)
        if candidate.is_file():
            return candidate
    if base.is_dir():
        for suffix in IMPORT_SUFFIXES:
            candidate = base / f"index{suffix}"
            if candidate.is_file():
                return candidate
    return None


class TypeResolver:
    """Locates interface, enum and alias declarations for named type references."""

    def __init__(self, loader: SourceLoader) -> None:
        self._loader = loader

    def resolve(self, type_name: str, from_file: ParsedFile) -> Resolution:
        declaration = find_declaration(from_file, type_name)
        if declaration is not None:
            return Resolution(declaration, _DECLARATION_KINDS[declaration.type], from_file)

        unresolved = Resolution(None, None, from_file)
        specifier = find_import_specifier(from_file, type_name)
        if not specifier:
            logger.debug("No declaration or import for %s in %s", type_name, from_file.path)
            return unresolved

        target = resolve_module_path(specifier, from_file.path)
        if target is None:
            logger.debug("Import %r for %s does not resolve to a file", specifier, type_name)
            return unresolved

        try:
            imported = self._loader.load(target)
        except SourceReadError as exc:
            logger.warning("%s", exc)
            return unresolved

        # Only one hop: re-exports inside ``imported`` are not followed.
        declaration = find_declaration(imported, type_name)
        if declaration is None:
            logger.debug("%s not declared in %s", type_name, imported.path)
            return Resolution(None, None, imported)
        return Resolution(declaration, _DECLARATION_KINDS[declaration.type], imported)


__all__ = [
    "IMPORT_SUFFIXES",
    "Resolution",
    "TypeResolver",
    "find_declaration",
    "find_import_specifier",
    "resolve_module_path",
]
