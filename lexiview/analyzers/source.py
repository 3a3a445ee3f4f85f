"""Tree-sitter source loading with a per-session parse cache."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from ..logging import get_logger

logger = get_logger("analyzers.source")

_TSX = Language(tree_sitter_typescript.language_tsx())
_TYPESCRIPT = Language(tree_sitter_typescript.language_typescript())

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "\\": "\\",
    "'": "'",
    '"': '"',
}


class SourceReadError(OSError):
    """Raised when a source file cannot be read or decoded."""


@dataclass(frozen=True)
class ParsedFile:
    """A parsed source file. Never mutated once created."""

    path: Path
    source: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def position(self, node: Node) -> Tuple[int, int]:
        """Return the 1-indexed (line, column) of ``node``, counting characters."""
        row, byte_column = node.start_point
        line_start = node.start_byte - byte_column
        prefix = self.source[line_start : node.start_byte].decode("utf-8", errors="replace")
        return row + 1, len(prefix) + 1


def language_for(path: Path) -> Language:
    # Plain .ts keeps `<T>expr` casts parseable; everything else may hold JSX.
    if path.suffix.lower() == ".ts":
        return _TYPESCRIPT
    return _TSX


def parse_source(path: Path, source: bytes) -> ParsedFile:
    parser = Parser(language_for(path))
    tree = parser.parse(source)
    if tree.root_node.has_error:
        logger.debug("Recovered from syntax errors while parsing %s", path)
    return ParsedFile(path=path, source=source, tree=tree)


class SourceLoader:
    """Parses files on demand and reuses trees for the lifetime of a session.

    There is no eviction: callers drop stale entries with :meth:`invalidate`
    when they learn a file changed.
    """

    def __init__(self) -> None:
        self._cache: Dict[Path, ParsedFile] = {}

    def load(self, path: Path) -> ParsedFile:
        key = Path(path).resolve()
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        try:
            source = key.read_bytes()
            source.decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceReadError(f"Cannot read {key}: {exc}") from exc
        parsed = parse_source(key, source)
        self._cache[key] = parsed
        return parsed

    def try_load(self, path: Path) -> Optional[ParsedFile]:
        try:
            return self.load(path)
        except SourceReadError as exc:
            logger.warning("%s", exc)
            return None

    def invalidate(self, paths: Iterable[Path]) -> None:
        for path in paths:
            self._cache.pop(Path(path).resolve(), None)

    def clear(self) -> None:
        self._cache.clear()

    def __contains__(self, path: object) -> bool:
        return isinstance(path, (str, Path)) and Path(path).resolve() in self._cache

    def __len__(self) -> int:
        return len(self._cache)


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants in source order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def string_value(parsed: ParsedFile, node: Node) -> Optional[str]:
    """Return the value of a plain string literal node, with escapes decoded.

    JSX attribute strings carry no ``escape_sequence`` children, so their
    backslashes are kept as written.
    """
    if node.type != "string":
        return None
    raw = parsed.text(node)
    if len(raw) < 2 or raw[0] not in "\"'" or raw[-1] != raw[0]:
        return None
    parts: List[str] = []
    for child in node.named_children:
        if child.type == "escape_sequence":
            parts.append(decode_escape(parsed.text(child)))
        else:
            parts.append(parsed.text(child))
    return "".join(parts)


def decode_escape(sequence: str) -> str:
    """Decode one JavaScript escape sequence such as ``\\n`` or ``\\u{1F600}``."""
    body = sequence[1:]
    if not body:
        return sequence
    lead = body[0]
    if lead in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[lead]
    if lead in "\r\n\u2028\u2029":
        # Line continuation.
        return ""
    if lead in "xu":
        digits = body[2:-1] if body.startswith("u{") else body[1:]
        try:
            return chr(int(digits, 16))
        except ValueError:
            return sequence
    if lead.isdigit():
        # Legacy octal escapes.
        return chr(int(body, 8)) if all(ch in "01234567" for ch in body) else body
    return body


__all__ = [
    "ParsedFile",
    "SourceLoader",
    "SourceReadError",
    "language_for",
    "parse_source",
    "string_value",
    "walk",
]
