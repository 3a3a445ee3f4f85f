"""Tree-sitter based analyzers: loading, scanning, resolution and synthesis."""

from .resolver import Resolution, TypeResolver
from .scanner import FileScan, UsageScanner
from .source import ParsedFile, SourceLoader, SourceReadError
from .synthesizer import ValueSynthesizer, enum_members

__all__ = [
    "FileScan",
    "ParsedFile",
    "Resolution",
    "SourceLoader",
    "SourceReadError",
    "TypeResolver",
    "UsageScanner",
    "ValueSynthesizer",
    "enum_members",
]
