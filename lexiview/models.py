"""Core data models shared across lexiview components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class TranslationUsage:
    """One source location that requests a translation key."""

    key: str
    component_path: str
    component_name: str
    line: int
    column: int


@dataclass
class ComponentInfo:
    """The single component a source file defines, if any."""

    path: str
    name: str
    props_interface: Optional[str] = None
    translation_keys: List[str] = field(default_factory=list)


@dataclass
class AnalysisSnapshot:
    """Versioned result of one full project scan."""

    schema_version: str
    timestamp: int
    usages: List[TranslationUsage]
    components: List[ComponentInfo]
    key_to_components: Dict[str, List[str]]
    component_to_keys: Dict[str, List[str]]

    def find_component(self, path: str) -> Optional[ComponentInfo]:
        for component in self.components:
            if component.path == path:
                return component
        return None


@dataclass(frozen=True)
class EnumMember:
    name: str
    value: Union[str, int, float]


EnumDescriptor = Tuple[EnumMember, ...]


class FunctionPlaceholder:
    """Stand-in for a callable prop; calling it only records the arguments.

    Placeholders compare by name, never by identity, so copies and
    deserialized instances remain structurally equal to the original.
    """

    __slots__ = ("name", "calls")

    def __init__(self, name: str) -> None:
        self.name = name
        self.calls: List[Tuple[Any, ...]] = []

    def __call__(self, *args: Any) -> None:
        self.calls.append(args)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FunctionPlaceholder):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(("function", self.name))

    def __deepcopy__(self, memo: Dict[int, Any]) -> "FunctionPlaceholder":
        return FunctionPlaceholder(self.name)

    def __repr__(self) -> str:
        return f"FunctionPlaceholder({self.name!r})"


ValueTree = Union[
    str,
    int,
    float,
    bool,
    None,
    List["ValueTree"],
    Dict[str, "ValueTree"],
    FunctionPlaceholder,
]

EnumMetadataMap = Dict[str, EnumDescriptor]


@dataclass
class PropsResult:
    """Synthesized props for one interface plus the enum side channel."""

    props: Dict[str, ValueTree] = field(default_factory=dict)
    enums: EnumMetadataMap = field(default_factory=dict)


__all__ = [
    "AnalysisSnapshot",
    "ComponentInfo",
    "EnumDescriptor",
    "EnumMember",
    "EnumMetadataMap",
    "FunctionPlaceholder",
    "PropsResult",
    "TranslationUsage",
    "ValueTree",
]
