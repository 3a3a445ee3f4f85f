"""Snapshot and lookup index construction from per-file scan results."""

from __future__ import annotations

import time
from typing import Dict, Iterable, List, Optional

from .analyzers.scanner import FileScan
from .models import AnalysisSnapshot, ComponentInfo, TranslationUsage

SCHEMA_VERSION = "1.0.0"


def build_indices(
    components: Iterable[ComponentInfo],
) -> tuple[Dict[str, List[str]], Dict[str, List[str]]]:
    """Return (key -> component paths, component path -> keys), built together."""
    key_to_components: Dict[str, List[str]] = {}
    component_to_keys: Dict[str, List[str]] = {}
    for component in components:
        keys = list(dict.fromkeys(component.translation_keys))
        component_to_keys[component.path] = keys
        for key in keys:
            key_to_components.setdefault(key, []).append(component.path)
    return key_to_components, component_to_keys


def build_snapshot(
    results: Iterable[FileScan], *, timestamp: Optional[int] = None
) -> AnalysisSnapshot:
    """Aggregate per-file results, in the order given, into a fresh snapshot."""
    usages: List[TranslationUsage] = []
    components: List[ComponentInfo] = []
    for result in results:
        usages.extend(result.usages)
        if result.component is not None:
            components.append(result.component)

    key_to_components, component_to_keys = build_indices(components)
    return AnalysisSnapshot(
        schema_version=SCHEMA_VERSION,
        timestamp=timestamp if timestamp is not None else int(time.time() * 1000),
        usages=usages,
        components=components,
        key_to_components=key_to_components,
        component_to_keys=component_to_keys,
    )


__all__ = ["SCHEMA_VERSION", "build_indices", "build_snapshot"]
