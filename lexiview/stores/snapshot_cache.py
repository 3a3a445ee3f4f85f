"""Persistent, version-guarded storage for analysis snapshots.

The store assumes a single owning process. Concurrent writers are not
coordinated and the last write wins; each write lands through a rename so
readers never observe a partially written document.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..index import SCHEMA_VERSION, build_indices
from ..logging import get_logger
from ..models import AnalysisSnapshot, ComponentInfo, TranslationUsage

logger = get_logger("stores.snapshot_cache")


class SnapshotCache:
    """Loads and saves one project's snapshot as a JSON document."""

    def __init__(self, path: Path, *, schema_version: str = SCHEMA_VERSION) -> None:
        self._path = Path(path)
        self._schema_version = schema_version

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[AnalysisSnapshot]:
        """Return the cached snapshot, or None when it is missing, corrupt or stale."""
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.info("Ignoring unreadable cache %s: %s", self._path, exc)
            return None
        if not isinstance(data, dict):
            logger.info("Ignoring malformed cache %s", self._path)
            return None
        if data.get("schemaVersion") != self._schema_version:
            logger.info(
                "Cache version mismatch (%s != %s), rebuilding",
                data.get("schemaVersion"),
                self._schema_version,
            )
            return None
        snapshot = snapshot_from_dict(data)
        if snapshot is None:
            logger.info("Ignoring malformed cache %s", self._path)
            return None
        logger.info("Loaded cache from %s", self._path)
        return snapshot

    def save(self, snapshot: AnalysisSnapshot) -> bool:
        """Write ``snapshot`` to disk; return False (and log) on I/O failure."""
        payload = json.dumps(snapshot_to_dict(snapshot), indent=2)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            handle, temp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(handle, "w", encoding="utf-8") as stream:
                    stream.write(payload)
                os.replace(temp_name, self._path)
            except BaseException:
                Path(temp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            logger.warning("Failed to save cache to %s: %s", self._path, exc)
            return False
        logger.info("Saved cache to %s", self._path)
        return True

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)


def snapshot_to_dict(snapshot: AnalysisSnapshot) -> Dict[str, Any]:
    components: List[Dict[str, Any]] = []
    for component in snapshot.components:
        entry: Dict[str, Any] = {"path": component.path, "name": component.name}
        if component.props_interface:
            entry["propsInterface"] = component.props_interface
        entry["translationKeys"] = list(component.translation_keys)
        components.append(entry)
    return {
        "schemaVersion": snapshot.schema_version,
        "timestamp": snapshot.timestamp,
        "translationUsages": [
            {
                "key": usage.key,
                "componentPath": usage.component_path,
                "componentName": usage.component_name,
                "line": usage.line,
                "column": usage.column,
            }
            for usage in snapshot.usages
        ],
        "components": components,
        "keyToComponents": {key: list(paths) for key, paths in snapshot.key_to_components.items()},
        "componentToKeys": {path: list(keys) for path, keys in snapshot.component_to_keys.items()},
    }


def snapshot_from_dict(data: Dict[str, Any]) -> Optional[AnalysisSnapshot]:
    """Rebuild a snapshot; the indices are re-derived rather than trusted."""
    timestamp = data.get("timestamp")
    raw_usages = data.get("translationUsages")
    raw_components = data.get("components")
    if not isinstance(timestamp, int) or isinstance(timestamp, bool):
        return None
    if not isinstance(raw_usages, list) or not isinstance(raw_components, list):
        return None

    usages: List[TranslationUsage] = []
    for raw in raw_usages:
        usage = _usage_from_dict(raw)
        if usage is None:
            return None
        usages.append(usage)

    components: List[ComponentInfo] = []
    for raw in raw_components:
        component = _component_from_dict(raw)
        if component is None:
            return None
        components.append(component)

    key_to_components, component_to_keys = build_indices(components)
    return AnalysisSnapshot(
        schema_version=str(data.get("schemaVersion")),
        timestamp=timestamp,
        usages=usages,
        components=components,
        key_to_components=key_to_components,
        component_to_keys=component_to_keys,
    )


def _usage_from_dict(payload: object) -> Optional[TranslationUsage]:
    if not isinstance(payload, dict):
        return None
    key = payload.get("key")
    path = payload.get("componentPath")
    name = payload.get("componentName")
    line = payload.get("line")
    column = payload.get("column")
    if not all(isinstance(value, str) for value in (key, path, name)):
        return None
    if not isinstance(line, int) or not isinstance(column, int) or line < 1 or column < 1:
        return None
    return TranslationUsage(key=key, component_path=path, component_name=name, line=line, column=column)


def _component_from_dict(payload: object) -> Optional[ComponentInfo]:
    if not isinstance(payload, dict):
        return None
    path = payload.get("path")
    name = payload.get("name")
    props_interface = payload.get("propsInterface")
    keys = payload.get("translationKeys", [])
    if not isinstance(path, str) or not isinstance(name, str):
        return None
    if props_interface is not None and not isinstance(props_interface, str):
        return None
    if not isinstance(keys, list) or not all(isinstance(key, str) for key in keys):
        return None
    return ComponentInfo(
        path=path,
        name=name,
        props_interface=props_interface,
        translation_keys=list(dict.fromkeys(keys)),
    )


__all__ = ["SnapshotCache", "snapshot_from_dict", "snapshot_to_dict"]
