"""Locale catalog loading and key coverage reports."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

from .logging import get_logger
from .models import AnalysisSnapshot

logger = get_logger("translations")

Catalog = Dict[str, str]


def flatten_catalog(data: Mapping[str, Any], prefix: str = "") -> Catalog:
    """Flatten nested catalog objects into dotted keys; non-string leaves are stringified."""
    flat: Catalog = {}
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(flatten_catalog(value, full_key))
        elif value is None:
            flat[full_key] = ""
        else:
            flat[full_key] = value if isinstance(value, str) else json.dumps(value)
    return flat


def load_catalogs(directory: Path, locales: Iterable[str]) -> Dict[str, Catalog]:
    """Read ``<directory>/<locale>.json`` for each locale; failures yield an empty catalog."""
    catalogs: Dict[str, Catalog] = {}
    for locale in locales:
        path = Path(directory) / f"{locale}.json"
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.warning("Translation catalog missing: %s", path)
            catalogs[locale] = {}
            continue
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Failed to load translation catalog %s: %s", path, exc)
            catalogs[locale] = {}
            continue
        if not isinstance(data, dict):
            logger.warning("Translation catalog %s is not an object", path)
            catalogs[locale] = {}
            continue
        catalogs[locale] = flatten_catalog(data)
    return catalogs


def used_keys(snapshot: AnalysisSnapshot) -> List[str]:
    return sorted({usage.key for usage in snapshot.usages})


def missing_keys(snapshot: AnalysisSnapshot, catalogs: Mapping[str, Catalog]) -> Dict[str, List[str]]:
    """Keys used in source but absent from each locale."""
    used = used_keys(snapshot)
    return {locale: [key for key in used if key not in catalog] for locale, catalog in catalogs.items()}


def unused_keys(snapshot: AnalysisSnapshot, catalogs: Mapping[str, Catalog]) -> Dict[str, List[str]]:
    """Catalog keys that no scanned usage references."""
    used = set(used_keys(snapshot))
    return {locale: sorted(key for key in catalog if key not in used) for locale, catalog in catalogs.items()}


__all__ = ["Catalog", "flatten_catalog", "load_catalogs", "missing_keys", "unused_keys", "used_keys"]
