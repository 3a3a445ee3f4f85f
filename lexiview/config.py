"""Configuration loading for lexiview (.lexiview.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".lexiview.yml"

_DEFAULT_LOCALES = ("en", "fr")
_DEFAULT_CACHE_FILE = ".lexiview/analysis-cache.json"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ServiceConfig:
    """Host and port for ``lexiview serve``."""

    host: str = "127.0.0.1"
    port: int = 3456


@dataclass
class LexiviewConfig:
    """Settings defined in .lexiview.yml, with paths resolved against ``root``."""

    root: Path
    source_dir: Path
    translations_dir: Path
    cache_file: Path
    locales: List[str] = field(default_factory=lambda: list(_DEFAULT_LOCALES))
    exclude_dirs: List[str] = field(default_factory=list)
    service: ServiceConfig = field(default_factory=ServiceConfig)

    @classmethod
    def defaults(cls, root: Path) -> "LexiviewConfig":
        return cls(
            root=root,
            source_dir=root,
            translations_dir=root / "translations",
            cache_file=root / _DEFAULT_CACHE_FILE,
        )


def load_config(config_path: Path) -> LexiviewConfig:
    """Load configuration from a project directory or an explicit config file."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return LexiviewConfig.defaults(root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = LexiviewConfig.defaults(root)

    source_dir = _as_str(data.get("source_dir"))
    if source_dir:
        config.source_dir = _resolve_under(root, source_dir)
    translations_dir = _as_str(data.get("translations_dir"))
    if translations_dir:
        config.translations_dir = _resolve_under(root, translations_dir)
    cache_file = _as_str(data.get("cache_file"))
    if cache_file:
        config.cache_file = _resolve_under(root, cache_file)

    if "locales" in data:
        config.locales = _as_str_list(data.get("locales"))
    config.exclude_dirs = _as_str_list(data.get("exclude_dirs"))

    service_data = _as_dict(data.get("service"))
    if service_data:
        host = _as_str(service_data.get("host"))
        port = _as_int(service_data.get("port"))
        if host:
            config.service.host = host
        if port is not None:
            if not 0 < port < 65536:
                raise ConfigError(f"service.port out of range: {port}")
            config.service.port = port

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _resolve_under(root: Path, value: str) -> Path:
    candidate = Path(value).expanduser()
    if candidate.is_absolute():
        return candidate
    return (root / candidate).resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "LexiviewConfig", "ServiceConfig", "load_config"]
