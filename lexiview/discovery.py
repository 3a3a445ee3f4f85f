"""Source file discovery for project scans."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List

from .logging import get_logger

logger = get_logger("discovery")

EXCLUDED_DIRS = frozenset(
    {
        "node_modules",
        "dist",
        "build",
        ".git",
        ".lexiview",
    }
)

SOURCE_SUFFIXES = (".ts", ".tsx", ".js", ".jsx")


def is_source_file(path: Path) -> bool:
    return path.suffix.lower() in SOURCE_SUFFIXES


def discover(root: Path, extra_excludes: Iterable[str] = ()) -> List[Path]:
    """Return eligible source files under ``root`` in a stable walk order.

    Directories named in the exclusion set are pruned. An unreadable
    directory is logged and skipped; its siblings are still walked.
    """
    root_path = Path(root).expanduser().resolve()
    if not root_path.exists():
        raise FileNotFoundError(f"Project path not found: {root}")
    if not root_path.is_dir():
        raise NotADirectoryError(f"Project path is not a directory: {root}")

    excluded = EXCLUDED_DIRS | frozenset(extra_excludes)

    def _on_error(exc: OSError) -> None:
        logger.warning("Skipping unreadable directory %s: %s", exc.filename, exc.strerror or exc)

    files: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root_path, onerror=_on_error):
        dirnames[:] = sorted(name for name in dirnames if name not in excluded)
        current = Path(dirpath)
        for filename in sorted(filenames):
            candidate = current / filename
            if is_source_file(candidate):
                files.append(candidate)

    logger.debug("Discovered %d source files under %s", len(files), root_path)
    return files


__all__ = ["EXCLUDED_DIRS", "SOURCE_SUFFIXES", "discover", "is_source_file"]
