"""Analysis sessions: the explicit owner of parse, scan and props caches."""

from __future__ import annotations

from collections import deque
from pathlib import Path
from typing import Any, Deque, Dict, Iterable, List, Optional, Set

from .analyzers.resolver import TypeResolver, resolve_module_path
from .analyzers.scanner import FileScan, UsageScanner
from .analyzers.source import SourceLoader, SourceReadError
from .analyzers.synthesizer import ValueSynthesizer
from .config import LexiviewConfig, load_config
from .discovery import discover, is_source_file
from .index import build_snapshot
from .logging import get_logger, log_duration
from .models import AnalysisSnapshot, ComponentInfo, PropsResult
from .serializer import serialize_props
from .stores import SnapshotCache
from .translations import Catalog, load_catalogs

logger = get_logger("session")


class AnalysisSession:
    """Holds every mutable cache for one analysis lifetime.

    Nothing is shared between sessions. A session is meant to be driven from
    a single thread (or a single event loop); it takes no locks.
    """

    def __init__(self, root: Path | str, config: Optional[LexiviewConfig] = None) -> None:
        root_path = Path(root).expanduser().resolve()
        self.config = config if config is not None else load_config(root_path)
        self.root = root_path
        self.loader = SourceLoader()
        self._scanner = UsageScanner()
        self._synthesizer = ValueSynthesizer(TypeResolver(self.loader))
        self._store = SnapshotCache(self.config.cache_file)
        self._results: Dict[str, FileScan] = {}
        self._imports: Dict[str, Set[str]] = {}
        self._props_cache: Dict[str, Dict[str, Any]] = {}
        self._snapshot: Optional[AnalysisSnapshot] = None

    # ------------------------------------------------------------------
    # Snapshot lifecycle

    @property
    def snapshot(self) -> Optional[AnalysisSnapshot]:
        return self._snapshot

    def analyze(self) -> AnalysisSnapshot:
        """Rescan every discovered file and swap in a fresh snapshot."""
        self.loader.clear()
        self._props_cache.clear()
        with log_duration(logger, "Analysis complete"):
            files = self._discover()
            logger.info("Found %d source files", len(files))
            results: Dict[str, FileScan] = {}
            for path in files:
                results[str(path)] = self._scan(path)
            snapshot = self._install(results)
        logger.info(
            "Found %d translation usages in %d components",
            len(snapshot.usages),
            len(snapshot.components),
        )
        return snapshot

    def load_or_analyze(self) -> AnalysisSnapshot:
        """Use the stored snapshot when it is valid, otherwise rebuild and persist."""
        cached = self._store.load()
        if cached is not None:
            self._snapshot = cached
            return cached
        snapshot = self.analyze()
        self.save()
        return snapshot

    def ensure_snapshot(self) -> AnalysisSnapshot:
        if self._snapshot is None:
            return self.load_or_analyze()
        return self._snapshot

    def save(self) -> bool:
        if self._snapshot is None:
            return False
        return self._store.save(self._snapshot)

    def refresh(self, changed_paths: Iterable[Path | str]) -> AnalysisSnapshot:
        """Rescan only what changed, then rebuild the indices as a whole.

        Changed files and newly discovered files are rescanned; deleted files
        drop out. Cached props are evicted for the changed files and for
        every file that imports one of them, directly or transitively.
        """
        if not self._results:
            # A snapshot loaded from disk carries no per-file state.
            return self.analyze()

        changed = {str(Path(path).expanduser().resolve()) for path in changed_paths}
        self.loader.invalidate(Path(path) for path in changed)

        files = self._discover()
        current = [str(path) for path in files]
        current_set = set(current)
        removed = set(self._results) - current_set
        self.loader.invalidate(Path(path) for path in removed)

        # Importers of deleted files are only reachable through the old graph.
        stale = self.dependents(removed)
        added = current_set - set(self._results)

        results: Dict[str, FileScan] = {}
        rescanned = 0
        for path in current:
            previous = self._results.get(path)
            if previous is None or path in changed:
                results[path] = self._scan(Path(path))
                rescanned += 1
            else:
                results[path] = previous
                # A new file may now satisfy an import that did not resolve before.
                self._imports[path] = self._resolve_imports(Path(path), previous.imports)

        snapshot = self._install(results)
        stale |= self.dependents(changed | added)
        for path in stale:
            self._props_cache.pop(path, None)
        logger.info("Rescanned %d of %d files; evicted props for %d", rescanned, len(current), len(stale))
        return snapshot

    def dependents(self, paths: Iterable[str]) -> Set[str]:
        """Return ``paths`` plus every file that transitively imports one of them."""
        reverse: Dict[str, Set[str]] = {}
        for importer, targets in self._imports.items():
            for target in targets:
                reverse.setdefault(target, set()).add(importer)

        seen: Set[str] = set(paths)
        queue: Deque[str] = deque(seen)
        while queue:
            current = queue.popleft()
            for importer in reverse.get(current, ()):
                if importer not in seen:
                    seen.add(importer)
                    queue.append(importer)
        return seen

    # ------------------------------------------------------------------
    # Components and props

    def component(self, path: str) -> Optional[ComponentInfo]:
        return self.ensure_snapshot().find_component(path)

    def component_props(self, path: str) -> Optional[Dict[str, Any]]:
        """Serialized props for a scanned component, cached per component path."""
        cached = self._props_cache.get(path)
        if cached is not None:
            return cached
        component = self.component(path)
        if component is None:
            return None
        if component.props_interface:
            payload = serialize_props(self.generate_props(path, component.props_interface))
        else:
            payload = serialize_props(PropsResult())
        self._props_cache[path] = payload
        return payload

    def generate_props(self, file_path: Path | str, interface_name: str) -> PropsResult:
        parsed = self.loader.try_load(Path(file_path))
        if parsed is None:
            return PropsResult()
        return self._synthesizer.generate_props(parsed, interface_name)

    def load_translations(self) -> Dict[str, Catalog]:
        return load_catalogs(self.config.translations_dir, self.config.locales)

    # ------------------------------------------------------------------
    # Internal helpers

    def _discover(self) -> List[Path]:
        return discover(self.config.source_dir, self.config.exclude_dirs)

    def _scan(self, path: Path) -> FileScan:
        key = str(path)
        try:
            parsed = self.loader.load(path)
        except SourceReadError as exc:
            logger.warning("Skipping %s", exc)
            self._imports.pop(key, None)
            return FileScan(path=key)
        try:
            result = self._scanner.scan(parsed)
        except Exception:  # pragma: no cover - scanner bug guard
            logger.exception("Failed to scan %s", path)
            self._imports.pop(key, None)
            return FileScan(path=key)
        self._imports[key] = self._resolve_imports(parsed.path, result.imports)
        return result

    @staticmethod
    def _resolve_imports(path: Path, specifiers: Iterable[str]) -> Set[str]:
        resolved: Set[str] = set()
        for specifier in specifiers:
            if not specifier.startswith("."):
                continue
            target = resolve_module_path(specifier, path)
            if target is not None and is_source_file(target):
                resolved.add(str(target))
        return resolved

    def _install(self, results: Dict[str, FileScan]) -> AnalysisSnapshot:
        for path in set(self._imports) - set(results):
            del self._imports[path]
        self._results = results
        # Built completely before assignment so readers never see half an index.
        self._snapshot = build_snapshot(results.values())
        return self._snapshot


def analyze_project(root: Path | str) -> AnalysisSnapshot:
    """Scan ``root`` in a throwaway session and return the snapshot, without writing."""
    root_path = Path(root).expanduser().resolve()
    return AnalysisSession(root_path, LexiviewConfig.defaults(root_path)).analyze()


def generate_props(file_path: Path | str, interface_name: str) -> PropsResult:
    """Synthesize props for ``interface_name`` as seen from ``file_path``."""
    path = Path(file_path).expanduser().resolve()
    return AnalysisSession(path.parent, LexiviewConfig.defaults(path.parent)).generate_props(
        path, interface_name
    )


__all__ = ["AnalysisSession", "analyze_project", "generate_props"]
