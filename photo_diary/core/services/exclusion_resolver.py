"""Directory exclusion with memoized, single-flight ancestor checks.

A directory is excluded when it, or any ancestor up to the scan root, holds a
marker file. Each directory is checked at most once per resolver: the first
caller registers a `Future` in the in-flight map and computes the value,
concurrent callers for the same directory wait on that future. Ancestors are
resolved before descendants, so an excluded parent is inherited without
touching the disk again.
"""

from __future__ import annotations

from collections.abc import Iterable
from concurrent.futures import Future, ThreadPoolExecutor
import os
import threading

from loguru import logger

from photo_diary.core.models import ExclusionResult
from photo_diary.core.services.interfaces import MarkerProbe

DEFAULT_CONCURRENCY = 8


def _norm(path: str) -> str:
    return os.path.normpath(os.path.abspath(path))


def _is_within(directory: str, root: str) -> bool:
    if directory == root:
        return True
    prefix = root if root.endswith(os.sep) else root + os.sep
    return directory.startswith(prefix)


class ExclusionResolver:
    """Resolves per-directory exclusion for one run.

    Args:
        probe: Callable returning True when a directory holds a marker.
        concurrency: Maximum number of directories checked in parallel.
    """

    def __init__(self, probe: MarkerProbe, concurrency: int = DEFAULT_CONCURRENCY) -> None:
        self._probe = probe
        self._concurrency = max(1, int(concurrency))
        self._lock = threading.Lock()
        self._entries: dict[str, Future[bool]] = {}

    def resolve(self, candidate_paths: Iterable[str], root: str) -> ExclusionResult:
        """Split `candidate_paths` into included files and excluded directories."""
        paths = list(candidate_paths)
        root = _norm(root)
        parent_of = {p: _norm(os.path.dirname(_norm(p))) for p in paths}
        # Shorter paths first so ancestors are scheduled before descendants.
        dirs = sorted(set(parent_of.values()), key=lambda d: (len(d), d))

        flags: dict[str, bool] = {}
        if dirs:
            workers = min(self._concurrency, len(dirs))
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="exclude") as pool:
                for directory, excluded in zip(
                    dirs, pool.map(lambda d: self.is_excluded(d, root), dirs)
                ):
                    flags[directory] = excluded

        included = [p for p in paths if not flags[parent_of[p]]]
        excluded_dirs = sorted(d for d, excluded in flags.items() if excluded)
        if excluded_dirs:
            logger.info(
                "Exclusion: {} of {} directories excluded, {} of {} files kept",
                len(excluded_dirs),
                len(dirs),
                len(included),
                len(paths),
            )
        return ExclusionResult(included=included, excluded_dirs=excluded_dirs)

    def is_excluded(self, directory: str, root: str) -> bool:
        """Return True if `directory` or an ancestor below `root` is marked."""
        directory = _norm(directory)
        root = _norm(root)

        chain: list[str] = []
        current = directory
        while _is_within(current, root):
            chain.append(current)
            parent = os.path.dirname(current)
            if current == root or parent == current:
                break
            current = parent

        excluded = False
        for entry in reversed(chain):
            excluded = self._resolve_one(entry, excluded)
        return excluded

    def _resolve_one(self, directory: str, parent_excluded: bool) -> bool:
        with self._lock:
            pending = self._entries.get(directory)
            owner = pending is None
            if owner:
                pending = Future()
                self._entries[directory] = pending
        if not owner:
            return pending.result()

        try:
            value = self._compute(directory, parent_excluded)
        except BaseException as ex:
            # waiters must not block on a future nobody will complete
            pending.set_exception(ex)
            raise
        pending.set_result(value)
        return value

    def _compute(self, directory: str, parent_excluded: bool) -> bool:
        if parent_excluded:
            return True
        if os.path.dirname(directory) == directory:
            return False
        try:
            marked = bool(self._probe(directory))
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.warning("Marker probe failed for {}: {}", directory, ex)
            return False
        if marked:
            logger.debug("Excluded by marker: {}", directory)
        return marked

    @property
    def cached_count(self) -> int:
        """Number of directories with a pending or resolved entry."""
        with self._lock:
            return len(self._entries)
