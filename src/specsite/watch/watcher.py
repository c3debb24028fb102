"""File watcher — turns filesystem changes into ChangeEvent objects.

Used twice: over the source tree (to trigger rebuilds) and over the output
tree (to push live-reload notifications).  Patterns are root-relative globs
where ``**`` spans any number of directories, e.g. ``src/**/*``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from watchfiles import Change, DefaultFilter, awatch

from specsite._errors import WatchError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable

    from specsite._types import ChangeKind


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A file change detected by the watcher.

    Attributes:
        path: Absolute, resolved path to the changed file.
        kind: Type of filesystem change.

    """

    path: Path
    kind: ChangeKind


_GLOB_CHARS = frozenset("*?[")


def collapse_kind(changes: set[Change], path: Path) -> ChangeKind:
    """Reduce the raw changes seen for one path in one batch to a single kind.

    The file's current existence decides between deleted and the rest, so a
    create-then-write burst is one "created" event.
    """
    if not path.exists():
        return "deleted"
    if Change.added in changes:
        return "created"
    return "modified"


def pattern_base(pattern: str) -> PurePosixPath:
    """Return the leading part of *pattern* that contains no glob characters."""
    base: list[str] = []
    for part in PurePosixPath(pattern).parts:
        if _GLOB_CHARS & set(part):
            break
        base.append(part)
    return PurePosixPath(*base) if base else PurePosixPath(".")


class FileWatcher:
    """Watches the files matching a set of globs under a root directory.

    Uses ``watchfiles.awatch`` for efficient filesystem monitoring and yields
    one :class:`ChangeEvent` per changed path in each batch of changes,
    sorted by path.

    Args:
        root: Directory that relative patterns are resolved against.
        patterns: Glob patterns selecting the files of interest.
        debounce_ms: Window in which watchfiles groups raw changes.
        step_ms: Polling step of the watchfiles loop.

    """

    def __init__(
        self,
        root: Path,
        patterns: Iterable[str],
        *,
        debounce_ms: int = 300,
        step_ms: int = 100,
    ) -> None:
        self._root = root.resolve()
        self._patterns = tuple(patterns)
        self._debounce_ms = debounce_ms
        self._step_ms = step_ms
        self._stop_event = asyncio.Event()
        self._default_filter = DefaultFilter()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def patterns(self) -> tuple[str, ...]:
        return self._patterns

    def watch_paths(self) -> tuple[Path, ...]:
        """Directories to subscribe to, derived from the patterns' fixed prefixes."""
        paths: list[Path] = []
        for pattern in self._patterns:
            base = pattern_base(pattern)
            path = Path(base) if Path(base).is_absolute() else self._root / base
            path = path.resolve()
            if path.is_file():
                path = path.parent
            if not any(path == p or path.is_relative_to(p) for p in paths):
                paths = [p for p in paths if not p.is_relative_to(path)]
                paths.append(path)
        return tuple(paths)

    def matches(self, path: Path) -> bool:
        """Whether *path* matches any of the watcher's patterns."""
        resolved = path.resolve()
        try:
            candidate = PurePosixPath(resolved.relative_to(self._root).as_posix())
        except ValueError:
            candidate = None
        absolute = PurePosixPath(resolved.as_posix())
        for pattern in self._patterns:
            if PurePosixPath(pattern).is_absolute():
                if absolute.full_match(pattern):
                    return True
            elif candidate is not None and candidate.full_match(pattern):
                return True
        return False

    def _filter(self, change: Change, path: str) -> bool:
        return self._default_filter(change, path) and self.matches(Path(path))

    def stop(self) -> None:
        """Signal ``changes()`` to finish after its current wait.

        A stop requested before iteration begins ends ``changes()`` at once.
        """
        self._stop_event.set()

    async def changes(self) -> AsyncIterator[ChangeEvent]:
        """Async iterator over matching changes until ``stop()`` is called.

        Raises:
            WatchError: If a watch root does not exist.

        """
        roots = self.watch_paths()
        missing = [str(p) for p in roots if not p.exists()]
        if missing:
            msg = f"Cannot watch missing path(s): {', '.join(missing)}"
            raise WatchError(msg)

        async for raw_changes in awatch(
            *roots,
            watch_filter=self._filter,
            debounce=self._debounce_ms,
            step=self._step_ms,
            stop_event=self._stop_event,
        ):
            by_path: dict[str, set[Change]] = {}
            for change_type, path_str in raw_changes:
                by_path.setdefault(path_str, set()).add(change_type)
            for path_str in sorted(by_path):
                path = Path(path_str)
                yield ChangeEvent(
                    path=path.resolve(),
                    kind=collapse_kind(by_path[path_str], path),
                )
