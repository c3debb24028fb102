"""Watch layer — filesystem change detection and the rebuild loop."""

from specsite.watch.rebuild import RebuildLoop
from specsite.watch.watcher import ChangeEvent, FileWatcher, pattern_base

__all__ = [
    "ChangeEvent",
    "FileWatcher",
    "RebuildLoop",
    "pattern_base",
]
