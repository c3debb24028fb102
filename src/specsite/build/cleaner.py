"""Output cleaner — empties the output directory before a fresh build."""

from __future__ import annotations

import shutil
from pathlib import Path

from specsite._errors import CleanError


def clean_output(output_dir: Path) -> int:
    """Recursively delete everything beneath *output_dir*.

    The directory itself is left in place, empty.  A directory that does not
    exist, or is already empty, is a successful no-op.

    Returns:
        Number of top-level entries removed.

    Raises:
        CleanError: If an entry cannot be removed (permissions, locks).
            No partial-cleanup recovery is attempted.

    """
    if not output_dir.exists():
        return 0
    if not output_dir.is_dir():
        msg = f"Output path {output_dir} exists and is not a directory"
        raise CleanError(msg)

    removed = 0
    try:
        for entry in sorted(output_dir.iterdir()):
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
            removed += 1
    except OSError as exc:
        msg = f"Failed to clean {output_dir}: {exc}"
        raise CleanError(msg) from exc
    return removed
