"""Startup banner — task-aware status output.

Prints a short banner naming the task, the entry document and the output
directory.  Detects ``NO_COLOR`` / ``TERM`` for safe fallback.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from specsite.config import SiteConfig


# ---------------------------------------------------------------------------
# ANSI helpers — respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_MAGENTA = "\033[35m" if _COLOR else ""


# ---------------------------------------------------------------------------
# Task badges
# ---------------------------------------------------------------------------

_TASK_STYLES: dict[str, tuple[str, str]] = {
    "clean": (_MAGENTA, "clean"),
    "build": (_YELLOW, "build"),
    "default": (_YELLOW, "build"),
    "watch": (_GREEN, "watch"),
    "start": (_CYAN, "start"),
}


def _task_badge(task: str) -> str:
    """Return a styled [task] badge."""
    color, label = _TASK_STYLES.get(task, (_DIM, task))
    return f"{color}[{label}]{_RESET}"


def _clickable_url(url: str) -> str:
    """Wrap *url* in an OSC 8 hyperlink escape if the terminal supports it."""
    if not _COLOR:
        return url
    return f"\033]8;;{url}\033\\{_BOLD}{_CYAN}{url}{_RESET}\033]8;;\033\\"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def format_banner(config: SiteConfig, task: str) -> str:
    """Build the banner text for *task* (no trailing newline)."""
    from specsite import __version__

    lines: list[str] = [
        "",
        f"  {_BOLD}specsite{_RESET} {_DIM}v{__version__}{_RESET}  {_task_badge(task)}",
        f"  {_DIM}{'─' * 43}{_RESET}",
    ]

    if task != "clean":
        lines.append(f"  {_DIM}├─{_RESET} entry: {_DIM}{config.entry_path}{_RESET}")
    if task in ("watch", "start"):
        lines.append(
            f"  {_DIM}├─{_RESET} watching: {_DIM}{', '.join(config.watch_patterns)}{_RESET}"
        )
    lines.append(f"  {_DIM}└─{_RESET} output: {_DIM}{config.output_path}{_RESET}")

    if task == "start":
        lines.append("")
        # Port 0 is only known once bound; the serve task prints that URL.
        if config.port:
            url = f"http://{config.host}:{config.port}"
            lines.append(f"  {_clickable_url(url)}")
        if config.live_reload:
            lines.append(f"  {_DIM}live reload on{_RESET}")

    lines.append("")
    return "\n".join(lines)


def print_banner(config: SiteConfig, task: str) -> None:
    """Print the specsite startup banner to stderr.

    Args:
        config: Resolved SiteConfig.
        task: Name of the task about to run.

    """
    print(format_banner(config, task), file=sys.stderr)
