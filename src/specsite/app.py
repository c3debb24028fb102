"""Specsite application — public entry points for the standard tasks.

Each entry point loads the configuration, constructs the task graph, and
runs one task to completion (or, for ``watch`` and ``start``, until the
process is interrupted).
"""

import asyncio
from pathlib import Path

from specsite.config_loader import load_config
from specsite.observability import Collector, EventLog
from specsite.tasks.registry import default_graph
from specsite.tasks.runner import TaskRun, TaskRunner


def run(task: str = "default", root: str | Path = ".", **kwargs: object) -> TaskRun:
    """Run a named task and return its outcome.

    Args:
        task: Task name (``clean``, ``build``, ``watch``, ``start``, ``default``).
        root: Project root directory.
        **kwargs: Override SiteConfig fields.

    Raises:
        ConfigError: If the configuration is invalid.

    """
    from specsite.banner import print_banner

    config = load_config(Path(root), **kwargs)
    collector = Collector(EventLog())
    graph = default_graph(config, collector=collector)
    runner = TaskRunner(graph, collector)

    print_banner(config, task)
    return asyncio.run(runner.run(task))


def clean(root: str | Path = ".", **kwargs: object) -> TaskRun:
    """Delete everything in the output directory."""
    return run("clean", root, **kwargs)


def build(root: str | Path = ".", **kwargs: object) -> TaskRun:
    """Render the entry document into the output directory.

    The output directory is not cleaned first; run ``clean`` for a fresh tree.
    """
    return run("build", root, **kwargs)


def watch(root: str | Path = ".", **kwargs: object) -> TaskRun:
    """Rebuild on every source change until interrupted."""
    return run("watch", root, **kwargs)


def start(root: str | Path = ".", **kwargs: object) -> TaskRun:
    """Watch sources and serve the output with live reload until interrupted."""
    return run("start", root, **kwargs)
