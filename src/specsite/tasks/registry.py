"""Default task graph — clean, build, watch, start, default.

The graph is constructed explicitly from a SiteConfig; every task closes
over the same DocumentBuilder so that all output writes share one lock.

    clean     empty the output directory
    build     render the entry document into the output directory
    watch     rebuild on every qualifying source change (never finishes)
    start     watch  ||  dev server with live reload (never finishes)
    default   alias of build
"""

from __future__ import annotations

import asyncio
import sys
from typing import TYPE_CHECKING

from specsite.build.builder import DocumentBuilder
from specsite.build.cleaner import clean_output
from specsite.server.dev import DevServer
from specsite.tasks.graph import Task, TaskGraph
from specsite.watch.rebuild import RebuildLoop
from specsite.watch.watcher import FileWatcher

if TYPE_CHECKING:
    from specsite.build.builder import BuildResult
    from specsite.config import SiteConfig
    from specsite.observability.collector import Collector


def default_graph(
    config: SiteConfig,
    *,
    collector: Collector | None = None,
    builder: DocumentBuilder | None = None,
    server: DevServer | None = None,
) -> TaskGraph:
    """Construct the standard task graph for *config*.

    Args:
        config: Frozen site configuration.
        collector: Optional observability collector shared by all tasks.
        builder: Builder to use (defaults to the configured renderer CLI).
        server: Dev server to use for ``start``.

    """
    doc_builder = builder or DocumentBuilder(config, collector=collector)

    async def clean() -> None:
        output_dir = config.output_path
        removed = await asyncio.to_thread(clean_output, output_dir)
        if collector is not None:
            collector.record_clean(str(output_dir), removed)
        print(f"  Cleaned {output_dir} ({removed} removed)", file=sys.stderr)

    async def build() -> None:
        result = await doc_builder.build()
        _print_build_summary(result)

    async def watch() -> None:
        watcher = FileWatcher(
            config.root,
            config.watch_patterns,
            debounce_ms=config.watch_debounce_ms,
        )
        loop = RebuildLoop(
            doc_builder,
            delay_ms=config.rebuild_delay_ms,
            initial_build=config.initial_build,
        )
        print(
            f"  Watching {', '.join(config.watch_patterns)} for changes...",
            file=sys.stderr,
        )
        await loop.run(watcher.changes())

    async def serve() -> None:
        dev_server = server or DevServer(config, collector=collector)
        await dev_server.start()
        print(f"  Serving {config.output_path} at {dev_server.url}", file=sys.stderr)
        await dev_server.serve_forever()

    return TaskGraph([
        Task("clean", clean, description="Delete everything in the output directory"),
        Task("build", build, description="Render the entry document into the output directory"),
        Task("watch", watch, description="Rebuild whenever a source file changes"),
        Task(
            "start",
            serve,
            deps=("watch",),
            parallel=True,
            description="Watch sources and serve the output with live reload",
        ),
        Task("default", deps=("build",), description="Alias of build"),
    ])


def _print_build_summary(result: BuildResult) -> None:
    """Print build completion summary to stderr."""
    lines = [
        f"  Wrote {result.total_files} file{'s' if result.total_files != 1 else ''}",
        f"  Output: {result.output_dir}",
        f"  Done in {result.duration_ms:.0f}ms",
    ]
    print("\n".join(lines), file=sys.stderr)
