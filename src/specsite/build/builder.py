"""Document builder — renders the entry document into the output tree.

Each build renders into a private staging directory first.  Only a
successful render is copied into the output directory, so a failed build
leaves the previous output untouched.  Writes to the output tree are
serialized with an ``asyncio.Lock``: overlapping rebuild triggers queue up
behind the running build instead of racing it.
"""

from __future__ import annotations

import asyncio
import shutil
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from specsite._errors import BuildError
from specsite.build.renderer import EcmarkupRenderer, RenderOptions

if TYPE_CHECKING:
    from specsite.build.renderer import Renderer
    from specsite.config import SiteConfig
    from specsite.observability.collector import Collector


@dataclass(frozen=True, slots=True)
class RenderedFile:
    """Record of a single file written during a build.

    Attributes:
        relative_path: Path inside the output directory (POSIX form).
        output_path: Absolute filesystem path to the written file.
        size_bytes: Size of the written file in bytes.

    """

    relative_path: str
    output_path: Path
    size_bytes: int


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Aggregate result of one build.

    Attributes:
        files: All files written, sorted by relative path.
        duration_ms: Total wall-clock time for the build.
        output_dir: Absolute path to the output directory.

    """

    files: tuple[RenderedFile, ...]
    duration_ms: float
    output_dir: Path

    @property
    def total_files(self) -> int:
        return len(self.files)


class DocumentBuilder:
    """Builds the configured entry document into the output directory.

    Args:
        config: Frozen site configuration.
        renderer: Renderer to use; defaults to the ``ecmarkup`` CLI configured
            from *config*.
        collector: Optional observability collector.

    """

    def __init__(
        self,
        config: SiteConfig,
        renderer: Renderer | None = None,
        collector: Collector | None = None,
    ) -> None:
        self._config = config
        self._renderer = renderer or EcmarkupRenderer(
            config.renderer_command, RenderOptions.from_config(config),
        )
        self._collector = collector
        self._lock = asyncio.Lock()
        self._build_count = 0

    @property
    def build_count(self) -> int:
        """Number of builds that completed successfully."""
        return self._build_count

    @property
    def is_building(self) -> bool:
        """Whether a build currently holds the output lock."""
        return self._lock.locked()

    async def build(self) -> BuildResult:
        """Run one build; waits for any build already in progress.

        Raises:
            RenderError: If the renderer fails.  The output tree is unchanged.
            BuildError: If the rendered files cannot be written.

        """
        async with self._lock:
            worker = asyncio.ensure_future(asyncio.to_thread(self.build_sync))
            try:
                return await asyncio.shield(worker)
            except asyncio.CancelledError:
                # The thread cannot be interrupted; keep the lock until it
                # stops writing the output tree.
                await asyncio.wait({worker})
                raise

    def build_sync(self) -> BuildResult:
        """Blocking build.  Callers must not overlap it with another build."""
        start = time.perf_counter()
        entry = self._config.entry_path
        output_dir = self._config.output_path
        files: tuple[RenderedFile, ...] = ()
        ok = False

        try:
            with tempfile.TemporaryDirectory(prefix="specsite-") as staging:
                staging_dir = Path(staging)
                self._renderer.render(entry, staging_dir)
                files = self._publish(staging_dir, output_dir)
            ok = True
        finally:
            elapsed = (time.perf_counter() - start) * 1000
            if self._collector is not None:
                self._collector.record_build(
                    str(entry),
                    str(output_dir),
                    files_written=len(files),
                    ok=ok,
                    duration_ms=elapsed,
                )

        self._build_count += 1
        return BuildResult(files=files, duration_ms=elapsed, output_dir=output_dir)

    @staticmethod
    def _publish(staging_dir: Path, output_dir: Path) -> tuple[RenderedFile, ...]:
        """Copy the staged tree into *output_dir*, preserving relative paths."""
        results: list[RenderedFile] = []
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            for src_file in sorted(staging_dir.rglob("*")):
                if not src_file.is_file():
                    continue
                relative = src_file.relative_to(staging_dir)
                dest_file = output_dir / relative
                dest_file.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(src_file, dest_file)
                results.append(RenderedFile(
                    relative_path=relative.as_posix(),
                    output_path=dest_file,
                    size_bytes=dest_file.stat().st_size,
                ))
        except OSError as exc:
            msg = f"Failed to write output to {output_dir}: {exc}"
            raise BuildError(msg) from exc
        return tuple(results)
