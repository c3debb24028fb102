"""Renderer — drives the external markup-to-HTML CLI.

The renderer is an opaque external service: it reads the entry document
(and anything it references), and writes the rendered HTML plus any emitted
assets into a destination directory.  Specsite only builds the command line,
runs it, and interprets the exit status.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from specsite._errors import RenderError

if TYPE_CHECKING:
    from specsite._types import AssetsMode
    from specsite.config import SiteConfig


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Fixed options handed to the renderer on every run.

    Attributes:
        js: Script asset file name (written next to the HTML), or empty.
        css: Style asset file name (written next to the HTML), or empty.
        assets: Asset inclusion mode (``none``, ``inline``, ``external``).
        strict: Treat renderer warnings as errors.

    """

    js: str = "ecmarkup.js"
    css: str = "ecmarkup.css"
    assets: AssetsMode = "none"
    strict: bool = False

    @classmethod
    def from_config(cls, config: SiteConfig) -> RenderOptions:
        return cls(js=config.js, css=config.css, assets=config.assets, strict=config.strict)


class Renderer(Protocol):
    """Anything that can render an entry document into a directory."""

    def render(self, entry: Path, dest_dir: Path) -> Path:
        """Render *entry* into *dest_dir* and return the main output file."""
        ...


class EcmarkupRenderer:
    """Runs the ``ecmarkup`` command line tool.

    Args:
        command: argv prefix of the CLI (e.g. ``("npx", "ecmarkup")``).
        options: Rendering options.
        timeout: Seconds before a hung renderer is killed (None = no limit).

    """

    def __init__(
        self,
        command: tuple[str, ...] = ("ecmarkup",),
        options: RenderOptions | None = None,
        *,
        timeout: float | None = None,
    ) -> None:
        self._command = command
        self._options = options or RenderOptions()
        self._timeout = timeout

    @property
    def options(self) -> RenderOptions:
        return self._options

    def argv(self, entry: Path, out_file: str) -> list[str]:
        """Build the full command line for one render."""
        opts = self._options
        args = [*self._command]
        if opts.strict:
            args.append("--strict")
        if opts.js:
            args += ["--js-out", opts.js]
        if opts.css:
            args += ["--css-out", opts.css]
        args += ["--assets", opts.assets]
        args += [str(entry), out_file]
        return args

    def render(self, entry: Path, dest_dir: Path) -> Path:
        """Render *entry* into *dest_dir*.

        The CLI runs with *dest_dir* as its working directory, so every file
        it emits lands inside it with the tool's own relative layout.

        Raises:
            RenderError: If the entry is missing, the CLI cannot be started,
                exits non-zero, or produces no output document.

        """
        if not entry.is_file():
            msg = f"Entry document not found: {entry}"
            raise RenderError(msg)

        out_name = entry.name
        argv = self.argv(entry, out_name)
        try:
            proc = subprocess.run(
                argv,
                cwd=dest_dir,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self._timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            msg = f"Renderer executable not found: {self._command[0]!r}"
            raise RenderError(msg) from exc
        except subprocess.TimeoutExpired as exc:
            msg = f"Renderer timed out after {self._timeout}s on {entry.name}"
            raise RenderError(msg) from exc
        except OSError as exc:
            msg = f"Cannot run renderer {self._command[0]!r}: {exc}"
            raise RenderError(msg) from exc

        if proc.returncode != 0:
            detail = proc.stderr.strip() or proc.stdout.strip()
            msg = f"Renderer failed on {entry.name} (exit {proc.returncode})"
            if detail:
                msg = f"{msg}: {detail.splitlines()[-1]}"
            raise RenderError(msg, stderr=proc.stderr)

        out_file = dest_dir / out_name
        if not out_file.is_file():
            msg = f"Renderer produced no output for {entry.name}"
            raise RenderError(msg, stderr=proc.stderr)
        return out_file
