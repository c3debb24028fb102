"""Specsite configuration.

SiteConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path

from specsite._errors import ConfigError
from specsite._types import AssetsMode

ASSETS_MODES: frozenset[str] = frozenset({"none", "inline", "external"})


@dataclass(frozen=True, slots=True)
class SiteConfig:
    """Configuration for a specsite project.

    Attributes:
        root: Project root directory. Always resolved to an absolute path on
              construction.
        entry: Entry-point document, relative to root.
        output: Output directory for the rendered site.
        watch_patterns: Root-relative globs of source files that trigger a rebuild.
        host: Bind address for the dev server.
        port: Bind port for the dev server (0 picks a free port).
        js: Name of the script asset the renderer emits.
        css: Name of the style asset the renderer emits.
        assets: Asset inclusion mode passed to the renderer.
        strict: Fail the build on renderer warnings.
        renderer_command: argv prefix used to invoke the external renderer.
        rebuild_delay_ms: Quiet period for coalescing source changes into one
            rebuild. 0 triggers one rebuild per change.
        watch_debounce_ms: Grouping window of the filesystem watcher.
        live_reload: Inject the live-reload client into served HTML.
        initial_build: Build once when ``watch`` starts, before any change.

    """

    root: Path = field(default_factory=Path.cwd)
    entry: str = "src/index.html"
    output: Path = field(default_factory=lambda: Path("docs"))
    watch_patterns: tuple[str, ...] = ("src/**/*",)
    host: str = "127.0.0.1"
    port: int = 8080
    js: str = "ecmarkup.js"
    css: str = "ecmarkup.css"
    assets: AssetsMode = "none"
    strict: bool = False
    renderer_command: tuple[str, ...] = ("ecmarkup",)
    rebuild_delay_ms: int = 100
    watch_debounce_ms: int = 300
    live_reload: bool = True
    initial_build: bool = False

    def __post_init__(self) -> None:
        # Resolve root to absolute so that watchfiles (which returns
        # absolute paths) can be compared via Path.relative_to().
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())
        if not isinstance(self.output, Path):
            object.__setattr__(self, "output", Path(self.output))
        self._validate()

    def _validate(self) -> None:
        if not 0 <= self.port <= 65535:
            msg = f"port must be between 0 and 65535, got {self.port}"
            raise ConfigError(msg)
        if self.assets not in ASSETS_MODES:
            msg = (
                f"assets must be one of {sorted(ASSETS_MODES)}, "
                f"got {self.assets!r}"
            )
            raise ConfigError(msg)
        if self.rebuild_delay_ms < 0 or self.watch_debounce_ms < 0:
            msg = "rebuild_delay_ms and watch_debounce_ms must not be negative"
            raise ConfigError(msg)
        if not self.renderer_command:
            msg = "renderer_command must name an executable"
            raise ConfigError(msg)
        if not self.watch_patterns:
            msg = "watch_patterns must contain at least one glob"
            raise ConfigError(msg)
        if not self.entry:
            msg = "entry must name a source document"
            raise ConfigError(msg)

    @property
    def entry_path(self) -> Path:
        """Absolute path to the entry-point document."""
        return self.root / self.entry

    @property
    def output_path(self) -> Path:
        """Absolute path to output directory."""
        if self.output.is_absolute():
            return self.output
        return self.root / self.output

    @property
    def output_patterns(self) -> tuple[str, ...]:
        """Globs covering the whole output tree, relative to root when possible."""
        try:
            rel = self.output_path.relative_to(self.root)
        except ValueError:
            return (f"{self.output_path.as_posix()}/**/*",)
        return (f"{rel.as_posix()}/**/*",)
