"""Specsite error hierarchy.

All specsite-specific errors inherit from SpecsiteError for easy catching.
"""


class SpecsiteError(Exception):
    """Base error for all specsite operations."""


class ConfigError(SpecsiteError):
    """Invalid or missing configuration."""


class CleanError(SpecsiteError):
    """The output directory could not be emptied."""


class RenderError(SpecsiteError):
    """The external renderer failed on the entry document.

    Attributes:
        stderr: Diagnostic output captured from the renderer, if any.

    """

    def __init__(self, message: str, *, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr


class BuildError(SpecsiteError):
    """Rendered output could not be written to the output directory."""


class WatchError(SpecsiteError):
    """A watch target is missing or the watcher failed."""


class ServerError(SpecsiteError):
    """The dev server could not start (e.g. port already bound)."""


class TaskError(SpecsiteError):
    """Unknown task, invalid task graph, or dependency cycle."""
