"""Specsite — build a specification document into a static site.

Renders one entry document through an external markup-to-HTML CLI into an
output directory, and optionally watches the sources and serves the result
with live reload.

Quick start::

    import specsite

    specsite.build("my-proposal/")

Tasks::

    specsite.clean("my-proposal/")    # Empty the output directory
    specsite.build("my-proposal/")    # Render once
    specsite.watch("my-proposal/")    # Rebuild on every source change
    specsite.start("my-proposal/")    # watch + dev server with live reload

"""

__version__ = "0.1.0"
__all__ = [
    "SiteConfig",
    "__version__",
    "build",
    "clean",
    "run",
    "start",
    "watch",
]

_APP_EXPORTS = frozenset({"build", "clean", "run", "start", "watch"})


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import specsite`` fast while providing a clean top-level API.
    """
    if name == "SiteConfig":
        from specsite.config import SiteConfig

        return SiteConfig

    if name in _APP_EXPORTS:
        from specsite import app

        return getattr(app, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
