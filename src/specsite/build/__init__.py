"""Build layer — output cleaning and document rendering.

Wraps the external renderer CLI and owns every write to the output tree.
"""

from specsite.build.builder import BuildResult, DocumentBuilder, RenderedFile
from specsite.build.cleaner import clean_output
from specsite.build.renderer import EcmarkupRenderer, Renderer, RenderOptions

__all__ = [
    "BuildResult",
    "DocumentBuilder",
    "EcmarkupRenderer",
    "RenderOptions",
    "RenderedFile",
    "Renderer",
    "clean_output",
]
