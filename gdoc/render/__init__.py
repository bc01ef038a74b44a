"""AsciiDoc rendering of resolved document models."""

from .reflow import reflow
from .renderer import DOCINFO_FILENAME, RenderError, Renderer, RenderOptions, render_type

__all__ = [
    "DOCINFO_FILENAME",
    "RenderError",
    "RenderOptions",
    "Renderer",
    "reflow",
    "render_type",
]
