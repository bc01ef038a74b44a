"""Post-processing applied to rendered documents."""

from .anchors import AnchorCheckError, AnchorValidator
from .lint import AsciiDocLinter

__all__ = ["AnchorCheckError", "AnchorValidator", "AsciiDocLinter"]
