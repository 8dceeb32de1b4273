"""Markdown and syntax-highlighting collaborators."""

from .base import HighlightResult, Highlighter, MarkdownRenderer
from .markdown_renderer import PythonMarkdownRenderer
from .pygments_highlighter import PygmentsHighlighter

__all__ = [
    "HighlightResult",
    "Highlighter",
    "MarkdownRenderer",
    "PygmentsHighlighter",
    "PythonMarkdownRenderer",
]
