"""Markdown rendering backed by Python-Markdown."""

from __future__ import annotations

from typing import Sequence

import markdown

from .base import MarkdownRenderer

DEFAULT_EXTENSIONS = ("fenced_code",)


class PythonMarkdownRenderer(MarkdownRenderer):
    """Renders markdown with a fresh converter per call, so instances hold no state."""

    def __init__(self, extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> None:
        self.extensions = list(extensions)

    def render(self, text: str) -> str:
        return markdown.markdown(text, extensions=self.extensions)
