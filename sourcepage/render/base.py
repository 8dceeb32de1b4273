"""Interfaces for the markdown and syntax-highlighting collaborators."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class HighlightResult:
    """HTML fragment produced by a highlighter plus the language it used."""

    value: str
    language: Optional[str] = None


class MarkdownRenderer(ABC):
    """Converts markdown text to HTML."""

    @abstractmethod
    def render(self, text: str) -> str:
        """Return the HTML for ``text``."""


class Highlighter(ABC):
    """Wraps source text in highlighting markup."""

    @abstractmethod
    def highlight(self, text: str, language: Optional[str] = None) -> HighlightResult:
        """Highlight ``text``; detect the language when ``language`` is None."""
