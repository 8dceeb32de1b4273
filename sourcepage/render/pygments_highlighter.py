"""Syntax highlighting backed by Pygments."""

from __future__ import annotations

from typing import Optional

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, guess_lexer
from pygments.lexers.special import TextLexer
from pygments.util import ClassNotFound

from .base import HighlightResult, Highlighter


class PygmentsHighlighter(Highlighter):
    """Produces a ``<span>`` fragment with no wrapping ``<div>`` or ``<pre>``.

    A language hint must name a Pygments lexer alias; without one the lexer is
    guessed from the text, falling back to plain text.
    """

    def __init__(self, formatter: HtmlFormatter | None = None) -> None:
        self.formatter = formatter or HtmlFormatter(nowrap=True)

    def highlight(self, text: str, language: Optional[str] = None) -> HighlightResult:
        lexer = self._resolve_lexer(text, language)
        value = highlight(text, lexer, self.formatter)
        return HighlightResult(value=value, language=_lexer_alias(lexer))

    @staticmethod
    def _resolve_lexer(text: str, language: Optional[str]) -> Lexer:
        if language:
            return get_lexer_by_name(language)
        try:
            return guess_lexer(text)
        except ClassNotFound:
            return TextLexer()


def _lexer_alias(lexer: Lexer) -> str:
    return lexer.aliases[0] if lexer.aliases else lexer.name
