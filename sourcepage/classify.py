"""Extension-based classification of input files."""

from __future__ import annotations

from pathlib import PurePath
from typing import Dict, Mapping

from .models import ContentKind

_MARKDOWN_SUFFIXES = {".md"}

_LANGUAGE_BY_SUFFIX = {
    ".css": "css",
    ".js": "js",
    ".html": "html",
    ".sass": "sass",
}


def _normalise_suffix(suffix: str) -> str:
    suffix = suffix.strip().lower()
    if suffix and not suffix.startswith("."):
        suffix = f".{suffix}"
    return suffix


class PathClassifier:
    """Maps a path to markdown or a highlight language hint.

    Unknown extensions fall back to a highlight kind without a hint, leaving
    detection to the highlighter.
    """

    def __init__(self, languages: Mapping[str, str] | None = None) -> None:
        self._languages: Dict[str, str] = dict(_LANGUAGE_BY_SUFFIX)
        for suffix, language in (languages or {}).items():
            key = _normalise_suffix(suffix)
            if key and key not in _MARKDOWN_SUFFIXES:
                self._languages[key] = language

    def classify(self, path: str | PurePath) -> ContentKind:
        suffix = PurePath(path).suffix.lower()
        if suffix in _MARKDOWN_SUFFIXES:
            return ContentKind.markdown()
        return ContentKind.highlight(self._languages.get(suffix))


__all__ = ["PathClassifier"]
