"""Dispatch of classified file contents to the rendering collaborators."""

from __future__ import annotations

from .models import Artifact, ClassifiedContent, ContentKind
from .render import Highlighter, MarkdownRenderer


class TransformError(RuntimeError):
    """Raised when a collaborator fails to render a file's contents."""


class ContentTransformer:
    """Produces the HTML body for one file using injected collaborators."""

    def __init__(self, markdown_renderer: MarkdownRenderer, highlighter: Highlighter) -> None:
        self.markdown_renderer = markdown_renderer
        self.highlighter = highlighter

    def transform(self, kind: ContentKind, text: str) -> str:
        try:
            if kind.is_markdown:
                return self.markdown_renderer.render(text)
            return self.highlighter.highlight(text, kind.language).value
        except Exception as exc:
            label = kind.language or kind.name
            raise TransformError(f"{label} rendering failed: {exc}") from exc

    def render_artifact(self, content: ClassifiedContent, output_name: str) -> Artifact:
        """Transform classified contents into the artifact written as ``output_name``."""
        return Artifact(output_name=output_name, html=self.transform(content.kind, content.text))


__all__ = ["ContentTransformer", "TransformError"]
