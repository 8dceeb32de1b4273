"""Core data models shared across sourcepage components."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

MARKDOWN = "markdown"
HIGHLIGHT = "highlight"

NavigationTree = Dict[str, List[str]]


@dataclass(frozen=True)
class FileRecord:
    """A regular file discovered by the walker."""

    path: str


@dataclass(frozen=True)
class ContentKind:
    """How a file's contents are turned into HTML."""

    name: str
    language: Optional[str] = None

    @classmethod
    def markdown(cls) -> "ContentKind":
        return cls(name=MARKDOWN)

    @classmethod
    def highlight(cls, language: Optional[str] = None) -> "ContentKind":
        return cls(name=HIGHLIGHT, language=language)

    @property
    def is_markdown(self) -> bool:
        return self.name == MARKDOWN


@dataclass
class ClassifiedContent:
    """Raw file text paired with its classification."""

    kind: ContentKind
    text: str


@dataclass
class Artifact:
    """One HTML output file."""

    output_name: str
    html: str


@dataclass
class UnitResult:
    """Outcome of generating the artifact for a single input file."""

    source: str
    output_name: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RunSummary:
    """Result of a full pipeline run."""

    root: str
    output_dir: str
    init_script: str
    tree_written: bool
    results: List[UnitResult] = field(default_factory=list)
    collisions: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.ok)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    def failures(self) -> List[UnitResult]:
        return [result for result in self.results if not result.ok]
