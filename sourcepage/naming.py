"""Flattening of nested input paths into unique artifact filenames."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Dict, Iterable, List

from .models import FileRecord

DEFAULT_SEPARATOR = "-_sp_-"
ARTIFACT_SUFFIX = ".html"


class ArtifactCollisionError(RuntimeError):
    """Raised when two input files would be written to the same artifact."""


def relative_path(path: str | PurePath, root: str | PurePath) -> str:
    """Return ``path`` relative to ``root`` as a POSIX string with a leading ``/``."""
    try:
        relative = PurePath(path).relative_to(PurePath(root))
    except ValueError as exc:
        raise ValueError(f"{path} is not inside {root}") from exc
    return "/" + relative.as_posix()


@dataclass
class NameAssignment:
    """Output names for a set of records plus the paths that lost a collision."""

    names: Dict[str, str] = field(default_factory=dict)
    collisions: Dict[str, str] = field(default_factory=dict)


class ArtifactNamer:
    """Derives flat artifact names by replacing path separators with a token.

    Uniqueness holds only while no path component contains the token itself;
    ``assign`` reports the cases where it does not.
    """

    def __init__(self, separator: str = DEFAULT_SEPARATOR) -> None:
        if not separator:
            raise ValueError("separator must not be empty")
        if "/" in separator or "\\" in separator:
            raise ValueError("separator must not contain a path separator")
        self.separator = separator

    def name_for(self, path: str | PurePath, root: str | PurePath) -> str:
        flattened = relative_path(path, root).replace("/", self.separator)
        return f"{flattened}{ARTIFACT_SUFFIX}"

    def assign(self, records: Iterable[FileRecord], root: str | PurePath) -> NameAssignment:
        """Name every record; later paths that map to a taken name are collisions."""
        assignment = NameAssignment()
        owners: Dict[str, str] = {}
        for record in records:
            name = self.name_for(record.path, root)
            owner = owners.get(name)
            if owner is not None:
                assignment.collisions[record.path] = owner
                continue
            owners[name] = record.path
            assignment.names[record.path] = name
        return assignment

    def ambiguous_components(self, path: str | PurePath, root: str | PurePath) -> List[str]:
        """Return the components of ``path`` that contain the separator token."""
        return [
            part
            for part in relative_path(path, root).split("/")
            if self.separator in part
        ]


__all__ = [
    "ARTIFACT_SUFFIX",
    "ArtifactCollisionError",
    "ArtifactNamer",
    "DEFAULT_SEPARATOR",
    "NameAssignment",
    "relative_path",
]
