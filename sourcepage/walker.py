"""Concurrent recursive enumeration of project files."""

from __future__ import annotations

import asyncio
import stat
from pathlib import Path
from typing import FrozenSet, Iterable, List, Sequence

from .fsio import FileSystemIO
from .logging import get_logger
from .models import FileRecord

DEFAULT_PRUNED_DIRS = frozenset(
    {
        # version control
        ".git",
        ".hg",
        ".svn",
        # dependencies and caches
        "node_modules",
        "bower_components",
        ".venv",
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        # IDE metadata
        ".idea",
        ".vscode",
    }
)


def resolve_root(root: str | Path) -> Path:
    """Return the absolute project root, raising unless it is an existing directory."""
    root_path = Path(root).expanduser().resolve()
    if not root_path.exists():
        raise FileNotFoundError(f"Project path not found: {root}")
    if not root_path.is_dir():
        raise NotADirectoryError(f"Project path is not a directory: {root}")
    return root_path


class DirectoryWalker:
    """Walks a directory tree, fanning out over the children of every directory."""

    def __init__(
        self,
        prune_dirs: Iterable[str] | None = None,
        *,
        excluded_paths: Iterable[str | Path] = (),
        follow_symlinks: bool = False,
        io: FileSystemIO | None = None,
    ) -> None:
        self.prune_dirs: FrozenSet[str] = (
            frozenset(prune_dirs) if prune_dirs is not None else DEFAULT_PRUNED_DIRS
        )
        self.excluded_paths: FrozenSet[Path] = frozenset(
            Path(path).expanduser().resolve() for path in excluded_paths
        )
        self.follow_symlinks = follow_symlinks
        self.io = io or FileSystemIO()
        self.logger = get_logger("walker")

    async def walk(self, root: str | Path) -> List[FileRecord]:
        """Return every regular file under ``root`` outside pruned directories.

        Errors below the root are logged and drop only the affected entry. A
        missing or unreadable root raises.
        """
        root_path = resolve_root(root)

        names = await self.io.list_dir(root_path)
        records = await self._walk_children(root_path, names)
        self.logger.debug("Walker discovered %d files under %s", len(records), root_path)
        return records

    async def _walk_dir(self, directory: Path) -> List[FileRecord]:
        try:
            names = await self.io.list_dir(directory)
        except OSError as exc:
            self.logger.warning("Cannot list %s: %s", directory, exc)
            return []
        return await self._walk_children(directory, names)

    async def _walk_children(self, directory: Path, names: Sequence[str]) -> List[FileRecord]:
        outcomes = await asyncio.gather(
            *(self._visit(directory / name) for name in names),
            return_exceptions=True,
        )
        records: List[FileRecord] = []
        for name, outcome in zip(names, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                self.logger.warning("Skipping %s: %s", directory / name, outcome)
                continue
            records.extend(outcome)
        return records

    async def _visit(self, path: Path) -> List[FileRecord]:
        if path in self.excluded_paths:
            self.logger.debug("Skipping excluded path %s", path)
            return []

        try:
            info = await self.io.stat(path, follow_symlinks=False)
            is_link = stat.S_ISLNK(info.st_mode)
            if is_link:
                info = await self.io.stat(path)
        except OSError as exc:
            self.logger.warning("Cannot stat %s: %s", path, exc)
            return []

        if stat.S_ISDIR(info.st_mode):
            if path.name in self.prune_dirs:
                self.logger.debug("Pruning %s", path)
                return []
            if is_link and not self.follow_symlinks:
                self.logger.debug("Not following symlinked directory %s", path)
                return []
            if is_link and await self._is_cycle(path):
                self.logger.warning("Symlink %s points into its own ancestry; skipping", path)
                return []
            return await self._walk_dir(path)

        if stat.S_ISREG(info.st_mode):
            return [FileRecord(path=str(path))]

        return []

    async def _is_cycle(self, link: Path) -> bool:
        try:
            target = await self.io.resolve(link)
        except OSError:
            return True
        return target in link.parents


__all__ = ["DEFAULT_PRUNED_DIRS", "DirectoryWalker", "resolve_root"]
