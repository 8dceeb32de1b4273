"""Navigation tree construction and its front-end initialization script."""

from __future__ import annotations

import json
from pathlib import PurePath
from typing import FrozenSet, Iterable

from .models import FileRecord, NavigationTree
from .naming import relative_path

JUNK_FILENAMES = frozenset({".DS_Store", "Thumbs.db", "desktop.ini"})

DEFAULT_QUEUE_NAME = "_spq"
TREE_INIT_COMMAND = "sp:tree:init"
_BANNER = "/*! auto-generated by sourcepage */"


class NavigationTreeBuilder:
    """Folds the walked files into a directory -> children mapping."""

    def __init__(self, junk_names: Iterable[str] = JUNK_FILENAMES) -> None:
        self.junk_names: FrozenSet[str] = frozenset(junk_names)

    def build(self, records: Iterable[FileRecord], root: str | PurePath) -> NavigationTree:
        """Group basenames by parent directory, keyed relative to ``root``.

        Files directly under the root are keyed ``/``. Children keep the order
        in which ``records`` yields them.
        """
        tree: NavigationTree = {}
        for record in records:
            rel = relative_path(record.path, root)
            directory, _, name = rel.rpartition("/")
            if name in self.junk_names:
                continue
            tree.setdefault(directory or "/", []).append(name)
        return tree

    @staticmethod
    def render_init_script(
        tree: NavigationTree,
        *,
        queue_name: str = DEFAULT_QUEUE_NAME,
        command: str = TREE_INIT_COMMAND,
    ) -> str:
        """Return a script that queues ``[command, tree]`` on ``window.<queue_name>``."""
        payload = json.dumps(tree, separators=(",", ":"))
        queue = f"window.{queue_name}"
        return (
            f"{_BANNER}\n"
            f"{queue} = {queue} || [];{queue}.push(['{command}', {payload}]);"
        )


__all__ = [
    "DEFAULT_QUEUE_NAME",
    "JUNK_FILENAMES",
    "NavigationTreeBuilder",
    "TREE_INIT_COMMAND",
]
