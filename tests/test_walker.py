"""Tests for sourcepage.walker."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

import pytest

from sourcepage.fsio import FileSystemIO
from sourcepage.walker import DEFAULT_PRUNED_DIRS, DirectoryWalker


class FailingIO(FileSystemIO):
    """Raises for selected paths to simulate unreadable entries."""

    def __init__(self, *, unlistable=(), unstatable=()) -> None:
        super().__init__(max_concurrency=4)
        self.unlistable = {Path(p) for p in unlistable}
        self.unstatable = {Path(p) for p in unstatable}

    async def list_dir(self, path: Path):
        if path in self.unlistable:
            raise PermissionError(f"cannot list {path}")
        return await super().list_dir(path)

    async def stat(self, path: Path, *, follow_symlinks: bool = True):
        if path in self.unstatable:
            raise OSError(f"cannot stat {path}")
        return await super().stat(path, follow_symlinks=follow_symlinks)


def _walk(walker: DirectoryWalker, root: Path) -> list[str]:
    records = asyncio.run(walker.walk(root))
    return [os.path.relpath(record.path, root) for record in records]


def test_walk_emits_every_file_exactly_once(project) -> None:
    project.write(
        {
            "README.md": "# Title\n",
            "src/app.js": "const x = 1;\n",
            "src/styles/site.css": "body {}\n",
            "docs/deep/nested/page.md": "text\n",
        }
    )

    paths = _walk(DirectoryWalker(), project.path())

    assert sorted(paths) == sorted(
        [
            "README.md",
            os.path.join("src", "app.js"),
            os.path.join("src", "styles", "site.css"),
            os.path.join("docs", "deep", "nested", "page.md"),
        ]
    )
    assert len(paths) == len(set(paths))


def test_walk_prunes_configured_directories(project) -> None:
    project.write(
        {
            "index.html": "<p></p>\n",
            ".git/HEAD": "ref: refs/heads/main\n",
            "node_modules/lib/index.js": "module.exports = 1;\n",
            ".idea/workspace.xml": "<xml/>\n",
            "src/node_modules/inner.js": "nested\n",
        }
    )

    paths = _walk(DirectoryWalker(), project.path())

    assert paths == ["index.html"]


def test_walk_uses_custom_prune_set(project) -> None:
    project.write({"dist/bundle.js": "x\n", ".git/HEAD": "ref\n"})

    paths = _walk(DirectoryWalker({"dist"}), project.path())

    assert paths == [os.path.join(".git", "HEAD")]


def test_default_prune_set_covers_vcs_dependencies_and_ide() -> None:
    assert {".git", "node_modules", ".idea"} <= DEFAULT_PRUNED_DIRS


def test_walk_skips_excluded_paths(project) -> None:
    project.write(
        {
            "README.md": "# Hi\n",
            "public/data/old.html": "<p>old</p>\n",
            "public/js/sp-init.js": "window._spq = [];\n",
            "public/js/app.js": "run();\n",
        }
    )

    walker = DirectoryWalker(
        excluded_paths=[project.path("public/data"), project.path("public/js/sp-init.js")]
    )
    paths = _walk(walker, project.path())

    assert sorted(paths) == sorted(["README.md", os.path.join("public", "js", "app.js")])


def test_unlistable_directory_does_not_abort_siblings(project) -> None:
    project.write(
        {
            "locked/secret.md": "hidden\n",
            "open/visible.md": "shown\n",
            "top.txt": "top\n",
        }
    )

    io = FailingIO(unlistable=[project.path("locked")])
    paths = _walk(DirectoryWalker(io=io), project.path())

    assert sorted(paths) == sorted([os.path.join("open", "visible.md"), "top.txt"])


def test_unstatable_entry_is_skipped(project) -> None:
    project.write({"a.txt": "a\n", "b.txt": "b\n"})

    io = FailingIO(unstatable=[project.path("a.txt")])
    paths = _walk(DirectoryWalker(io=io), project.path())

    assert paths == ["b.txt"]


def test_unlistable_root_is_fatal(project) -> None:
    io = FailingIO(unlistable=[project.path()])

    with pytest.raises(PermissionError):
        asyncio.run(DirectoryWalker(io=io).walk(project.path()))


def test_walk_rejects_missing_root(tmp_path: Path) -> None:
    missing = tmp_path / "missing"

    with pytest.raises(FileNotFoundError) as excinfo:
        asyncio.run(DirectoryWalker().walk(missing))

    assert str(missing) in str(excinfo.value)


def test_walk_rejects_file_root(project) -> None:
    project.write({"file.txt": "x\n"})

    with pytest.raises(NotADirectoryError):
        asyncio.run(DirectoryWalker().walk(project.path("file.txt")))


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_symlinked_directories_are_not_followed_by_default(project) -> None:
    project.write({"real/file.md": "x\n"})
    try:
        os.symlink(project.path("real"), project.path("alias"), target_is_directory=True)
        os.symlink(project.path(), project.path("real/loop"), target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks")

    assert _walk(DirectoryWalker(), project.path()) == [os.path.join("real", "file.md")]

    followed = _walk(DirectoryWalker(follow_symlinks=True), project.path())
    assert sorted(followed) == sorted(
        [os.path.join("real", "file.md"), os.path.join("alias", "file.md")]
    )
