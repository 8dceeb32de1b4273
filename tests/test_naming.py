"""Tests for sourcepage.naming."""

from __future__ import annotations

import itertools

import pytest

from sourcepage.models import FileRecord
from sourcepage.naming import DEFAULT_SEPARATOR, ArtifactNamer, relative_path

ROOT = "/proj"


def test_relative_path_has_leading_separator() -> None:
    assert relative_path("/proj/a/b.md", ROOT) == "/a/b.md"
    assert relative_path("/proj/README.md", ROOT) == "/README.md"


def test_relative_path_rejects_outside_root() -> None:
    with pytest.raises(ValueError):
        relative_path("/elsewhere/file.md", ROOT)


def test_name_for_flattens_root_file() -> None:
    name = ArtifactNamer().name_for("/proj/README.md", ROOT)

    assert name == f"{DEFAULT_SEPARATOR}README.md.html"


def test_name_for_flattens_nested_paths() -> None:
    namer = ArtifactNamer("__")

    assert namer.name_for("/proj/src/app.js", ROOT) == "__src__app.js.html"
    assert namer.name_for("/proj/docs/guide.md", ROOT) == "__docs__guide.md.html"


def test_distinct_paths_produce_distinct_names() -> None:
    paths = [
        "/proj/a/b/c.md",
        "/proj/a/b-c.md",
        "/proj/a-b/c.md",
        "/proj/ab/c.md",
        "/proj/a/bc.md",
        "/proj/a_b/c.md",
        "/proj/c.md",
        "/proj/c.md.html",
    ]
    namer = ArtifactNamer()

    names = [namer.name_for(path, ROOT) for path in paths]

    for left, right in itertools.combinations(names, 2):
        assert left != right


@pytest.mark.parametrize("separator", ["", "a/b", "a\\b"])
def test_invalid_separators_rejected(separator: str) -> None:
    with pytest.raises(ValueError):
        ArtifactNamer(separator)


def test_assign_reports_collisions_from_token_in_component() -> None:
    namer = ArtifactNamer("--")
    records = [
        FileRecord("/proj/a/b.md"),
        FileRecord("/proj/a--b.md"),
        FileRecord("/proj/c.md"),
    ]

    assignment = namer.assign(records, ROOT)

    assert assignment.names == {
        "/proj/a/b.md": "--a--b.md.html",
        "/proj/c.md": "--c.md.html",
    }
    assert assignment.collisions == {"/proj/a--b.md": "/proj/a/b.md"}


def test_ambiguous_components_flags_token_usage() -> None:
    namer = ArtifactNamer("--")

    assert namer.ambiguous_components("/proj/x--y/z.md", ROOT) == ["x--y"]
    assert namer.ambiguous_components("/proj/x/z.md", ROOT) == []
