"""
Tests for project tree scanning and comparison.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from checker.checks import check_structure
from checker.config import PROJECT_STRUCTURE
from checker.models import DirNode, FileNode, mkdir, mkfile
from checker.tree import diff, find_match, scan


def test_scan_builds_typed_nodes(project_dir: Path) -> None:
    tree = scan(project_dir)

    assert tree.name == "project"
    assert tree.type == "directory"
    names = {(child.name, child.type) for child in tree.children}
    assert names == {("index.html", "file"), ("styles", "directory"), ("fonts", "directory")}

    styles = find_match(mkdir("styles"), tree.children)
    assert styles is not None
    assert styles.children == (FileNode(name="style.css"),)


def test_scan_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        scan(tmp_path / "nope")


def test_find_match_requires_same_type() -> None:
    actual = [mkdir("index.html"), mkfile("index.html")]

    found = find_match(mkfile("index.html"), actual)

    assert isinstance(found, FileNode)


def test_find_match_first_wins() -> None:
    first = mkdir("styles", [mkfile("a.css")])
    second = mkdir("styles", [mkfile("b.css")])

    assert find_match(mkdir("styles"), [first, second]) is first


def test_complete_project_has_no_structure_errors(project_dir: Path) -> None:
    assert check_structure(project_dir) == []


def test_missing_directory_reports_only_the_directory(project_dir: Path) -> None:
    (project_dir / "fonts" / "fonts.css").unlink()
    (project_dir / "fonts").rmdir()

    errors = check_structure(project_dir)

    assert [e.to_dict() for e in errors] == [
        {"id": "structure.directory", "values": {"name": "fonts"}},
    ]


def test_missing_file_inside_directory(project_dir: Path) -> None:
    (project_dir / "styles" / "style.css").unlink()

    errors = check_structure(project_dir)

    assert [e.to_dict() for e in errors] == [
        {"id": "structure.file", "values": {"name": "style.css"}},
    ]


def test_file_in_place_of_directory_is_missing(project_dir: Path) -> None:
    (project_dir / "fonts" / "fonts.css").unlink()
    (project_dir / "fonts").rmdir()
    (project_dir / "fonts").write_text("", encoding="utf-8")

    errors = check_structure(project_dir)

    assert [e.id for e in errors] == ["structure.directory"]


def test_errors_follow_required_tree_order() -> None:
    canonical = [
        mkfile("index.html"),
        mkdir("styles", [mkfile("style.css"), mkfile("global.css")]),
        mkfile("readme.md"),
        mkdir("fonts", [mkfile("fonts.css")]),
    ]
    actual = [mkdir("styles", [mkfile("global.css")])]

    errors = diff(canonical, actual)

    assert [(e.id, e.values.name) for e in errors] == [
        ("structure.file", "index.html"),
        ("structure.file", "style.css"),
        ("structure.file", "readme.md"),
        ("structure.directory", "fonts"),
    ]


def test_extra_actual_entries_are_ignored() -> None:
    canonical = [mkfile("index.html")]
    actual = [mkfile("index.html"), mkfile("notes.txt"), mkdir("img", [mkfile("a.png")])]

    assert diff(canonical, actual) == []


def test_nested_missing_directory_has_no_cascading_errors() -> None:
    canonical = [mkdir("a", [mkdir("b", [mkfile("c"), mkdir("d", [mkfile("e")])])])]
    actual = [mkdir("a")]

    errors = diff(canonical, actual)

    assert [(e.id, e.values.name) for e in errors] == [("structure.directory", "b")]


def test_diff_is_repeatable() -> None:
    actual = [mkfile("index.html")]

    first = diff(PROJECT_STRUCTURE.children, actual)
    second = diff(PROJECT_STRUCTURE.children, actual)

    assert first == second
    assert len(first) == 2


def test_canonical_tree_is_immutable() -> None:
    with pytest.raises(ValidationError):
        PROJECT_STRUCTURE.children = ()
    assert isinstance(PROJECT_STRUCTURE, DirNode)
