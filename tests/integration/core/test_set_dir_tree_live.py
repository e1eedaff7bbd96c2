from __future__ import annotations

"""
Integration tests for live directory tree creation.

Runs set_dir_tree() against a temporary directory and checks the
resulting files on disk.
"""

import os
from pathlib import Path

import pytest

from dirtree import MakeDirOp, WriteFileOp, set_dir_tree, set_dir_tree_from_file
from dirtree.domain.errors import PreconditionError


def _snapshot(root: Path) -> dict:
    """Map every path below root to its file contents, or None for directories."""
    return {
        p.relative_to(root).as_posix(): (p.read_text(encoding="utf-8") if p.is_file() else None)
        for p in sorted(root.rglob("*"))
    }


def test_live_run_creates_tree(workdir: Path, project_outline: str) -> None:
    result = set_dir_tree("proj", project_outline)

    assert result == []
    assert _snapshot(workdir / "proj") == {
        "README.md": "# Project\nSome text",
        "docs": None,
        "src": None,
        "src/main.py": "def main():\n\treturn 0",
        "src/utils": None,
    }


def test_file_without_body_is_empty(workdir: Path) -> None:
    set_dir_tree("out", "/sub\n\tempty.txt")

    assert (workdir / "out" / "sub" / "empty.txt").read_text(encoding="utf-8") == ""


def test_second_run_without_clear_keeps_old_files(workdir: Path) -> None:
    set_dir_tree("out", "old.txt\n\tx")
    set_dir_tree("out", "new.txt\n\ty")

    assert _snapshot(workdir / "out") == {"new.txt": "y", "old.txt": "x"}


def test_clear_makes_second_run_match_fresh_run(workdir: Path) -> None:
    first = "/a\n\tone.txt\n\t\t1\nkeep.txt"
    second = "/a\n\ttwo.txt\n\t\t2"

    set_dir_tree("out", first)
    set_dir_tree("out", second, {"clear": True})
    set_dir_tree("fresh", second)

    assert _snapshot(workdir / "out") == _snapshot(workdir / "fresh")


def test_existing_file_is_overwritten(workdir: Path) -> None:
    set_dir_tree("out", "f.txt\n\tfirst")
    set_dir_tree("out", "f.txt\n\tsecond")

    assert (workdir / "out" / "f.txt").read_text(encoding="utf-8") == "second"


def test_from_file(workdir: Path) -> None:
    outline = workdir / "outline.txt"
    outline.write_text("/docs\n  index.md\n    # Title\n", encoding="utf-8")

    set_dir_tree_from_file("site", str(outline))

    assert (workdir / "site" / "docs" / "index.md").read_text(encoding="utf-8") == "# Title"


def test_root_is_file_leaves_disk_untouched(workdir: Path) -> None:
    (workdir / "out").write_text("occupied", encoding="utf-8")

    with pytest.raises(PreconditionError):
        set_dir_tree("out", "/sub\n\tf.txt")

    assert (workdir / "out").read_text(encoding="utf-8") == "occupied"


@pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")
def test_symlinked_root_is_accepted(workdir: Path) -> None:
    (workdir / "real").mkdir()
    (workdir / "link").symlink_to(workdir / "real", target_is_directory=True)

    ops = set_dir_tree("link", "x", {"scaffold": True})
    assert ops == [MakeDirOp("link"), WriteFileOp("link/x", "")]

    set_dir_tree("link", "/sub\n\tnote.txt\n\t\thi")
    assert (workdir / "real" / "sub" / "note.txt").read_text(encoding="utf-8") == "hi"


@pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")
def test_dangling_symlink_root_rejected(workdir: Path) -> None:
    (workdir / "link").symlink_to(workdir / "gone", target_is_directory=True)

    with pytest.raises(PreconditionError, match="symlink"):
        set_dir_tree("link", "x")
