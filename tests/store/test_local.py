"""Unit tests for the atomic file primitives."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from pile.store import local


def test_atomic_write_creates_and_replaces(tmp_path: Path) -> None:
    target = tmp_path / ".pile-tags"
    local.atomic_write(target, b"a\n")
    assert target.read_bytes() == b"a\n"

    local.atomic_write(target, b"b\n")
    assert target.read_bytes() == b"b\n"
    # No temp files left behind on success.
    assert local.find_temp_files(tmp_path, ".pile-tags") == []


def test_atomic_write_failure_keeps_previous_content(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """A crash between writing the temp file and renaming it leaves the old file intact."""
    target = tmp_path / ".pile-tags"
    target.write_bytes(b"old\n")

    def _crash(src: str, dst: str) -> None:
        raise KeyboardInterrupt

    monkeypatch.setattr(local.os, "replace", _crash)

    with pytest.raises(KeyboardInterrupt):
        local.atomic_write(target, b"new\n")

    assert target.read_bytes() == b"old\n"
    assert local.find_temp_files(tmp_path, ".pile-tags") == []


def test_atomic_write_hard_kill_leaves_only_temp_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """If cleanup never runs (process killed), the leftover is a recognisable temp file."""
    target = tmp_path / ".pile-tags"
    target.write_bytes(b"old\n")

    def _crash(src: str, dst: str) -> None:
        raise SystemExit(1)

    monkeypatch.setattr(local.os, "replace", _crash)
    monkeypatch.setattr(local.os, "unlink", lambda path: None)

    with pytest.raises(SystemExit):
        local.atomic_write(target, b"new\n")

    assert target.read_bytes() == b"old\n"
    leftovers = local.find_temp_files(tmp_path, ".pile-tags")
    assert len(leftovers) == 1
    assert leftovers[0].read_bytes() == b"new\n"


def test_is_temp_file() -> None:
    assert local.is_temp_file(Path(".pile-tags.abc123.tmp"), ".pile-tags")
    assert not local.is_temp_file(Path(".pile-tags"), ".pile-tags")
    assert not local.is_temp_file(Path("notes.tmp"), ".pile-tags")


def test_rmtree(tmp_path: Path) -> None:
    tree = tmp_path / "proj"
    (tree / "nested").mkdir(parents=True)
    (tree / "nested" / "file.txt").write_text("x")

    local.rmtree(tree)
    assert not tree.exists()

    # Removing a non-existent tree is a no-op.
    local.rmtree(tree)


def test_atomic_write_uses_same_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[tuple[str, str]] = []
    real_replace = os.replace

    def _spy(src: str, dst: str) -> None:
        seen.append((src, str(dst)))
        real_replace(src, dst)

    monkeypatch.setattr(local.os, "replace", _spy)
    local.atomic_write(tmp_path / "record", b"x")

    assert len(seen) == 1
    assert Path(seen[0][0]).parent == tmp_path
