"""Unit tests for the tag record codec."""

from __future__ import annotations

from pathlib import Path

import pytest

from pile.errors import CorruptMetadataError
from pile.store.codec import decode, encode, normalize, normalize_tag, read_tags


def test_normalize_lowercases_trims_and_dedupes() -> None:
    assert normalize(["Python", " python ", "PYTHON", "Rust"]) == frozenset({"python", "rust"})


def test_normalize_drops_blank_tags() -> None:
    assert normalize(["", "   ", "\n", "x"]) == frozenset({"x"})


def test_normalize_splits_multiline_tags() -> None:
    """A tag can never span two lines of the record."""
    assert normalize(["a\nB", "c\r\nd"]) == frozenset({"a", "b", "c", "d"})


def test_normalize_tag() -> None:
    assert normalize_tag("  Machine-Learning ") == "machine-learning"
    assert normalize_tag("   ") == ""


def test_encode_is_sorted_one_tag_per_line() -> None:
    assert encode({"web", "Api", "backend"}) == b"api\nbackend\nweb\n"


def test_encode_empty() -> None:
    assert encode(set()) == b""
    assert encode(["", " "]) == b""


def test_decode_ignores_blank_lines_and_case() -> None:
    assert decode(b"\nPython\n\n  rust  \r\npython\n") == frozenset({"python", "rust"})


def test_decode_empty() -> None:
    assert decode(b"") == frozenset()


def test_decode_unicode() -> None:
    assert decode("Café\nnaïve\n".encode()) == frozenset({"café", "naïve"})


@pytest.mark.parametrize(
    "tags",
    [
        set(),
        {"x"},
        {"X", "x", " x "},
        {"Data Science", "ml", "ML"},
        {"multi\nline", "Ümlaut"},
    ],
)
def test_roundtrip_equals_normalize(tags: set[str]) -> None:
    assert decode(encode(tags)) == normalize(tags)


def test_decode_rejects_invalid_utf8() -> None:
    with pytest.raises(CorruptMetadataError):
        decode(b"python\n\xff\xfe\x00garbage")


def test_decode_rejects_nul_bytes() -> None:
    with pytest.raises(CorruptMetadataError):
        decode(b"python\x00rust\n")


def test_read_tags_missing_file_is_empty(tmp_path: Path) -> None:
    assert read_tags(tmp_path / "absent") == frozenset()


def test_read_tags_corrupt_file_names_path(tmp_path: Path) -> None:
    record = tmp_path / ".pile-tags"
    record.write_bytes(b"\xff\xff")

    with pytest.raises(CorruptMetadataError, match=".pile-tags"):
        read_tags(record)


def test_read_tags_is_distinct_from_missing(tmp_path: Path) -> None:
    """An empty record and a missing record both mean 'no tags'."""
    record = tmp_path / ".pile-tags"
    record.write_bytes(b"")
    assert read_tags(record) == frozenset()
