"""Tag record codec.

A project's tag set is stored as line-oriented UTF-8 text, one normalized tag
per line, with no header so the file stays human-editable::

    graphics
    hobby
    rust

Normalization lowercases, trims and deduplicates.  A string containing line
breaks is split into one tag per line, so ``decode(encode(tags))`` always
equals ``normalize(tags)``.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from pile.errors import CorruptMetadataError

ENCODING = "utf-8"


def normalize_tag(tag: str) -> str:
    """Normalize a single tag.  Returns ``""`` for blank input."""
    return tag.strip().lower()


def normalize(tags: Iterable[str]) -> frozenset[str]:
    """Lowercase, trim and deduplicate *tags*, dropping empty ones."""
    result: set[str] = set()
    for tag in tags:
        for line in tag.splitlines():
            normalized = normalize_tag(line)
            if normalized:
                result.add(normalized)
    return frozenset(result)


def encode(tags: Iterable[str]) -> bytes:
    """Serialize *tags* to record bytes (sorted, trailing newline)."""
    lines = sorted(normalize(tags))
    if not lines:
        return b""
    return ("\n".join(lines) + "\n").encode(ENCODING)


def decode(data: bytes) -> frozenset[str]:
    """Parse record bytes.  Raises ``CorruptMetadataError`` on non-text input."""
    try:
        text = data.decode(ENCODING)
    except UnicodeDecodeError as exc:
        msg = f"Tag record is not valid UTF-8: {exc}"
        raise CorruptMetadataError(msg) from exc

    if "\x00" in text:
        msg = "Tag record contains NUL bytes"
        raise CorruptMetadataError(msg)

    return normalize(text.splitlines())


def read_tags(path: Path) -> frozenset[str]:
    """Read and decode the record at *path*.  A missing file means no tags.

    Other ``OSError``s propagate to the caller unchanged.
    """
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        return frozenset()

    try:
        return decode(data)
    except CorruptMetadataError as exc:
        msg = f"{path}: {exc}"
        raise CorruptMetadataError(msg) from exc
