"""On-disk record format and atomic file primitives."""

from pile.store.codec import decode, encode, normalize, read_tags
from pile.store.local import atomic_write, rmtree

__all__ = ["atomic_write", "decode", "encode", "normalize", "read_tags", "rmtree"]
