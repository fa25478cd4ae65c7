"""Local filesystem primitives for the project store.

Writes are atomic: data is written to a temporary file in the same directory,
flushed to disk, then renamed over the target path.  A reader (or the next
process) sees either the old file or the new one in full, never a partial
write, even if the process dies between the two steps.

Temporary files are named ``{target}.{random}.tmp`` so leftovers from an
interrupted write can be recognised and pruned.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import tempfile
from pathlib import Path

TMP_SUFFIX = ".tmp"


def atomic_write(path: Path, data: bytes) -> None:
    """Write data atomically: temp file + fsync + rename.

    The temp file is created in the same directory so ``os.replace`` is
    atomic on POSIX and replaces an existing target on Windows.
    """
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f"{path.name}.", suffix=TMP_SUFFIX)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up temp file on any failure.
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise


def is_temp_file(path: Path, target_name: str) -> bool:
    """Return True if *path* looks like an ``atomic_write`` leftover for *target_name*."""
    name = path.name
    return name.startswith(f"{target_name}.") and name.endswith(TMP_SUFFIX)


def find_temp_files(directory: Path, target_name: str) -> list[Path]:
    """List leftover temp files for *target_name* inside *directory*."""
    return sorted(p for p in directory.iterdir() if p.is_file() and is_temp_file(p, target_name))


def rmtree(path: Path) -> None:
    """Remove directory tree.  No-op if path doesn't exist."""
    if path.exists():
        shutil.rmtree(path)
