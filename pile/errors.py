"""Error kinds raised by the tagged-project store.

The core never prints or exits; it raises one of these and lets the caller
(the CLI) decide on messaging and exit codes.  Each kind also derives from
the closest builtin exception so generic ``except ValueError`` /
``except LookupError`` handlers keep working.
"""

from __future__ import annotations


class PileError(Exception):
    """Base class for all pile errors."""

    exit_code: int = 1


class InvalidNameError(PileError, ValueError):
    """Raised when a project name is empty, hidden, or contains a path separator."""

    exit_code = 2


class InvalidTagError(PileError, ValueError):
    """Raised when a tag normalizes to nothing."""

    exit_code = 2


class AlreadyExistsError(PileError, ValueError):
    """Raised when a project directory already exists on disk."""

    exit_code = 3


class NameCollisionError(InvalidNameError, AlreadyExistsError):
    """Raised when a name differs from an existing project only by case."""

    exit_code = 3


class NotFoundError(PileError, LookupError):
    """Raised when a project does not exist."""

    exit_code = 4


class CorruptMetadataError(PileError, ValueError):
    """Raised when a metadata record is not readable tag text."""

    exit_code = 5


class WorkspaceUnavailableError(PileError, RuntimeError):
    """Raised when the workspace root is missing or not writable."""

    exit_code = 6


class PileIOError(PileError):
    """Wraps a file-system error that no other kind covers.

    The original ``OSError`` is always chained as ``__cause__``.
    """

    exit_code = 7
