"""Project CRUD operations.

Encapsulates all project data access: create, list, get, tag, remove.  The
workspace directory tree is the database::

    {workspace}/{name}/             project directory
    {workspace}/{name}/.pile-tags   tag record (see ``pile.store.codec``)

A project exists iff its directory exists.  A missing tag record means the
project has no tags.  Every record write goes through ``atomic_write`` so a
crash never leaves a half-written record behind.
"""

from __future__ import annotations

import contextlib
import os
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

from loguru import logger

from pile.errors import (
    AlreadyExistsError,
    CorruptMetadataError,
    InvalidNameError,
    InvalidTagError,
    NameCollisionError,
    NotFoundError,
    PileError,
    PileIOError,
    WorkspaceUnavailableError,
)
from pile.models import Project
from pile.store.codec import encode, normalize, normalize_tag, read_tags
from pile.store.local import atomic_write, find_temp_files, rmtree

DEFAULT_METADATA_FILENAME = ".pile-tags"

_SEPARATORS = frozenset({"/", "\\", os.sep} | ({os.altsep} if os.altsep else set()))


def clean_name(name: str) -> str:
    """Trim surrounding whitespace and replace inner spaces with ``-``."""
    return name.strip().replace(" ", "-")


def validate_name(name: str) -> None:
    """Raise ``InvalidNameError`` unless *name* can be a project directory name."""
    if not name:
        msg = "Project name cannot be empty"
        raise InvalidNameError(msg)
    if any(sep in name for sep in _SEPARATORS):
        msg = f"Project name may not contain a path separator: {name!r}"
        raise InvalidNameError(msg)
    if name.startswith("."):
        msg = f"Project name may not start with '.': {name!r}"
        raise InvalidNameError(msg)
    if "\x00" in name:
        msg = f"Project name may not contain NUL: {name!r}"
        raise InvalidNameError(msg)


@contextlib.contextmanager
def _io_errors(action: str) -> Iterator[None]:
    """Re-raise unclassified ``OSError``s as ``PileIOError``."""
    try:
        yield
    except PileError:
        raise
    except OSError as exc:
        msg = f"Failed to {action}: {exc}"
        raise PileIOError(msg) from exc


class ProjectStore:
    """Owns the project directories under one workspace root.

    The workspace is passed in explicitly; the store never reads the
    environment.  Construction fails with ``WorkspaceUnavailableError`` if
    the root is missing or not writable.
    """

    def __init__(self, workspace: str | Path, metadata_filename: str = DEFAULT_METADATA_FILENAME) -> None:
        root = Path(workspace)
        if not root.is_dir():
            msg = f"Workspace does not exist or is not a directory: {root}"
            raise WorkspaceUnavailableError(msg)
        if not os.access(root, os.W_OK | os.X_OK):
            msg = f"Workspace is not writable: {root}"
            raise WorkspaceUnavailableError(msg)
        self._root = root
        self._metadata_filename = metadata_filename

    @property
    def workspace(self) -> Path:
        return self._root

    def _project_dir(self, name: str) -> Path:
        return self._root / name

    def _record_path(self, name: str) -> Path:
        return self._project_dir(name) / self._metadata_filename

    def _require_dir(self, name: str) -> Path:
        validate_name(name)
        path = self._project_dir(name)
        if not path.is_dir():
            raise NotFoundError(name)
        return path

    def _load(self, name: str, path: Path) -> Project:
        tags = read_tags(self._record_path(name))
        return Project(name=name, path=path, tags=tags)

    def _write_tags(self, name: str, tags: Iterable[str]) -> Project:
        name = clean_name(name)
        path = self._require_dir(name)
        normalized = normalize(tags)
        with _io_errors(f"write tags for '{name}'"):
            atomic_write(self._record_path(name), encode(normalized))
        logger.debug("Wrote tags for {}: {}", name, sorted(normalized))
        return Project(name=name, path=path, tags=normalized)

    # -- Create ----------------------------------------------------------------

    def create_project(
        self,
        name: str,
        tags: Iterable[str] = (),
        *,
        readme: bool = False,
        populate: Callable[[Path], None] | None = None,
    ) -> Project:
        """Create a project directory with an initial tag record.

        *populate* is called with the new, still empty directory before the
        tag record is written (``git clone URL <dir>`` needs an empty target).
        If it raises, the directory is removed again.

        Raises ``InvalidNameError`` for unusable names, ``AlreadyExistsError``
        if the directory exists, and ``NameCollisionError`` (both of the
        above) if the name differs from an existing project only by case.
        """
        name = clean_name(name)
        validate_name(name)
        path = self._project_dir(name)

        if path.exists():
            raise AlreadyExistsError(name)

        folded = name.casefold()
        for existing in self._iter_names():
            if existing.casefold() == folded:
                msg = f"{name} (collides with existing project '{existing}')"
                raise NameCollisionError(msg)

        normalized = normalize(tags)
        logger.info("Creating project {} at {}", name, path)
        with _io_errors(f"create project '{name}'"):
            try:
                path.mkdir()
            except FileExistsError:
                raise AlreadyExistsError(name) from None
            try:
                if populate is not None:
                    populate(path)
                atomic_write(self._record_path(name), encode(normalized))
                readme_path = path / "README.md"
                if readme and not readme_path.exists():
                    readme_path.write_text(f"# {name}\n", encoding="utf-8")
            except BaseException:
                # Don't leave a half-initialised project behind.
                with contextlib.suppress(OSError):
                    rmtree(path)
                raise

        return Project(name=name, path=path, tags=normalized)

    # -- Read ------------------------------------------------------------------

    def _iter_names(self) -> Iterator[str]:
        with _io_errors("scan workspace"):
            entries = list(self._root.iterdir())
        for entry in entries:
            if entry.name.startswith(".") or not entry.is_dir():
                continue
            yield entry.name

    def iter_projects(self) -> Iterator[Project]:
        """Yield projects in name order, loading each record as it is reached.

        Entries that are not valid project names, or whose record is corrupt
        or unreadable, are skipped with a warning.
        """
        for name in sorted(self._iter_names()):
            try:
                validate_name(name)
            except InvalidNameError as exc:
                logger.warning("Skipping workspace entry {!r}: {}", name, exc)
                continue
            try:
                yield self._load(name, self._project_dir(name))
            except CorruptMetadataError as exc:
                logger.warning("Skipping project {}: {}", name, exc)
            except OSError as exc:
                logger.warning("Skipping project {}: cannot read tags ({})", name, exc)

    def list_projects(self) -> list[Project]:
        """List all projects, sorted by name."""
        return list(self.iter_projects())

    def get_project(self, name: str) -> Project:
        """Get a project by name.  Raises ``NotFoundError`` if missing.

        Lookups clean *name* the way ``create_project`` does, so ``"my thesis"``
        finds the project created as ``my-thesis``.
        """
        name = clean_name(name)
        path = self._require_dir(name)
        with _io_errors(f"read tags for '{name}'"):
            return self._load(name, path)

    def exists(self, name: str) -> bool:
        name = clean_name(name)
        try:
            validate_name(name)
        except InvalidNameError:
            return False
        return self._project_dir(name).is_dir()

    def project_path(self, name: str) -> Path:
        """Return the directory of an existing project."""
        name = clean_name(name)
        return self._require_dir(name)

    # -- Update ----------------------------------------------------------------

    def set_tags(self, name: str, tags: Iterable[str]) -> Project:
        """Replace the tag set of a project."""
        return self._write_tags(name, tags)

    def add_tag(self, name: str, tag: str) -> Project:
        """Add *tag* to a project.  Adding a tag twice is a no-op."""
        new_tags = normalize([tag])
        if not new_tags:
            msg = f"Tag cannot be empty: {tag!r}"
            raise InvalidTagError(msg)

        project = self.get_project(name)
        if new_tags <= project.tags:
            return project
        return self._write_tags(name, project.tags | new_tags)

    def remove_tag(self, name: str, tag: str) -> Project:
        """Remove *tag* from a project.  Removing an absent tag is a no-op."""
        normalized = normalize_tag(tag)
        if not normalized:
            msg = f"Tag cannot be empty: {tag!r}"
            raise InvalidTagError(msg)

        project = self.get_project(name)
        if normalized not in project.tags:
            return project
        return self._write_tags(name, project.tags - {normalized})

    # -- Delete ----------------------------------------------------------------

    def remove_project(self, name: str) -> None:
        """Delete a project directory and everything in it.  Irreversible."""
        name = clean_name(name)
        path = self._require_dir(name)
        logger.info("Removing project {} at {}", name, path)
        with _io_errors(f"remove project '{name}'"):
            rmtree(path)

    def prune(self) -> list[Path]:
        """Delete temp record files left behind by interrupted writes."""
        removed: list[Path] = []
        for name in self._iter_names():
            directory = self._project_dir(name)
            with _io_errors(f"scan project '{name}'"):
                leftovers = find_temp_files(directory, self._metadata_filename)
            for leftover in leftovers:
                logger.warning("Pruning orphaned tag record {}", leftover)
                with _io_errors(f"remove {leftover}"):
                    leftover.unlink(missing_ok=True)
                removed.append(leftover)
        return removed
