from __future__ import annotations

import contextlib
import subprocess
from collections.abc import Callable, Iterator
from pathlib import Path

import click

from pile.errors import (
    AlreadyExistsError,
    CorruptMetadataError,
    InvalidNameError,
    InvalidTagError,
    NotFoundError,
    PileError,
    PileIOError,
    WorkspaceUnavailableError,
)
from pile.managers.projects import ProjectStore
from pile.models import MatchMode, Project
from pile.search.engine import QueryEngine

# Most specific first: NameCollisionError is both InvalidName and AlreadyExists.
_ERROR_MESSAGES: list[tuple[type[PileError], str]] = [
    (AlreadyExistsError, "The project name is already in use"),
    (InvalidNameError, "Invalid project name"),
    (InvalidTagError, "Invalid tag"),
    (NotFoundError, "Such a project does not exist"),
    (CorruptMetadataError, "Corrupt tag record"),
    (WorkspaceUnavailableError, "Workspace unavailable"),
    (PileIOError, "An IO error occurred"),
]


class _PileCommandError(click.ClickException):
    def __init__(self, message: str, exit_code: int) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@contextlib.contextmanager
def _handle_errors() -> Iterator[None]:
    """Translate core errors into a message on stderr and a per-kind exit code."""
    try:
        yield
    except PileError as exc:
        prefix = next((text for kind, text in _ERROR_MESSAGES if isinstance(exc, kind)), "An error occurred")
        raise _PileCommandError(f"{prefix}: {exc}", exc.exit_code) from exc


def _store(ctx: click.Context) -> ProjectStore:
    workspace: Path | None = ctx.obj["workspace"]
    if workspace is None:
        raise _PileCommandError(
            "No workspace configured. Set PILE_WORKSPACE or pass --workspace.",
            WorkspaceUnavailableError.exit_code,
        )
    with _handle_errors():
        return ProjectStore(workspace, metadata_filename=ctx.obj["settings"].metadata_filename)


def _engine(ctx: click.Context) -> QueryEngine:
    return QueryEngine(_store(ctx))


def _git_clone(url: str) -> Callable[[Path], None]:
    def _clone(target: Path) -> None:
        try:
            subprocess.run(["git", "clone", url, str(target)], check=True)  # noqa: S603, S607
        except (OSError, subprocess.CalledProcessError) as exc:
            msg = f"Cloning {url} failed: {exc}"
            raise PileIOError(msg) from exc

    return _clone


def _print_table(projects: list[Project]) -> None:
    rows = [(p.name, ", ".join(p.sorted_tags)) for p in projects]
    width = max(len("Project name"), *(len(name) for name, _ in rows))
    click.echo(f"{'Project name':<{width}}  Tags")
    for name, tags in rows:
        click.echo(f"{name:<{width}}  {tags}".rstrip())


@click.group()
@click.option(
    "--workspace",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Workspace root (default: from PILE_WORKSPACE).",
)
@click.pass_context
def main(ctx: click.Context, workspace: Path | None) -> None:
    """Pile - organize your projects from the command line."""
    from pile.log import setup_logging
    from pile.settings import get_settings

    settings = get_settings()
    setup_logging(settings.log_level)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["workspace"] = workspace.expanduser() if workspace else settings.workspace


# ---------------------------------------------------------------------------
# Project lifecycle
# ---------------------------------------------------------------------------


@main.command()
@click.argument("name")
@click.argument("tags", nargs=-1, metavar="[SUBJECT TAGS]...")
@click.option("--readme", "-r", is_flag=True, default=False, help="Generate a README.md.")
@click.option("--clone", "-c", default=None, metavar="URL", help="Clone a git repository into the new directory.")
@click.pass_context
def add(ctx: click.Context, name: str, tags: tuple[str, ...], readme: bool, clone: str | None) -> None:
    """Add a project and create a directory for it."""
    store = _store(ctx)
    populate = _git_clone(clone) if clone else None
    with _handle_errors():
        project = store.create_project(name, tags, readme=readme, populate=populate)

    click.echo("Project created")
    click.echo(str(project.path))


@main.command()
@click.argument("name", metavar="PROJECT_NAME")
@click.option("--yes", "-y", is_flag=True, default=False, help="Do not ask for confirmation.")
@click.pass_context
def remove(ctx: click.Context, name: str, yes: bool) -> None:
    """Delete a project directory and everything in it."""
    store = _store(ctx)
    with _handle_errors():
        path = store.project_path(name)
        if not yes:
            click.confirm(f"Permanently delete {path} and all of its contents?", abort=True)
        store.remove_project(name)
    click.echo(f'The project "{path.name}" was removed')


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


@main.command()
@click.argument("name", metavar="PROJECT_NAME")
@click.argument("tag")
@click.pass_context
def tag(ctx: click.Context, name: str, tag: str) -> None:
    """Add a tag to a project."""
    store = _store(ctx)
    with _handle_errors():
        project = store.add_tag(name, tag)
    click.echo(f"{project.name}: {', '.join(project.sorted_tags)}")


@main.command()
@click.argument("name", metavar="PROJECT_NAME")
@click.argument("tag")
@click.pass_context
def untag(ctx: click.Context, name: str, tag: str) -> None:
    """Remove a tag from a project."""
    store = _store(ctx)
    with _handle_errors():
        project = store.remove_tag(name, tag)
    click.echo(f"{project.name}: {', '.join(project.sorted_tags)}")


@main.command()
@click.pass_context
def tags(ctx: click.Context) -> None:
    """List every tag with its number of projects."""
    engine = _engine(ctx)
    with _handle_errors():
        counts = engine.tag_counts()
    if not counts:
        click.echo("No tags were found.")
        return
    for name, count in counts.items():
        click.echo(f"{name} ({count})")


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


@main.command(name="list")
@click.option("--name", "-n", default=None, help="Filter by project name.")
@click.option("--tag", "-t", default=None, help="Filter by tag name.")
@click.pass_context
def list_(ctx: click.Context, name: str | None, tag: str | None) -> None:
    """List all projects."""
    engine = _engine(ctx)
    with _handle_errors():
        projects = engine.filter_projects(name=name, tag=tag)
    if not projects:
        click.echo("No projects were found.")
        return
    _print_table(projects)


@main.command()
@click.argument("terms", nargs=-1, metavar="[TAGS]...")
@click.option(
    "--any/--all",
    "match_any",
    default=False,
    help="Match projects carrying any of the tags, or all of them (default).",
)
@click.pass_context
def find(ctx: click.Context, terms: tuple[str, ...], match_any: bool) -> None:
    """Find projects by tag, best match first."""
    engine = _engine(ctx)
    mode = MatchMode.ANY if match_any else MatchMode.ALL
    with _handle_errors():
        hits = engine.rank(terms, mode)
    if not hits:
        click.echo("No projects were found.")
        return
    width = max(len(hit.project.name) for hit in hits)
    for hit in hits:
        click.echo(f"{hit.project.name:<{width}}  {', '.join(hit.project.sorted_tags)}".rstrip())


@main.command(context_settings={"ignore_unknown_options": True})
@click.argument("name", metavar="PROJECT_NAME")
@click.option("--execute", "-x", is_flag=True, default=False, help="Run COMMAND inside the project directory.")
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def path(ctx: click.Context, name: str, execute: bool, command: tuple[str, ...]) -> None:
    """Print the path of a project directory.

    With --execute, run COMMAND inside the project directory and exit with its
    status.
    """
    store = _store(ctx)
    with _handle_errors():
        project_dir = store.project_path(name)
    if command and not execute:
        msg = f"Unexpected arguments {' '.join(command)!r}; use --execute to run a command."
        raise click.UsageError(msg)
    click.echo(str(project_dir))

    if execute and command:
        try:
            result = subprocess.run(list(command), cwd=project_dir, check=False)  # noqa: S603
        except OSError as exc:
            msg = f"Could not run {command[0]}: {exc}"
            raise _PileCommandError(msg, PileIOError.exit_code) from exc
        ctx.exit(result.returncode)


# ---------------------------------------------------------------------------
# File manager / browser
# ---------------------------------------------------------------------------


@main.command(name="open")
@click.argument("name", metavar="PROJECT_NAME")
@click.pass_context
def open_(ctx: click.Context, name: str) -> None:
    """Open a project in a file manager."""
    store = _store(ctx)
    with _handle_errors():
        project_dir = store.project_path(name)
    click.launch(str(project_dir))


@main.command()
@click.pass_context
def workspace(ctx: click.Context) -> None:
    """Open the workspace in a file manager."""
    store = _store(ctx)
    click.launch(str(store.workspace))


@main.command()
@click.pass_context
def doc(ctx: click.Context) -> None:
    """Open the documentation in a web browser."""
    url = ctx.obj["settings"].docs_url
    click.echo(f"Documentation can be found at: {url}")
    click.launch(url)


# ---------------------------------------------------------------------------
# Maintenance
# ---------------------------------------------------------------------------


@main.command()
@click.pass_context
def prune(ctx: click.Context) -> None:
    """Delete tag record leftovers from interrupted writes."""
    store = _store(ctx)
    with _handle_errors():
        removed = store.prune()
    for leftover in removed:
        click.echo(f"Removed {leftover}")
    click.echo(f"Pruned {len(removed)} file(s).")


if __name__ == "__main__":
    main()
