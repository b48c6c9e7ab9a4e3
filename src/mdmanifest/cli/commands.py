"""CLI command implementations"""

import json
import logging
from typing import Annotated, Any, Optional

import typer

from mdmanifest.config import Settings, load_config
from mdmanifest.core.pipeline import run_build
from mdmanifest.errors import ManifestReadError, ManifestWriteError, NotFoundError, QueryError
from mdmanifest.reader.queries import (
    get_doc,
    get_structure,
    get_task_group,
    list_docs,
    list_task_groups,
    list_tasks,
    open_source,
)
from mdmanifest.reader.source import WorkspaceSource


Workspace = Annotated[Optional[str], typer.Option("--workspace", "-w", help="Workspace root (or set MDMANIFEST_WORKSPACE_ROOT)")]
Source = Annotated[Optional[str], typer.Option("--source", help="auto, live or manifest")]
Verbose = Annotated[bool, typer.Option("--verbose", "-v", help="Verbose logging")]


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _source(settings: Settings) -> WorkspaceSource:
    try:
        return open_source(settings)
    except ManifestReadError as e:
        _fail("No manifest available", e)


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def build_cmd(workspace: Workspace = None, verbose: Verbose = False):
    """Scan docs and tasks and write the manifest."""
    _setup_logging(verbose)
    settings = _settings(overrides={"workspace_root": workspace})
    try:
        manifest, written = run_build(settings)
    except (ManifestWriteError, OSError) as e:
        _fail("Build failed", e)
    typer.echo(
        f"Manifest generated with {len(manifest.docs)} docs, "
        f"{len(manifest.tasks)} task files and {len(manifest.all_tasks)} tasks"
    )
    for path in written:
        typer.echo(f"  -> {path}")


def docs_cmd(workspace: Workspace = None, source: Source = None, verbose: Verbose = False):
    """Print document records as JSON."""
    _setup_logging(verbose)
    src = _source(_settings(overrides={"workspace_root": workspace, "source": source}))
    try:
        docs = list_docs(src)
    except QueryError as e:
        _fail("Failed to fetch docs", e)
    _echo_json([d.model_dump(mode="json") for d in docs])


def doc_cmd(
    slug: Annotated[str, typer.Argument(help="Document slug, e.g. guide or reference/api")],
    workspace: Workspace = None,
    source: Source = None,
    verbose: Verbose = False,
    ):
    """Print one document record as JSON."""
    _setup_logging(verbose)
    src = _source(_settings(overrides={"workspace_root": workspace, "source": source}))
    try:
        doc = get_doc(src, slug)
    except (NotFoundError, QueryError) as e:
        _fail("Failed to fetch doc", e)
    _echo_json(doc.model_dump(mode="json"))


def tasks_cmd(
    workspace: Workspace = None,
    source: Source = None,
    groups: Annotated[bool, typer.Option("--groups", help="Group tasks by owning file")] = False,
    verbose: Verbose = False,
    ):
    """Print extracted tasks (or per-file task groups) as JSON."""
    _setup_logging(verbose)
    src = _source(_settings(overrides={"workspace_root": workspace, "source": source}))
    try:
        items = list_task_groups(src) if groups else list_tasks(src)
    except QueryError as e:
        _fail("Failed to fetch tasks", e)
    _echo_json([i.model_dump(mode="json") for i in items])


def group_cmd(
    slug: Annotated[str, typer.Argument(help="Task file slug, e.g. todo or sprint/week1")],
    workspace: Workspace = None,
    source: Source = None,
    verbose: Verbose = False,
    ):
    """Print the task group of one task file as JSON."""
    _setup_logging(verbose)
    src = _source(_settings(overrides={"workspace_root": workspace, "source": source}))
    try:
        group = get_task_group(src, slug)
    except (NotFoundError, QueryError) as e:
        _fail("Failed to fetch task group", e)
    _echo_json(group.model_dump(mode="json"))


def structure_cmd(workspace: Workspace = None, source: Source = None, verbose: Verbose = False):
    """Print the docs and tasks directory trees as JSON."""
    _setup_logging(verbose)
    src = _source(_settings(overrides={"workspace_root": workspace, "source": source}))
    try:
        view = get_structure(src)
    except QueryError as e:
        _fail("Failed to fetch directory structure", e)
    _echo_json(view.model_dump(mode="json"))
