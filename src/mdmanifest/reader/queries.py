"""Source selection and the read operations exposed to callers"""

import logging
from typing import Callable, TypeVar

from mdmanifest.config import Settings
from mdmanifest.core.models import DocumentRecord, StructureView, TaskGroup, TaskRecord
from mdmanifest.core.parse import MD_SUFFIX_RE
from mdmanifest.errors import ManifestReadError, NotFoundError, QueryError
from mdmanifest.reader.live_source import LiveSource
from mdmanifest.reader.manifest_source import ManifestSource, load_manifest
from mdmanifest.reader.source import WorkspaceSource


LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def open_source(settings: Settings) -> WorkspaceSource:
    """Pick the source once: a usable manifest when allowed, else a live scan.

    settings.source='manifest' raises ManifestReadError instead of falling back.
    """
    if settings.source == "live":
        return LiveSource(settings)

    manifest = load_manifest(settings)
    if manifest is not None:
        return ManifestSource(manifest)
    if settings.source == "manifest":
        raise ManifestReadError("No usable manifest found", path=settings.manifest_path, operation="load")

    LOGGER.info("No manifest found, falling back to live scan of %s", settings.target_dir)
    return LiveSource(settings)


def _query(operation: str, source: WorkspaceSource, fn: Callable[[], T]) -> T:
    """Run fn, converting a scan failure into a QueryError naming the operation."""
    try:
        return fn()
    except (OSError, ValueError) as e:
        LOGGER.error("Failed to %s from %s source: %s", operation, source.name, e)
        raise QueryError(f"Failed to {operation}: {e}", operation=operation) from e


def list_docs(source: WorkspaceSource) -> list[DocumentRecord]:
    return _query("list docs", source, source.documents)


def list_task_files(source: WorkspaceSource) -> list[DocumentRecord]:
    return _query("list task files", source, source.task_files)


def list_tasks(source: WorkspaceSource) -> list[TaskRecord]:
    return _query("list tasks", source, source.tasks)


def list_task_groups(source: WorkspaceSource) -> list[TaskGroup]:
    return _query("list task groups", source, source.task_groups)


def get_structure(source: WorkspaceSource) -> StructureView:
    def _view() -> StructureView:
        structure = source.structure()
        return StructureView(docs=structure.docs, tasks=structure.tasks, paths=source.paths())

    return _query("get structure", source, _view)


def _slug(value: str) -> str:
    """Normalize a lookup key: 'sprint/week1.md' and '/sprint/week1' both mean 'sprint/week1'."""
    return MD_SUFFIX_RE.sub('', value.strip().strip('/'))


def get_doc(source: WorkspaceSource, slug: str) -> DocumentRecord:
    """Return the document with the given slug; raises NotFoundError if there is none."""
    key = _slug(slug)
    for doc in list_docs(source):
        if doc.slug == key:
            return doc
    raise NotFoundError(f"No document with slug '{key}'", path=key, operation="get doc")


def get_task_group(source: WorkspaceSource, slug: str) -> TaskGroup:
    """Return the task group of one task file; raises NotFoundError if it has no tasks or does not exist."""
    key = _slug(slug)
    for group in list_task_groups(source):
        if group.id == key:
            return group
    raise NotFoundError(f"No task group '{key}'", path=key, operation="get task group")
