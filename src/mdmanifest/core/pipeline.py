"""Pipeline step functions: scan, parse, extract, and manifest assembly"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from mdmanifest.config import Settings
from mdmanifest.core.export import write_manifest
from mdmanifest.core.models import (
    DirectoryNode, DocumentRecord, Manifest, ManifestPaths,
    ManifestStructure, TaskRecord,
)
from mdmanifest.core.parse import parse_file
from mdmanifest.core.scan import build_structure, scan_markdown_files
from mdmanifest.core.tasks import extract_tasks


LOGGER = logging.getLogger(__name__)

_BUILD_LOCK = threading.Lock()


@dataclass
class RootScan:
    """Everything collected from one root (docs or tasks)."""
    documents: list[DocumentRecord] = field(default_factory=list)
    tasks:     list[TaskRecord] = field(default_factory=list)
    structure: DirectoryNode = field(default_factory=DirectoryNode)
    skipped:   list[str] = field(default_factory=list)


def collect_root(root: Path, settings: Settings, extract: bool = False) -> RootScan:
    """Scan root and parse each file, skipping (and logging) files that fail.

    With extract=True checkbox tasks are pulled from every parsed body.
    """
    files = scan_markdown_files(root, base=settings.target_dir, skip_dirs=settings.skip_dirs)
    result = RootScan(structure=build_structure(f.root_path for f in files))
    for f in files:
        try:
            doc = parse_file(f, settings.excerpt_length, settings.excerpt_separator)
        except (OSError, UnicodeDecodeError, ValueError) as e:
            LOGGER.warning("Skipping %s: %s", f.relative_path, e)
            result.skipped.append(f.relative_path)
            continue
        result.documents.append(doc)
        if extract:
            result.tasks.extend(extract_tasks(doc.content, f.root_path))
    LOGGER.debug("Collected %d of %d file(s) under %s", len(result.documents), len(files), root)
    return result


def build_manifest(settings: Settings, now: datetime | None = None) -> Manifest:
    """Scan the docs and tasks roots and assemble a Manifest."""
    docs = collect_root(settings.docs_path, settings)
    tasks = collect_root(settings.tasks_path, settings, extract=True)
    return Manifest(
        generated=now or datetime.now(timezone.utc),
        paths=ManifestPaths(
            target=str(settings.target_dir),
            docs=str(settings.docs_path),
            tasks=str(settings.tasks_path),
        ),
        docs=docs.documents,
        tasks=tasks.documents,
        structure=ManifestStructure(docs=docs.structure, tasks=tasks.structure),
        all_tasks=tasks.tasks,
    )


def run_build(settings: Settings) -> tuple[Manifest, list[Path]]:
    """Build and persist the manifest. Returns (manifest, written_paths).

    Concurrent callers in one process are serialized. Raises
    ManifestWriteError when the canonical manifest cannot be written.
    """
    with _BUILD_LOCK:
        manifest = build_manifest(settings)
        written = write_manifest(manifest, settings)
    LOGGER.info(
        "Manifest generated with %d docs, %d task files and %d tasks",
        len(manifest.docs), len(manifest.tasks), len(manifest.all_tasks),
    )
    return manifest, written
