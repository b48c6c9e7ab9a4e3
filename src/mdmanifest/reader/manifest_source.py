"""Source backed by a persisted manifest file"""

import logging
from datetime import datetime, timezone
from pathlib import Path

from mdmanifest.config import Settings
from mdmanifest.core.models import (
    DocumentRecord, Manifest, ManifestPaths, ManifestStructure, TaskRecord,
)
from mdmanifest.reader.source import WorkspaceSource


LOGGER = logging.getLogger(__name__)


def read_manifest(path: Path) -> Manifest | None:
    """Return the manifest at path, or None if it is missing, unreadable, or invalid."""
    if not path.is_file():
        return None
    try:
        return Manifest.model_validate_json(path.read_text(encoding='utf-8'))
    except (OSError, ValueError) as e:
        LOGGER.warning("Ignoring unusable manifest %s: %s", path, e)
        return None


def _is_stale(manifest: Manifest, max_age: int, now: datetime | None = None) -> bool:
    if not max_age:
        return False
    generated = manifest.generated
    if generated.tzinfo is None:
        generated = generated.replace(tzinfo=timezone.utc)
    age = (now or datetime.now(timezone.utc)) - generated
    return age.total_seconds() > max_age


def load_manifest(settings: Settings, now: datetime | None = None) -> Manifest | None:
    """Load the first usable, fresh manifest: canonical location, then the public mirror."""
    for path in (settings.manifest_path, settings.public_manifest_path):
        manifest = read_manifest(path)
        if manifest is None:
            continue
        if _is_stale(manifest, settings.manifest_max_age, now):
            LOGGER.info("Manifest %s is older than %ds, ignoring", path, settings.manifest_max_age)
            continue
        LOGGER.debug("Loaded manifest from: %s", path)
        return manifest
    return None


class ManifestSource(WorkspaceSource):
    name = "manifest"

    def __init__(self, manifest: Manifest):
        self.manifest = manifest

    def documents(self) -> list[DocumentRecord]:
        return self.manifest.docs

    def task_files(self) -> list[DocumentRecord]:
        return self.manifest.tasks

    def tasks(self) -> list[TaskRecord]:
        return self.manifest.all_tasks

    def structure(self) -> ManifestStructure:
        return self.manifest.structure

    def paths(self) -> ManifestPaths:
        return self.manifest.paths
