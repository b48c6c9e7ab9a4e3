"""Source that scans the workspace on first use"""

from mdmanifest.config import Settings
from mdmanifest.core.models import (
    DocumentRecord, Manifest, ManifestPaths, ManifestStructure, TaskRecord,
)
from mdmanifest.core.pipeline import build_manifest
from mdmanifest.reader.source import WorkspaceSource


class LiveSource(WorkspaceSource):
    """Runs the same assembly as a build, in memory, once per instance."""

    name = "live"

    def __init__(self, settings: Settings):
        self.settings = settings
        self._snapshot: Manifest | None = None

    def _scan(self) -> Manifest:
        if self._snapshot is None:
            self._snapshot = build_manifest(self.settings)
        return self._snapshot

    def documents(self) -> list[DocumentRecord]:
        return self._scan().docs

    def task_files(self) -> list[DocumentRecord]:
        return self._scan().tasks

    def tasks(self) -> list[TaskRecord]:
        return self._scan().all_tasks

    def structure(self) -> ManifestStructure:
        return self._scan().structure

    def paths(self) -> ManifestPaths:
        return self._scan().paths
