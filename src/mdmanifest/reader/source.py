"""Read-side interface shared by manifest-backed and live-scan sources"""

from abc import ABC, abstractmethod

from mdmanifest.core.models import (
    DocumentRecord, ManifestPaths, ManifestStructure, TaskGroup, TaskRecord,
)
from mdmanifest.core.tasks import group_tasks


class WorkspaceSource(ABC):
    """Serves docs, task files, tasks, and structure. Implementations must return identical shapes."""

    name: str = "source"

    @abstractmethod
    def documents(self) -> list[DocumentRecord]:
        raise NotImplementedError

    @abstractmethod
    def task_files(self) -> list[DocumentRecord]:
        raise NotImplementedError

    @abstractmethod
    def tasks(self) -> list[TaskRecord]:
        raise NotImplementedError

    @abstractmethod
    def structure(self) -> ManifestStructure:
        raise NotImplementedError

    @abstractmethod
    def paths(self) -> ManifestPaths:
        raise NotImplementedError

    def task_groups(self) -> list[TaskGroup]:
        return group_tasks(self.task_files(), self.tasks())
