"""Data models for scanned files, parsed documents, tasks, and the manifest"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_serializer


TaskStatus = Literal["todo", "done"]
TaskType = Literal["epic", "story", "bug", "doc", "custom"]

FOLDER_TASK_TYPES: dict[str, TaskType] = {
    "epics":   "epic",
    "stories": "story",
    "bugs":    "bug",
    "docs":    "doc",
}


def task_type_for(slug: str) -> TaskType:
    """Classify a task file by the top-level folder it sits in under the tasks root.

    Files directly in the root are "doc"; unknown folders are "custom".
    """
    folder, sep, _ = slug.partition("/")
    if not sep:
        return "doc"
    return FOLDER_TASK_TYPES.get(folder, "custom")


@dataclass(frozen=True)
class ScannedFile:
    """A markdown file found by the scanner; not persisted."""
    path:          Path     # absolute path on disk
    relative_path: str      # POSIX path relative to the workspace
    root_path:     str      # POSIX path relative to the scanned root


class DocumentRecord(BaseModel):
    """One parsed Markdown/MDX file."""
    slug:     str                   # root-relative path without extension
    filename: str
    filepath: str                   # workspace-relative path
    content:  str                   # body without frontmatter
    metadata: dict[str, Any] = {}
    excerpt:  str


class TaskRecord(BaseModel):
    """One checkbox line extracted from a task file."""
    id:        str
    title:     str
    completed: bool
    line:      int                  # 1-based, relative to the body
    file:      str

    @computed_field
    @property
    def status(self) -> TaskStatus:
        return "done" if self.completed else "todo"


class DirectoryNode(BaseModel):
    """One level of a scanned tree: direct files and named child folders."""
    files:   list[str] = Field(default_factory=list)
    folders: dict[str, "DirectoryNode"] = Field(default_factory=dict)

    @model_serializer(mode="wrap")
    def omit_empty_keys(self, handler):
        # an empty level serializes as {}
        return {k: v for k, v in handler(self).items() if v}


class ManifestPaths(BaseModel):
    target: str
    docs:   str
    tasks:  str


class ManifestStructure(BaseModel):
    docs:  DirectoryNode = Field(default_factory=DirectoryNode)
    tasks: DirectoryNode = Field(default_factory=DirectoryNode)


class Manifest(BaseModel):
    """Top-level aggregate written to disk by a build."""
    model_config = ConfigDict(populate_by_name=True)

    generated: datetime
    paths:     ManifestPaths
    docs:      list[DocumentRecord] = Field(default_factory=list)
    tasks:     list[DocumentRecord] = Field(default_factory=list)
    structure: ManifestStructure = Field(default_factory=ManifestStructure)
    all_tasks: list[TaskRecord] = Field(default_factory=list, alias="allTasks")


class TaskGroup(BaseModel):
    """Tasks of a single task file with aggregate counts."""
    id:       str                   # slug of the owning file
    name:     str
    file:     str
    metadata: dict[str, Any] = {}
    tasks:    list[TaskRecord] = Field(default_factory=list)

    @computed_field
    @property
    def type(self) -> TaskType:
        return task_type_for(self.id)

    @computed_field
    @property
    def total(self) -> int:
        return len(self.tasks)

    @computed_field
    @property
    def completed(self) -> int:
        return sum(1 for t in self.tasks if t.completed)

    @computed_field
    @property
    def pending(self) -> int:
        return self.total - self.completed


class StructureView(BaseModel):
    """Directory trees of both roots plus the paths they were scanned from."""
    docs:  DirectoryNode
    tasks: DirectoryNode
    paths: ManifestPaths
