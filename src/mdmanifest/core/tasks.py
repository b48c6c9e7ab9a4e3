"""Checkbox task extraction and per-file task grouping"""

import posixpath
import re
from typing import Iterable

from mdmanifest.core.models import DocumentRecord, TaskGroup, TaskRecord


TASK_RE = re.compile(r'^\s*-\s*\[([^\]]?)\](?:\s+(.*))?$')


def extract_tasks(content: str, file: str) -> list[TaskRecord]:
    """Return one TaskRecord per '- [ ]' / '- [x]' line, in line order.

    Ids are '<file>-L<line>' with 1-based body line numbers, so they shift
    when lines are inserted above a task.
    """
    tasks = []
    for index, line in enumerate(content.split('\n'), start=1):
        m = TASK_RE.match(line)
        if not m:
            continue
        tasks.append(TaskRecord(
            id=f"{file}-L{index}",
            title=(m.group(2) or '').strip(),
            completed=m.group(1) in ('x', 'X'),
            line=index,
            file=file,
        ))
    return tasks


def root_relative(doc: DocumentRecord) -> str:
    """Path of doc relative to its scanned root, as passed to extract_tasks."""
    return posixpath.join(posixpath.dirname(doc.slug), doc.filename)


def group_tasks(task_files: Iterable[DocumentRecord], tasks: Iterable[TaskRecord]) -> list[TaskGroup]:
    """Group tasks under their owning file; files without tasks are left out."""
    by_file: dict[str, list[TaskRecord]] = {}
    for task in tasks:
        by_file.setdefault(task.file, []).append(task)

    groups = []
    for doc in task_files:
        owned = by_file.get(root_relative(doc))
        if not owned:
            continue
        groups.append(TaskGroup(
            id=doc.slug,
            name=str(doc.metadata.get('title') or doc.filename),
            file=doc.filepath,
            metadata=doc.metadata,
            tasks=sorted(owned, key=lambda t: t.line),
        ))
    return groups
