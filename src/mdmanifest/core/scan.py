"""Markdown file discovery and directory tree construction"""

import logging
import os
from pathlib import Path
from typing import Iterable

from mdmanifest.core.models import DirectoryNode, ScannedFile


LOGGER = logging.getLogger(__name__)

MD_EXTENSIONS = {'.md', '.mdx'}
SKIP_DIRS = ('node_modules',)


def is_markdown_file(name: str) -> bool:
    """True for .md/.mdx names, case-insensitive."""
    return Path(name).suffix.lower() in MD_EXTENSIONS


def _pruned(name: str, skip_dirs: set[str]) -> bool:
    return name.startswith('.') or name in skip_dirs


def _walk(
    directory: Path,
    root: Path,
    base: Path,
    skip_dirs: set[str],
    ancestors: set[Path],
    out: list[ScannedFile],
    ) -> None:
    # only directories on the current descent path; aliases of a sibling are still walked
    real = directory.resolve()
    if real in ancestors:
        LOGGER.debug("Skipping symlink cycle at %s", directory)
        return
    ancestors.add(real)
    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
        for entry in entries:
            if entry.is_dir():
                if _pruned(entry.name, skip_dirs):
                    continue
                try:
                    _walk(entry, root, base, skip_dirs, ancestors, out)
                except OSError as e:
                    LOGGER.warning("Cannot list %s: %s", entry, e)
            elif entry.is_file() and is_markdown_file(entry.name):
                out.append(ScannedFile(
                    path=entry,
                    relative_path=Path(os.path.relpath(entry, base)).as_posix(),
                    root_path=Path(os.path.relpath(entry, root)).as_posix(),
                ))
    finally:
        ancestors.discard(real)


def scan_markdown_files(
    root: Path,
    base: Path | None = None,
    skip_dirs: Iterable[str] = SKIP_DIRS,
    ) -> list[ScannedFile]:
    """Return .md/.mdx files under root, depth-first in name order.

    relative_path is computed against base (defaults to root) so several roots
    can share one workspace-relative namespace. Hidden directories and
    skip_dirs are pruned. A missing root yields [], an unreadable root raises
    OSError.
    """
    root = Path(root).absolute()
    if not root.is_dir():
        return []
    base = Path(base).absolute() if base is not None else root
    files: list[ScannedFile] = []
    _walk(root, root, base, set(skip_dirs), set(), files)
    return files


def build_structure(paths: Iterable[str]) -> DirectoryNode:
    """Build a DirectoryNode tree from POSIX relative file paths, keeping input order."""
    tree = DirectoryNode()
    for rel in paths:
        *folders, filename = rel.split('/')
        node = tree
        for part in folders:
            node = node.folders.setdefault(part, DirectoryNode())
        node.files.append(filename)
    return tree
