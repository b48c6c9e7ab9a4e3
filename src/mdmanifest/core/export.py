"""Manifest serialization and persistence"""

import logging
import os
import tempfile
from pathlib import Path

from mdmanifest.config import Settings
from mdmanifest.core.models import Manifest
from mdmanifest.errors import ManifestWriteError


LOGGER = logging.getLogger(__name__)


def manifest_json(manifest: Manifest) -> str:
    """Serialize with 2-space indent, JSON key names (allTasks), and a trailing newline."""
    return manifest.model_dump_json(by_alias=True, indent=2) + '\n'


def _atomic_write(path: Path, text: str) -> None:
    """Write text to a sibling temp file, then replace path with it."""
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f"{path.name}.", suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as fh:
            fh.write(text)
        os.chmod(tmp, 0o644)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


def write_manifest(manifest: Manifest, settings: Settings) -> list[Path]:
    """Write the canonical manifest and, if the public dir exists, its mirror.

    Returns the written paths. Raises ManifestWriteError on any OSError.
    """
    text = manifest_json(manifest)
    targets = [settings.manifest_path]
    if settings.public_manifest_path.parent.is_dir():
        targets.append(settings.public_manifest_path)

    for path in targets:
        try:
            _atomic_write(path, text)
        except OSError as e:
            raise ManifestWriteError(f"Cannot write manifest: {e}", path=path, operation='write') from e
        LOGGER.info("Written to: %s", path)
    return targets
