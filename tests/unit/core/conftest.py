"""Shared fixtures for core unit tests"""

import pytest

from mdmanifest.core.models import ScannedFile


@pytest.fixture(name="scanned")
def scanned_fixture(tmp_path, write_md):
    """Return a helper writing a file under tmp_path/<root>/ and describing it as the scanner would."""
    def _scanned(root_path: str, text: str, root: str = "docs") -> ScannedFile:
        path = write_md(f"{root}/{root_path}", text)
        return ScannedFile(path=path, relative_path=f"{root}/{root_path}", root_path=root_path)
    return _scanned
