"""Root test configuration: isolated environment and a sample workspace"""

from pathlib import Path

import pytest

from mdmanifest.config import Settings


GUIDE_MD = """\
---
title: Guide
---
# Guide

Text"""

TODO_MD = "- [ ] Buy milk\n- [x] Walk dog"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Drop MDMANIFEST_* variables inherited from the calling shell."""
    for name in Settings.model_fields:
        monkeypatch.delenv(f"MDMANIFEST_{name.upper()}", raising=False)


@pytest.fixture(name="write_md")
def write_md_fixture(tmp_path):
    """Return a helper writing text to tmp_path/rel, creating parent dirs."""
    def _write(rel: str, text: str) -> Path:
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture(name="workspace")
def workspace_fixture(tmp_path, write_md):
    """Workspace with docs/guide.md and tasks/todo.md."""
    write_md("docs/guide.md", GUIDE_MD)
    write_md("tasks/todo.md", TODO_MD)
    return tmp_path


@pytest.fixture(name="settings")
def settings_fixture(workspace):
    return Settings(workspace_root=str(workspace))
