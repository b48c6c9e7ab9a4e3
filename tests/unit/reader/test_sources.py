"""Unit tests for the reader package: manifest loading, source selection, and queries"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from mdmanifest.config import Settings
from mdmanifest.core.pipeline import run_build
from mdmanifest.errors import ManifestReadError, NotFoundError, QueryError
from mdmanifest.reader import live_source
from mdmanifest.reader.live_source import LiveSource
from mdmanifest.reader.manifest_source import ManifestSource, load_manifest, read_manifest
from mdmanifest.reader.queries import (
    get_doc,
    get_structure,
    get_task_group,
    list_docs,
    list_task_files,
    list_task_groups,
    list_tasks,
    open_source,
)


# --- read_manifest / load_manifest ---

def test_read_manifest_missing_returns_none(tmp_path):
    assert read_manifest(tmp_path / ".manifest.json") is None


def test_read_manifest_corrupt_returns_none(tmp_path):
    path = tmp_path / ".manifest.json"
    path.write_text("{not json")
    assert read_manifest(path) is None


def test_read_manifest_wrong_shape_returns_none(tmp_path):
    path = tmp_path / ".manifest.json"
    path.write_text(json.dumps({"docs": []}))
    assert read_manifest(path) is None


def test_load_manifest_falls_back_to_public_mirror(settings, workspace):
    (workspace / "public").mkdir()
    run_build(settings)
    settings.manifest_path.unlink()
    manifest = load_manifest(settings)
    assert manifest is not None
    assert [t.id for t in manifest.all_tasks] == ["todo.md-L1", "todo.md-L2"]


def test_load_manifest_ignores_stale(workspace):
    settings = Settings(workspace_root=str(workspace), manifest_max_age=60)
    run_build(settings)
    later = datetime.now(timezone.utc) + timedelta(minutes=5)
    assert load_manifest(settings, now=later) is None
    assert load_manifest(settings) is not None


def test_load_manifest_max_age_zero_never_stale(settings):
    run_build(settings)
    far_future = datetime.now(timezone.utc) + timedelta(days=3650)
    assert load_manifest(settings, now=far_future) is not None


# --- open_source ---

def test_open_source_prefers_manifest(settings):
    run_build(settings)
    assert isinstance(open_source(settings), ManifestSource)


def test_open_source_falls_back_to_live(settings):
    assert isinstance(open_source(settings), LiveSource)


def test_open_source_live_mode_ignores_manifest(workspace):
    settings = Settings(workspace_root=str(workspace), source="live")
    run_build(settings)
    assert isinstance(open_source(settings), LiveSource)


def test_open_source_manifest_mode_requires_manifest(workspace):
    settings = Settings(workspace_root=str(workspace), source="manifest")
    with pytest.raises(ManifestReadError, match="No usable manifest"):
        open_source(settings)


def test_open_source_corrupt_manifest_falls_back_to_live(settings):
    settings.manifest_path.write_text("garbage")
    assert isinstance(open_source(settings), LiveSource)


# --- interchangeability ---

def test_manifest_and_live_sources_agree(settings, write_md):
    """Both sources return equal docs, task files, tasks, groups, and structure."""
    write_md("docs/sub/dated.md", "---\ndate: 2026-01-15\ntags: [a]\n---\nBody")
    write_md("tasks/sprint/plan.mdx", "---\ntitle: Plan\n---\n- [x] one\n- [ ] two\n")
    run_build(settings)

    cached = open_source(settings)
    live = LiveSource(settings)
    assert isinstance(cached, ManifestSource)

    assert list_docs(cached) == list_docs(live)
    assert list_task_files(cached) == list_task_files(live)
    assert list_tasks(cached) == list_tasks(live)
    assert list_task_groups(cached) == list_task_groups(live)
    assert get_structure(cached) == get_structure(live)


def test_live_source_scans_once(settings, monkeypatch):
    calls = []
    real = live_source.build_manifest

    def counting(s):
        calls.append(s)
        return real(s)

    monkeypatch.setattr(live_source, "build_manifest", counting)
    source = LiveSource(settings)
    list_docs(source)
    list_tasks(source)
    get_structure(source)
    assert len(calls) == 1


# --- queries ---

def test_list_task_groups_projection(settings):
    [group] = list_task_groups(LiveSource(settings))
    assert group.id == "todo"
    assert group.name == "todo.md"
    assert group.file == "tasks/todo.md"
    assert (group.total, group.completed, group.pending) == (2, 1, 1)


def test_get_structure_view(settings, workspace):
    view = get_structure(LiveSource(settings))
    assert view.docs.files == ["guide.md"]
    assert view.tasks.files == ["todo.md"]
    assert view.paths.target == str(workspace.resolve())


def test_empty_workspace_is_not_a_failure(tmp_path):
    """No docs directory is an empty result, distinct from a failed scan."""
    source = open_source(Settings(workspace_root=str(tmp_path)))
    assert list_docs(source) == []
    assert list_tasks(source) == []


def test_live_scan_failure_raises_query_error(settings, monkeypatch):
    def broken(s):
        raise PermissionError("denied")

    monkeypatch.setattr(live_source, "build_manifest", broken)
    with pytest.raises(QueryError, match="list docs") as exc:
        list_docs(LiveSource(settings))
    assert exc.value.operation == "list docs"
    assert isinstance(exc.value.__cause__, PermissionError)


# --- single-item lookups ---

@pytest.mark.parametrize("built", [False, True])
def test_get_doc_by_slug(settings, write_md, built):
    write_md("docs/reference/api.mdx", "API")
    if built:
        run_build(settings)
    source = open_source(settings)
    assert get_doc(source, "guide").metadata == {"title": "Guide"}
    assert get_doc(source, "reference/api").filepath == "docs/reference/api.mdx"


def test_get_doc_accepts_filename_and_slashes(settings):
    source = LiveSource(settings)
    assert get_doc(source, "/guide.md").slug == "guide"


def test_get_doc_missing_raises_not_found(settings):
    with pytest.raises(NotFoundError, match="No document with slug 'nope'") as exc:
        get_doc(LiveSource(settings), "nope")
    assert exc.value.operation == "get doc"
    assert isinstance(exc.value, LookupError)


def test_get_task_group_by_slug(settings, write_md):
    write_md("tasks/epics/v1.md", "---\ntitle: V1\n---\n- [x] a\n- [ ] b\n- [ ] c")
    run_build(settings)
    group = get_task_group(open_source(settings), "epics/v1")
    assert (group.name, group.type, group.total, group.pending) == ("V1", "epic", 3, 2)
    assert [t.id for t in group.tasks] == ["epics/v1.md-L1", "epics/v1.md-L2", "epics/v1.md-L3"]


def test_get_task_group_without_tasks_is_not_found(settings, write_md):
    """A task file with no checkboxes has no group."""
    write_md("tasks/notes.md", "Just prose")
    with pytest.raises(NotFoundError, match="No task group 'notes'"):
        get_task_group(LiveSource(settings), "notes")
