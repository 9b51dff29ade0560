# -*- coding: utf-8 -*-
"""
Unit tests for project persistence
"""

import json
from dataclasses import replace
from datetime import datetime, timezone

import pytest

from screenedit.domain.models.project import Project
from screenedit.infra.project_store import ProjectStore, load_project_file


def new_project(project_id, created_at):
    project = Project.new(project_id, f"/rec/{project_id}/screen.mp4", 10.0, 1920, 1080)
    return replace(project, created_at=created_at)


def test_save_and_load(tmp_path):
    store = ProjectStore(tmp_path)
    project = new_project("p1", datetime(2024, 3, 1, tzinfo=timezone.utc))

    path = store.save(project)

    assert path == tmp_path / "p1" / "project.json"
    assert json.loads(path.read_text())["screenVideoPath"] == "/rec/p1/screen.mp4"
    assert store.load("p1") == project
    assert load_project_file(path) == project


def test_list_newest_first_and_skips_broken(tmp_path):
    store = ProjectStore(tmp_path)
    store.save(new_project("old", datetime(2024, 1, 1, tzinfo=timezone.utc)))
    store.save(new_project("new", datetime(2024, 6, 1, tzinfo=timezone.utc)))
    (tmp_path / "broken").mkdir()
    (tmp_path / "broken" / "project.json").write_text("{not json")
    (tmp_path / "empty").mkdir()
    (tmp_path / "stray.txt").write_text("ignored")

    assert [p.id for p in store.list()] == ["new", "old"]


def test_list_missing_directory(tmp_path):
    assert ProjectStore(tmp_path / "nowhere").list() == []


def test_load_missing_project(tmp_path):
    with pytest.raises(FileNotFoundError):
        ProjectStore(tmp_path).load("missing")


def test_load_invalid_document(tmp_path):
    path = tmp_path / "project.json"
    path.write_text(json.dumps({"id": "x"}))

    with pytest.raises(ValueError, match="Failed to parse project file"):
        load_project_file(tmp_path)


@pytest.mark.parametrize(
    "document",
    [
        [1, 2],
        "project",
        {
            "id": "p1",
            "screenVideoPath": "/rec/screen.mp4",
            "duration": 10,
            "resolution": {"width": 1920, "height": 1080},
            "edits": ["segments"],
        },
        {
            "id": "p1",
            "screenVideoPath": "/rec/screen.mp4",
            "duration": 10,
            "resolution": None,
        },
    ],
)
def test_wrongly_shaped_documents(tmp_path, document):
    store = ProjectStore(tmp_path)
    store.save(new_project("good", datetime(2024, 3, 1, tzinfo=timezone.utc)))
    (tmp_path / "bad").mkdir()
    (tmp_path / "bad" / "project.json").write_text(json.dumps(document))

    with pytest.raises(ValueError, match="Failed to parse project file"):
        load_project_file(tmp_path / "bad")
    assert [p.id for p in store.list()] == ["good"]


def test_delete(tmp_path):
    store = ProjectStore(tmp_path)
    store.save(new_project("p1", datetime(2024, 3, 1, tzinfo=timezone.utc)))

    store.delete("p1")

    assert not (tmp_path / "p1").exists()
    with pytest.raises(FileNotFoundError):
        store.delete("p1")
