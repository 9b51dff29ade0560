# -*- coding: utf-8 -*-
"""
JSON persistence of projects, one directory per recording
"""

import json
import shutil
from pathlib import Path
from typing import List, Union

from ..domain.models.project import Project
from .logging import get_logger

PROJECT_FILE = "project.json"


def load_project_file(path: Union[str, Path]) -> Project:
    """Reads a project document; path may be the project dir or the json file"""
    path = Path(path)
    if path.is_dir():
        path = path / PROJECT_FILE
    if not path.exists():
        raise FileNotFoundError(f"Project file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        return Project.from_dict(data)
    except (
        json.JSONDecodeError,
        AttributeError,
        KeyError,
        TypeError,
        ValueError,
    ) as e:
        raise ValueError(f"Failed to parse project file {path}: {e}") from e


class ProjectStore:
    """Projects stored as <recordings_dir>/<project id>/project.json"""

    def __init__(self, recordings_dir: Union[str, Path]):
        self.logger = get_logger("ProjectStore")
        self.recordings_dir = Path(recordings_dir)

    def project_dir(self, project_id: str) -> Path:
        return self.recordings_dir / project_id

    def load(self, project_id: str) -> Project:
        project_dir = self.project_dir(project_id)
        if not project_dir.exists():
            raise FileNotFoundError(f"Project not found: {project_id}")
        return load_project_file(project_dir)

    def save(self, project: Project) -> Path:
        project_dir = self.project_dir(project.id)
        project_dir.mkdir(parents=True, exist_ok=True)
        path = project_dir / PROJECT_FILE
        with open(path, "w", encoding="utf-8") as f:
            json.dump(project.to_dict(), f, ensure_ascii=False, indent=2)
        self.logger.debug("Project %s saved to %s", project.id, path)
        return path

    def list(self) -> List[Project]:
        """All readable projects, newest first"""
        projects = []
        if not self.recordings_dir.exists():
            return projects

        for entry in self.recordings_dir.iterdir():
            if not entry.is_dir():
                continue
            try:
                projects.append(load_project_file(entry))
            except (FileNotFoundError, ValueError) as e:
                self.logger.warning("Skipping %s: %s", entry, e)

        projects.sort(key=lambda project: project.created_at, reverse=True)
        return projects

    def delete(self, project_id: str) -> None:
        project_dir = self.project_dir(project_id)
        if not project_dir.exists():
            raise FileNotFoundError(f"Project not found: {project_id}")
        shutil.rmtree(project_dir)
        self.logger.info("Project %s deleted", project_id)
