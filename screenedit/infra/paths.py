# -*- coding: utf-8 -*-
"""
Paths utilities for FFmpeg binaries and export file naming
"""

import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..domain.models.export import ExportOptions
from ..domain.models.project import Project
from .settings import settings

UNSAFE_FILENAME_CHARS = '/\\:*?"<>|'


def _resolve_bin(configured: Optional[str], name: str) -> str:
    if configured:
        return configured
    return shutil.which(name) or name


def ffmpeg_bin() -> str:
    """Resolves the FFmpeg executable"""
    return _resolve_bin(settings.ffmpeg_path, "ffmpeg")


def ffprobe_bin() -> str:
    """Resolves the FFprobe executable"""
    return _resolve_bin(settings.ffprobe_path, "ffprobe")


def sanitize_project_name(name: str) -> str:
    """Replaces characters that are unsafe in file names, and spaces, with _"""
    cleaned = "".join("_" if ch in UNSAFE_FILENAME_CHARS else ch for ch in name)
    return cleaned.replace(" ", "_")


def export_output_path(
    project: Project,
    options: ExportOptions,
    output_dir: Path,
    now: Optional[datetime] = None,
) -> Path:
    """{name}_{YYYYMMDD_HHMMSS}_{720p|1080p|4k|audio}.{ext} inside output_dir"""
    now = now or datetime.now()
    if options.format.is_audio_only:
        resolution_label = "audio"
    else:
        resolution_label = options.resolution.label

    filename = "{}_{}_{}.{}".format(
        sanitize_project_name(project.name),
        now.strftime("%Y%m%d_%H%M%S"),
        resolution_label,
        options.format.extension,
    )
    return Path(output_dir) / filename
