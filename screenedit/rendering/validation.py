# -*- coding: utf-8 -*-
"""
Pre-flight checks run before any export command is built
"""

from pathlib import Path
from typing import Callable

from ..domain.errors import ExportValidationError
from ..domain.models.export import ExportOptions
from ..domain.models.project import Project
from ..infra.logging import get_logger

logger = get_logger("ExportValidation")


def validate_export_inputs(
    project: Project,
    options: ExportOptions,
    has_audio_stream: Callable[[str], bool],
) -> None:
    """Raises ExportValidationError on the first unusable input"""
    if not Path(project.screen_video_path).exists():
        raise ExportValidationError(
            f"Screen recording file does not exist: {project.screen_video_path}"
        )

    if project.camera_video_path and not Path(project.camera_video_path).exists():
        raise ExportValidationError(
            f"Camera recording file does not exist: {project.camera_video_path}"
        )

    if (
        project.microphone_audio_path
        and not Path(project.microphone_audio_path).exists()
    ):
        raise ExportValidationError(
            f"Microphone recording file does not exist: {project.microphone_audio_path}"
        )

    if not any(segment.enabled for segment in project.edits.segments):
        raise ExportValidationError("No enabled timeline segments to export")

    if options.format.is_audio_only:
        has_microphone_audio = bool(
            project.microphone_audio_path
            and Path(project.microphone_audio_path).exists()
        )
        if not has_microphone_audio and not has_audio_stream(project.screen_video_path):
            raise ExportValidationError(
                "Audio export requires at least one audio source (system or microphone)"
            )

    logger.debug("Export inputs valid for project %s", project.id)
