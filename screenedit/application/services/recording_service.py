# -*- coding: utf-8 -*-
"""
Finalization of a recording made of several paused/resumed screen segments
"""

from pathlib import Path
from typing import List, Optional, Sequence, Union

from ...domain.models.project import Project
from ...infra.logging import get_logger
from ...infra.media_io import MediaIO
from ...rendering.cli_builder import CliBuilder
from ...rendering.runner import Runner

MANIFEST_NAME = "segments_concat.txt"
MERGED_NAME = "screen_merged.mp4"


def escape_concat_path(path: Union[str, Path]) -> str:
    """Quotes a path for a concat demuxer manifest line"""
    return str(path).replace("'", "'\\''")


def write_concat_manifest(paths: Sequence[Union[str, Path]], manifest_path: Path) -> Path:
    lines = [f"file '{escape_concat_path(path)}'" for path in paths]
    manifest_path.write_text("\n".join(lines), encoding="utf-8")
    return manifest_path


class RecordingService:
    """Turns raw capture output into a project ready for editing"""

    def __init__(
        self,
        media_io: Optional[MediaIO] = None,
        runner: Optional[Runner] = None,
        cli_builder: Optional[CliBuilder] = None,
    ):
        self.logger = get_logger("RecordingService")
        self.media_io = media_io or MediaIO()
        self.runner = runner or Runner()
        self.cli_builder = cli_builder or CliBuilder(self.media_io)

    def concatenate_screen_segments(
        self, segment_paths: List[Path], screen_video_path: Path
    ) -> Path:
        """Joins the segments into screen_video_path with a stream copy.

        A single segment is left untouched.
        """
        if len(segment_paths) <= 1:
            return screen_video_path

        project_dir = screen_video_path.parent
        manifest_path = write_concat_manifest(segment_paths, project_dir / MANIFEST_NAME)
        merged_path = project_dir / MERGED_NAME

        self.logger.info(
            "Concatenating %d screen segments into %s",
            len(segment_paths),
            screen_video_path,
        )
        try:
            self.runner.run(
                self.cli_builder.make_concat_command(manifest_path, merged_path)
            )
        except RuntimeError:
            merged_path.unlink(missing_ok=True)
            raise
        finally:
            manifest_path.unlink(missing_ok=True)

        if screen_video_path.exists():
            screen_video_path.unlink()
        merged_path.replace(screen_video_path)

        for path in segment_paths:
            if Path(path) != screen_video_path:
                Path(path).unlink(missing_ok=True)

        return screen_video_path

    def create_project(
        self,
        project_id: str,
        screen_video_path: Path,
        camera_video_path: Optional[Path] = None,
        microphone_audio_path: Optional[Path] = None,
    ) -> Project:
        """Builds the initial project from probed duration and dimensions"""
        duration = self.media_io.probe_duration(screen_video_path) or 0.0
        dimensions = self.media_io.probe_video_dimensions(screen_video_path)
        if dimensions is None:
            self.logger.warning(
                "Using 1920x1080 for %s, dimensions could not be probed",
                screen_video_path,
            )
            dimensions = (1920, 1080)

        width, height = dimensions
        return Project.new(
            project_id,
            str(screen_video_path),
            duration,
            width,
            height,
            camera_video_path=str(camera_video_path) if camera_video_path else None,
            microphone_audio_path=(
                str(microphone_audio_path) if microphone_audio_path else None
            ),
        )
