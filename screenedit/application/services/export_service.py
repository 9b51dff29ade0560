# -*- coding: utf-8 -*-
"""
Export service: validation, output naming, command building and execution
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from ...domain.models.export import ExportOptions
from ...domain.models.project import Project
from ...infra.logging import get_logger
from ...infra.media_io import MediaIO
from ...infra.paths import export_output_path
from ...infra.settings import settings
from ...rendering.cli_builder import CliBuilder
from ...rendering.codecs import Platform
from ...rendering.runner import Progress, Runner
from ...rendering.segmenter import build_timeline_pieces, edited_duration
from ...rendering.validation import validate_export_inputs


@dataclass
class ExportRequest:
    """One export of one project"""

    project: Project
    options: ExportOptions
    output_dir: Optional[Path] = None
    output_path: Optional[Path] = None
    dry_run: bool = False


@dataclass
class ExportResult:
    output_path: Path
    command: List[str]
    executed: bool


class ExportService:
    """Runs exports one at a time"""

    def __init__(
        self,
        media_io: Optional[MediaIO] = None,
        runner: Optional[Runner] = None,
        platform: Optional[Platform] = None,
    ):
        self.logger = get_logger("ExportService")
        self.media_io = media_io or MediaIO()
        self.runner = runner or Runner()
        self.cli_builder = CliBuilder(
            self.media_io, platform or Platform(settings.platform)
        )

    def export(
        self,
        request: ExportRequest,
        on_progress: Optional[Callable[[Progress], None]] = None,
    ) -> ExportResult:
        """Validates the request, then builds and (unless dry_run) runs ffmpeg"""
        project, options = request.project, request.options
        validate_export_inputs(project, options, self.media_io.has_audio_stream)

        if request.output_path:
            output_path = Path(request.output_path)
        else:
            output_path = export_output_path(
                project, options, request.output_dir or settings.export_dir
            )
        command = self.cli_builder.make_command(project, options, output_path)

        if request.dry_run:
            self.logger.info("Dry run, FFmpeg not started for %s", project.id)
            return ExportResult(output_path=output_path, command=command, executed=False)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        total_duration = edited_duration(build_timeline_pieces(project))
        self.logger.info(
            "Exporting project %s (%.2fs of media) to %s",
            project.id,
            total_duration,
            output_path,
        )
        self.runner.run(
            command,
            on_progress=on_progress,
            timeout=settings.export_timeout,
            total_duration=total_duration,
        )

        self.logger.info("Export completed: %s", output_path)
        return ExportResult(output_path=output_path, command=command, executed=True)

    def cancel(self) -> bool:
        """Cancels the export in progress, if any"""
        return self.runner.cancel()
