# -*- coding: utf-8 -*-
"""
Builds FFmpeg commands for exporting a project
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Protocol, Union

from ..domain.models.export import ExportOptions
from ..domain.models.project import Project
from .audio_chain import GAIN_TOLERANCE
from .codecs import Platform, audio_codec_args, codec_profile, video_codec_args
from .graph_builder import (
    GraphBuilder,
    GraphResult,
    Label,
    ResolvedInputs,
    format_number,
)
from .segmenter import (
    build_timeline_pieces,
    enabled_segments,
    timeline_is_edited,
)
from ..infra.logging import get_logger

SCREEN_AUDIO = Label.input(0, "a")


class AudioProbe(Protocol):
    def has_audio_stream(self, path: Union[str, Path]) -> bool: ...


class CliBuilder:
    """Compiles Project + ExportOptions into an ffmpeg argument list"""

    def __init__(
        self, media_io: Optional[AudioProbe] = None, platform: Optional[Platform] = None
    ):
        self.logger = get_logger("CliBuilder")
        if media_io is None:
            from ..infra.media_io import MediaIO

            media_io = MediaIO()
        self.media_io = media_io
        self.platform = platform or Platform.current()
        self.graph_builder = GraphBuilder()

    def resolve_inputs(self, project: Project) -> ResolvedInputs:
        """Probes the sources, splits the timeline and picks fast or graph path"""
        camera_path = project.camera_video_path or None
        microphone_path = project.microphone_audio_path or None
        screen_has_audio = self.media_io.has_audio_stream(project.screen_video_path)

        segments = enabled_segments(project)
        pieces = build_timeline_pieces(project)
        edited = timeline_is_edited(pieces, 0.0, project.duration)

        edits = project.edits
        only_segment = segments[0] if len(segments) == 1 else None
        fast_path = (
            camera_path is None
            and microphone_path is None
            and only_segment is not None
            and (only_segment[0] > 0.0 or only_segment[1] < project.duration)
            and not timeline_is_edited(pieces, *only_segment)
            and not edits.zoom
            # Both are expressed in source time, which seeking shifts
            and not edits.annotations
            and abs(edits.audio_mix.system_volume - 1.0) < GAIN_TOLERANCE
        )

        self.logger.info(
            "Inputs resolved: camera=%s, microphone=%s, screen_audio=%s, "
            "pieces=%d, edited=%s, fast_path=%s",
            camera_path is not None,
            microphone_path is not None,
            screen_has_audio,
            len(pieces),
            edited,
            fast_path,
        )
        return ResolvedInputs(
            screen_path=project.screen_video_path,
            camera_path=camera_path,
            microphone_path=microphone_path,
            screen_has_audio=screen_has_audio,
            segments=segments,
            pieces=pieces,
            edited=edited,
            fast_path=fast_path,
        )

    def build_args(
        self, project: Project, options: ExportOptions, output_path: Union[str, Path]
    ) -> List[str]:
        """Argument list for ffmpeg, without the executable"""
        inputs = self.resolve_inputs(project)
        result = self.graph_builder.build(project, options, inputs)
        graph = result.graph
        profile = codec_profile(options.format, self.platform)

        args: List[str] = []
        for spec in graph.inputs:
            if spec.seek_start is not None:
                args.extend(["-ss", format_number(spec.seek_start)])
            if spec.seek_end is not None:
                args.extend(["-to", format_number(spec.seek_end)])
            args.extend(["-i", spec.path])

        if options.format.is_audio_only:
            args.append("-vn")
            args.extend(audio_codec_args(profile, options))
            if not graph.is_empty:
                args.extend(["-filter_complex", graph.to_string()])
            args.extend(self._audio_map_args(result, video_output=False))
        elif options.format.is_animated_image:
            args.extend(["-filter_complex", graph.to_string()])
            args.extend(["-map", result.video.map_spec, "-an"])
        else:
            args.extend(video_codec_args(profile, options))
            args.extend(audio_codec_args(profile, options))
            args.extend(["-r", str(options.frame_rate)])
            if result.video is not None:
                args.extend(["-filter_complex", graph.to_string()])
                args.extend(["-map", result.video.map_spec])
            else:
                args.extend(["-vf", f"scale=-2:{options.resolution.height}"])
                args.extend(["-map", "0:v"])
            args.extend(self._audio_map_args(result, video_output=True))

        args.extend(["-y", str(output_path)])
        return args

    def _audio_map_args(self, result: GraphResult, video_output: bool) -> List[str]:
        audio = result.audio
        if audio is None:
            # A graph disables automatic stream selection for audio too
            if video_output and not result.graph.is_empty:
                return ["-an"]
            return []
        if audio == SCREEN_AUDIO:
            return ["-map", "0:a?"]
        return ["-map", audio.map_spec]

    def make_command(
        self, project: Project, options: ExportOptions, output_path: Union[str, Path]
    ) -> List[str]:
        """Full ffmpeg command line for an export"""
        from ..infra.paths import ffmpeg_bin

        self.logger.info(
            "Building FFmpeg export command for project %s -> %s",
            project.id,
            output_path,
        )
        cmd = [ffmpeg_bin(), *self.build_args(project, options, output_path)]
        self.logger.debug("FFmpeg command: %s", " ".join(cmd))
        return cmd

    def make_concat_command(
        self, manifest_path: Union[str, Path], output_path: Union[str, Path]
    ) -> List[str]:
        """Stream-copies the files listed in a concat demuxer manifest into one"""
        from ..infra.paths import ffmpeg_bin

        cmd = [
            ffmpeg_bin(),
            "-f",
            "concat",
            "-safe",
            "0",
            "-i",
            str(manifest_path),
            "-c",
            "copy",
            "-y",
            str(output_path),
        ]
        self.logger.debug("Concat command: %s", " ".join(cmd))
        return cmd
