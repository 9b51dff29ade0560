# -*- coding: utf-8 -*-
"""
FFmpeg filtergraph construction from a project's edit decision list
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence, Union

from ..domain.models.export import ExportOptions
from ..domain.models.project import Project
from ..domain.models.timeline import AudioSourceConfig, TimelinePiece
from ..infra.logging import get_logger


def format_number(value: float) -> str:
    """Shortest plain decimal form: 5.0 -> '5', 0.00005 -> '0.00005'"""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    # FFmpeg time values do not accept exponent notation
    return format(Decimal(repr(value)), "f")


@dataclass(frozen=True)
class Label:
    """A pad of the filtergraph: an input stream ("0:a") or a filter output"""

    name: str
    is_input: bool = False

    @classmethod
    def input(cls, index: int, kind: str) -> "Label":
        return cls(f"{index}:{kind}", is_input=True)

    @property
    def map_spec(self) -> str:
        """Value for -map: stream specifiers go bare, graph outputs bracketed"""
        return self.name if self.is_input else str(self)

    def __str__(self) -> str:
        return f"[{self.name}]"


class LabelAllocator:
    """Hands out filter output labels as prefix + counter.

    Prefixes are letters only and the suffix digits only, so two different
    (prefix, counter) pairs can never spell the same label.
    """

    _PREFIX = re.compile(r"^[a-z]+$")

    def __init__(self):
        self._counters: dict[str, int] = {}

    def new(self, prefix: str) -> Label:
        if not self._PREFIX.match(prefix):
            raise ValueError(f"invalid label prefix: {prefix!r}")
        index = self._counters.get(prefix, 0)
        self._counters[prefix] = index + 1
        return Label(f"{prefix}{index}")


@dataclass(frozen=True)
class InputSpec:
    """An -i input, optionally bounded by input seeking"""

    path: str
    seek_start: Optional[float] = None
    seek_end: Optional[float] = None


class FilterGraph:
    """Inputs and filter chains of a single ffmpeg invocation"""

    def __init__(self):
        self.inputs: list[InputSpec] = []
        self.filters: list[str] = []
        self.labels = LabelAllocator()

    def add_input(
        self,
        input_path: str,
        seek_start: Optional[float] = None,
        seek_end: Optional[float] = None,
    ) -> int:
        """Adds an input and returns its stream index"""
        self.inputs.append(InputSpec(str(input_path), seek_start, seek_end))
        return len(self.inputs) - 1

    def add_filter(
        self,
        inputs: Union[Label, Sequence[Label]],
        filter_expr: str,
        outputs: Union[Label, Sequence[Label]],
    ) -> None:
        """Adds one chain: [in...]filter_expr[out...]"""
        if isinstance(inputs, Label):
            inputs = [inputs]
        if isinstance(outputs, Label):
            outputs = [outputs]
        self.filters.append(
            "".join(map(str, inputs)) + filter_expr + "".join(map(str, outputs))
        )

    def chain(self, source: Label, filter_expr: str, prefix: str) -> Label:
        """Adds a single-input chain writing to a fresh label"""
        output = self.labels.new(prefix)
        self.add_filter(source, filter_expr, output)
        return output

    @property
    def is_empty(self) -> bool:
        return not self.filters

    def to_string(self) -> str:
        """Converts the filtergraph to the -filter_complex string"""
        return ";".join(self.filters)


@dataclass(frozen=True)
class ResolvedInputs:
    """Everything known about the sources before any graph is built"""

    screen_path: str
    camera_path: Optional[str]
    microphone_path: Optional[str]
    screen_has_audio: bool
    segments: list[tuple[float, float]]
    pieces: list[TimelinePiece]
    edited: bool
    fast_path: bool

    @property
    def audio_sources(self) -> AudioSourceConfig:
        return AudioSourceConfig.resolve(
            self.screen_has_audio, self.microphone_path is not None
        )


@dataclass
class GraphResult:
    graph: FilterGraph
    video: Optional[Label] = None
    audio: Optional[Label] = None
    camera_index: Optional[int] = None
    microphone_index: Optional[int] = None


class GraphBuilder:
    """Builds the filtergraph for one export"""

    def __init__(self):
        self.logger = get_logger("GraphBuilder")

    def build(
        self, project: Project, options: ExportOptions, inputs: ResolvedInputs
    ) -> GraphResult:
        """Registers the inputs and emits the video and audio chains.

        The returned video label is None when no graph was needed at all;
        the audio label is None when the export carries no audio.
        """
        from . import audio_chain, video_chain

        self.logger.info(
            "Building filtergraph for project %s (%d pieces, format %s)",
            project.id,
            len(inputs.pieces),
            options.format.value,
        )

        graph = FilterGraph()
        result = GraphResult(graph=graph)

        if inputs.fast_path:
            seg_start, seg_end = inputs.segments[0]
            graph.add_input(inputs.screen_path, seg_start, seg_end)
        else:
            graph.add_input(inputs.screen_path)
        if inputs.camera_path is not None:
            result.camera_index = graph.add_input(inputs.camera_path)
        if inputs.microphone_path is not None:
            result.microphone_index = graph.add_input(inputs.microphone_path)

        video: Optional[Label] = None
        if not options.format.is_audio_only:
            video = Label.input(0, "v")
            if not inputs.fast_path and inputs.edited:
                video = video_chain.build_video_pieces(
                    graph, video, inputs.pieces, project.resolution
                )
            if result.camera_index is not None:
                video = video_chain.apply_camera_overlay(
                    graph,
                    video,
                    Label.input(result.camera_index, "v"),
                    project.edits.camera_overlay,
                    project.camera_offset_ms or 0,
                )
            video = video_chain.apply_annotations(graph, video, project)

        if not options.format.is_animated_image:
            result.audio = audio_chain.build_audio_output(
                graph,
                inputs.audio_sources,
                None if inputs.fast_path else inputs.pieces,
                project,
                result.microphone_index,
            )

        if options.format.is_animated_image:
            result.video = video_chain.apply_gif_palette(
                graph,
                video,
                min(options.frame_rate, 30),
                min(options.resolution.height, 720),
            )
        elif video is not None and not graph.is_empty:
            result.video = video_chain.apply_final_scale(
                graph, video, options.resolution.height
            )

        self.logger.debug("Filtergraph built: %s", graph.to_string())
        return result
