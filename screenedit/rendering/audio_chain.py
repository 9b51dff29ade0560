# -*- coding: utf-8 -*-
"""
Audio filter chains: per-piece trim and tempo, sync offset, gain, ducking and mix
"""

from __future__ import annotations

import math
from typing import Optional

from ..domain.models.project import Project
from ..domain.models.timeline import AudioSourceConfig, TimelinePiece
from .graph_builder import FilterGraph, Label

ATEMPO_MIN = 0.5
ATEMPO_MAX = 2.0
SPEED_TOLERANCE = 0.01
GAIN_TOLERANCE = 0.01
TIME_TOLERANCE = 0.001
MAX_GAIN = 2.0

MIC_HIGHPASS_HZ = 80
DUCKING = "sidechaincompress=threshold=0.025:ratio=8:attack=20:release=300"
MIX = "amix=inputs=2:duration=longest:dropout_transition=0"


def atempo_factors(speed: float) -> list[float]:
    """Splits speed into atempo factors, each within [0.5, 2.0].

    Returns an empty list when no tempo change is needed.
    """
    if not math.isfinite(speed) or speed <= 0.0 or abs(speed - 1.0) < SPEED_TOLERANCE:
        return []

    remaining = speed
    factors = []
    while remaining > ATEMPO_MAX:
        factors.append(ATEMPO_MAX)
        remaining /= ATEMPO_MAX
    while remaining < ATEMPO_MIN:
        factors.append(ATEMPO_MIN)
        remaining /= ATEMPO_MIN

    factors.append(remaining)
    return factors


def atempo_chain(speed: float) -> Optional[str]:
    """atempo filters reproducing speed, e.g. 3.0 -> 'atempo=2.0,atempo=1.50000'"""
    factors = atempo_factors(speed)
    if not factors:
        return None

    parts = [f"atempo={factor:.1f}" for factor in factors[:-1]]
    parts.append(f"atempo={factors[-1]:.5f}")
    return ",".join(parts)


def build_audio_timeline_filter(
    graph: FilterGraph,
    input_label: Label,
    pieces: list[TimelinePiece],
    prefix: str,
    source_duration: Optional[float] = None,
) -> Label:
    """Trims and retimes the source to the pieces and joins them into one label"""
    if len(pieces) == 1:
        # A kept tail would otherwise outlast the trimmed video
        piece = pieces[0]
        untrimmed_end = source_duration is None or (
            abs(piece.end - source_duration) <= TIME_TOLERANCE
        )
        if (
            piece.start <= TIME_TOLERANCE
            and untrimmed_end
            and abs(piece.speed - 1.0) < SPEED_TOLERANCE
        ):
            return input_label

    labels = []
    for piece in pieces:
        expr = (
            f"atrim=start={piece.start:.6f}:end={piece.end:.6f},"
            "asetpts=PTS-STARTPTS"
        )
        tempo = atempo_chain(piece.speed)
        if tempo:
            expr += "," + tempo
        labels.append(graph.chain(input_label, expr, prefix))

    if len(labels) == 1:
        return labels[0]

    output = graph.labels.new(prefix + "out")
    graph.add_filter(labels, f"concat=n={len(labels)}:v=0:a=1", output)
    return output


def apply_audio_offset(
    graph: FilterGraph, input_label: Label, offset_ms: int, prefix: str
) -> Label:
    """Delays (positive) or trims (negative) a stream recorded on another clock"""
    if offset_ms == 0:
        return input_label

    if offset_ms > 0:
        return graph.chain(input_label, f"adelay={offset_ms}|{offset_ms}", prefix)

    trim_start = abs(offset_ms) / 1000.0
    return graph.chain(
        input_label, f"atrim=start={trim_start:.6f},asetpts=PTS-STARTPTS", prefix
    )


def apply_audio_gain(
    graph: FilterGraph, input_label: Label, volume: float, prefix: str
) -> Label:
    gain = min(max(volume, 0.0), MAX_GAIN)
    if abs(gain - 1.0) < GAIN_TOLERANCE:
        return input_label
    return graph.chain(input_label, f"volume={gain:.3f}", prefix)


def build_audio_output(
    graph: FilterGraph,
    sources: AudioSourceConfig,
    pieces: Optional[list[TimelinePiece]],
    project: Project,
    microphone_index: Optional[int],
) -> Optional[Label]:
    """Produces the single audio label of the export, or None without audio.

    pieces is None when input seeking already trimmed the source.
    """
    mix = project.edits.audio_mix

    screen = None
    if sources.has_screen:
        screen = Label.input(0, "a")
        if pieces is not None:
            screen = build_audio_timeline_filter(
                graph, screen, pieces, "ascreen", project.duration
            )
        screen = apply_audio_gain(graph, screen, mix.system_volume, "ascreenvol")

    mic = None
    if sources.has_microphone:
        mic = Label.input(microphone_index, "a")
        mic = apply_audio_offset(
            graph, mic, project.microphone_offset_ms or 0, "amicoffset"
        )
        if pieces is not None:
            mic = build_audio_timeline_filter(
                graph, mic, pieces, "amicpiece", project.duration
            )
        mic = graph.chain(mic, f"highpass=f={MIC_HIGHPASS_HZ}", "amicclean")
        mic = apply_audio_gain(graph, mic, mix.microphone_volume, "amicvol")

    if sources is AudioSourceConfig.BOTH:
        # The mic feeds both the compressor side-chain and the mix
        trigger = graph.labels.new("amictrigger")
        voice = graph.labels.new("amicmix")
        graph.add_filter(mic, "asplit=2", [trigger, voice])
        ducked = graph.labels.new("aducked")
        graph.add_filter([screen, trigger], DUCKING, ducked)
        mixed = graph.labels.new("aout")
        graph.add_filter([ducked, voice], MIX, mixed)
        return mixed
    elif sources is AudioSourceConfig.SCREEN_ONLY:
        return screen
    elif sources is AudioSourceConfig.MIC_ONLY:
        return mic
    else:
        return None
