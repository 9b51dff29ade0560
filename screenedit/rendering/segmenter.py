# -*- coding: utf-8 -*-
"""
Splits the enabled segments of a project into pieces of constant speed and zoom
"""

from __future__ import annotations

from typing import Iterable, Optional

from ..domain.models.project import Project, SpeedEffect, ZoomEffect
from ..domain.models.timeline import ActiveZoom, TimelinePiece
from ..infra.logging import get_logger

BREAKPOINT_EPSILON = 1e-9
TIME_TOLERANCE = 0.001
SPEED_TOLERANCE = 0.01

logger = get_logger("TimelineSegmenter")


def enabled_segments(project: Project) -> list[tuple[float, float]]:
    """Enabled (start, end) ranges sorted by start time.

    With nothing enabled the whole recording is returned, which is only
    meaningful for previews: export validation rejects that case first.
    """
    segments = [
        (segment.start_time, segment.end_time)
        for segment in project.edits.segments
        if segment.enabled
    ]
    if not segments:
        segments.append((0.0, project.duration))

    segments.sort(key=lambda segment: segment[0])
    return segments


def _breakpoints(
    seg_start: float, seg_end: float, effects: Iterable[SpeedEffect | ZoomEffect]
) -> list[float]:
    # Segment bounds are kept exact; interior points closer than epsilon merge
    interior = sorted(
        boundary
        for effect in effects
        for boundary in (effect.start_time, effect.end_time)
        if seg_start + BREAKPOINT_EPSILON <= boundary <= seg_end - BREAKPOINT_EPSILON
    )

    points = [seg_start]
    for point in interior:
        if point - points[-1] >= BREAKPOINT_EPSILON:
            points.append(point)
    points.append(seg_end)
    return points


def _speed_at(time: float, effects: list[SpeedEffect]) -> float:
    # First declared effect wins when ranges overlap
    for effect in effects:
        if effect.start_time <= time < effect.end_time:
            return effect.speed
    return 1.0


def _zoom_at(time: float, effects: list[ZoomEffect]) -> Optional[ActiveZoom]:
    # Zooms at or below 1.0 never cover a later, active one
    for effect in effects:
        if effect.start_time <= time < effect.end_time and effect.scale > 1.0:
            return ActiveZoom(scale=effect.scale, x=effect.x, y=effect.y)
    return None


def build_timeline_pieces(project: Project) -> list[TimelinePiece]:
    """Tiles every enabled segment with pieces of constant speed and zoom"""
    edits = project.edits
    pieces: list[TimelinePiece] = []

    for seg_start, seg_end in enabled_segments(project):
        if seg_end <= seg_start:
            continue

        points = _breakpoints(seg_start, seg_end, [*edits.speed, *edits.zoom])
        for start, end in zip(points, points[1:]):
            if end <= start:
                continue
            pieces.append(
                TimelinePiece(
                    start=start,
                    end=end,
                    speed=_speed_at(start, edits.speed),
                    zoom=_zoom_at(start, edits.zoom),
                )
            )

    if not pieces:
        logger.warning(
            "No usable timeline pieces for project %s, exporting full duration",
            project.id,
        )
        pieces.append(TimelinePiece(start=0.0, end=project.duration))

    logger.debug("Timeline split into %d pieces", len(pieces))
    return pieces


def timeline_is_edited(
    pieces: list[TimelinePiece], window_start: float, window_end: float
) -> bool:
    """True when the pieces are anything other than one plain copy of the window"""
    if len(pieces) != 1:
        return True
    piece = pieces[0]
    return (
        abs(piece.start - window_start) > TIME_TOLERANCE
        or abs(piece.end - window_end) > TIME_TOLERANCE
        or abs(piece.speed - 1.0) > SPEED_TOLERANCE
        or piece.zoom is not None
    )


def edited_duration(pieces: list[TimelinePiece]) -> float:
    """Length of the exported media in seconds"""
    total = 0.0
    for piece in pieces:
        speed = piece.speed if piece.speed > 0 else 1.0
        total += piece.duration / speed
    return total
