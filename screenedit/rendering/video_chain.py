# -*- coding: utf-8 -*-
"""
Video filter chains: timeline pieces, zoom, camera overlay, annotations, scaling
"""

from __future__ import annotations

from ..domain.models.project import (
    CameraOverlayPosition,
    CameraOverlaySettings,
    Project,
    Resolution,
)
from ..domain.models.timeline import ActiveZoom, TimelinePiece
from .graph_builder import FilterGraph, Label, format_number

MIN_ZOOM_SCALE = 1.01
MIN_CAMERA_SCALE = 0.1
MIN_ANNOTATION_DURATION = 0.01
MIN_ANNOTATION_SIZE = 0.02
MIN_ANNOTATION_OPACITY = 0.1

PALETTE_GEN = "palettegen=stats_mode=diff"
PALETTE_USE = "paletteuse=dither=bayer:bayer_scale=5:diff_mode=rectangle"


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def zoom_filter(zoom: ActiveZoom, width: int, height: int) -> str:
    """Crop to the zoomed window, then scale back to the output size"""
    scale = max(zoom.scale, MIN_ZOOM_SCALE)
    crop_w = f"iw/{scale:.6f}"
    crop_h = f"ih/{scale:.6f}"
    crop_x = f"(iw-{crop_w})/2+{zoom.x:.3f}"
    crop_y = f"(ih-{crop_h})/2+{zoom.y:.3f}"
    return (
        f"crop=w={crop_w}:h={crop_h}:x='{crop_x}':y='{crop_y}',"
        f"scale={width}:{height}"
    )


def build_video_pieces(
    graph: FilterGraph,
    input_label: Label,
    pieces: list[TimelinePiece],
    resolution: Resolution,
) -> Label:
    """One trimmed, retimed (and maybe zoomed) chain per piece, concatenated"""
    labels = []
    for piece in pieces:
        expr = (
            f"trim=start={piece.start:.6f}:end={piece.end:.6f},"
            f"setpts=(PTS-STARTPTS)/{piece.speed:.6f}"
        )
        if piece.zoom is not None:
            expr += "," + zoom_filter(piece.zoom, resolution.width, resolution.height)
        labels.append(graph.chain(input_label, expr, "vpiece"))

    if len(labels) == 1:
        return labels[0]

    output = graph.labels.new("vconcat")
    graph.add_filter(labels, f"concat=n={len(labels)}:v=1:a=0", output)
    return output


def camera_overlay_coordinates(overlay: CameraOverlaySettings) -> str:
    """x:y argument of the overlay filter"""
    margin = overlay.margin
    position_map = {
        CameraOverlayPosition.TOP_LEFT: f"{margin}:{margin}",
        CameraOverlayPosition.TOP_RIGHT: f"W-w-{margin}:{margin}",
        CameraOverlayPosition.BOTTOM_LEFT: f"{margin}:H-h-{margin}",
        CameraOverlayPosition.BOTTOM_RIGHT: f"W-w-{margin}:H-h-{margin}",
    }
    if overlay.position is CameraOverlayPosition.CUSTOM:
        return "(W-w)*{:.6f}:(H-h)*{:.6f}".format(
            _clamp(overlay.custom_x, 0.0, 1.0), _clamp(overlay.custom_y, 0.0, 1.0)
        )
    return position_map[overlay.position]


def apply_camera_overlay(
    graph: FilterGraph,
    base_label: Label,
    camera_label: Label,
    overlay: CameraOverlaySettings,
    offset_ms: int,
) -> Label:
    """Scales and syncs the camera stream and overlays it on base_label"""
    camera_scale = format_number(max(overlay.scale, MIN_CAMERA_SCALE))
    scale_expr = f"scale=iw*{camera_scale}:ih*{camera_scale}"

    if offset_ms > 0:
        expr = f"setpts=PTS+{offset_ms / 1000.0:.6f}/TB,{scale_expr}"
    elif offset_ms < 0:
        expr = (
            f"trim=start={abs(offset_ms) / 1000.0:.6f},"
            f"setpts=PTS-STARTPTS,{scale_expr}"
        )
    else:
        expr = scale_expr
    camera = graph.chain(camera_label, expr, "cam")

    output = graph.labels.new("vwithcam")
    graph.add_filter(
        [base_label, camera], f"overlay={camera_overlay_coordinates(overlay)}", output
    )
    return output


def escape_drawtext_text(value: str) -> str:
    """Escapes text for a quoted drawtext value inside a filtergraph"""
    return (
        value.replace("\\", "\\\\")
        .replace(":", "\\:")
        .replace("'", "\\'")
        .replace(",", "\\,")
        .replace("%", "\\%")
        .replace("\n", "\\n")
    )


def apply_annotations(graph: FilterGraph, input_label: Label, project: Project) -> Label:
    """Draws every annotation in authored order; each step gets its own label"""
    current = input_label
    for annotation in project.edits.annotations:
        start_time = max(annotation.start_time, 0.0)
        end_time = min(annotation.end_time, project.duration)
        if end_time - start_time <= MIN_ANNOTATION_DURATION:
            continue

        x = _clamp(annotation.x, 0.0, 1.0)
        y = _clamp(annotation.y, 0.0, 1.0)
        width = _clamp(annotation.width, MIN_ANNOTATION_SIZE, 1.0)
        height = _clamp(annotation.height, MIN_ANNOTATION_SIZE, 1.0)
        opacity = _clamp(annotation.opacity, MIN_ANNOTATION_OPACITY, 1.0)
        thickness = max(annotation.thickness, 1)
        color = "".join(annotation.color.split())
        enable = f"enable='between(t,{start_time:.6f},{end_time:.6f})'"

        current = graph.chain(
            current,
            f"drawbox=x=iw*{x:.6f}:y=ih*{y:.6f}:w=iw*{width:.6f}:h=ih*{height:.6f}"
            f":color={color}@{opacity:.3f}:t={thickness}:{enable}",
            "vannot",
        )

        text = (annotation.text or "").strip()
        if text:
            current = graph.chain(
                current,
                f"drawtext=text='{escape_drawtext_text(text)}'"
                f":x=w*{x:.6f}+10:y=h*{y:.6f}+10:fontsize=28"
                f":fontcolor=white@{opacity:.3f}:box=1:boxcolor=black@0.35:{enable}",
                "vannottxt",
            )
    return current


def apply_final_scale(graph: FilterGraph, input_label: Label, height: int) -> Label:
    """Even width, target height"""
    return graph.chain(input_label, f"scale=-2:{height}", "vout")


def apply_gif_palette(
    graph: FilterGraph, input_label: Label, fps: int, height: int
) -> Label:
    """Two-pass palette: generate from one branch, apply to the other"""
    first = graph.labels.new("s")
    second = graph.labels.new("s")
    graph.add_filter(
        input_label, f"fps={fps},scale=-1:{height}:flags=lanczos,split", [first, second]
    )
    palette = graph.chain(first, PALETTE_GEN, "p")
    output = graph.labels.new("vout")
    graph.add_filter([second, palette], PALETTE_USE, output)
    return output
