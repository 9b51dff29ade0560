# -*- coding: utf-8 -*-
"""
Domain models for a recorded project and its edit decision list
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional


def _parse_timestamp(value: Optional[str]) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class Resolution:
    """Pixel size of the screen recording"""

    width: int
    height: int


@dataclass(frozen=True)
class Segment:
    """A cut of the source recording; disabled segments are dropped on export"""

    id: str
    start_time: float
    end_time: float
    enabled: bool = True


@dataclass(frozen=True)
class SpeedEffect:
    """Playback speed applied over a source time range"""

    id: str
    start_time: float
    end_time: float
    speed: float


@dataclass(frozen=True)
class ZoomEffect:
    """Zoom/pan over a source time range; x and y are pixel offsets from centre"""

    id: str
    start_time: float
    end_time: float
    scale: float
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Annotation:
    """Rectangle (and optional caption) drawn over the video"""

    id: str
    start_time: float
    end_time: float
    x: float
    y: float
    width: float
    height: float
    color: str = "#ff3b30"
    opacity: float = 1.0
    thickness: int = 4
    text: Optional[str] = None


class CameraOverlayPosition(str, Enum):
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"
    CUSTOM = "custom"


@dataclass(frozen=True)
class CameraOverlaySettings:
    """Picture-in-picture placement of the camera recording"""

    position: CameraOverlayPosition = CameraOverlayPosition.BOTTOM_RIGHT
    margin: int = 24
    scale: float = 0.25
    custom_x: float = 1.0
    custom_y: float = 1.0


@dataclass(frozen=True)
class AudioMixSettings:
    """Gain of each audio source, 1.0 is unity"""

    system_volume: float = 1.0
    microphone_volume: float = 1.0


@dataclass(frozen=True)
class EditDecisionList:
    """Every non-destructive edit authored for a project"""

    segments: list[Segment] = field(default_factory=list)
    zoom: list[ZoomEffect] = field(default_factory=list)
    speed: list[SpeedEffect] = field(default_factory=list)
    annotations: list[Annotation] = field(default_factory=list)
    camera_overlay: CameraOverlaySettings = field(default_factory=CameraOverlaySettings)
    audio_mix: AudioMixSettings = field(default_factory=AudioMixSettings)


@dataclass(frozen=True)
class Project:
    """A finished recording plus its edits"""

    id: str
    name: str
    screen_video_path: str
    duration: float
    resolution: Resolution
    edits: EditDecisionList = field(default_factory=EditDecisionList)
    camera_video_path: Optional[str] = None
    microphone_audio_path: Optional[str] = None
    camera_offset_ms: Optional[int] = None
    microphone_offset_ms: Optional[int] = None
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @classmethod
    def new(
        cls,
        project_id: str,
        screen_video_path: str,
        duration: float,
        width: int,
        height: int,
        camera_video_path: Optional[str] = None,
        microphone_audio_path: Optional[str] = None,
    ) -> "Project":
        """Creates a project with one enabled segment covering the whole recording"""
        segment = Segment(
            id=str(uuid.uuid4()), start_time=0.0, end_time=duration, enabled=True
        )
        return cls(
            id=project_id,
            name=f"Recording {project_id[:8]}",
            screen_video_path=screen_video_path,
            duration=duration,
            resolution=Resolution(width=width, height=height),
            edits=EditDecisionList(segments=[segment]),
            camera_video_path=camera_video_path,
            microphone_audio_path=microphone_audio_path,
        )

    # The on-disk document uses camelCase keys.

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Project":
        edits = data.get("edits") or {}
        overlay = edits.get("cameraOverlay") or {}
        mix = edits.get("audioMix") or {}
        created_at = data.get("createdAt")

        return cls(
            id=data["id"],
            name=data.get("name", ""),
            screen_video_path=data["screenVideoPath"],
            camera_video_path=data.get("cameraVideoPath"),
            microphone_audio_path=data.get("microphoneAudioPath"),
            camera_offset_ms=data.get("cameraOffsetMs"),
            microphone_offset_ms=data.get("microphoneOffsetMs"),
            duration=float(data["duration"]),
            resolution=Resolution(
                width=int(data["resolution"]["width"]),
                height=int(data["resolution"]["height"]),
            ),
            created_at=_parse_timestamp(created_at),
            edits=EditDecisionList(
                segments=[
                    Segment(
                        id=s["id"],
                        start_time=float(s["startTime"]),
                        end_time=float(s["endTime"]),
                        enabled=bool(s.get("enabled", True)),
                    )
                    for s in edits.get("segments", [])
                ],
                zoom=[
                    ZoomEffect(
                        id=z["id"],
                        start_time=float(z["startTime"]),
                        end_time=float(z["endTime"]),
                        scale=float(z["scale"]),
                        x=float(z.get("x", 0.0)),
                        y=float(z.get("y", 0.0)),
                    )
                    for z in edits.get("zoom", [])
                ],
                speed=[
                    SpeedEffect(
                        id=s["id"],
                        start_time=float(s["startTime"]),
                        end_time=float(s["endTime"]),
                        speed=float(s["speed"]),
                    )
                    for s in edits.get("speed", [])
                ],
                annotations=[
                    Annotation(
                        id=a["id"],
                        start_time=float(a["startTime"]),
                        end_time=float(a["endTime"]),
                        x=float(a["x"]),
                        y=float(a["y"]),
                        width=float(a["width"]),
                        height=float(a["height"]),
                        color=a.get("color", "#ff3b30"),
                        opacity=float(a.get("opacity", 1.0)),
                        thickness=int(a.get("thickness", 4)),
                        text=a.get("text"),
                    )
                    for a in edits.get("annotations", [])
                ],
                camera_overlay=CameraOverlaySettings(
                    position=CameraOverlayPosition(
                        overlay.get("position", CameraOverlayPosition.BOTTOM_RIGHT.value)
                    ),
                    margin=int(overlay.get("margin", 24)),
                    scale=float(overlay.get("scale", 0.25)),
                    custom_x=float(overlay.get("customX", 1.0)),
                    custom_y=float(overlay.get("customY", 1.0)),
                ),
                audio_mix=AudioMixSettings(
                    system_volume=float(mix.get("systemVolume", 1.0)),
                    microphone_volume=float(mix.get("microphoneVolume", 1.0)),
                ),
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        edits = self.edits
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "createdAt": self.created_at.isoformat(),
            "screenVideoPath": self.screen_video_path,
            "duration": self.duration,
            "resolution": {
                "width": self.resolution.width,
                "height": self.resolution.height,
            },
            "edits": {
                "segments": [
                    {
                        "id": s.id,
                        "startTime": s.start_time,
                        "endTime": s.end_time,
                        "enabled": s.enabled,
                    }
                    for s in edits.segments
                ],
                "zoom": [
                    {
                        "id": z.id,
                        "startTime": z.start_time,
                        "endTime": z.end_time,
                        "scale": z.scale,
                        "x": z.x,
                        "y": z.y,
                    }
                    for z in edits.zoom
                ],
                "speed": [
                    {
                        "id": s.id,
                        "startTime": s.start_time,
                        "endTime": s.end_time,
                        "speed": s.speed,
                    }
                    for s in edits.speed
                ],
                "annotations": [
                    {
                        "id": a.id,
                        "startTime": a.start_time,
                        "endTime": a.end_time,
                        "x": a.x,
                        "y": a.y,
                        "width": a.width,
                        "height": a.height,
                        "color": a.color,
                        "opacity": a.opacity,
                        "thickness": a.thickness,
                        "text": a.text,
                    }
                    for a in edits.annotations
                ],
                "cameraOverlay": {
                    "position": edits.camera_overlay.position.value,
                    "margin": edits.camera_overlay.margin,
                    "scale": edits.camera_overlay.scale,
                    "customX": edits.camera_overlay.custom_x,
                    "customY": edits.camera_overlay.custom_y,
                },
                "audioMix": {
                    "systemVolume": edits.audio_mix.system_volume,
                    "microphoneVolume": edits.audio_mix.microphone_volume,
                },
            },
        }
        # Optional media keys are omitted rather than written as null
        optional = {
            "cameraVideoPath": self.camera_video_path,
            "microphoneAudioPath": self.microphone_audio_path,
            "cameraOffsetMs": self.camera_offset_ms,
            "microphoneOffsetMs": self.microphone_offset_ms,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data
