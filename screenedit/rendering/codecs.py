# -*- coding: utf-8 -*-
"""
Encoder capability table keyed by (export format, platform)
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..domain.models.export import ExportFormat, ExportOptions


class Platform(str, Enum):
    MACOS = "macos"
    OTHER = "other"

    @classmethod
    def current(cls) -> "Platform":
        return cls.MACOS if sys.platform == "darwin" else cls.OTHER


@dataclass(frozen=True)
class CodecProfile:
    """How one format is encoded on one platform"""

    video_codec: Optional[str] = None
    rate_control: Optional[str] = None  # "crf" | "bitrate"
    video_extra: tuple[str, ...] = ()
    pix_fmt: Optional[str] = None
    audio_codec: Optional[str] = None
    audio_bitrate: bool = False

    @property
    def has_video(self) -> bool:
        return self.video_codec is not None

    @property
    def has_audio(self) -> bool:
        return self.audio_codec is not None


_X264 = CodecProfile(
    video_codec="libx264",
    rate_control="crf",
    pix_fmt="yuv420p",
    audio_codec="aac",
    audio_bitrate=True,
)
_VIDEOTOOLBOX = CodecProfile(
    video_codec="h264_videotoolbox",
    rate_control="bitrate",
    video_extra=("-allow_sw", "1"),
    pix_fmt="yuv420p",
    audio_codec="aac",
    audio_bitrate=True,
)
_PRORES = CodecProfile(
    video_codec="prores_ks",
    video_extra=("-profile:v", "3"),
    pix_fmt="yuv422p10le",
    audio_codec="pcm_s16le",
)
# The gif muxer picks its own encoder; the palette lives in the filtergraph
_GIF = CodecProfile()
_WAV = CodecProfile(audio_codec="pcm_s16le")
_MP3 = CodecProfile(audio_codec="libmp3lame", audio_bitrate=True)

CAPABILITIES: dict[tuple[ExportFormat, Platform], CodecProfile] = {
    (ExportFormat.MP4, Platform.MACOS): _VIDEOTOOLBOX,
    (ExportFormat.MP4, Platform.OTHER): _X264,
    **{(ExportFormat.MOV, platform): _PRORES for platform in Platform},
    **{(ExportFormat.GIF, platform): _GIF for platform in Platform},
    **{(ExportFormat.WAV, platform): _WAV for platform in Platform},
    **{(ExportFormat.MP3, platform): _MP3 for platform in Platform},
}


def codec_profile(fmt: ExportFormat, platform: Platform) -> CodecProfile:
    return CAPABILITIES[(fmt, platform)]


def video_codec_args(profile: CodecProfile, options: ExportOptions) -> list[str]:
    if not profile.has_video:
        return []

    args = ["-c:v", profile.video_codec]
    if profile.rate_control == "crf":
        args.extend(
            ["-crf", str(options.compression.crf), "-preset", options.compression.preset]
        )
    elif profile.rate_control == "bitrate":
        args.extend(["-b:v", f"{options.target_video_bitrate_kbps}k"])
    args.extend(profile.video_extra)
    if profile.pix_fmt:
        args.extend(["-pix_fmt", profile.pix_fmt])
    return args


def audio_codec_args(profile: CodecProfile, options: ExportOptions) -> list[str]:
    if not profile.has_audio:
        return []

    args = ["-c:a", profile.audio_codec]
    if profile.audio_bitrate:
        args.extend(["-b:a", f"{options.compression.audio_bitrate_kbps}k"])
    return args
