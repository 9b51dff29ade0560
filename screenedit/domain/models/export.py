# -*- coding: utf-8 -*-
"""
Export options chosen by the user: format, frame rate, compression and size
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ExportFormat(str, Enum):
    MP4 = "mp4"
    MOV = "mov"
    GIF = "gif"
    WAV = "wav"
    MP3 = "mp3"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def is_audio_only(self) -> bool:
        return self in (ExportFormat.WAV, ExportFormat.MP3)

    @property
    def is_animated_image(self) -> bool:
        return self is ExportFormat.GIF


class CompressionPreset(str, Enum):
    MINIMAL = "minimal"
    SOCIAL = "social"
    WEB = "web"
    POTATO = "potato"

    @property
    def crf(self) -> int:
        """CRF used by the software H.264 encoder"""
        return {
            CompressionPreset.MINIMAL: 18,
            CompressionPreset.SOCIAL: 23,
            CompressionPreset.WEB: 28,
            CompressionPreset.POTATO: 35,
        }[self]

    @property
    def preset(self) -> str:
        """x264 speed/quality preset"""
        return {
            CompressionPreset.MINIMAL: "slow",
            CompressionPreset.SOCIAL: "medium",
            CompressionPreset.WEB: "fast",
            CompressionPreset.POTATO: "veryfast",
        }[self]

    @property
    def audio_bitrate_kbps(self) -> int:
        return {
            CompressionPreset.MINIMAL: 320,
            CompressionPreset.SOCIAL: 192,
            CompressionPreset.WEB: 128,
            CompressionPreset.POTATO: 96,
        }[self]

    @property
    def bitrate_multiplier(self) -> float:
        return {
            CompressionPreset.MINIMAL: 1.6,
            CompressionPreset.SOCIAL: 1.0,
            CompressionPreset.WEB: 0.72,
            CompressionPreset.POTATO: 0.5,
        }[self]


class ResolutionPreset(str, Enum):
    P720 = "720p"
    P1080 = "1080p"
    P4K = "4k"

    @property
    def height(self) -> int:
        return {
            ResolutionPreset.P720: 720,
            ResolutionPreset.P1080: 1080,
            ResolutionPreset.P4K: 2160,
        }[self]

    @property
    def label(self) -> str:
        return self.value

    @property
    def base_bitrate_kbps(self) -> float:
        return {
            ResolutionPreset.P720: 5_000.0,
            ResolutionPreset.P1080: 8_000.0,
            ResolutionPreset.P4K: 24_000.0,
        }[self]


@dataclass(frozen=True)
class ExportOptions:
    """Export settings for one export job"""

    format: ExportFormat = ExportFormat.MP4
    frame_rate: int = 30
    compression: CompressionPreset = CompressionPreset.SOCIAL
    resolution: ResolutionPreset = ResolutionPreset.P1080

    @property
    def target_video_bitrate_kbps(self) -> int:
        """Bitrate target for encoders driven by bitrate instead of CRF"""
        return int(
            round(self.resolution.base_bitrate_kbps * self.compression.bitrate_multiplier)
        )
