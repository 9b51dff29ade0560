# -*- coding: utf-8 -*-
"""
Derived timeline types used while compiling an export
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class ActiveZoom:
    """Zoom in effect for a whole piece"""

    scale: float
    x: float
    y: float


@dataclass(frozen=True)
class TimelinePiece:
    """Interval of one enabled segment with constant speed and zoom"""

    start: float
    end: float
    speed: float = 1.0
    zoom: Optional[ActiveZoom] = None

    @property
    def duration(self) -> float:
        return self.end - self.start


class AudioSourceConfig(Enum):
    """Which audio sources take part in an export"""

    NONE = "none"
    SCREEN_ONLY = "screen_only"
    MIC_ONLY = "mic_only"
    BOTH = "both"

    @classmethod
    def resolve(cls, screen_has_audio: bool, has_microphone: bool) -> "AudioSourceConfig":
        if screen_has_audio and has_microphone:
            return cls.BOTH
        if screen_has_audio:
            return cls.SCREEN_ONLY
        if has_microphone:
            return cls.MIC_ONLY
        return cls.NONE

    @property
    def has_screen(self) -> bool:
        return self in (AudioSourceConfig.SCREEN_ONLY, AudioSourceConfig.BOTH)

    @property
    def has_microphone(self) -> bool:
        return self in (AudioSourceConfig.MIC_ONLY, AudioSourceConfig.BOTH)
