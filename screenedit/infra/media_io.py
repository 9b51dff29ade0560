# -*- coding: utf-8 -*-
"""
FFprobe-backed inspection of recorded media
"""

import json
import subprocess
from pathlib import Path
from typing import Optional, Tuple, Union

from .logging import get_logger
from .paths import ffprobe_bin
from .settings import settings

PathLike = Union[str, Path]


class MediaIO:
    """Media probes; a failed probe is logged and reported as absent"""

    def __init__(self, timeout: Optional[float] = None):
        self.logger = get_logger("MediaIO")
        self.timeout = timeout if timeout is not None else settings.probe_timeout

    def _probe(self, path: PathLike, *args: str) -> dict:
        result = subprocess.run(
            [ffprobe_bin(), "-v", "error", *args, "-of", "json", str(path)],
            capture_output=True,
            text=True,
            check=True,
            timeout=self.timeout,
        )
        return json.loads(result.stdout or "{}")

    def has_audio_stream(self, path: PathLike) -> bool:
        """Whether the file carries at least one audio stream"""
        try:
            data = self._probe(
                path, "-select_streams", "a:0", "-show_entries", "stream=index"
            )
        except (OSError, subprocess.SubprocessError, ValueError) as e:
            self.logger.warning("Audio probe failed for %s: %s", path, e)
            return False

        has_audio = bool(data.get("streams"))
        self.logger.debug("Audio stream in %s: %s", path, has_audio)
        return has_audio

    def probe_video_dimensions(self, path: PathLike) -> Optional[Tuple[int, int]]:
        """Width and height of the first video stream"""
        try:
            data = self._probe(
                path, "-select_streams", "v:0", "-show_entries", "stream=width,height"
            )
            stream = data["streams"][0]
            width, height = int(stream["width"]), int(stream["height"])
        except (
            OSError,
            subprocess.SubprocessError,
            ValueError,
            KeyError,
            IndexError,
        ) as e:
            self.logger.warning("Dimension probe failed for %s: %s", path, e)
            return None

        self.logger.debug("Dimensions of %s: %dx%d", path, width, height)
        return width, height

    def probe_duration(self, path: PathLike) -> Optional[float]:
        """Container duration in seconds"""
        try:
            data = self._probe(path, "-show_entries", "format=duration")
            duration = float(data["format"]["duration"])
        except (
            OSError,
            subprocess.SubprocessError,
            ValueError,
            KeyError,
            TypeError,
        ) as e:
            self.logger.warning("Duration probe failed for %s: %s", path, e)
            return None

        self.logger.debug("Duration of %s: %.2fs", path, duration)
        return duration
