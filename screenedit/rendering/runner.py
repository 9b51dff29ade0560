# -*- coding: utf-8 -*-
"""
Runs FFmpeg commands with progress reporting and cancellation
"""

import os
import re
import subprocess
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ..domain.errors import ExportCancelledError
from ..infra.logging import get_logger

STDERR_TIME = re.compile(r"time=(\d+):(\d+):(\d+(?:\.\d+)?)")


@dataclass(frozen=True)
class Progress:
    """Rendering progress reported by ffmpeg"""

    out_time_ms: int
    speed: Optional[float]
    percent: Optional[float]
    frame: Optional[int] = None
    fps: Optional[float] = None
    bitrate: Optional[str] = None


def parse_stderr_time(line: str) -> Optional[float]:
    """Seconds from a classic stats line ("frame=  100 ... time=00:00:03.33 ...")"""
    match = STDERR_TIME.search(line)
    if not match:
        return None
    hours, minutes, seconds = match.groups()
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)


def progress_from_fields(
    fields: Dict[str, str], total_duration: Optional[float] = None
) -> Optional[Progress]:
    """Builds a Progress from one block of -progress key=value output"""
    try:
        # out_time_ms is reported in microseconds as well, despite its name
        if "out_time_us" in fields:
            out_time_ms = int(fields["out_time_us"]) // 1000
        elif "out_time_ms" in fields:
            out_time_ms = int(fields["out_time_ms"]) // 1000
        elif "out_time" in fields:
            seconds = parse_stderr_time("time=" + fields["out_time"])
            if seconds is None:
                return None
            out_time_ms = int(seconds * 1000)
        else:
            return None

        speed = fields.get("speed", "").rstrip("x").strip()
        fps = fields.get("fps")
        frame = fields.get("frame")
        percent = None
        if total_duration and total_duration > 0:
            percent = max(0.0, min(100.0, out_time_ms / 10.0 / total_duration))

        return Progress(
            out_time_ms=out_time_ms,
            speed=float(speed) if speed and speed != "N/A" else None,
            percent=percent,
            frame=int(frame) if frame else None,
            fps=float(fps) if fps else None,
            bitrate=fields.get("bitrate"),
        )
    except ValueError:
        return None


class Runner:
    """Executes ffmpeg, one process at a time per runner"""

    def __init__(self):
        self.logger = get_logger("Runner")
        self._process: Optional[subprocess.Popen] = None
        self._cancelled = threading.Event()

    def cancel(self) -> bool:
        """Stops the running process; False when nothing is running"""
        process = self._process
        if process is None or process.poll() is not None:
            return False
        self.logger.info("Cancelling FFmpeg process %d", process.pid)
        self._cancelled.set()
        process.terminate()
        return True

    def run(
        self,
        cmd: List[str],
        on_progress: Optional[Callable[[Progress], None]] = None,
        timeout: Optional[float] = None,
        total_duration: Optional[float] = None,
    ) -> subprocess.CompletedProcess:
        """Runs the command, reporting progress until it exits"""
        self.logger.info("Running FFmpeg command: %s", " ".join(map(str, cmd)))
        self._cancelled.clear()

        # -progress is a global option and must precede the outputs
        cmd_with_progress = [cmd[0], "-progress", "pipe:1", "-nostats", *cmd[1:]]

        kwargs = {}
        if os.name == "nt":
            kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP

        try:
            process = subprocess.Popen(
                cmd_with_progress,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                **kwargs,
            )
        except OSError as e:
            self.logger.error("Could not start FFmpeg: %s", e)
            raise RuntimeError(f"Could not start FFmpeg: {e}") from e
        self._process = process

        stderr_lines: List[str] = []
        stderr_reader = threading.Thread(
            target=self._drain, args=(process.stderr, stderr_lines), daemon=True
        )
        stderr_reader.start()

        watchdog = None
        if timeout:
            watchdog = threading.Timer(timeout, process.kill)
            watchdog.start()

        started = time.monotonic()
        fields: Dict[str, str] = {}
        try:
            for line in process.stdout:
                key, sep, value = line.strip().partition("=")
                if not sep:
                    continue
                fields[key] = value
                if key == "progress":
                    progress = progress_from_fields(fields, total_duration)
                    if progress and on_progress:
                        on_progress(progress)
                    fields = {}
            return_code = process.wait()
        except BaseException:
            # Never leave ffmpeg running without an owner
            if process.poll() is None:
                self.logger.warning("Killing FFmpeg process %d", process.pid)
                process.kill()
                process.wait()
            raise
        finally:
            if watchdog:
                watchdog.cancel()
            stderr_reader.join(timeout=5)
            self._process = None

        stderr = "".join(stderr_lines)
        if self._cancelled.is_set():
            self.logger.info("FFmpeg process cancelled")
            raise ExportCancelledError("Export cancelled")
        if timeout and time.monotonic() - started >= timeout and return_code != 0:
            self.logger.error("FFmpeg timed out after %ss", timeout)
            raise RuntimeError(f"FFmpeg exceeded the {timeout}s timeout")
        if return_code != 0:
            self.logger.error(
                "FFmpeg exited with code %d. Stderr: %s", return_code, stderr
            )
            raise RuntimeError(
                f"FFmpeg failed with exit code {return_code}: {stderr[-2000:]}"
            )

        self.logger.info("FFmpeg finished successfully")
        return subprocess.CompletedProcess(cmd, return_code, "", stderr)

    @staticmethod
    def _drain(stream, sink: List[str]) -> None:
        for line in stream:
            sink.append(line)
