# -*- coding: utf-8 -*-
"""
Unit tests for FFmpeg execution and progress parsing
"""

from unittest.mock import Mock, patch

import pytest

from screenedit.domain.errors import ExportCancelledError
from screenedit.rendering.runner import (
    Runner,
    parse_stderr_time,
    progress_from_fields,
)

PROGRESS_OUTPUT = [
    "frame=150\n",
    "fps=30.0\n",
    "bitrate=1200.5kbits/s\n",
    "out_time_us=5000000\n",
    "speed=1.5x\n",
    "progress=continue\n",
    "frame=300\n",
    "out_time_us=10000000\n",
    "speed=1.6x\n",
    "progress=end\n",
]


def fake_process(stdout_lines, return_code=0, stderr_lines=()):
    process = Mock()
    process.stdout = iter(stdout_lines)
    process.stderr = iter(stderr_lines)
    process.wait.return_value = return_code
    process.poll.return_value = None
    process.pid = 4242
    return process


class TestProgressParsing:
    def test_stderr_time(self):
        line = "frame=  100 fps= 30 q=-1.0 size=  256kB time=00:01:03.33 bitrate=N/A"

        assert parse_stderr_time(line) == pytest.approx(63.33)
        assert parse_stderr_time("no timing here") is None

    def test_fields_with_total_duration(self):
        progress = progress_from_fields(
            {"out_time_us": "5000000", "speed": "1.5x", "frame": "150", "fps": "30.0"},
            total_duration=10.0,
        )

        assert progress.out_time_ms == 5000
        assert progress.percent == pytest.approx(50.0)
        assert progress.speed == 1.5
        assert progress.frame == 150
        assert progress.fps == 30.0

    def test_out_time_ms_is_microseconds(self):
        progress = progress_from_fields({"out_time_ms": "2500000"})

        assert progress.out_time_ms == 2500
        assert progress.percent is None

    def test_out_time_fallback_and_clamp(self):
        progress = progress_from_fields(
            {"out_time": "00:00:12.000000", "speed": "N/A"}, total_duration=10.0
        )

        assert progress.out_time_ms == 12000
        assert progress.percent == 100.0
        assert progress.speed is None

    def test_unusable_fields(self):
        assert progress_from_fields({"frame": "1"}) is None
        assert progress_from_fields({"out_time_us": "N/A"}) is None


class TestRunner:
    @patch("screenedit.rendering.runner.subprocess.Popen")
    def test_run_reports_progress(self, mock_popen):
        mock_popen.return_value = fake_process(PROGRESS_OUTPUT)
        updates = []

        result = Runner().run(
            ["ffmpeg", "-i", "in.mp4", "-y", "out.mp4"],
            on_progress=updates.append,
            total_duration=10.0,
        )

        cmd = mock_popen.call_args[0][0]
        assert cmd[:4] == ["ffmpeg", "-progress", "pipe:1", "-nostats"]
        assert cmd[-1] == "out.mp4"
        assert [u.percent for u in updates] == [pytest.approx(50.0), 100.0]
        assert result.returncode == 0

    @patch("screenedit.rendering.runner.subprocess.Popen")
    def test_failure_raises_with_stderr(self, mock_popen):
        mock_popen.return_value = fake_process(
            [], return_code=1, stderr_lines=["Invalid filter\n"]
        )

        with pytest.raises(RuntimeError, match="Invalid filter"):
            Runner().run(["ffmpeg", "-y", "out.mp4"])

    @patch("screenedit.rendering.runner.subprocess.Popen")
    def test_missing_binary(self, mock_popen):
        mock_popen.side_effect = FileNotFoundError("ffmpeg")

        with pytest.raises(RuntimeError, match="Could not start FFmpeg"):
            Runner().run(["ffmpeg", "-y", "out.mp4"])

    @patch("screenedit.rendering.runner.subprocess.Popen")
    def test_failing_callback_kills_ffmpeg(self, mock_popen):
        process = fake_process(PROGRESS_OUTPUT)
        mock_popen.return_value = process
        runner = Runner()

        with pytest.raises(ZeroDivisionError):
            runner.run(
                ["ffmpeg", "-y", "out.mp4"],
                on_progress=lambda progress: 1 / 0,
                total_duration=10.0,
            )
        process.kill.assert_called_once()
        assert runner.cancel() is False

    def test_cancel_without_process(self):
        assert Runner().cancel() is False

    @patch("screenedit.rendering.runner.subprocess.Popen")
    def test_cancel_during_run(self, mock_popen):
        runner = Runner()
        process = fake_process([], return_code=255)

        def stdout():
            assert runner.cancel() is True
            yield "progress=end\n"

        process.stdout = stdout()
        mock_popen.return_value = process

        with pytest.raises(ExportCancelledError):
            runner.run(["ffmpeg", "-y", "out.mp4"])
        process.terminate.assert_called_once()
