# -*- coding: utf-8 -*-
"""
Shared fixtures: project factory and a fake media probe
"""

from unittest.mock import Mock

import pytest

from screenedit.domain.models.project import (
    EditDecisionList,
    Project,
    Resolution,
    Segment,
)


@pytest.fixture
def make_project():
    """Factory for projects; segments are (start, end) or (start, end, enabled)"""

    def _make(
        duration=20.0,
        segments=None,
        screen_path="/rec/screen.mp4",
        camera_path=None,
        microphone_path=None,
        camera_offset_ms=None,
        microphone_offset_ms=None,
        width=1920,
        height=1080,
        **edits,
    ):
        if segments is None:
            segments = [(0.0, duration)]
        segment_models = []
        for index, segment in enumerate(segments):
            start, end = segment[0], segment[1]
            enabled = segment[2] if len(segment) > 2 else True
            segment_models.append(
                Segment(id=f"seg{index}", start_time=start, end_time=end, enabled=enabled)
            )

        return Project(
            id="project-1234",
            name="Demo",
            screen_video_path=str(screen_path),
            duration=duration,
            resolution=Resolution(width=width, height=height),
            edits=EditDecisionList(segments=segment_models, **edits),
            camera_video_path=str(camera_path) if camera_path else None,
            microphone_audio_path=str(microphone_path) if microphone_path else None,
            camera_offset_ms=camera_offset_ms,
            microphone_offset_ms=microphone_offset_ms,
        )

    return _make


@pytest.fixture
def audio_probe():
    """Probe reporting an audio stream in every file"""
    probe = Mock()
    probe.has_audio_stream.return_value = True
    return probe


@pytest.fixture
def silent_probe():
    """Probe reporting no audio stream anywhere"""
    probe = Mock()
    probe.has_audio_stream.return_value = False
    return probe
