# -*- coding: utf-8 -*-
"""
Unit tests for the encoder capability table
"""

import pytest

from screenedit.domain.models.export import (
    CompressionPreset,
    ExportFormat,
    ExportOptions,
    ResolutionPreset,
)
from screenedit.rendering.codecs import (
    CAPABILITIES,
    Platform,
    audio_codec_args,
    codec_profile,
    video_codec_args,
)


def test_every_format_is_covered_on_every_platform():
    for fmt in ExportFormat:
        for platform in Platform:
            assert (fmt, platform) in CAPABILITIES


def test_mp4_software_encoder():
    options = ExportOptions(compression=CompressionPreset.WEB)
    profile = codec_profile(ExportFormat.MP4, Platform.OTHER)

    assert video_codec_args(profile, options) == [
        "-c:v", "libx264", "-crf", "28", "-preset", "fast", "-pix_fmt", "yuv420p"
    ]
    assert audio_codec_args(profile, options) == ["-c:a", "aac", "-b:a", "128k"]


def test_mp4_hardware_encoder_on_macos():
    options = ExportOptions(
        compression=CompressionPreset.MINIMAL, resolution=ResolutionPreset.P720
    )
    profile = codec_profile(ExportFormat.MP4, Platform.MACOS)

    assert video_codec_args(profile, options) == [
        "-c:v",
        "h264_videotoolbox",
        "-b:v",
        "8000k",
        "-allow_sw",
        "1",
        "-pix_fmt",
        "yuv420p",
    ]


@pytest.mark.parametrize("platform", list(Platform))
def test_mov_is_prores(platform):
    profile = codec_profile(ExportFormat.MOV, platform)
    options = ExportOptions(format=ExportFormat.MOV)

    assert video_codec_args(profile, options) == [
        "-c:v", "prores_ks", "-profile:v", "3", "-pix_fmt", "yuv422p10le"
    ]
    assert audio_codec_args(profile, options) == ["-c:a", "pcm_s16le"]


def test_audio_only_formats():
    options = ExportOptions(compression=CompressionPreset.POTATO)

    wav = codec_profile(ExportFormat.WAV, Platform.OTHER)
    mp3 = codec_profile(ExportFormat.MP3, Platform.MACOS)

    assert video_codec_args(wav, options) == []
    assert audio_codec_args(wav, options) == ["-c:a", "pcm_s16le"]
    assert audio_codec_args(mp3, options) == ["-c:a", "libmp3lame", "-b:a", "96k"]


def test_gif_has_no_codec_arguments():
    profile = codec_profile(ExportFormat.GIF, Platform.OTHER)

    assert video_codec_args(profile, ExportOptions()) == []
    assert audio_codec_args(profile, ExportOptions()) == []
