"""Shared pytest fixtures for mediameta tests."""

import copy

import pytest

from mediameta.core.probe import Container

H264_STREAM = {
    "index": 0,
    "codec_name": "h264",
    "codec_long_name": "H.264 / AVC / MPEG-4 AVC / MPEG-4 part 10",
    "profile": "High",
    "codec_type": "video",
    "width": 1920,
    "height": 1080,
    "sample_aspect_ratio": "1:1",
    "display_aspect_ratio": "16:9",
    "pix_fmt": "yuv420p",
    "level": 40,
    "color_range": "tv",
    "color_space": "bt709",
    "color_transfer": "bt709",
    "color_primaries": "bt709",
    "field_order": "progressive",
    "r_frame_rate": "25/1",
    "avg_frame_rate": "25/1",
    "disposition": {"default": 1, "attached_pic": 0},
    "tags": {"language": "und"},
}

AAC_STREAM = {
    "index": 1,
    "codec_name": "aac",
    "codec_long_name": "AAC (Advanced Audio Coding)",
    "profile": "LC",
    "codec_type": "audio",
    "sample_rate": "48000",
    "channels": 2,
    "channel_layout": "stereo",
    "avg_frame_rate": "0/0",
    "bit_rate": "128000",
    "disposition": {"default": 1, "attached_pic": 0},
    "tags": {"language": "eng", "handler_name": "SoundHandler"},
}

SAMPLE_FORMAT = {
    "filename": "sample.mkv",
    "nb_streams": 2,
    "format_name": "matroska,webm",
    "format_long_name": "Matroska / WebM",
    "duration": "10.000000",
    "tags": {
        "title": "Sample Clip",
        "encoder": "libebml v1.4.2 + libmatroska v1.6.4",
        "ARTIST": "Someone",
        "_STATISTICS_WRITING_APP": "mkvmerge v57.0.0",
    },
}

SAMPLE_FILE_SIZE = 1_250_000


@pytest.fixture
def h264_stream():
    """ffprobe entry for a 1080p25 progressive H.264 stream."""
    return copy.deepcopy(H264_STREAM)


@pytest.fixture
def aac_stream():
    """ffprobe entry for a stereo 48 kHz AAC stream."""
    return copy.deepcopy(AAC_STREAM)


@pytest.fixture
def probe_data(h264_stream, aac_stream):
    """ffprobe report for a Matroska file with one video and one audio stream."""
    return {"streams": [h264_stream, aac_stream], "format": copy.deepcopy(SAMPLE_FORMAT)}


@pytest.fixture
def sample_file(tmp_path):
    """A 1,250,000 byte file standing in for the media file."""
    path = tmp_path / "sample.mkv"
    path.write_bytes(b"\0" * SAMPLE_FILE_SIZE)
    return path


@pytest.fixture
def sample_container(sample_file, probe_data):
    """Container built from the sample ffprobe report."""
    return Container(sample_file, probe_data)
