"""Unit tests for the ffprobe-backed container facade."""

import json
import subprocess
from unittest.mock import Mock, patch

import pytest

from mediameta.core.probe import (
    TIME_BASE,
    AudioDecoder,
    Container,
    FieldOrder,
    Frame,
    Medium,
    Stream,
    VideoDecoder,
    open_container,
    parse_ratio,
)
from mediameta.errors import CodecInitError, FFprobeNotFoundError, UnrecognizedContainerError


class TestParseRatio:
    """Test raw ratio parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("24000/1001", (24000, 1001)),
            ("16:9", (16, 9)),
            ("0/0", (0, 0)),
            ("0:1", (0, 1)),
            ("25", (25, 1)),
            (None, (0, 0)),
            ("", (0, 0)),
            ("N/A", (0, 0)),
        ],
    )
    def test_values(self, value, expected):
        assert parse_ratio(value) == expected


class TestStream:
    """Test stream construction and decoder views."""

    def test_from_probe(self, h264_stream):
        stream = Stream.from_probe(h264_stream)

        assert stream.index == 0
        assert stream.medium is Medium.VIDEO
        assert stream.codec_parameters.codec_id == "h264"
        assert stream.codec_parameters.profile == "High"
        assert stream.codec_parameters.level == 40
        assert stream.avg_frame_rate == (25, 1)
        assert stream.tags == {"language": "und"}

    def test_numeric_profile_is_text(self, aac_stream):
        aac_stream["profile"] = 128

        stream = Stream.from_probe(aac_stream)

        assert stream.codec_parameters.profile == "128"

    def test_unknown_codec_type(self):
        stream = Stream.from_probe({"index": 3, "codec_type": "something"})

        assert stream.medium is Medium.UNKNOWN

    def test_video_decoder(self, h264_stream):
        decoder = Stream.from_probe(h264_stream).decoder()

        assert isinstance(decoder, VideoDecoder)
        assert decoder.width == 1920
        assert decoder.height == 1080
        assert decoder.sample_aspect_ratio == (1, 1)
        assert decoder.field_order is FieldOrder.PROGRESSIVE
        assert decoder.pixel_format == "yuv420p"
        assert decoder.color_range == "tv"
        assert decoder.bit_rate == 0

    def test_unspecified_color_values_are_none(self, h264_stream):
        h264_stream["color_range"] = "unknown"
        h264_stream["color_space"] = "unspecified"
        del h264_stream["color_primaries"]

        decoder = Stream.from_probe(h264_stream).decoder()

        assert decoder.color_range is None
        assert decoder.color_space is None
        assert decoder.color_primaries is None
        assert decoder.color_transfer == "bt709"

    def test_missing_field_order_is_unknown(self, h264_stream):
        del h264_stream["field_order"]

        decoder = Stream.from_probe(h264_stream).decoder()

        assert decoder.field_order is FieldOrder.UNKNOWN

    def test_audio_decoder(self, aac_stream):
        decoder = Stream.from_probe(aac_stream).decoder()

        assert isinstance(decoder, AudioDecoder)
        assert decoder.sample_rate == 48000
        assert decoder.channels == 2
        assert decoder.bit_rate == 128000
        assert decoder.describe_channel_layout() == "stereo"

    def test_channel_layout_truncated_at_nul(self):
        decoder = AudioDecoder(codec_id="pcm_s16le", sample_rate=44100, channels=6, channel_layout="5.1\0garbage")

        assert decoder.describe_channel_layout() == "5.1"

    def test_channel_layout_falls_back_to_channel_count(self):
        decoder = AudioDecoder(codec_id="pcm_s16le", sample_rate=44100, channels=3)

        assert decoder.describe_channel_layout() == "3 channels"

    def test_decoder_not_found(self, aac_stream):
        del aac_stream["codec_name"]

        with pytest.raises(CodecInitError, match="stream #1"):
            Stream.from_probe(aac_stream).decoder()

    def test_unknown_codec_name(self, h264_stream):
        h264_stream["codec_name"] = "unknown"

        with pytest.raises(CodecInitError):
            Stream.from_probe(h264_stream).decoder()

    def test_no_decoder_for_subtitles(self):
        stream = Stream.from_probe({"index": 2, "codec_type": "subtitle", "codec_name": "subrip"})

        with pytest.raises(CodecInitError):
            stream.decoder()


class TestContainer:
    """Test container-level facts."""

    def test_format_facts(self, sample_container):
        assert sample_container.format_id == "matroska,webm"
        assert sample_container.format_long_name == "Matroska / WebM"
        assert sample_container.duration == 10 * TIME_BASE
        assert sample_container.bit_rate == 0
        assert list(sample_container.tags) == [
            "title",
            "encoder",
            "ARTIST",
            "_STATISTICS_WRITING_APP",
        ]
        assert [s.index for s in sample_container.streams] == [0, 1]

    def test_missing_duration(self, sample_file):
        container = Container(sample_file, {"format": {"format_name": "mp3"}, "streams": []})

        assert container.duration is None

    def test_best_stream_none_without_video(self, sample_file, aac_stream):
        container = Container(sample_file, {"format": {}, "streams": [aac_stream]})

        assert container.best_stream(Medium.VIDEO) is None
        assert container.best_stream(Medium.AUDIO).index == 1

    def test_best_stream_prefers_default_disposition(self, sample_file, h264_stream):
        small_default = dict(h264_stream, index=0, width=640, height=360)
        large = dict(h264_stream, index=1, disposition={"default": 0})
        container = Container(sample_file, {"format": {}, "streams": [small_default, large]})

        assert container.best_stream(Medium.VIDEO).index == 0

    def test_best_stream_skips_attached_pictures(self, sample_file, h264_stream):
        cover = dict(
            h264_stream,
            index=0,
            codec_name="mjpeg",
            width=3000,
            height=3000,
            disposition={"default": 1, "attached_pic": 1},
        )
        video = dict(h264_stream, index=1)
        container = Container(sample_file, {"format": {}, "streams": [cover, video]})

        assert container.best_stream(Medium.VIDEO).index == 1

    def test_best_stream_prefers_larger_picture(self, sample_file, h264_stream):
        small = dict(h264_stream, index=0, width=640, height=360)
        large = dict(h264_stream, index=1)
        container = Container(sample_file, {"format": {}, "streams": [small, large]})

        assert container.best_stream(Medium.VIDEO).index == 1

    def test_best_stream_ties_go_to_lowest_index(self, sample_file, h264_stream):
        first = dict(h264_stream, index=0)
        second = dict(h264_stream, index=1)
        container = Container(sample_file, {"format": {}, "streams": [first, second]})

        assert container.best_stream(Medium.VIDEO).index == 0


class TestDecodeFrames:
    """Test the bounded frame scan."""

    def test_yields_frames(self, sample_container):
        stream = sample_container.streams[0]

        with patch("subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=0, stdout="0\n\n0\n1\n0\n", stderr="")
            frames = list(sample_container.decode_frames(stream, max_frames=30))

        assert frames == [
            Frame(interlaced=False),
            Frame(interlaced=False),
            Frame(interlaced=True),
            Frame(interlaced=False),
        ]
        cmd = mock_run.call_args[0][0]
        assert cmd[0] == "ffprobe"
        assert cmd[cmd.index("-select_streams") + 1] == "0"
        assert cmd[cmd.index("-read_intervals") + 1] == "%+#30"
        assert "frame=interlaced_frame" in cmd
        assert cmd[-1] == str(sample_container.path)
        assert mock_run.call_args[1]["timeout"] == 30

    def test_stops_at_max_frames(self, sample_container):
        stream = sample_container.streams[0]

        with patch("subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=0, stdout="0\n0\n0\n0\n", stderr="")
            frames = list(sample_container.decode_frames(stream, max_frames=2))

        assert len(frames) == 2

    def test_failed_scan_raises(self, sample_container):
        stream = sample_container.streams[0]
        error = subprocess.CalledProcessError(
            1, "ffprobe", output="", stderr="Error while decoding stream #0:0: Invalid data\n"
        )

        with patch("subprocess.run", side_effect=error):
            with pytest.raises(UnrecognizedContainerError, match="Invalid data"):
                list(sample_container.decode_frames(stream))

    def test_failed_scan_without_stderr(self, sample_container):
        stream = sample_container.streams[0]
        error = subprocess.CalledProcessError(-11, "ffprobe", output="", stderr="")

        with patch("subprocess.run", side_effect=error):
            with pytest.raises(UnrecognizedContainerError, match="frame scan of stream #0 failed"):
                list(sample_container.decode_frames(stream))

    def test_timeout(self, sample_file, probe_data):
        container = Container(sample_file, probe_data, timeout_seconds=5)
        stream = container.streams[0]

        with patch(
            "subprocess.run", side_effect=subprocess.TimeoutExpired("ffprobe", 5)
        ) as mock_run:
            with pytest.raises(UnrecognizedContainerError, match="timed out after 5s"):
                list(container.decode_frames(stream))

        assert mock_run.call_args[1]["timeout"] == 5

    def test_closed_container_refuses_scan(self, sample_container):
        stream = sample_container.streams[0]

        with sample_container:
            pass

        with patch("subprocess.run") as mock_run:
            with pytest.raises(ValueError, match="closed"):
                list(sample_container.decode_frames(stream))

        mock_run.assert_not_called()


class TestOpenContainer:
    """Test running ffprobe."""

    def test_success(self, sample_file, probe_data):
        with patch("shutil.which", return_value="/usr/bin/ffprobe"), patch(
            "subprocess.run"
        ) as mock_run:
            mock_run.return_value = Mock(returncode=0, stdout=json.dumps(probe_data))
            container = open_container(sample_file)

        assert container.format_id == "matroska,webm"
        assert len(container.streams) == 2
        cmd = mock_run.call_args[0][0]
        assert "-show_format" in cmd
        assert "-show_streams" in cmd

    def test_ffprobe_missing(self, sample_file):
        with patch("shutil.which", return_value=None):
            with pytest.raises(FFprobeNotFoundError, match="ffprobe not found"):
                open_container(sample_file)

    def test_unrecognized_container(self, sample_file):
        error = subprocess.CalledProcessError(
            1, "ffprobe", stderr=f"{sample_file}: Invalid data found when processing input\n"
        )
        with patch("shutil.which", return_value="/usr/bin/ffprobe"), patch(
            "subprocess.run", side_effect=error
        ):
            with pytest.raises(UnrecognizedContainerError, match="Invalid data found"):
                open_container(sample_file)

    def test_timeout(self, sample_file):
        with patch("shutil.which", return_value="/usr/bin/ffprobe"), patch(
            "subprocess.run", side_effect=subprocess.TimeoutExpired("ffprobe", 30)
        ):
            with pytest.raises(UnrecognizedContainerError, match="timed out"):
                open_container(sample_file)

    def test_bad_json(self, sample_file):
        with patch("shutil.which", return_value="/usr/bin/ffprobe"), patch(
            "subprocess.run", return_value=Mock(returncode=0, stdout="not json")
        ):
            with pytest.raises(UnrecognizedContainerError):
                open_container(sample_file)

    def test_errors_are_io_errors(self, sample_file):
        with patch("shutil.which", return_value=None):
            with pytest.raises(OSError):
                open_container(sample_file)
