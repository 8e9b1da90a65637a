"""Build typed per-stream metadata from container streams.

The one-line summaries these feed are modeled on FFmpeg's avcodec_string(),
which ffmpeg and ffprobe use to describe streams.
"""

from fractions import Fraction
from typing import Optional, assert_never

from mediameta.core.names import codec_description
from mediameta.core.probe import AudioDecoder, Medium, Stream, VideoDecoder
from mediameta.errors import CodecInitError
from mediameta.models.stream import (
    AttachmentMetadata,
    AudioMetadata,
    DataMetadata,
    StreamMetadata,
    SubtitleMetadata,
    UnknownMetadata,
    VideoMetadata,
)
from mediameta.utils.format import format_bit_rate
from mediameta.utils.logger import get_logger

logger = get_logger(__name__)


def format_ratio(ratio: Fraction) -> str:
    return f"{ratio.numerator}:{ratio.denominator}"


def sample_aspect_ratio(raw: tuple[int, int]) -> Fraction:
    """Reduced SAR; an unspecified (0:N) ratio means square pixels."""
    num, den = raw
    if num == 0 or den == 0:
        return Fraction(1, 1)
    return Fraction(num, den)


def display_aspect_ratio(sar: Fraction, width: int, height: int) -> Optional[Fraction]:
    """DAR = SAR * width/height, or None when the height is unknown."""
    if height == 0:
        return None
    return sar * Fraction(width, height)


def frame_rate(raw: tuple[int, int]) -> tuple[Optional[Fraction], Optional[str]]:
    """Exact and formatted frame rate; (None, None) when the denominator is 0."""
    num, den = raw
    if den == 0:
        return None, None
    rate = Fraction(num, den)
    if rate.denominator == 1:
        return rate, f"{rate.numerator} fps"
    return rate, f"{float(rate):.2f} fps"


def color_spec(
    color_range: Optional[str],
    color_space: Optional[str],
    color_primaries: Optional[str],
    color_trc: Optional[str],
) -> str:
    """Summarize color properties, e.g. "tv, bt709" or "pc, bt709/unknown/unknown".

    Returns an empty string when nothing is known.
    """
    specs = []
    if color_range:
        specs.append(color_range)
    if color_space or color_primaries or color_trc:
        if color_space == color_primaries == color_trc:
            specs.append(color_space)
        else:
            specs.append(
                "/".join(v or "unknown" for v in (color_space, color_primaries, color_trc))
            )
    return ", ".join(specs)


def stream_language(stream: Stream) -> Optional[str]:
    return stream.tags.get("language") or stream.tags.get("LANGUAGE")


def _codec_desc(stream: Stream) -> str:
    params = stream.codec_parameters
    return codec_description(
        params.codec_id or "unknown", params.long_name, params.profile, params.level
    )


def build_video_metadata(stream: Stream) -> VideoMetadata:
    video = stream.decoder()
    if not isinstance(video, VideoDecoder):
        raise CodecInitError(stream.index, "expected a video decoder")

    sar = sample_aspect_ratio(video.sample_aspect_ratio)
    dar = display_aspect_ratio(sar, video.width, video.height)
    rate, rate_str = frame_rate(stream.avg_frame_rate)
    bit_rate = video.bit_rate or None

    return VideoMetadata(
        index=stream.index,
        codec=video.codec_id,
        codec_desc=_codec_desc(stream),
        width=video.width,
        height=video.height,
        pixel_dimensions=f"{video.width}x{video.height}",
        sample_aspect_ratio_value=sar,
        sample_aspect_ratio=format_ratio(sar),
        display_aspect_ratio_value=dar,
        display_aspect_ratio=format_ratio(dar) if dar is not None else None,
        pixel_fmt=video.pixel_format,
        color_range=video.color_range,
        color_space=video.color_space,
        color_primaries=video.color_primaries,
        color_trc=video.color_transfer,
        color_spec_str=color_spec(
            video.color_range, video.color_space, video.color_primaries, video.color_transfer
        ),
        frame_rate_value=rate,
        frame_rate=rate_str,
        bit_rate_value=bit_rate,
        bit_rate=format_bit_rate(bit_rate),
    )


def build_audio_metadata(stream: Stream) -> AudioMetadata:
    audio = stream.decoder()
    if not isinstance(audio, AudioDecoder):
        raise CodecInitError(stream.index, "expected an audio decoder")

    bit_rate = audio.bit_rate or None

    return AudioMetadata(
        index=stream.index,
        language=stream_language(stream),
        codec=audio.codec_id,
        codec_desc=_codec_desc(stream),
        sample_rate_value=audio.sample_rate,
        sample_rate=f"{audio.sample_rate} Hz",
        channels=audio.channels,
        channel_layout_value=audio.channel_layout,
        channel_layout=audio.describe_channel_layout(),
        bit_rate_value=bit_rate,
        bit_rate=format_bit_rate(bit_rate),
    )


def build_subtitle_metadata(stream: Stream) -> SubtitleMetadata:
    return SubtitleMetadata(
        index=stream.index,
        language=stream_language(stream),
        codec=stream.codec_parameters.codec_id,
        codec_desc=_codec_desc(stream),
    )


def build_stream_metadata(stream: Stream) -> StreamMetadata:
    """Build the metadata variant matching the stream's medium.

    Raises:
        CodecInitError: If a video/audio decoder cannot be set up
    """
    medium = stream.medium
    if medium is Medium.VIDEO:
        metadata: StreamMetadata = build_video_metadata(stream)
    elif medium is Medium.AUDIO:
        metadata = build_audio_metadata(stream)
    elif medium is Medium.SUBTITLE:
        metadata = build_subtitle_metadata(stream)
    elif medium is Medium.DATA:
        metadata = DataMetadata(index=stream.index)
    elif medium is Medium.ATTACHMENT:
        metadata = AttachmentMetadata(index=stream.index)
    elif medium is Medium.UNKNOWN:
        metadata = UnknownMetadata(index=stream.index)
    else:
        assert_never(medium)

    logger.debug("Stream parsed", stream_index=stream.index, medium=medium.value)
    return metadata
