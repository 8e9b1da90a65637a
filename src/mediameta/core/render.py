"""Plain-text rendering of metadata for terminal output."""

from typing import assert_never

from mediameta.core.media_file import MediaFileMetadata, StreamTags
from mediameta.core.tags import Tags
from mediameta.models.stream import (
    AttachmentMetadata,
    AudioMetadata,
    DataMetadata,
    StreamMetadata,
    SubtitleMetadata,
    UnknownMetadata,
    VideoMetadata,
)

LABEL_WIDTH = 24
TAG_KEY_WIDTH = 20
UNDETERMINED_LANGUAGE = "und"
NOT_AVAILABLE = "Not available"


def _line(label: str, value: object) -> str:
    return f"{label + ':':<{LABEL_WIDTH}}{value}"


def _tag_lines(tags: Tags) -> list[str]:
    return [f"    {key + ': ':<{TAG_KEY_WIDTH}}{value}" for key, value in tags]


def render_stream(stream: StreamMetadata) -> str:
    """One-line summary of a stream, e.g. "#1: Audio (eng), AAC (LC), 48000 Hz, stereo"."""
    if isinstance(stream, VideoMetadata):
        parts = [f"#{stream.index}: Video", stream.codec_desc]
        if stream.pixel_fmt:
            if stream.color_spec_str:
                parts.append(f"{stream.pixel_fmt} ({stream.color_spec_str})")
            else:
                parts.append(stream.pixel_fmt)
        aspect = f"SAR {stream.sample_aspect_ratio}"
        if stream.display_aspect_ratio:
            aspect += f", DAR {stream.display_aspect_ratio}"
        parts.append(f"{stream.pixel_dimensions} ({aspect})")
        if stream.frame_rate:
            parts.append(stream.frame_rate)
        if stream.bit_rate:
            parts.append(stream.bit_rate)
        return ", ".join(parts)
    elif isinstance(stream, AudioMetadata):
        parts = [
            f"#{stream.index}: Audio ({stream.language or UNDETERMINED_LANGUAGE})",
            stream.codec_desc,
            stream.sample_rate,
            stream.channel_layout,
        ]
        if stream.bit_rate:
            parts.append(stream.bit_rate)
        return ", ".join(parts)
    elif isinstance(stream, SubtitleMetadata):
        return (
            f"#{stream.index}: Subtitle ({stream.language or UNDETERMINED_LANGUAGE}), "
            f"{stream.codec_desc}"
        )
    elif isinstance(stream, DataMetadata):
        return f"#{stream.index}: Data"
    elif isinstance(stream, AttachmentMetadata):
        return f"#{stream.index}: Attachment"
    elif isinstance(stream, UnknownMetadata):
        return f"#{stream.index}: Unknown"
    else:
        assert_never(stream)


def _render_tag_section(tags: Tags, streams_tags: list[StreamTags]) -> list[str]:
    lines = []
    if tags:
        lines.append("Tags:")
        lines.extend(_tag_lines(tags))
    for stream_tags in streams_tags:
        if stream_tags.tags:
            lines.append(f"  #{stream_tags.index}")
            lines.extend(_tag_lines(stream_tags.tags))
    return lines


def render_media_file(metadata: MediaFileMetadata) -> str:
    """Render file metadata as a block of "Key: value" lines."""
    m = metadata
    lines = []
    if m.title:
        lines.append(_line("Title", m.title))
    lines.append(_line("Filename", m.file_name))
    lines.append(
        _line("File size", f"{m.file_size} ({m.file_size_base10}, {m.file_size_base2})")
    )
    if m.options.include_checksum and m.hash:
        lines.append(_line("SHA-256 digest", m.hash))
    lines.append(_line("Container format", m.container_format))
    lines.append(_line("Duration", m.duration or NOT_AVAILABLE))
    if m.pixel_dimensions:
        lines.append(_line("Pixel dimensions", m.pixel_dimensions))
    if m.sample_aspect_ratio:
        lines.append(_line("Sample aspect ratio", m.sample_aspect_ratio))
    if m.display_aspect_ratio:
        lines.append(_line("Display aspect ratio", m.display_aspect_ratio))
    if m.scan_type:
        lines.append(_line("Scan type", m.scan_type))
    if m.frame_rate:
        lines.append(_line("Frame rate", m.frame_rate))
    lines.append(_line("Bit rate", m.bit_rate or NOT_AVAILABLE))

    lines.append("Streams:")
    lines.extend(f"    {render_stream(stream)}" for stream in m.streams)

    if m.options.include_all_tags:
        lines.extend(_render_tag_section(m.tags, m.streams_tags))
    elif m.options.include_tags:
        lines.extend(_render_tag_section(m.filtered_tags, m.streams_filtered_tags))

    return "\n".join(lines)
