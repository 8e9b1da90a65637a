"""File-level metadata: container facts plus per-stream results."""

from dataclasses import dataclass, field, fields
from enum import Enum
from fractions import Fraction
from pathlib import Path
from typing import Any, Optional

from mediameta.config import FFprobeConfig
from mediameta.core.names import container_display_name
from mediameta.core.probe import TIME_BASE, Container, Medium, open_container
from mediameta.core.scan import classify_scan_type
from mediameta.core.streams import build_stream_metadata
from mediameta.core.tags import Tags, filtered_tags, to_tags
from mediameta.errors import IOFailureError, NotAFileError
from mediameta.models.stream import ScanType, StreamMetadata, VideoMetadata
from mediameta.utils.checksum import sha256_hash
from mediameta.utils.format import SizeBase, format_bit_rate, format_seconds, human_size
from mediameta.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class MediaFileMetadataOptions:
    """Optional computations requested for a file."""

    include_checksum: bool = False
    include_tags: bool = False
    include_all_tags: bool = False
    decode_frames: bool = False


@dataclass
class StreamTags:
    """Tags of a single stream."""

    index: int
    tags: Tags


@dataclass
class MediaFileMetadata:
    """Everything known about a media file.

    Fields are computed once by build_media_file_metadata(). Afterwards only
    the include_*/decode_frames toggles change anything, and each of them
    touches its own fields only. Tags are always extracted; the toggles
    decide what a renderer shows.
    """

    path: str
    file_name: str
    file_size: int
    file_size_base10: str
    file_size_base2: str
    container_format: str
    options: MediaFileMetadataOptions = field(default_factory=MediaFileMetadataOptions)
    hash: Optional[str] = None
    title: Optional[str] = None
    duration_value: Optional[float] = None
    duration: Optional[str] = None

    # Projected from the best video stream, if any.
    width: Optional[int] = None
    height: Optional[int] = None
    pixel_dimensions: Optional[str] = None
    sample_aspect_ratio_value: Optional[Fraction] = None
    sample_aspect_ratio: Optional[str] = None
    display_aspect_ratio_value: Optional[Fraction] = None
    display_aspect_ratio: Optional[str] = None
    frame_rate_value: Optional[Fraction] = None
    frame_rate: Optional[str] = None

    scan_type: Optional[ScanType] = None
    bit_rate_value: Optional[float] = None
    bit_rate: Optional[str] = None

    streams: list[StreamMetadata] = field(default_factory=list)
    tags: Tags = field(default_factory=list)
    filtered_tags: Tags = field(default_factory=list)
    streams_tags: list[StreamTags] = field(default_factory=list)
    streams_filtered_tags: list[StreamTags] = field(default_factory=list)

    probe_config: FFprobeConfig = field(
        default_factory=FFprobeConfig, repr=False, compare=False
    )

    def include_checksum(self, on: bool) -> "MediaFileMetadata":
        """Compute (on) or drop (off) the SHA-256 digest.

        Raises:
            IOFailureError: If the file cannot be read
        """
        if on:
            if self.hash is None:
                self.hash = sha256_hash(self.path)
            self.options.include_checksum = True
        else:
            self.options.include_checksum = False
            self.hash = None
        return self

    def include_tags(self, on: bool) -> "MediaFileMetadata":
        """Show (on) or hide (off) non-boring tags."""
        self.options.include_tags = on
        return self

    def include_all_tags(self, on: bool) -> "MediaFileMetadata":
        """Show all tags. Turning this on also turns on include_tags;
        turning it off leaves include_tags alone."""
        if on:
            self.options.include_tags = True
        self.options.include_all_tags = on
        return self

    def decode_frames(self, on: bool) -> "MediaFileMetadata":
        """Re-run scan type classification with or without frame decoding.

        Raises:
            UnrecognizedContainerError: If the file can no longer be opened
            CodecInitError: If the video decoder cannot be set up
        """
        with self._open() as container:
            self.scan_type = classify_scan_type(container, decode_frames=on)
        self.options.decode_frames = on
        return self

    def _open(self) -> Container:
        return open_container(
            self.path,
            ffprobe=self.probe_config.path,
            timeout_seconds=self.probe_config.timeout_seconds,
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable view; rationals become "n/d" strings."""
        return {
            f.name: _serializable(getattr(self, f.name))
            for f in fields(self)
            if f.name != "probe_config"
        }


def _serializable(value: Any) -> Any:
    if isinstance(value, Fraction):
        return f"{value.numerator}/{value.denominator}"
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "__dataclass_fields__"):
        return {f.name: _serializable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [_serializable(v) for v in value]
    return value


def estimate_bit_rate(
    container_bit_rate: int, file_size: int, duration_seconds: Optional[float]
) -> Optional[float]:
    """Overall bit rate in bits/second.

    The container's own figure wins; otherwise it is estimated from the file
    size and duration. None if neither is available.
    """
    if container_bit_rate:
        return float(container_bit_rate)
    if duration_seconds is not None and duration_seconds > 0:
        return file_size * 8 / duration_seconds
    return None


def container_title(tags: dict[str, str]) -> Optional[str]:
    return tags.get("title") or tags.get("TITLE")


def build_media_file_metadata(
    path: str | Path,
    options: Optional[MediaFileMetadataOptions] = None,
    probe_config: Optional[FFprobeConfig] = None,
) -> MediaFileMetadata:
    """Inspect a media file.

    Args:
        path: Path to the media file
        options: Optional computations to perform
        probe_config: ffprobe settings

    Returns:
        MediaFileMetadata for the file

    Raises:
        NotAFileError: If the path is missing or not a regular file
        FFprobeNotFoundError: If ffprobe is not installed
        UnrecognizedContainerError: If the file cannot be demuxed
        CodecInitError: If any stream's decoder cannot be set up
        IOFailureError: If the file size or checksum cannot be read
    """
    path = Path(path)
    options = options or MediaFileMetadataOptions()
    probe_config = probe_config or FFprobeConfig()

    if not path.is_file():
        raise NotAFileError(str(path))

    logger.debug("Inspecting file", file=str(path))

    try:
        file_size = path.stat().st_size
    except OSError as e:
        raise IOFailureError(str(path), f"cannot read file size: {e}") from e

    with open_container(
        path, ffprobe=probe_config.path, timeout_seconds=probe_config.timeout_seconds
    ) as container:
        duration_value = (
            container.duration / TIME_BASE
            if container.duration is not None and container.duration >= 0
            else None
        )
        bit_rate_value = estimate_bit_rate(container.bit_rate, file_size, duration_value)

        streams = [build_stream_metadata(stream) for stream in container.streams]
        scan_type = classify_scan_type(container, decode_frames=options.decode_frames)

        container_tags = container.tags
        all_tags = to_tags(container_tags)
        streams_tags = [StreamTags(s.index, to_tags(s.tags)) for s in container.streams]

        best = container.best_stream(Medium.VIDEO)
        best_video = _find_video(streams, best.index) if best is not None else None

        metadata = MediaFileMetadata(
            path=str(path),
            file_name=path.name,
            file_size=file_size,
            file_size_base10=human_size(file_size, SizeBase.BASE10),
            file_size_base2=human_size(file_size, SizeBase.BASE2),
            container_format=container_display_name(
                container.format_id, path, container.format_long_name
            ),
            options=MediaFileMetadataOptions(decode_frames=options.decode_frames),
            title=container_title(container_tags),
            duration_value=duration_value,
            duration=format_seconds(duration_value) if duration_value is not None else None,
            scan_type=scan_type,
            bit_rate_value=bit_rate_value,
            bit_rate=format_bit_rate(bit_rate_value),
            streams=streams,
            tags=all_tags,
            filtered_tags=filtered_tags(all_tags),
            streams_tags=streams_tags,
            streams_filtered_tags=[
                StreamTags(st.index, filtered_tags(st.tags)) for st in streams_tags
            ],
            probe_config=probe_config,
        )

    if best_video is not None:
        _project_video(metadata, best_video)

    metadata.include_checksum(options.include_checksum)
    metadata.include_tags(options.include_tags)
    metadata.include_all_tags(options.include_all_tags)

    logger.info(
        "Metadata extracted",
        file=str(path),
        container_format=metadata.container_format,
        stream_count=len(streams),
        scan_type=scan_type.value if scan_type else None,
    )

    return metadata


def _find_video(streams: list[StreamMetadata], index: int) -> Optional[VideoMetadata]:
    for stream in streams:
        if stream.index == index and isinstance(stream, VideoMetadata):
            return stream
    return None


def _project_video(metadata: MediaFileMetadata, video: VideoMetadata) -> None:
    metadata.width = video.width
    metadata.height = video.height
    metadata.pixel_dimensions = video.pixel_dimensions
    metadata.sample_aspect_ratio_value = video.sample_aspect_ratio_value
    metadata.sample_aspect_ratio = video.sample_aspect_ratio
    metadata.display_aspect_ratio_value = video.display_aspect_ratio_value
    metadata.display_aspect_ratio = video.display_aspect_ratio
    metadata.frame_rate_value = video.frame_rate_value
    metadata.frame_rate = video.frame_rate
