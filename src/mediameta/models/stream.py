"""Per-stream metadata models."""

from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Optional, Union


class ScanType(Enum):
    """Scan type of the primary video stream."""

    PROGRESSIVE = "Progressive scan"
    # Field order unknown and no frames decoded to confirm.
    LIKELY_PROGRESSIVE = "Progressive scan*"
    INTERLACED = "Interlaced scan"

    def __str__(self) -> str:
        return self.value


@dataclass
class VideoMetadata:
    """Video stream metadata.

    width/height * sample_aspect_ratio_value == display_aspect_ratio_value
    (width:height is the storage aspect ratio, not to be confused with SAR).
    """

    index: int
    codec: str
    codec_desc: str
    width: int
    height: int
    pixel_dimensions: str
    sample_aspect_ratio_value: Fraction
    sample_aspect_ratio: str
    display_aspect_ratio_value: Optional[Fraction] = None
    display_aspect_ratio: Optional[str] = None
    pixel_fmt: Optional[str] = None
    color_range: Optional[str] = None
    color_space: Optional[str] = None
    color_primaries: Optional[str] = None
    color_trc: Optional[str] = None
    color_spec_str: str = ""  # Empty when there is nothing to show
    frame_rate_value: Optional[Fraction] = None
    frame_rate: Optional[str] = None
    bit_rate_value: Optional[int] = None
    bit_rate: Optional[str] = None


@dataclass
class AudioMetadata:
    """Audio stream metadata."""

    index: int
    codec: str
    codec_desc: str
    sample_rate_value: int
    sample_rate: str
    channels: int
    channel_layout_value: str
    channel_layout: str
    language: Optional[str] = None
    bit_rate_value: Optional[int] = None
    bit_rate: Optional[str] = None


@dataclass
class SubtitleMetadata:
    """Subtitle stream metadata."""

    index: int
    codec: Optional[str]
    codec_desc: str
    language: Optional[str] = None


@dataclass
class DataMetadata:
    index: int


@dataclass
class AttachmentMetadata:
    index: int


@dataclass
class UnknownMetadata:
    index: int


StreamMetadata = Union[
    VideoMetadata,
    AudioMetadata,
    SubtitleMetadata,
    DataMetadata,
    AttachmentMetadata,
    UnknownMetadata,
]
