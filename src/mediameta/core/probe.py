"""Container and codec inspection on top of ffprobe.

ffprobe does the demuxing and decoding; this module turns its JSON report
into Container/Stream/decoder objects and runs the bounded frame scan used
for interlace detection.
"""

import json
import shutil
import subprocess
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from pathlib import Path
from typing import Any, Optional

from mediameta.errors import CodecInitError, FFprobeNotFoundError, UnrecognizedContainerError
from mediameta.utils.logger import get_logger

logger = get_logger(__name__)

# Container durations are reported in microseconds, like AV_TIME_BASE.
TIME_BASE = 1_000_000

# ffprobe placeholders meaning "not specified".
_UNSPECIFIED = {"", "unknown", "unspecified", "reserved"}


class Medium(Enum):
    """Stream category."""

    VIDEO = "video"
    AUDIO = "audio"
    SUBTITLE = "subtitle"
    DATA = "data"
    ATTACHMENT = "attachment"
    UNKNOWN = "unknown"

    @classmethod
    def from_codec_type(cls, codec_type: Optional[str]) -> "Medium":
        try:
            return cls(codec_type)
        except ValueError:
            return cls.UNKNOWN


class FieldOrder(Enum):
    """Field order of a video stream as reported by the decoder."""

    PROGRESSIVE = "progressive"
    TT = "tt"  # top coded first, top displayed first
    BB = "bb"  # bottom coded first, bottom displayed first
    TB = "tb"  # top coded first, bottom displayed first
    BT = "bt"  # bottom coded first, top displayed first
    UNKNOWN = "unknown"

    @classmethod
    def from_value(cls, value: Optional[str]) -> "FieldOrder":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_interlaced(self) -> bool:
        return self in (FieldOrder.TT, FieldOrder.BB, FieldOrder.TB, FieldOrder.BT)


def parse_ratio(value: Optional[str]) -> tuple[int, int]:
    """Parse "num/den" or "num:den" into a raw pair.

    Missing or malformed values give (0, 0). The denominator may be 0, so
    the result is not a Fraction.
    """
    if not value:
        return (0, 0)
    for separator in ("/", ":"):
        if separator in value:
            num, _, den = value.partition(separator)
            try:
                return (int(num), int(den))
            except ValueError:
                return (0, 0)
    try:
        return (int(value), 1)
    except ValueError:
        return (0, 0)


def _int(value: Any, default: int = 0) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _name(value: Optional[str]) -> Optional[str]:
    if value is None or value in _UNSPECIFIED:
        return None
    return value


@dataclass(frozen=True)
class CodecParameters:
    """Codec identification as stored in the container."""

    codec_id: Optional[str]
    long_name: str = ""
    profile: Optional[str] = None
    level: Optional[int] = None


@dataclass(frozen=True)
class Frame:
    """A decoded frame sample."""

    interlaced: bool

    def is_interlaced(self) -> bool:
        return self.interlaced


@dataclass(frozen=True)
class VideoDecoder:
    """Decoder-level properties of a video stream."""

    codec_id: str
    width: int
    height: int
    sample_aspect_ratio: tuple[int, int]
    field_order: FieldOrder
    pixel_format: Optional[str] = None
    color_range: Optional[str] = None
    color_space: Optional[str] = None
    color_primaries: Optional[str] = None
    color_transfer: Optional[str] = None
    bit_rate: int = 0


@dataclass(frozen=True)
class AudioDecoder:
    """Decoder-level properties of an audio stream."""

    codec_id: str
    sample_rate: int
    channels: int
    channel_layout: str = ""
    bit_rate: int = 0

    def describe_channel_layout(self) -> str:
        """Channel layout name such as "stereo" or "5.1(side)".

        Anything after an embedded NUL is discarded. Streams without a known
        layout are described by channel count, as FFmpeg does.
        """
        layout = self.channel_layout.split("\0", 1)[0]
        if layout:
            return layout
        return f"{self.channels} channels"


@dataclass
class Stream:
    """A single stream of a container, built from an ffprobe stream entry."""

    index: int
    medium: Medium
    codec_parameters: CodecParameters
    tags: dict[str, str] = field(default_factory=dict)
    avg_frame_rate: tuple[int, int] = (0, 0)
    disposition: dict[str, int] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_probe(cls, data: dict[str, Any], position: int = 0) -> "Stream":
        """Build a stream from one entry of ffprobe's "streams" array."""
        codec_id = data.get("codec_name")
        if codec_id == "unknown":
            codec_id = None
        level = data.get("level")
        profile = data.get("profile")
        return cls(
            index=_int(data.get("index"), position),
            medium=Medium.from_codec_type(data.get("codec_type")),
            codec_parameters=CodecParameters(
                codec_id=codec_id,
                long_name=data.get("codec_long_name", ""),
                profile=str(profile) if profile is not None else None,
                level=_int(level) if level is not None else None,
            ),
            tags=dict(data.get("tags", {})),
            avg_frame_rate=parse_ratio(data.get("avg_frame_rate")),
            disposition=dict(data.get("disposition", {})),
            raw=data,
        )

    @property
    def bit_rate(self) -> int:
        return _int(self.raw.get("bit_rate"))

    @property
    def is_attached_picture(self) -> bool:
        return self.disposition.get("attached_pic", 0) == 1

    def decoder(self) -> VideoDecoder | AudioDecoder:
        """Decoder view of this stream.

        Raises:
            CodecInitError: If no decoder can be set up for the stream
        """
        codec_id = self.codec_parameters.codec_id
        if self.medium not in (Medium.VIDEO, Medium.AUDIO):
            raise CodecInitError(self.index, f"no decoder for {self.medium.value} streams")
        if not codec_id:
            raise CodecInitError(self.index, "decoder not found")

        if self.medium == Medium.VIDEO:
            return VideoDecoder(
                codec_id=codec_id,
                width=_int(self.raw.get("width")),
                height=_int(self.raw.get("height")),
                sample_aspect_ratio=parse_ratio(self.raw.get("sample_aspect_ratio")),
                field_order=FieldOrder.from_value(self.raw.get("field_order")),
                pixel_format=_name(self.raw.get("pix_fmt")),
                color_range=_name(self.raw.get("color_range")),
                color_space=_name(self.raw.get("color_space")),
                color_primaries=_name(self.raw.get("color_primaries")),
                color_transfer=_name(self.raw.get("color_transfer")),
                bit_rate=self.bit_rate,
            )

        return AudioDecoder(
            codec_id=codec_id,
            sample_rate=_int(self.raw.get("sample_rate")),
            channels=_int(self.raw.get("channels")),
            channel_layout=self.raw.get("channel_layout") or "",
            bit_rate=self.bit_rate,
        )


class Container:
    """A demuxed media file.

    Holds the ffprobe report in memory. Frame scans run a separate, time
    limited ffprobe process and are refused once the container is closed.
    """

    def __init__(
        self,
        path: str | Path,
        data: dict[str, Any],
        ffprobe: str = "ffprobe",
        timeout_seconds: int = 30,
    ):
        self.path = Path(path)
        self.ffprobe = ffprobe
        self.timeout_seconds = timeout_seconds
        self._format = data.get("format", {})
        self.streams = [
            Stream.from_probe(stream, position)
            for position, stream in enumerate(data.get("streams", []))
        ]
        self._closed = False

    @property
    def format_id(self) -> str:
        return self._format.get("format_name", "")

    @property
    def format_long_name(self) -> str:
        return self._format.get("format_long_name", "")

    @property
    def duration(self) -> Optional[int]:
        """Duration in TIME_BASE units, or None if unknown."""
        value = self._format.get("duration")
        if value is None:
            return None
        try:
            return int(Fraction(value) * TIME_BASE)
        except (ValueError, ZeroDivisionError):
            return None

    @property
    def bit_rate(self) -> int:
        """Overall bit rate in bits/second; 0 means unknown."""
        return _int(self._format.get("bit_rate"))

    @property
    def tags(self) -> dict[str, str]:
        return dict(self._format.get("tags", {}))

    def best_stream(self, medium: Medium) -> Optional[Stream]:
        """Pick the primary stream of a medium.

        Ranking, highest first: disposition (default flag, not flagged for
        hearing/visually impaired), real content over attached pictures,
        bit rate, pixel area, then the lowest index.
        """
        candidates = [s for s in self.streams if s.medium == medium]
        if not candidates:
            return None

        def rank(stream: Stream):
            disposition = stream.disposition
            impaired = disposition.get("hearing_impaired", 0) or disposition.get(
                "visual_impaired", 0
            )
            score = (0 if impaired else 1) + (1 if disposition.get("default", 0) else 0)
            area = _int(stream.raw.get("width")) * _int(stream.raw.get("height"))
            return (score, not stream.is_attached_picture, stream.bit_rate, area, -stream.index)

        return max(candidates, key=rank)

    def decode_frames(self, stream: Stream, max_frames: int = 30) -> Iterator[Frame]:
        """Decode frames of a stream in file order.

        Not restartable: ffprobe reads at most max_frames packets of the
        stream, and frames are handed out as the caller consumes them.
        Frames that fail to decode are simply absent.

        Raises:
            UnrecognizedContainerError: If ffprobe fails or times out
            ValueError: If the container is closed
        """
        cmd = [
            self.ffprobe,
            "-v",
            "error",
            "-select_streams",
            str(stream.index),
            "-read_intervals",
            f"%+#{max_frames}",
            "-show_entries",
            "frame=interlaced_frame",
            "-print_format",
            "csv=p=0",
            str(self.path),
        ]

        if self._closed:
            raise ValueError(f"container {self.path} is closed")

        logger.debug(
            "Decoding frames", file=str(self.path), stream_index=stream.index, max_frames=max_frames
        )

        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, check=True, timeout=self.timeout_seconds
            )
        except subprocess.TimeoutExpired as e:
            logger.error(
                "ffprobe frame scan timeout", file=str(self.path), timeout=self.timeout_seconds
            )
            raise UnrecognizedContainerError(
                str(self.path), f"frame scan timed out after {self.timeout_seconds}s"
            ) from e
        except subprocess.CalledProcessError as e:
            logger.error(
                "ffprobe frame scan failed",
                file=str(self.path),
                stream_index=stream.index,
                returncode=e.returncode,
                stderr=e.stderr,
            )
            reason = (e.stderr or "").strip().splitlines()
            raise UnrecognizedContainerError(
                str(self.path), reason[-1] if reason else f"frame scan of stream #{stream.index} failed"
            ) from e

        decoded = 0
        for line in result.stdout.splitlines():
            value = line.strip().split(",", 1)[0]
            if not value:
                continue
            decoded += 1
            yield Frame(interlaced=value == "1")
            if decoded >= max_frames:
                break

    def close(self) -> None:
        """Mark the container closed; later frame scans are refused."""
        self._closed = True

    def __enter__(self) -> "Container":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def check_ffprobe_available(ffprobe: str = "ffprobe") -> bool:
    """Check if the ffprobe executable can be found."""
    return shutil.which(ffprobe) is not None


def run_ffprobe(path: str | Path, ffprobe: str = "ffprobe", timeout_seconds: int = 30) -> dict:
    """Run ffprobe on a file and return its parsed JSON report.

    Raises:
        FFprobeNotFoundError: If ffprobe is not installed
        UnrecognizedContainerError: If ffprobe cannot demux the file
    """
    if not check_ffprobe_available(ffprobe):
        raise FFprobeNotFoundError(ffprobe)

    cmd = [
        ffprobe,
        "-v",
        "error",
        "-print_format",
        "json",
        "-show_format",
        "-show_streams",
        str(path),
    ]

    try:
        result = subprocess.run(
            cmd, capture_output=True, text=True, check=True, timeout=timeout_seconds
        )
        data = json.loads(result.stdout)
    except subprocess.TimeoutExpired as e:
        logger.error("ffprobe timeout", file=str(path), timeout=timeout_seconds)
        raise UnrecognizedContainerError(str(path), f"ffprobe timed out after {timeout_seconds}s") from e
    except subprocess.CalledProcessError as e:
        logger.error(
            "ffprobe failed",
            file=str(path),
            returncode=e.returncode,
            stderr=e.stderr,
        )
        reason = (e.stderr or "").strip().splitlines()
        raise UnrecognizedContainerError(
            str(path), reason[-1] if reason else "Invalid data found when processing input"
        ) from e
    except json.JSONDecodeError as e:
        logger.error("Failed to parse ffprobe output", file=str(path), error=str(e))
        raise UnrecognizedContainerError(str(path), f"unreadable ffprobe output: {e}") from e

    if "format" not in data:
        raise UnrecognizedContainerError(str(path), "no container format detected")

    return data


def open_container(
    path: str | Path, ffprobe: str = "ffprobe", timeout_seconds: int = 30
) -> Container:
    """Open a file as a demuxed container.

    Raises:
        FFprobeNotFoundError: If ffprobe is not installed
        UnrecognizedContainerError: If the file is not a recognized container
    """
    data = run_ffprobe(path, ffprobe=ffprobe, timeout_seconds=timeout_seconds)
    container = Container(path, data, ffprobe=ffprobe, timeout_seconds=timeout_seconds)
    logger.debug(
        "Container opened",
        file=str(path),
        format_name=container.format_id,
        stream_count=len(container.streams),
    )
    return container
