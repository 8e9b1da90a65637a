"""Preferred display names for common container formats and codecs.

FFmpeg's stock long names are inconsistent ("raw ADTS AAC (Advanced Audio
Coding)", "QuickTime / MOV", ...). The tables below replace the ones that
show up most often; everything else falls back to the capitalized long name.
"""

from pathlib import Path
from typing import Optional

# FFmpeg format name -> display name. The stock long name is noted where it
# differs meaningfully.
FORMAT_NAMES = {
    "aac": "Raw ADTS AAC",  # raw ADTS AAC (Advanced Audio Coding)
    "aiff": "Audio Interchange File Format (AIFF)",  # Audio IFF
    "asf": "Advanced Systems Format (ASF)",
    "ass": "Advanced SubStation Alpha (ASS)",  # SSA (SubStation Alpha) subtitle
    "flv": "Flash Video (FLV)",
    "jpeg_pipe": "JPEG",  # piped jpeg sequence
    "mp3": "MP3",
    "mpeg": "MPEG-2 Program Stream (MPEG-PS)",
    "mpegts": "MPEG-2 Transport Stream (MPEG-TS)",
    "png_pipe": "PNG",  # piped png sequence
    "realtext": "RealText",
    "sami": "Synchronized Accessible Media Interchange (SAMI)",
    "srt": "SubRip",
    "subviewer": "SubViewer",
    "subviewer1": "SubViewer v1",
    "wav": "Waveform Audio (WAV)",
    "webvtt": "WebVTT",
}

MATROSKA_FAMILY = "matroska,webm"
MOV_FAMILY = "mov,mp4,m4a,3gp,3g2,mj2"

MOV_FAMILY_NAMES = {
    "mov": "QuickTime File Format",
    "qt": "QuickTime File Format",
    "3gp": "3GPP",
    "3g2": "3GPP2",
    "mj2": "Motion JPEG 2000",
    "mjp2": "Motion JPEG 2000",
}

# FFmpeg codec name -> display name.
CODEC_NAMES = {
    # Video
    "h264": "H.264",
    "hevc": "HEVC",
    "mpeg4": "MPEG-4 Part 2",
    "png": "PNG",
    "vp8": "VP8",
    "vp9": "VP9",
    # Audio
    "aac": "AAC",
    "ac3": "Dolby AC-3",  # ATSC A/52A (AC-3)
    "cook": "Cook (RealAudio G2)",
    "flac": "FLAC",
    "mp3": "MP3",
    "opus": "Opus",
    "ra_144": "RealAudio 1.0",
    "ra_288": "RealAudio 2.0",
    # Subtitle
    "ass": "Advanced SubStation Alpha (ASS)",
    "realtext": "RealText",
    "sami": "Synchronized Accessible Media Interchange (SAMI)",
    "srt": "SubRip",
    "ssa": "SubStation Alpha (SSA)",
    "subrip": "SubRip",
    "subviewer": "SubViewer",
    "subviewer1": "SubViewer v1",
    "webvtt": "WebVTT",
}

# Profile names as reported by ffprobe -> display names.
H264_PROFILES = {
    "Baseline": "Baseline Profile",
    "Constrained Baseline": "Constrained Baseline Profile",
    "Main": "Main Profile",
    "Extended": "Extended Profile",
    "High": "High Profile",
    "High 10": "High 10 Profile",
    "High 10 Intra": "High 10 Intra Profile",
    "High 4:2:2": "High 4:2:2 Profile",
    "High 4:2:2 Intra": "High 4:2:2 Intra Profile",
    "High 4:4:4": "High 4:4:4 Profile",
    "High 4:4:4 Predictive": "High 4:4:4 Predictive Profile",
    "High 4:4:4 Intra": "High 4:4:4 Intra Profile",
    "CAVLC 4:4:4": "CAVLC 4:4:4 Profile",
}

HEVC_PROFILES = {
    "Main": "Main Profile",
    "Main 10": "Main 10 Profile",
    "Main Still Picture": "Main Still Picture Profile",
    "Rext": "Range Extension (RExt)",
}

VP9_PROFILES = {
    "Profile 0": "Profile 0",
    "Profile 1": "Profile 1",
    "Profile 2": "Profile 2",
    "Profile 3": "Profile 3",
}

AAC_PROFILES = {
    "Main": "Main Profile",
    "LC": "LC",  # Low Complexity
    "SSR": "SSR",  # Scalable Sample Rate
    "LTP": "LTP",  # Long Term Prediction
    "HE-AAC": "HE-AAC",
    "HE-AACv2": "HE-AAC v2",
    "LD": "LD",  # Low Delay
    "ELD": "ELD",  # Enhanced Low Delay
    # libavcodec has no names for these, so ffprobe prints the numeric value.
    "128": "MPEG-2 LC",
    "131": "MPEG-2 HE-AAC",
}

# Codec name -> level divisor. Levels are stored scaled by these factors.
LEVEL_DIVISORS = {
    "h264": 10,
    "hevc": 30,
}

UNKNOWN_PROFILE = "Unknown Profile"


def capitalize(s: str) -> str:
    """Uppercase the first character only, leaving the rest untouched."""
    if not s:
        return ""
    return s[0].upper() + s[1:]


def container_display_name(
    format_id: str, path_or_extension: str | Path, long_name: str = ""
) -> str:
    """Display name for a container format.

    Some FFmpeg demuxers cover a family of formats, so the file extension
    picks the member.

    Args:
        format_id: FFmpeg format name (e.g. "mov,mp4,m4a,3gp,3g2,mj2")
        path_or_extension: File path, or a bare extension without the dot
        long_name: FFmpeg's long name, used when there is no table entry

    Returns:
        Display name
    """
    extension = _extension_of(path_or_extension)

    if format_id in FORMAT_NAMES:
        return FORMAT_NAMES[format_id]
    if format_id == MATROSKA_FAMILY:
        return "WebM" if extension == "webm" else "Matroska (MKV)"
    if format_id == MOV_FAMILY:
        if extension in MOV_FAMILY_NAMES:
            return MOV_FAMILY_NAMES[extension]
        return f"MPEG-4 Part 14 ({extension.upper()})"
    return capitalize(long_name or format_id)


def _extension_of(path_or_extension: str | Path) -> str:
    if isinstance(path_or_extension, Path):
        return path_or_extension.suffix.lstrip(".").lower()
    if "/" in path_or_extension or "." in path_or_extension:
        return Path(path_or_extension).suffix.lstrip(".").lower()
    return path_or_extension.lower()


def codec_display_name(codec_id: str, long_name: str = "") -> str:
    """Display name for a codec, e.g. "h264" -> "H.264"."""
    if codec_id in CODEC_NAMES:
        return CODEC_NAMES[codec_id]
    return capitalize(long_name or codec_id)


def format_level(level: int, divisor: int) -> str:
    """Render a scaled level, e.g. 40/10 -> "4", 41/10 -> "4.1"."""
    if level % divisor == 0:
        return str(level // divisor)
    return f"{level / divisor:.1f}"


def codec_profile_description(
    codec_id: str, profile: Optional[str], level: Optional[int]
) -> Optional[str]:
    """Profile (and level, where meaningful) qualifier for a codec.

    Returns None for codecs whose profile is not worth showing.
    """
    if codec_id == "h264":
        profile_name = H264_PROFILES.get(profile or "", UNKNOWN_PROFILE)
    elif codec_id == "hevc":
        profile_name = HEVC_PROFILES.get(profile or "", UNKNOWN_PROFILE)
    elif codec_id == "vp9":
        # libavcodec does not detect VP9 levels
        return VP9_PROFILES.get(profile or "", UNKNOWN_PROFILE)
    elif codec_id == "aac":
        return AAC_PROFILES.get(profile or "", UNKNOWN_PROFILE)
    else:
        return None

    level_name = format_level(level if level is not None else 0, LEVEL_DIVISORS[codec_id])
    return f"{profile_name} level {level_name}"


def codec_description(
    codec_id: str,
    long_name: str = "",
    profile: Optional[str] = None,
    level: Optional[int] = None,
) -> str:
    """Codec display name with profile qualifier, e.g. "H.264 (High Profile level 4)"."""
    name = codec_display_name(codec_id, long_name)
    qualifier = codec_profile_description(codec_id, profile, level)
    if qualifier is None:
        return name
    return f"{name} ({qualifier})"
